"""Async GraphQL client for the Linear API.

All Linear API calls go through a single GraphQL endpoint. Each method issues
exactly one HTTP request, so callers can wrap every method call in the rate
governor one-to-one. Relations are selected explicitly per query: a method
returns only the relations its callers read.
"""
import logging
from typing import Any, Optional

import httpx

from .errors import LinearAPIError, NotFoundError
from .models import Comment, Connection, Issue, Label, MutationPayload, Project, Team, User, WorkflowState

logger = logging.getLogger("linear-mcp.client")

LINEAR_API_URL = "https://api.linear.app/graphql"
DEFAULT_PAGE_SIZE = 100

PAGE_INFO = "pageInfo { hasNextPage endCursor }"

ISSUE_FIELDS = """
fragment IssueFields on Issue {
  id
  identifier
  title
  description
  priority
  url
  createdAt
  updatedAt
  state { id name type }
  team { id name key }
  assignee { id name }
  project { id name }
  labels { nodes { id name } }
}
"""

TEAMS_QUERY = f"""
query Teams($first: Int!, $after: String) {{
  teams(first: $first, after: $after) {{
    nodes {{ id name key }}
    {PAGE_INFO}
  }}
}}
"""

PROJECTS_QUERY = f"""
query Projects($first: Int!, $after: String) {{
  projects(first: $first, after: $after) {{
    nodes {{
      id
      name
      state
      teams {{ nodes {{ id name key }} }}
    }}
    {PAGE_INFO}
  }}
}}
"""

WORKFLOW_STATES_QUERY = f"""
query WorkflowStates($first: Int!, $after: String, $filter: WorkflowStateFilter) {{
  workflowStates(first: $first, after: $after, filter: $filter) {{
    nodes {{
      id
      name
      type
      team {{ id name key }}
    }}
    {PAGE_INFO}
  }}
}}
"""

ISSUE_LABELS_QUERY = f"""
query IssueLabels($first: Int!, $after: String, $filter: IssueLabelFilter) {{
  issueLabels(first: $first, after: $after, filter: $filter) {{
    nodes {{ id name color }}
    {PAGE_INFO}
  }}
}}
"""

ISSUE_QUERY = ISSUE_FIELDS + """
query Issue($id: String!) {
  issue(id: $id) { ...IssueFields }
}
"""

ISSUES_QUERY = ISSUE_FIELDS + f"""
query Issues($first: Int!, $after: String, $filter: IssueFilter) {{
  issues(first: $first, after: $after, filter: $filter) {{
    nodes {{ ...IssueFields }}
    {PAGE_INFO}
  }}
}}
"""

ISSUE_SEARCH_QUERY = ISSUE_FIELDS + f"""
query IssueSearch($query: String!, $first: Int!, $filter: IssueFilter) {{
  issueSearch(query: $query, first: $first, filter: $filter) {{
    nodes {{ ...IssueFields }}
    {PAGE_INFO}
  }}
}}
"""

ISSUE_CREATE_MUTATION = """
mutation IssueCreate($input: IssueCreateInput!) {
  issueCreate(input: $input) {
    success
    issue { id }
  }
}
"""

ISSUE_UPDATE_MUTATION = """
mutation IssueUpdate($id: String!, $input: IssueUpdateInput!) {
  issueUpdate(id: $id, input: $input) {
    success
    issue { id }
  }
}
"""

COMMENT_CREATE_MUTATION = """
mutation CommentCreate($input: CommentCreateInput!) {
  commentCreate(input: $input) {
    success
    comment { id }
  }
}
"""

COMMENT_QUERY = """
query Comment($id: String!) {
  comment(id: $id) {
    id
    body
    createdAt
    user { id name }
  }
}
"""

VIEWER_QUERY = """
query Viewer {
  viewer { id name displayName email admin active }
}
"""


def _error_message(errors: list[dict], status_code: int) -> str:
    parts = []
    for error in errors:
        message = error.get("message", "Unknown error")
        code = (error.get("extensions") or {}).get("code")
        parts.append(f"{message} [{code}]" if code else message)
    return f"Linear API error (HTTP {status_code}): " + "; ".join(parts)


def _mutation_payload(data: Optional[dict], entity: str) -> MutationPayload:
    data = data or {}
    node = data.get(entity) or {}
    return MutationPayload(success=bool(data.get("success")), entity_id=node.get("id"))


class LinearClient:
    """Thin typed wrapper over the Linear GraphQL endpoint."""

    def __init__(self, http: httpx.AsyncClient, api_url: str = LINEAR_API_URL):
        self._http = http
        self.api_url = api_url

    @classmethod
    def create(cls, api_key: str, api_url: str = LINEAR_API_URL, timeout: float = 30.0) -> "LinearClient":
        # Personal API keys are sent as-is, without a "Bearer" prefix
        http = httpx.AsyncClient(
            timeout=timeout,
            headers={"Authorization": api_key, "Content-Type": "application/json"},
        )
        return cls(http, api_url)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def execute(self, query: str, variables: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """Run a GraphQL document and return its ``data`` object.

        Raises LinearAPIError when the response carries GraphQL errors, and
        httpx.HTTPStatusError for non-GraphQL HTTP failures.
        """
        response = await self._http.post(self.api_url, json={"query": query, "variables": variables or {}})

        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("errors"):
            message = _error_message(body["errors"], response.status_code)
            logger.error(message)
            raise LinearAPIError(message, status_code=response.status_code, errors=body["errors"])

        response.raise_for_status()
        if not isinstance(body, dict):
            raise LinearAPIError(
                f"Linear API returned a non-JSON response (HTTP {response.status_code})",
                status_code=response.status_code,
            )
        return body.get("data") or {}

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def teams(self, after: Optional[str] = None, first: int = DEFAULT_PAGE_SIZE) -> Connection[Team]:
        data = await self.execute(TEAMS_QUERY, {"first": first, "after": after})
        return Connection[Team].model_validate(data.get("teams") or {})

    async def projects(self, after: Optional[str] = None, first: int = DEFAULT_PAGE_SIZE) -> Connection[Project]:
        data = await self.execute(PROJECTS_QUERY, {"first": first, "after": after})
        return Connection[Project].model_validate(data.get("projects") or {})

    async def workflow_states(
        self,
        filter: Optional[dict] = None,
        after: Optional[str] = None,
        first: int = DEFAULT_PAGE_SIZE
    ) -> Connection[WorkflowState]:
        data = await self.execute(WORKFLOW_STATES_QUERY, {"first": first, "after": after, "filter": filter})
        return Connection[WorkflowState].model_validate(data.get("workflowStates") or {})

    async def issue_labels(
        self,
        filter: Optional[dict] = None,
        after: Optional[str] = None,
        first: int = DEFAULT_PAGE_SIZE
    ) -> Connection[Label]:
        data = await self.execute(ISSUE_LABELS_QUERY, {"first": first, "after": after, "filter": filter})
        return Connection[Label].model_validate(data.get("issueLabels") or {})

    # ------------------------------------------------------------------
    # Issues
    # ------------------------------------------------------------------

    async def issue(self, issue_id: str) -> Issue:
        data = await self.execute(ISSUE_QUERY, {"id": issue_id})
        if not data.get("issue"):
            raise NotFoundError(f'Issue not found: "{issue_id}"')
        return Issue.model_validate(data["issue"])

    async def issues(
        self,
        filter: Optional[dict] = None,
        after: Optional[str] = None,
        first: int = 20
    ) -> Connection[Issue]:
        data = await self.execute(ISSUES_QUERY, {"first": first, "after": after, "filter": filter})
        return Connection[Issue].model_validate(data.get("issues") or {})

    async def issue_search(self, query: str, first: int = 20, filter: Optional[dict] = None) -> Connection[Issue]:
        data = await self.execute(ISSUE_SEARCH_QUERY, {"query": query, "first": first, "filter": filter})
        return Connection[Issue].model_validate(data.get("issueSearch") or {})

    async def create_issue(self, input: dict[str, Any]) -> MutationPayload:
        data = await self.execute(ISSUE_CREATE_MUTATION, {"input": input})
        return _mutation_payload(data.get("issueCreate"), "issue")

    async def update_issue(self, issue_id: str, input: dict[str, Any]) -> MutationPayload:
        data = await self.execute(ISSUE_UPDATE_MUTATION, {"id": issue_id, "input": input})
        return _mutation_payload(data.get("issueUpdate"), "issue")

    # ------------------------------------------------------------------
    # Comments and users
    # ------------------------------------------------------------------

    async def create_comment(self, input: dict[str, Any]) -> MutationPayload:
        data = await self.execute(COMMENT_CREATE_MUTATION, {"input": input})
        return _mutation_payload(data.get("commentCreate"), "comment")

    async def comment(self, comment_id: str) -> Comment:
        data = await self.execute(COMMENT_QUERY, {"id": comment_id})
        if not data.get("comment"):
            raise NotFoundError(f'Comment not found: "{comment_id}"')
        return Comment.model_validate(data["comment"])

    async def viewer(self) -> User:
        data = await self.execute(VIEWER_QUERY)
        return User.model_validate(data.get("viewer") or {})
