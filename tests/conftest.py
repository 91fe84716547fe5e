"""Shared fixtures: an in-memory stand-in for the Linear GraphQL client."""
from typing import Optional

import pytest

from linear_mcp.errors import LinearAPIError
from linear_mcp.models import (
    Comment,
    Connection,
    Issue,
    Label,
    MutationPayload,
    PageInfo,
    Project,
    Team,
    User,
    WorkflowState,
)

ENG = Team(id="team-eng", name="Engineering", key="ENG")
OPS = Team(id="team-ops", name="Operations", key="OPS")


def make_issue(issue_id: str = "11111111-2222-3333-4444-555555555555", identifier: str = "ENG-1", **overrides) -> Issue:
    data = {
        "id": issue_id,
        "identifier": identifier,
        "title": "Fix login",
        "description": None,
        "priority": 2,
        "url": f"https://linear.app/acme/issue/{identifier}",
        "createdAt": "2024-01-01T00:00:00.000Z",
        "updatedAt": "2024-01-02T00:00:00.000Z",
        "state": {"id": "state-eng-todo", "name": "Todo", "type": "unstarted"},
        "team": {"id": ENG.id, "name": ENG.name, "key": ENG.key},
        "assignee": None,
        "project": None,
        "labels": {"nodes": [{"id": "label-bug", "name": "Bug"}]},
    }
    data.update(overrides)
    return Issue.model_validate(data)


class FakeLinearClient:
    """Records every call and answers from in-memory fixtures."""

    def __init__(self):
        self.calls: list[tuple[str, dict]] = []
        self.teams_list = [ENG, OPS]
        self.projects_list = [
            Project(id="proj-web", name="Website", state="started", teams=[ENG]),
            Project(id="proj-infra", name="Infra", state="planned", teams=[ENG, OPS]),
        ]
        self.states_list = [
            WorkflowState(id="state-eng-todo", name="Todo", type="unstarted", team=ENG),
            WorkflowState(id="state-eng-done", name="Done", type="completed", team=ENG),
            WorkflowState(id="state-ops-todo", name="Todo", type="unstarted", team=OPS),
            WorkflowState(id="state-orphan", name="Orphan", type="backlog", team=None),
        ]
        self.team_labels = {ENG.id: [Label(id="label-bug", name="Bug", color="#f00")]}
        self.workspace_labels = [
            Label(id="label-bug", name="Bug", color="#f00"),
            Label(id="label-chore", name="Chore", color="#999"),
        ]
        self.all_labels = [
            Label(id="label-bug", name="Bug", color="#f00"),
            Label(id="label-chore", name="Chore", color="#999"),
            Label(id="label-ops", name="Pager", color="#0f0"),
        ]
        self.issue_store: dict[str, Issue] = {}
        self.search_results: list[Issue] = []
        self.list_page = Connection[Issue](nodes=[], page_info=PageInfo(has_next_page=False))
        self.create_payload = MutationPayload(success=True, entity_id=None)
        self.update_payload = MutationPayload(success=True, entity_id=None)
        self.comment_payload = MutationPayload(success=True, entity_id=None)
        self.comments: dict[str, Comment] = {}
        self.viewer_user = User(id="user-1", name="Ada", display_name="ada", email="ada@example.com",
                                admin=True, active=True)

    def count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    def last(self, method: str) -> dict:
        return [kwargs for name, kwargs in self.calls if name == method][-1]

    async def teams(self, after: Optional[str] = None, first: int = 100) -> Connection[Team]:
        self.calls.append(("teams", {"after": after}))
        return Connection[Team](nodes=list(self.teams_list))

    async def projects(self, after: Optional[str] = None, first: int = 100) -> Connection[Project]:
        self.calls.append(("projects", {"after": after}))
        return Connection[Project](nodes=list(self.projects_list))

    async def workflow_states(self, filter=None, after=None, first=100) -> Connection[WorkflowState]:
        self.calls.append(("workflow_states", {"filter": filter, "after": after}))
        states = self.states_list
        if filter:
            team_id = filter["team"]["id"]["eq"]
            states = [s for s in states if s.team and s.team.id == team_id]
        return Connection[WorkflowState](nodes=list(states))

    async def issue_labels(self, filter=None, after=None, first=100) -> Connection[Label]:
        self.calls.append(("issue_labels", {"filter": filter, "after": after}))
        if filter is None:
            labels = self.all_labels
        elif filter == {"team": {"null": True}}:
            labels = self.workspace_labels
        else:
            labels = self.team_labels.get(filter["team"]["id"]["eq"], [])
        return Connection[Label](nodes=list(labels))

    async def issue(self, issue_id: str) -> Issue:
        self.calls.append(("issue", {"id": issue_id}))
        if issue_id not in self.issue_store:
            raise LinearAPIError("Linear API error (HTTP 200): Entity not found [INVALID_INPUT]")
        return self.issue_store[issue_id]

    async def issues(self, filter=None, after=None, first=20) -> Connection[Issue]:
        self.calls.append(("issues", {"filter": filter, "after": after, "first": first}))
        return self.list_page

    async def issue_search(self, query: str, first: int = 20, filter=None) -> Connection[Issue]:
        self.calls.append(("issue_search", {"query": query, "first": first, "filter": filter}))
        return Connection[Issue](nodes=list(self.search_results[:first]))

    async def create_issue(self, input: dict) -> MutationPayload:
        self.calls.append(("create_issue", {"input": input}))
        return self.create_payload

    async def update_issue(self, issue_id: str, input: dict) -> MutationPayload:
        self.calls.append(("update_issue", {"id": issue_id, "input": input}))
        return self.update_payload

    async def create_comment(self, input: dict) -> MutationPayload:
        self.calls.append(("create_comment", {"input": input}))
        return self.comment_payload

    async def comment(self, comment_id: str) -> Comment:
        self.calls.append(("comment", {"id": comment_id}))
        if comment_id not in self.comments:
            raise LinearAPIError("Linear API error (HTTP 200): Entity not found")
        return self.comments[comment_id]

    async def viewer(self) -> User:
        self.calls.append(("viewer", {}))
        return self.viewer_user


@pytest.fixture
def fake_client():
    return FakeLinearClient()
