"""MCP tool handlers for the Linear API.

All handlers follow a consistent pattern:
- Accept: arguments dict and the server's ToolContext
- Validate arguments with the pydantic schemas in ``schemas``
- Resolve names to IDs through the Resolver, and wrap every remote call in
  the rate governor
- Return: a CallToolResult whose single text block is a JSON document, or a
  formatted error with ``isError`` set

No exception escapes a handler; failures are logged and converted into an
error result so the server stays ready for the next call.
"""
import asyncio
import functools
import logging
import traceback
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from mcp.types import CallToolResult

from . import formatters
from .cache import SnapshotCache, TTLCache
from .client import LinearClient
from .errors import ConfirmationFailedError, InvalidInputError, MutationFailedError, format_error
from .models import Connection, Issue, MutationPayload
from .pagination import collect_all
from .rate_limiter import RateGovernor
from .resolvers import Resolver, ref
from .schemas import (
    CreateCommentArgs,
    CreateIssueArgs,
    GetIssueArgs,
    ListIssueStatusesArgs,
    ListIssuesArgs,
    ListLabelsArgs,
    ListProjectsArgs,
    SearchIssuesArgs,
    UpdateIssueArgs,
)

logger = logging.getLogger("linear-mcp.handlers")

Handler = Callable[[dict, "ToolContext"], Awaitable[CallToolResult]]


@dataclass
class ToolContext:
    """State shared by all tool calls of one server instance."""

    client: LinearClient
    governor: RateGovernor
    resolver: Resolver
    metadata_cache: SnapshotCache

    @classmethod
    def create(
        cls,
        client: LinearClient,
        rate_limit: int = 80,
        cache_ttl_seconds: float = 300.0
    ) -> "ToolContext":
        governor = RateGovernor(limit=rate_limit)
        resolver = Resolver(client, governor, TTLCache(ttl_seconds=cache_ttl_seconds))
        return cls(
            client=client,
            governor=governor,
            resolver=resolver,
            metadata_cache=SnapshotCache(ttl_seconds=cache_ttl_seconds),
        )


def tool_handler(func: Handler) -> Handler:
    """Convert any failure inside a handler into an error tool result."""

    @functools.wraps(func)
    async def wrapper(arguments: Optional[dict], context: ToolContext) -> CallToolResult:
        try:
            return await func(arguments or {}, context)
        except Exception as e:
            logger.error(f"{func.__name__} failed: {type(e).__name__}: {e}")
            logger.debug(traceback.format_exc())
            return formatters.tool_result(format_error(e), is_error=True)

    return wrapper


def _all_pages(context: ToolContext, fetch_page: Callable[[Optional[str]], Awaitable[Connection]]):
    """Collect every page of a listing, governing each page fetch."""
    return collect_all(lambda cursor: context.governor.governed(lambda: fetch_page(cursor)))


async def _confirmed_issue(context: ToolContext, payload: MutationPayload, action: str) -> Issue:
    """Re-read an issue after a successful write.

    The write already happened at this point, so a failed read is reported
    separately from a failed mutation.
    """
    if not payload.entity_id:
        raise ConfirmationFailedError(f"Issue was {action} but could not be retrieved.")
    try:
        return await context.governor.governed(lambda: context.client.issue(payload.entity_id))
    except Exception as e:
        raise ConfirmationFailedError(f"Issue was {action} but could not be retrieved: {e}") from e


# ============================================================================
# Issue Handlers
# ============================================================================

@tool_handler
async def handle_create_issue(arguments: dict, context: ToolContext) -> CallToolResult:
    """Create an issue, resolving team/project/state names to IDs."""
    args = CreateIssueArgs.model_validate(arguments)
    resolver = context.resolver

    team_id = await resolver.resolve_team_id(ref(args.team_id, args.team_name))
    if not team_id:
        raise InvalidInputError("Either teamId or teamName is required to create an issue.")

    project_id = await resolver.resolve_project_id(ref(args.project_id, args.project_name))
    state_id = await resolver.resolve_state_id(ref(args.state_id, args.state_name), team_id)

    issue_input: dict[str, Any] = {"title": args.title, "teamId": team_id}
    if args.description is not None:
        issue_input["description"] = args.description
    if project_id:
        issue_input["projectId"] = project_id
    if state_id:
        issue_input["stateId"] = state_id
    if args.priority is not None:
        issue_input["priority"] = args.priority
    if args.label_ids is not None:
        issue_input["labelIds"] = args.label_ids
    if args.assignee_id:
        issue_input["assigneeId"] = args.assignee_id

    payload = await context.governor.governed(lambda: context.client.create_issue(issue_input))
    if not payload.success:
        raise MutationFailedError("Failed to create issue. The API returned an unsuccessful response.")

    issue = await _confirmed_issue(context, payload, "created")
    logger.info(f"Created issue {issue.identifier} (ID: {issue.id})")
    return formatters.tool_result(formatters.to_json(formatters.format_issue(issue)))


@tool_handler
async def handle_get_issue(arguments: dict, context: ToolContext) -> CallToolResult:
    """Get a single issue by identifier (e.g. "GEN-123") or UUID."""
    args = GetIssueArgs.model_validate(arguments)
    issue_id = await context.resolver.resolve_issue_id(args.identifier)
    issue = await context.governor.governed(lambda: context.client.issue(issue_id))
    return formatters.tool_result(formatters.to_json(formatters.format_issue(issue)))


@tool_handler
async def handle_update_issue(arguments: dict, context: ToolContext) -> CallToolResult:
    """Update an issue's fields.

    A state given by name is resolved within the issue's own team, which
    costs one extra read of the issue.
    """
    args = UpdateIssueArgs.model_validate(arguments)
    issue_id = await context.resolver.resolve_issue_id(args.issue_id)

    team_id = None
    if args.state_name:
        current = await context.governor.governed(lambda: context.client.issue(issue_id))
        if current.team:
            team_id = current.team.id

    state_id = await context.resolver.resolve_state_id(ref(args.state_id, args.state_name), team_id)

    update: dict[str, Any] = {}
    if args.title is not None:
        update["title"] = args.title
    if args.description is not None:
        update["description"] = args.description
    if state_id:
        update["stateId"] = state_id
    if args.priority is not None:
        update["priority"] = args.priority
    if args.assignee_id is not None:
        update["assigneeId"] = args.assignee_id or None  # "" unassigns
    if args.label_ids is not None:
        update["labelIds"] = args.label_ids

    payload = await context.governor.governed(lambda: context.client.update_issue(issue_id, update))
    if not payload.success:
        raise MutationFailedError("Failed to update issue. The API returned an unsuccessful response.")

    issue = await _confirmed_issue(context, payload, "updated")
    logger.info(f"Updated issue {issue.identifier} fields: {sorted(update)}")
    return formatters.tool_result(formatters.to_json(formatters.format_issue(issue)))


@tool_handler
async def handle_search_issues(arguments: dict, context: ToolContext) -> CallToolResult:
    """Full-text issue search with optional team/project/assignee/state filters."""
    args = SearchIssuesArgs.model_validate(arguments)
    resolver = context.resolver

    team_id = await resolver.resolve_team_id(ref(args.team_id, args.team_name))
    project_id = await resolver.resolve_project_id(ref(args.project_id, args.project_name))

    issue_filter: dict[str, Any] = {}
    if team_id:
        issue_filter["team"] = {"id": {"eq": team_id}}
    if project_id:
        issue_filter["project"] = {"id": {"eq": project_id}}
    if args.assignee_id:
        issue_filter["assignee"] = {"id": {"eq": args.assignee_id}}
    if args.state_name:
        # Without a team scope this matches the named state of every team
        state_ids = await resolver.matching_state_ids(args.state_name, team_id)
        if state_ids:
            issue_filter["state"] = {"id": {"in": state_ids}}

    result = await context.governor.governed(
        lambda: context.client.issue_search(args.query, first=args.limit, filter=issue_filter or None)
    )
    issues = [formatters.format_issue(issue) for issue in result.nodes]
    logger.info(f"Search '{args.query}' returned {len(issues)} issues")

    return formatters.tool_result(formatters.to_json({"total": len(issues), "issues": issues}))


@tool_handler
async def handle_list_issues(arguments: dict, context: ToolContext) -> CallToolResult:
    """List issues with filters and caller-driven cursor pagination."""
    args = ListIssuesArgs.model_validate(arguments)
    resolver = context.resolver

    team_id = await resolver.resolve_team_id(ref(args.team_id, args.team_name))
    project_id = await resolver.resolve_project_id(ref(args.project_id, args.project_name))
    state_id = await resolver.resolve_state_id(ref(args.state_id, args.state_name), team_id)

    issue_filter: dict[str, Any] = {}
    if team_id:
        issue_filter["team"] = {"id": {"eq": team_id}}
    if project_id:
        issue_filter["project"] = {"id": {"eq": project_id}}
    if state_id:
        issue_filter["state"] = {"id": {"eq": state_id}}
    if args.assignee_id:
        issue_filter["assignee"] = {"id": {"eq": args.assignee_id}}

    result = await context.governor.governed(
        lambda: context.client.issues(filter=issue_filter or None, after=args.cursor, first=args.limit)
    )

    return formatters.tool_result(formatters.to_json({
        "issues": [formatters.format_issue(issue) for issue in result.nodes],
        "pageInfo": {
            "hasNextPage": result.page_info.has_next_page,
            "endCursor": result.page_info.end_cursor,
        },
    }))


@tool_handler
async def handle_create_comment(arguments: dict, context: ToolContext) -> CallToolResult:
    """Add a Markdown comment to an issue."""
    args = CreateCommentArgs.model_validate(arguments)
    issue_id = await context.resolver.resolve_issue_id(args.issue_id)

    payload = await context.governor.governed(
        lambda: context.client.create_comment({"issueId": issue_id, "body": args.body})
    )
    if not payload.success:
        raise MutationFailedError("Failed to create comment. The API returned an unsuccessful response.")
    if not payload.entity_id:
        raise ConfirmationFailedError("Comment was created but could not be retrieved.")

    try:
        comment = await context.governor.governed(lambda: context.client.comment(payload.entity_id))
    except Exception as e:
        raise ConfirmationFailedError(f"Comment was created but could not be retrieved: {e}") from e

    logger.info(f"Created comment {comment.id} on issue {issue_id}")
    return formatters.tool_result(formatters.to_json(formatters.format_comment(comment, issue_id)))


# ============================================================================
# Team / Project / Label Handlers
# ============================================================================

@tool_handler
async def handle_list_teams(arguments: dict, context: ToolContext) -> CallToolResult:
    teams = await context.resolver.get_teams()
    return formatters.tool_result(formatters.to_json([formatters.format_team(t) for t in teams]))


@tool_handler
async def handle_list_projects(arguments: dict, context: ToolContext) -> CallToolResult:
    """List projects with their teams, optionally filtered by team."""
    args = ListProjectsArgs.model_validate(arguments)
    team_id = await context.resolver.resolve_team_id(ref(args.team_id, args.team_name))

    projects = await _all_pages(context, lambda cursor: context.client.projects(after=cursor))
    if team_id:
        projects = [p for p in projects if any(t.id == team_id for t in p.teams)]

    return formatters.tool_result(formatters.to_json([formatters.format_project(p) for p in projects]))


@tool_handler
async def handle_list_issue_statuses(arguments: dict, context: ToolContext) -> CallToolResult:
    args = ListIssueStatusesArgs.model_validate(arguments)
    team_id = await context.resolver.resolve_team_id(ref(args.team_id, args.team_name))

    states = await context.resolver.get_workflow_states(team_id)
    if team_id:
        states = [s for s in states if s.team.id == team_id]

    return formatters.tool_result(formatters.to_json([formatters.format_state(s) for s in states]))


@tool_handler
async def handle_list_labels(arguments: dict, context: ToolContext) -> CallToolResult:
    """List labels. With a team scope, workspace-level labels are included too."""
    args = ListLabelsArgs.model_validate(arguments)
    team_id = await context.resolver.resolve_team_id(ref(args.team_id, args.team_name))

    label_filter = {"team": {"id": {"eq": team_id}}} if team_id else None
    labels = await _all_pages(context, lambda cursor: context.client.issue_labels(filter=label_filter, after=cursor))

    if team_id:
        workspace_labels = await _all_pages(
            context, lambda cursor: context.client.issue_labels(filter={"team": {"null": True}}, after=cursor)
        )
        unique = {}
        for label in labels + workspace_labels:
            unique[label.id] = label
        labels = list(unique.values())

    return formatters.tool_result(formatters.to_json([formatters.format_label(l) for l in labels]))


# ============================================================================
# Workspace Handlers
# ============================================================================

@tool_handler
async def handle_get_user(arguments: dict, context: ToolContext) -> CallToolResult:
    """Get the authenticated user's profile."""
    user = await context.governor.governed(context.client.viewer)
    return formatters.tool_result(formatters.to_json(formatters.format_user(user)))


@tool_handler
async def handle_workspace_metadata(arguments: dict, context: ToolContext) -> CallToolResult:
    """Teams with their workflow states and projects, plus all labels, in one document.

    The whole document is cached for the snapshot TTL since building it fans
    out into one states listing per team.
    """
    cached = context.metadata_cache.get()
    if cached is not None:
        return formatters.tool_result(cached)

    teams, projects, labels = await asyncio.gather(
        context.resolver.get_teams(),
        _all_pages(context, lambda cursor: context.client.projects(after=cursor)),
        _all_pages(context, lambda cursor: context.client.issue_labels(after=cursor)),
    )
    states_per_team = await asyncio.gather(*(context.resolver.get_workflow_states(t.id) for t in teams))

    team_docs = []
    for team, states in zip(teams, states_per_team):
        team_docs.append({
            **formatters.format_team(team),
            "states": [
                {"id": s.id, "name": s.name, "type": s.type}
                for s in states if s.team.id == team.id
            ],
            "projects": [
                {"id": p.id, "name": p.name, "state": p.state, "teamIds": [t.id for t in p.teams]}
                for p in projects if any(t.id == team.id for t in p.teams)
            ],
        })

    text = formatters.to_json({
        "teams": team_docs,
        "labels": [formatters.format_label(l) for l in labels],
    })
    context.metadata_cache.set(text)
    logger.info(f"Built workspace metadata: {len(teams)} teams, {len(projects)} projects, {len(labels)} labels")
    return formatters.tool_result(text)
