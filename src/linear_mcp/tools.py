"""MCP tool definitions for the Linear server.

Input schemas are generated from the argument models in ``schemas`` so the
published schema and handler-side validation cannot drift apart.
"""
from typing import Type

from mcp.types import Tool, ToolAnnotations
from pydantic import BaseModel

from . import schemas


def _input_schema(model: Type[BaseModel]) -> dict:
    return model.model_json_schema(by_alias=True)


def _annotations(title: str, read_only: bool, idempotent: bool = True) -> ToolAnnotations:
    return ToolAnnotations(
        title=title,
        readOnlyHint=read_only,
        destructiveHint=False,
        idempotentHint=idempotent,
        openWorldHint=True,
    )


def get_tools() -> list[Tool]:
    """Get the list of all MCP tools for Linear."""
    return [
        # ============================================================================
        # Issue lifecycle tools
        # ============================================================================
        Tool(
            name="linear_create_issue",
            title="Create Linear Issue",
            description="Create a new issue in Linear. Requires a team (by ID or name) and title. "
                        "Optionally set project, state, priority (0=None, 1=Urgent, 2=High, 3=Medium, 4=Low), "
                        "labels, and assignee. Accepts both names and IDs for team, project, and state - "
                        "names are resolved internally.",
            inputSchema=_input_schema(schemas.CreateIssueArgs),
            annotations=_annotations("Create Linear Issue", read_only=False, idempotent=False),
        ),
        Tool(
            name="linear_get_issue",
            title="Get Linear Issue",
            description='Get a single issue by its identifier (e.g., "GEN-123") or UUID. '
                        "Returns full issue details including state, assignee, project, labels, and URL.",
            inputSchema=_input_schema(schemas.GetIssueArgs),
            annotations=_annotations("Get Linear Issue", read_only=True),
        ),
        Tool(
            name="linear_update_issue",
            title="Update Linear Issue",
            description="Update an existing issue's fields. Provide the issue ID or identifier plus any fields "
                        "to change. Accepts state name (e.g., 'Done') which is resolved to the correct workflow "
                        "state ID. Set assigneeId to empty string to unassign.",
            inputSchema=_input_schema(schemas.UpdateIssueArgs),
            annotations=_annotations("Update Linear Issue", read_only=False),
        ),
        Tool(
            name="linear_search_issues",
            title="Search Linear Issues",
            description="Full-text search across issues. Optionally filter by team, project, assignee, or state "
                        "name. Returns up to `limit` results (default 20, max 50).",
            inputSchema=_input_schema(schemas.SearchIssuesArgs),
            annotations=_annotations("Search Linear Issues", read_only=True),
        ),
        Tool(
            name="linear_list_issues",
            title="List Linear Issues",
            description="List issues with optional filters for team, project, state, and assignee. "
                        "Supports cursor-based pagination. Returns issues and pageInfo with endCursor for next page.",
            inputSchema=_input_schema(schemas.ListIssuesArgs),
            annotations=_annotations("List Linear Issues", read_only=True),
        ),
        Tool(
            name="linear_create_comment",
            title="Create Linear Comment",
            description='Add a comment to an issue. Provide the issue ID or identifier (e.g., "GEN-123") '
                        "and comment body (Markdown supported).",
            inputSchema=_input_schema(schemas.CreateCommentArgs),
            annotations=_annotations("Create Linear Comment", read_only=False, idempotent=False),
        ),
        # ============================================================================
        # Supporting query tools
        # ============================================================================
        Tool(
            name="linear_list_teams",
            title="List Linear Teams",
            description="List all teams in the workspace. Returns team ID, name, and key for each.",
            inputSchema=_input_schema(schemas.NoArgs),
            annotations=_annotations("List Linear Teams", read_only=True),
        ),
        Tool(
            name="linear_list_projects",
            title="List Linear Projects",
            description="List projects, optionally filtered by team (ID or name). "
                        "Returns project ID, name, state, and associated teams.",
            inputSchema=_input_schema(schemas.ListProjectsArgs),
            annotations=_annotations("List Linear Projects", read_only=True),
        ),
        Tool(
            name="linear_list_issue_statuses",
            title="List Linear Issue Statuses",
            description="List workflow states (e.g., Todo, In Progress, Done) for a team. "
                        "Provide team by ID or name. If omitted, returns states for all teams.",
            inputSchema=_input_schema(schemas.ListIssueStatusesArgs),
            annotations=_annotations("List Linear Issue Statuses", read_only=True),
        ),
        Tool(
            name="linear_list_labels",
            title="List Linear Labels",
            description="List issue labels, optionally filtered by team. "
                        "Includes both team-specific and workspace-level labels.",
            inputSchema=_input_schema(schemas.ListLabelsArgs),
            annotations=_annotations("List Linear Labels", read_only=True),
        ),
        # ============================================================================
        # Workspace tools
        # ============================================================================
        Tool(
            name="linear_get_user",
            title="Get Linear User",
            description="Get the authenticated user's profile information (name, email, admin status).",
            inputSchema=_input_schema(schemas.NoArgs),
            annotations=_annotations("Get Linear User", read_only=True),
        ),
        Tool(
            name="linear_workspace_metadata",
            title="Linear Workspace Metadata",
            description="Get comprehensive workspace metadata in a single call: all teams with their projects, "
                        "workflow states, and labels. Cached for 5 minutes. Use this first to discover IDs needed "
                        "for issue creation instead of calling list_teams + list_projects + list_statuses separately.",
            inputSchema=_input_schema(schemas.NoArgs),
            annotations=_annotations("Linear Workspace Metadata", read_only=True),
        ),
    ]
