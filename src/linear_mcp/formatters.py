"""Shared formatting functions for MCP responses.

Entities are flattened into compact, JSON-serializable dicts with camelCase
keys, then serialized into the single text block of a tool result.
"""
import json
from typing import Any

from mcp.types import CallToolResult, TextContent

from .models import Comment, Issue, Label, Project, Team, User, WorkflowState


def tool_result(text: str, is_error: bool = False) -> CallToolResult:
    """Wrap text in the tool result envelope. ``isError`` is only set on failure."""
    if is_error:
        return CallToolResult(content=[TextContent(type="text", text=text)], isError=True)
    return CallToolResult(content=[TextContent(type="text", text=text)])


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2)


def format_team(team: Team) -> dict:
    return {"id": team.id, "name": team.name, "key": team.key}


def format_state(state: WorkflowState) -> dict:
    """Format a workflow state with its owning team id."""
    return {
        "id": state.id,
        "name": state.name,
        "type": state.type,
        "teamId": state.team.id if state.team else None,
    }


def format_project(project: Project) -> dict:
    return {
        "id": project.id,
        "name": project.name,
        "state": project.state,
        "teamIds": [t.id for t in project.teams],
        "teamNames": [t.name for t in project.teams],
    }


def format_label(label: Label) -> dict:
    return {"id": label.id, "name": label.name, "color": label.color}


def format_user(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "displayName": user.display_name,
        "email": user.email,
        "admin": user.admin,
        "active": user.active,
    }


def format_issue(issue: Issue) -> dict:
    """Format an issue with its state, team, assignee, project and labels.

    ``description`` is left out when the issue has none.
    """
    result: dict[str, Any] = {
        "id": issue.id,
        "identifier": issue.identifier,
        "title": issue.title,
    }
    if issue.description is not None:
        result["description"] = issue.description

    result.update({
        "priority": issue.priority,
        "state": {"id": issue.state.id, "name": issue.state.name, "type": issue.state.type} if issue.state else None,
        "team": format_team(issue.team) if issue.team else None,
        "assignee": {"id": issue.assignee.id, "name": issue.assignee.name} if issue.assignee else None,
        "project": {"id": issue.project.id, "name": issue.project.name} if issue.project else None,
        "labels": [{"id": l.id, "name": l.name} for l in issue.labels],
        "url": issue.url,
        "createdAt": issue.created_at,
        "updatedAt": issue.updated_at,
    })
    return result


def format_comment(comment: Comment, issue_id: str) -> dict:
    return {
        "id": comment.id,
        "body": comment.body,
        "createdAt": comment.created_at,
        "user": {"id": comment.user.id, "name": comment.user.name} if comment.user else None,
        "issueId": issue_id,
    }
