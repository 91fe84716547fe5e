"""Pydantic schemas for tool arguments.

Tool input schemas published to MCP clients are generated from these models,
and handlers validate incoming arguments with them. Argument names are
camelCase on the wire.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PRIORITY_DESCRIPTION = "Priority: 0=No priority, 1=Urgent, 2=High, 3=Medium, 4=Low"


class ToolArguments(BaseModel):
    """Base for tool argument schemas."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class TeamScopeArgs(ToolArguments):
    """Optional team filter, by ID or name."""

    team_id: Optional[str] = Field(None, description="Team ID (UUID)")
    team_name: Optional[str] = Field(None, description="Team name or key (e.g., 'Engineering' or 'ENG')")


# Issue Schemas

class CreateIssueArgs(ToolArguments):
    title: str = Field(..., min_length=1, description="Issue title")
    description: Optional[str] = Field(None, description="Issue description (Markdown supported)")
    team_id: Optional[str] = Field(None, description="Team ID (UUID). Provide either teamId or teamName")
    team_name: Optional[str] = Field(None, description="Team name (e.g., 'General'). Resolved to ID internally")
    project_id: Optional[str] = Field(None, description="Project ID (UUID). Provide either projectId or projectName")
    project_name: Optional[str] = Field(None, description="Project name (e.g., 'nexus'). Resolved to ID internally")
    state_id: Optional[str] = Field(None, description="Workflow state ID. Use linear_list_issue_statuses to find valid IDs")
    state_name: Optional[str] = Field(
        None, description="Workflow state name (e.g., 'Todo', 'In Progress'). Resolved to ID internally"
    )
    priority: Optional[int] = Field(None, ge=0, le=4, description=PRIORITY_DESCRIPTION)
    label_ids: Optional[list[str]] = Field(None, description="Array of label IDs to apply")
    assignee_id: Optional[str] = Field(None, description="Assignee user ID")


class GetIssueArgs(ToolArguments):
    identifier: str = Field(..., min_length=1, description="Issue identifier (e.g., 'GEN-123') or UUID")


class UpdateIssueArgs(ToolArguments):
    issue_id: str = Field(..., min_length=1, description="Issue ID (UUID) or identifier (e.g., 'GEN-123')")
    title: Optional[str] = Field(None, description="New title")
    description: Optional[str] = Field(None, description="New description (Markdown)")
    state_id: Optional[str] = Field(None, description="New workflow state ID")
    state_name: Optional[str] = Field(
        None, description="New workflow state name (e.g., 'Done'). Resolved to ID internally"
    )
    priority: Optional[int] = Field(None, ge=0, le=4, description=PRIORITY_DESCRIPTION)
    assignee_id: Optional[str] = Field(None, description="New assignee user ID. Use empty string to unassign")
    label_ids: Optional[list[str]] = Field(None, description="Replace all labels with these IDs")


class SearchIssuesArgs(ToolArguments):
    query: str = Field(..., min_length=1, description="Text search query")
    team_id: Optional[str] = Field(None, description="Filter by team ID")
    team_name: Optional[str] = Field(None, description="Filter by team name")
    project_id: Optional[str] = Field(None, description="Filter by project ID")
    project_name: Optional[str] = Field(None, description="Filter by project name")
    assignee_id: Optional[str] = Field(None, description="Filter by assignee user ID")
    state_name: Optional[str] = Field(None, description="Filter by workflow state name (e.g., 'In Progress')")
    limit: int = Field(20, ge=1, le=50, description="Max results to return")


class ListIssuesArgs(ToolArguments):
    team_id: Optional[str] = Field(None, description="Filter by team ID")
    team_name: Optional[str] = Field(None, description="Filter by team name")
    project_id: Optional[str] = Field(None, description="Filter by project ID")
    project_name: Optional[str] = Field(None, description="Filter by project name")
    state_id: Optional[str] = Field(None, description="Filter by workflow state ID")
    state_name: Optional[str] = Field(None, description="Filter by workflow state name")
    assignee_id: Optional[str] = Field(None, description="Filter by assignee user ID")
    limit: int = Field(20, ge=1, le=50, description="Max results to return")
    cursor: Optional[str] = Field(None, description="Pagination cursor from previous response")


class CreateCommentArgs(ToolArguments):
    issue_id: str = Field(..., min_length=1, description="Issue ID (UUID) or identifier (e.g., 'GEN-123')")
    body: str = Field(..., min_length=1, description="Comment body (Markdown supported)")


# Team / project / workspace Schemas

class NoArgs(ToolArguments):
    pass


class ListProjectsArgs(TeamScopeArgs):
    pass


class ListIssueStatusesArgs(TeamScopeArgs):
    pass


class ListLabelsArgs(TeamScopeArgs):
    pass
