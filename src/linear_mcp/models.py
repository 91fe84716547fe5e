"""Read-only projections of Linear GraphQL objects.

Only the fields the tools need are selected from the API, so every model is
a flat record plus the few relations a tool reads. GraphQL uses camelCase;
fields are exposed in snake_case via aliases.
"""
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def _unwrap_nodes(value):
    """Accept a GraphQL connection ({"nodes": [...]}) where a list is expected."""
    if isinstance(value, dict):
        return value.get("nodes") or []
    return value if value is not None else []


class LinearModel(BaseModel):
    """Base for Linear entity projections."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True)


class Team(LinearModel):
    id: str
    name: str
    key: str = ""


class WorkflowState(LinearModel):
    id: str
    name: str
    type: str = ""
    team: Optional[Team] = None  # Owning team; absent when not selected or not resolvable


class Project(LinearModel):
    id: str
    name: str
    state: Optional[str] = None
    teams: list[Team] = Field(default_factory=list)

    @field_validator("teams", mode="before")
    @classmethod
    def unwrap_teams(cls, value):
        return _unwrap_nodes(value)


class Label(LinearModel):
    id: str
    name: str
    color: Optional[str] = None


class User(LinearModel):
    id: str
    name: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    admin: Optional[bool] = None
    active: Optional[bool] = None


class ProjectRef(LinearModel):
    id: str
    name: str


class Issue(LinearModel):
    id: str
    identifier: str
    title: str
    description: Optional[str] = None
    priority: int = 0
    url: str = ""
    created_at: str
    updated_at: str
    state: Optional[WorkflowState] = None
    team: Optional[Team] = None
    assignee: Optional[User] = None
    project: Optional[ProjectRef] = None
    labels: list[Label] = Field(default_factory=list)

    @field_validator("labels", mode="before")
    @classmethod
    def unwrap_labels(cls, value):
        return _unwrap_nodes(value)


class Comment(LinearModel):
    id: str
    body: str
    created_at: str
    user: Optional[User] = None


class PageInfo(LinearModel):
    has_next_page: bool = False
    end_cursor: Optional[str] = None


class Connection(LinearModel, Generic[T]):
    """One page of a Relay-style list result."""

    nodes: list[T] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo)


class MutationPayload(LinearModel):
    """Outcome of a write: success flag plus the id of the touched entity, if any."""

    success: bool
    entity_id: Optional[str] = None
