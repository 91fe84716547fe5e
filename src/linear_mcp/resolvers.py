"""Resolve human-readable names to Linear IDs.

Tools accept either an ID or a name for teams, projects and workflow
states. IDs pass through unchanged; names are matched case-insensitively
against cached listings. When a name does not match, the raised error lists
the valid names so the caller can correct itself.
"""
import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from .cache import TTLCache
from .client import LinearClient
from .errors import NotFoundError
from .models import Project, Team, WorkflowState
from .pagination import collect_all
from .rate_limiter import RateGovernor

logger = logging.getLogger("linear-mcp.resolvers")

UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)

ALL_TEAMS = "all"

# Search hits inspected when resolving an identifier
ISSUE_SEARCH_CANDIDATES = 10


@dataclass(frozen=True)
class ById:
    id: str


@dataclass(frozen=True)
class ByName:
    name: str


# None means the field was not specified
EntityRef = Optional[Union[ById, ByName]]


def ref(entity_id: Optional[str] = None, name: Optional[str] = None) -> EntityRef:
    """Build a reference from optional id/name arguments. The id wins if both are given."""
    if entity_id:
        return ById(entity_id)
    if name:
        return ByName(name)
    return None


def is_uuid(value: str) -> bool:
    return bool(UUID_PATTERN.match(value))


class Resolver:
    """Name-to-ID resolution backed by a TTL cache and the rate governor."""

    def __init__(self, client: LinearClient, governor: RateGovernor, cache: TTLCache):
        self.client = client
        self.governor = governor
        self.cache = cache

    # ------------------------------------------------------------------
    # Cached listings
    # ------------------------------------------------------------------

    async def get_teams(self) -> list[Team]:
        cached = self.cache.get("teams")
        if cached is not None:
            return cached

        teams = await collect_all(
            lambda cursor: self.governor.governed(lambda: self.client.teams(after=cursor))
        )
        self.cache.set("teams", teams)
        logger.info(f"Cached {len(teams)} teams")
        return teams

    async def get_projects(self, team_id: Optional[str] = None) -> list[Project]:
        cache_key = f"projects:{team_id or ALL_TEAMS}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        projects = await collect_all(
            lambda cursor: self.governor.governed(lambda: self.client.projects(after=cursor))
        )
        if team_id:
            projects = [p for p in projects if any(t.id == team_id for t in p.teams)]
        self.cache.set(cache_key, projects)
        logger.info(f"Cached {len(projects)} projects for {cache_key}")
        return projects

    async def get_workflow_states(self, team_id: Optional[str] = None) -> list[WorkflowState]:
        cache_key = f"states:{team_id or ALL_TEAMS}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        state_filter = {"team": {"id": {"eq": team_id}}} if team_id else None
        nodes = await collect_all(
            lambda cursor: self.governor.governed(
                lambda: self.client.workflow_states(filter=state_filter, after=cursor)
            )
        )
        # States without a resolvable team cannot be scoped, so they are dropped
        states = [s for s in nodes if s.team is not None]
        self.cache.set(cache_key, states)
        logger.info(f"Cached {len(states)} workflow states for {cache_key}")
        return states

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def resolve_team_id(self, team: EntityRef) -> Optional[str]:
        if isinstance(team, ById):
            return team.id
        if team is None:
            return None

        teams = await self.get_teams()
        wanted = team.name.lower()
        for t in teams:
            if t.name.lower() == wanted or t.key.lower() == wanted:
                return t.id

        available = ", ".join(t.name for t in teams)
        raise NotFoundError(f'Team not found: "{team.name}". Available teams: {available}')

    async def resolve_project_id(self, project: EntityRef, team_id: Optional[str] = None) -> Optional[str]:
        if isinstance(project, ById):
            return project.id
        if project is None:
            return None

        projects = await self.get_projects(team_id)
        wanted = project.name.lower()
        for p in projects:
            if p.name.lower() == wanted:
                return p.id

        available = ", ".join(p.name for p in projects)
        raise NotFoundError(f'Project not found: "{project.name}". Available projects: {available}')

    async def resolve_state_id(self, state: EntityRef, team_id: Optional[str] = None) -> Optional[str]:
        """Resolve a workflow state.

        State names repeat across teams ("Todo", "Done"), so without a team
        scope the first matching state of any team is returned.
        """
        if isinstance(state, ById):
            return state.id
        if state is None:
            return None

        states = await self.get_workflow_states(team_id)
        in_scope = [s for s in states if not team_id or s.team.id == team_id]
        wanted = state.name.lower()
        for s in in_scope:
            if s.name.lower() == wanted:
                return s.id

        available = ", ".join(dict.fromkeys(s.name for s in in_scope))
        raise NotFoundError(f'State not found: "{state.name}". Available states: {available}')

    async def matching_state_ids(self, state_name: str, team_id: Optional[str] = None) -> list[str]:
        """Return every state id named ``state_name`` (across all teams when unscoped)."""
        states = await self.get_workflow_states(team_id)
        wanted = state_name.lower()
        return [s.id for s in states if s.name.lower() == wanted]

    async def resolve_issue_id(self, identifier: str) -> str:
        """Resolve an issue identifier (e.g. "GEN-123") or UUID to an issue UUID.

        Full-text search ranks "GEN-123" close to "GEN-12", so only a hit whose
        identifier matches exactly is accepted.
        """
        if is_uuid(identifier):
            return identifier

        result = await self.governor.governed(
            lambda: self.client.issue_search(identifier, first=ISSUE_SEARCH_CANDIDATES)
        )
        wanted = identifier.lower()
        for issue in result.nodes:
            if issue.identifier.lower() == wanted:
                return issue.id
        raise NotFoundError(f'Issue not found: "{identifier}". Verify the identifier format (e.g., "GEN-123").')
