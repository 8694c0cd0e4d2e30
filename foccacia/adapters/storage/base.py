"""Storage backend contract and helpers shared by its implementations."""

import asyncio
import logging
from typing import Any, List, Protocol

from foccacia.adapters.football_api import FootballAPIClient
from foccacia.core.entities import (
    EntityId,
    Group,
    GroupDetails,
    GroupTeam,
    GroupTeamDetails,
    User,
)

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    """Protocol for storage backend implementations.

    Every implementation raises the same errors for the same situations:
    NotFoundError for missing entities, ConflictError for uniqueness
    violations and InternalError for failures of the underlying store.
    """

    def parse_group_id(self, raw: Any) -> EntityId:
        """Validate a caller-supplied group id and convert it to this backend's id type."""
        ...

    def parse_membership_id(self, raw: Any) -> EntityId:
        """Validate a caller-supplied membership id and convert it to this backend's id type."""
        ...

    async def initialize(self) -> None:
        """Prepare the backend for use."""
        ...

    async def close(self) -> None:
        """Release backend resources."""
        ...

    async def create_user(self, name: str) -> User:
        """Create a user with a fresh token."""
        ...

    async def get_user_by_name(self, name: str) -> User:
        """Get a user by name."""
        ...

    async def convert_token_to_user_id(self, token: str) -> EntityId:
        """Resolve a user token to the user's id."""
        ...

    async def get_groups_by_owner(self, user_id: EntityId) -> List[Group]:
        """Get every group owned by the user."""
        ...

    async def get_group(self, group_id: EntityId) -> Group:
        """Get a group by id."""
        ...

    async def create_group(self, name: str, description: str, owner_id: EntityId) -> Group:
        """Create a group owned by the given user."""
        ...

    async def update_group(self, group_id: EntityId, name: str, description: str) -> Group:
        """Replace a group's name and description."""
        ...

    async def delete_group(self, group_id: EntityId) -> None:
        """Delete a group and its memberships."""
        ...

    async def get_group_memberships(self, group_id: EntityId) -> List[GroupTeam]:
        """Get the memberships of a group."""
        ...

    async def get_group_details(self, group_id: EntityId) -> GroupDetails:
        """Get a group with every membership enriched from the football API."""
        ...

    async def add_team_to_group(
        self, group_id: EntityId, team_id: int, league_id: int, season: int
    ) -> GroupTeam:
        """Attach a team/league/season to a group."""
        ...

    async def remove_team_from_group(self, membership_id: EntityId, group_id: EntityId) -> None:
        """Detach a membership from a group."""
        ...


async def ensure_team_exists(
    football_api: FootballAPIClient, team_id: int, league_id: int, season: int
) -> None:
    """Check the football API knows the team/league/season combination.

    Raises:
        NotFoundError: If the team did not play that league in that season
    """
    await football_api.get_teams({"id": team_id, "league": league_id, "season": season})


async def enrich_membership(
    football_api: FootballAPIClient, membership: GroupTeam
) -> GroupTeamDetails:
    """Resolve the team, venue and league names of a membership."""
    teams = await football_api.get_teams(
        {"id": membership.team_id, "league": membership.league_id, "season": membership.season}
    )
    leagues = await football_api.get_leagues({"id": membership.league_id})

    team = teams[0]
    return GroupTeamDetails(
        id=membership.id,
        team=team.name,
        venue=team.venue_name or "",
        league=leagues[0].name,
        season=membership.season,
    )


async def build_group_details(
    football_api: FootballAPIClient, group: Group, memberships: List[GroupTeam]
) -> GroupDetails:
    """Enrich every membership concurrently and attach them to the group.

    A failed lookup for any membership fails the whole result.
    """
    teams = await asyncio.gather(
        *(enrich_membership(football_api, m) for m in memberships)
    )
    logger.debug(f"Enriched {len(teams)} memberships for group {group.id}")
    return GroupDetails.from_group(group, list(teams))
