"""Domain service layer for the FOCCACIA application.

This service sits between boundary adapters (HTTP API, web site) and the
infrastructure. Every operation runs the same pipeline:

- validate caller input
- resolve the caller token to a user id
- fetch the group and check the caller owns it
- delegate to the storage backend or the football API

Each stage raises on the first failure, so nothing is written before
validation and authorization have passed.
"""

import asyncio
import logging
from typing import Any, List

from ..adapters.football_api import FootballAPIClient, LeagueInfo, TeamInfo
from ..adapters.storage import StorageBackend
from ..core.entities import (
    EntityId,
    Group,
    GroupDetails,
    GroupTeam,
    LeagueSummary,
    TeamDetailed,
    User,
)
from ..core.errors import InvalidDataError, NotAuthorizedError


logger = logging.getLogger(__name__)


def _require_text(value: Any, message: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidDataError(message)
    return str(value).strip()


def _require_int(value: Any, name: str) -> int:
    """Coerce a caller-supplied numeric field to int."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidDataError(f"{name} must be provided")
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise InvalidDataError(f"{name} must be a number")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidDataError(f"{name} must be a number")


class FoccaciaServices:
    """Application services for teams, users and groups.

    Methods taking a ``token`` treat it as the caller's credential. It is
    always the last parameter and is resolved once, before any other
    storage access.
    """

    def __init__(self, storage: StorageBackend, football_api: FootballAPIClient):
        """Initialize the services.

        Args:
            storage: Storage backend for users, groups and memberships
            football_api: Football API client for team and league data
        """
        if storage is None:
            raise ValueError("storage must be provided")
        if football_api is None:
            raise ValueError("football_api must be provided")

        self.storage = storage
        self.football_api = football_api

    # Team and league lookups

    async def get_teams_by_name(self, name: str) -> List[TeamInfo]:
        """Get teams whose name matches."""
        name = _require_text(name, "Team name must be provided")
        return await self.football_api.get_teams_by_name(name)

    async def get_teams_detailed(self, name: str) -> List[TeamDetailed]:
        """Get teams whose name matches, each with every league it plays in."""
        teams = await self.get_teams_by_name(name)
        leagues_per_team = await asyncio.gather(
            *(self.football_api.get_leagues_by_team(team.id) for team in teams)
        )
        return [
            TeamDetailed(
                id=team.id,
                name=team.name,
                logo=team.logo or "",
                venue=team.venue_name or "",
                leagues=[_league_summary(league) for league in leagues],
            )
            for team, leagues in zip(teams, leagues_per_team)
        ]

    async def get_leagues_by_team(self, team_id: Any) -> List[LeagueInfo]:
        """Get every league a team has played in."""
        team_id = _require_int(team_id, "Team id")
        return await self.football_api.get_leagues_by_team(team_id)

    # Users

    async def create_user(self, name: str) -> User:
        """Register a new user."""
        name = _require_text(name, "userName must be provided")
        return await self.storage.create_user(name)

    async def get_user(self, name: str) -> User:
        """Get a user by name."""
        name = _require_text(name, "userName must be provided")
        return await self.storage.get_user_by_name(name)

    # Groups

    async def get_groups(self, token: str) -> List[Group]:
        """Get the groups owned by the caller."""
        user_id = await self._resolve_caller(token)
        return await self.storage.get_groups_by_owner(user_id)

    async def create_group(self, name: str, description: str, token: str) -> Group:
        """Create a group owned by the caller."""
        if not name or not description:
            raise InvalidDataError(
                "To create a Group, a name and description must be provided"
            )

        user_id = await self._resolve_caller(token)
        return await self.storage.create_group(name, description, user_id)

    async def update_group(
        self, group_id: Any, name: str, description: str, token: str
    ) -> Group:
        """Replace the name and description of a group the caller owns."""
        group_id = self.storage.parse_group_id(group_id)
        if not name or not description:
            raise InvalidDataError("Both name and description must be provided")

        user_id = await self._resolve_caller(token)
        await self._get_owned_group(group_id, user_id)
        return await self.storage.update_group(group_id, name, description)

    async def delete_group(self, group_id: Any, token: str) -> None:
        """Delete a group the caller owns, with its memberships."""
        group_id = self.storage.parse_group_id(group_id)

        user_id = await self._resolve_caller(token)
        await self._get_owned_group(group_id, user_id)
        await self.storage.delete_group(group_id)

    async def get_group_details(self, group_id: Any, token: str) -> GroupDetails:
        """Get a group the caller owns with its teams resolved."""
        group_id = self.storage.parse_group_id(group_id)

        user_id = await self._resolve_caller(token)
        await self._get_owned_group(group_id, user_id)
        return await self.storage.get_group_details(group_id)

    # Memberships

    async def add_team_to_group(
        self,
        group_id: Any,
        team_id: Any,
        league_id: Any,
        season: Any,
        token: str,
    ) -> GroupTeam:
        """Attach a team/league/season to a group the caller owns."""
        team_id = _require_int(team_id, "teamId")
        league_id = _require_int(league_id, "leagueId")
        season = _require_int(season, "season")
        group_id = self.storage.parse_group_id(group_id)

        user_id = await self._resolve_caller(token)
        await self._get_owned_group(group_id, user_id)
        return await self.storage.add_team_to_group(group_id, team_id, league_id, season)

    async def remove_team_from_group(
        self, group_id: Any, membership_id: Any, token: str
    ) -> None:
        """Detach a membership from a group the caller owns."""
        membership_id = self.storage.parse_membership_id(membership_id)
        group_id = self.storage.parse_group_id(group_id)

        user_id = await self._resolve_caller(token)
        await self._get_owned_group(group_id, user_id)
        await self.storage.remove_team_from_group(membership_id, group_id)

    # Authorization helpers

    async def _resolve_caller(self, token: str) -> EntityId:
        """Resolve the caller token to a user id.

        Raises:
            InvalidDataError: If no token was supplied
            NotFoundError: If no user has this token
        """
        if not token:
            raise InvalidDataError("A user token must be provided")
        return await self.storage.convert_token_to_user_id(token)

    async def _get_owned_group(self, group_id: EntityId, user_id: EntityId) -> Group:
        """Fetch a group and check the user owns it.

        Raises:
            NotFoundError: If the group does not exist
            NotAuthorizedError: If the user is not the owner
        """
        group = await self.storage.get_group(group_id)
        if not group.is_owned_by(user_id):
            logger.warning(f"User {user_id} denied access to group {group_id}")
            raise NotAuthorizedError(
                f"User with id {user_id} does not own group with id {group_id}"
            )
        return group


def _league_summary(league: LeagueInfo) -> LeagueSummary:
    return LeagueSummary(id=league.id, name=league.name, seasons=list(league.seasons))
