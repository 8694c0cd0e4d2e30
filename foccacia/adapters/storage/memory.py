"""In-memory storage backend."""

import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional

from foccacia.adapters.football_api import FootballAPIClient
from foccacia.core.entities import Group, GroupDetails, GroupTeam, User
from foccacia.core.errors import ConflictError, InvalidDataError, NotFoundError
from .base import build_group_details, ensure_team_exists

logger = logging.getLogger(__name__)


@dataclass
class MemoryStore:
    """Records kept by a MemoryStorage, in insertion order.

    Each entity type has its own id counter, starting at 1.
    """

    users: List[User] = field(default_factory=list)
    groups: List[Group] = field(default_factory=list)
    group_teams: List[GroupTeam] = field(default_factory=list)

    last_user_id: int = 0
    last_group_id: int = 0
    last_group_team_id: int = 0

    def next_user_id(self) -> int:
        self.last_user_id += 1
        return self.last_user_id

    def next_group_id(self) -> int:
        self.last_group_id += 1
        return self.last_group_id

    def next_group_team_id(self) -> int:
        self.last_group_team_id += 1
        return self.last_group_team_id

    def add_user(self, name: str, token: Optional[str] = None) -> User:
        user = User(id=self.next_user_id(), name=name, token=token or str(uuid.uuid4()))
        self.users.append(user)
        return user

    def add_group(self, name: str, description: str, owner_id: int) -> Group:
        group = Group(
            id=self.next_group_id(),
            name=name,
            description=description,
            owner_id=owner_id,
        )
        self.groups.append(group)
        return group

    def add_group_team(self, group_id: int, team_id: int, league_id: int, season: int) -> GroupTeam:
        group_team = GroupTeam(
            id=self.next_group_team_id(),
            group_id=group_id,
            team_id=team_id,
            league_id=league_id,
            season=season,
        )
        self.group_teams.append(group_team)
        return group_team

    @classmethod
    def with_demo_data(cls) -> "MemoryStore":
        """Store with two users, each owning one group."""
        store = cls()
        user1 = store.add_user("User1", "c176eafd-25eb-45d3-a8cb-7218f3d63b3b")
        user2 = store.add_user("User2", "3efa8c5d-a9f4-4d71-be2d-8d9347e540c0")
        group1 = store.add_group("Group1", "Description1", user1.id)
        group2 = store.add_group("Group2", "Description2", user2.id)
        store.add_group_team(group1.id, 1, 1, 2021)
        store.add_group_team(group1.id, 2, 1, 2021)
        store.add_group_team(group2.id, 1, 1, 2021)
        return store


class MemoryStorage:
    """Storage backend keeping every record in a MemoryStore.

    Records last for the lifetime of the store and are handed out as copies;
    only the backend changes the stored instances. Every check-then-write
    runs without awaiting in between, so operations are atomic on a single
    event loop. The backend is not safe to share across threads.
    """

    def __init__(self, football_api: FootballAPIClient, store: Optional[MemoryStore] = None):
        self.football_api = football_api
        self.store = store if store is not None else MemoryStore()

    def parse_group_id(self, raw: Any) -> int:
        return self._parse_numeric_id(raw, "Group id")

    def parse_membership_id(self, raw: Any) -> int:
        return self._parse_numeric_id(raw, "Group team id")

    @staticmethod
    def _parse_numeric_id(raw: Any, label: str) -> int:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            raise InvalidDataError(f"{label} must be provided")
        if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
            raise InvalidDataError(f"{label} must be a number")
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise InvalidDataError(f"{label} must be a number")

    async def initialize(self) -> None:
        logger.info(
            f"Memory storage ready with {len(self.store.users)} users "
            f"and {len(self.store.groups)} groups"
        )

    async def close(self) -> None:
        pass

    # User methods

    async def create_user(self, name: str) -> User:
        if any(u.name == name for u in self.store.users):
            raise ConflictError(f"User with name {name} already exists")
        user = self.store.add_user(name)
        logger.info(f"Created user {user.id}")
        return replace(user)

    async def get_user_by_name(self, name: str) -> User:
        for user in self.store.users:
            if user.name == name:
                return replace(user)
        raise NotFoundError(f"User with name {name} not found")

    async def convert_token_to_user_id(self, token: str) -> int:
        for user in self.store.users:
            if user.token == token:
                return user.id
        raise NotFoundError(f"User with token {token} not found")

    # Group methods

    async def get_groups_by_owner(self, user_id: int) -> List[Group]:
        return [replace(g) for g in self.store.groups if g.owner_id == user_id]

    async def get_group(self, group_id: int) -> Group:
        return replace(self._find_group(group_id))

    async def create_group(self, name: str, description: str, owner_id: int) -> Group:
        group = self.store.add_group(name, description, owner_id)
        logger.info(f"Created group {group.id} for user {owner_id}")
        return replace(group)

    async def update_group(self, group_id: int, name: str, description: str) -> Group:
        group = self._find_group(group_id)
        group.name = name
        group.description = description
        return replace(group)

    async def delete_group(self, group_id: int) -> None:
        group = self._find_group(group_id)
        self.store.groups.remove(group)
        self.store.group_teams[:] = [
            gt for gt in self.store.group_teams if gt.group_id != group_id
        ]
        logger.info(f"Deleted group {group_id}")

    def _find_group(self, group_id: int) -> Group:
        for group in self.store.groups:
            if group.id == group_id:
                return group
        raise NotFoundError(f"Group with id {group_id} not found")

    # Membership methods

    async def get_group_memberships(self, group_id: int) -> List[GroupTeam]:
        return [replace(gt) for gt in self.store.group_teams if gt.group_id == group_id]

    async def get_group_details(self, group_id: int) -> GroupDetails:
        group = replace(self._find_group(group_id))
        memberships = await self.get_group_memberships(group_id)
        return await build_group_details(self.football_api, group, memberships)

    async def add_team_to_group(
        self, group_id: int, team_id: int, league_id: int, season: int
    ) -> GroupTeam:
        self._find_group(group_id)
        await ensure_team_exists(self.football_api, team_id, league_id, season)

        # group may have been deleted while the football API answered
        self._find_group(group_id)
        for gt in self.store.group_teams:
            if gt.group_id == group_id and gt.matches(team_id, league_id, season):
                raise ConflictError(
                    f"Team with id {team_id}, league id {league_id} and season {season} "
                    f"already exists in group with id {group_id}"
                )

        group_team = self.store.add_group_team(group_id, team_id, league_id, season)
        logger.info(f"Added team {team_id} to group {group_id}")
        return replace(group_team)

    async def remove_team_from_group(self, membership_id: int, group_id: int) -> None:
        for gt in self.store.group_teams:
            if gt.id == membership_id and gt.group_id == group_id:
                self.store.group_teams.remove(gt)
                return
        raise NotFoundError(
            f"Team with id {membership_id} not found in group with id {group_id}"
        )
