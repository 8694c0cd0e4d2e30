"""Core entities for the FOCCACIA service."""

from dataclasses import dataclass, field
from typing import List, Union

# int for the in-memory backend, the store-assigned string for Elasticsearch
EntityId = Union[int, str]


@dataclass
class User:
    """A registered user.

    The token is the opaque credential callers present; it is resolved to
    the user id before any ownership check.
    """

    id: EntityId
    name: str
    token: str

    def __str__(self) -> str:
        return f"User({self.name})"


@dataclass
class Group:
    """A user-owned named collection of team memberships."""

    id: EntityId
    name: str
    description: str
    owner_id: EntityId

    def is_owned_by(self, user_id: EntityId) -> bool:
        """Check if the given user owns this group."""
        return self.owner_id == user_id

    def __str__(self) -> str:
        return f"Group(id={self.id}, name={self.name}, owner_id={self.owner_id})"


@dataclass
class GroupTeam:
    """A (team, league, season) tuple attached to a group."""

    id: EntityId
    group_id: EntityId
    team_id: int
    league_id: int
    season: int

    def matches(self, team_id: int, league_id: int, season: int) -> bool:
        """Check if this membership is for the given team/league/season."""
        return (
            self.team_id == team_id
            and self.league_id == league_id
            and self.season == season
        )


@dataclass
class GroupTeamDetails:
    """A membership with its team, venue and league names resolved."""

    id: EntityId
    team: str
    venue: str
    league: str
    season: int


@dataclass
class GroupDetails:
    """A group together with its enriched memberships."""

    id: EntityId
    name: str
    description: str
    owner_id: EntityId
    teams: List[GroupTeamDetails] = field(default_factory=list)

    @classmethod
    def from_group(cls, group: Group, teams: List[GroupTeamDetails]) -> "GroupDetails":
        return cls(
            id=group.id,
            name=group.name,
            description=group.description,
            owner_id=group.owner_id,
            teams=teams,
        )


@dataclass
class LeagueSummary:
    """League entry of a detailed team listing."""

    id: int
    name: str
    seasons: List[int] = field(default_factory=list)


@dataclass
class TeamDetailed:
    """A team with its venue and every league it plays in."""

    id: int
    name: str
    logo: str
    venue: str
    leagues: List[LeagueSummary] = field(default_factory=list)
