"""Core layer for the FOCCACIA service.

This module provides the domain entities and the application errors shared
by storage backends, the football API client and the service layer.
"""

from .entities import (
    EntityId,
    User,
    Group,
    GroupTeam,
    GroupTeamDetails,
    GroupDetails,
    LeagueSummary,
    TeamDetailed,
)
from .errors import (
    ErrorKind,
    FoccaciaError,
    InvalidDataError,
    NotFoundError,
    NotAuthorizedError,
    ConflictError,
    InternalError,
)

__all__ = [
    "EntityId",
    "User",
    "Group",
    "GroupTeam",
    "GroupTeamDetails",
    "GroupDetails",
    "LeagueSummary",
    "TeamDetailed",
    "ErrorKind",
    "FoccaciaError",
    "InvalidDataError",
    "NotFoundError",
    "NotAuthorizedError",
    "ConflictError",
    "InternalError",
]
