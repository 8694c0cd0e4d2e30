"""Football API adapter package.

This package contains the memoized API-Football client used to validate
and enrich group memberships.
"""

from .cache import MemoCache, make_cache_key
from .client import (
    FootballAPIClient,
    TeamInfo,
    LeagueInfo,
    DEFAULT_BASE_URL,
)

__all__ = [
    # Client
    "FootballAPIClient",
    "DEFAULT_BASE_URL",
    # Cache
    "MemoCache",
    "make_cache_key",
    # Data classes
    "TeamInfo",
    "LeagueInfo",
]
