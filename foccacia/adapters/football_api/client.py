"""API-Football client with memoization and error classification."""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Mapping

import httpx
import structlog

from foccacia.core.errors import (
    InternalError,
    NotAuthorizedError,
    NotFoundError,
)
from .cache import MemoCache, make_cache_key

logger = structlog.get_logger()

DEFAULT_BASE_URL = "https://v3.football.api-sports.io"


@dataclass
class TeamInfo:
    """Team entry from the /teams endpoint."""

    id: int
    name: str
    code: Optional[str] = None
    country: Optional[str] = None
    logo: Optional[str] = None
    venue_name: Optional[str] = None
    venue_city: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TeamInfo":
        team = data.get("team") or {}
        venue = data.get("venue") or {}
        return cls(
            id=team["id"],
            name=team["name"],
            code=team.get("code"),
            country=team.get("country"),
            logo=team.get("logo"),
            venue_name=venue.get("name"),
            venue_city=venue.get("city"),
        )


@dataclass
class LeagueInfo:
    """League entry from the /leagues endpoint."""

    id: int
    name: str
    type: Optional[str] = None
    logo: Optional[str] = None
    country: Optional[str] = None
    seasons: List[int] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "LeagueInfo":
        league = data.get("league") or {}
        country = data.get("country") or {}
        return cls(
            id=league["id"],
            name=league["name"],
            type=league.get("type"),
            logo=league.get("logo"),
            country=country.get("name"),
            seasons=[s["year"] for s in data.get("seasons") or [] if "year" in s],
        )


class FootballAPIClient:
    """Read-only client over the API-Football /teams and /leagues endpoints.

    Every public lookup is memoized: identical arguments share one remote
    query for as long as the cache keeps the entry.
    """

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        request_timeout: float = 10.0,
        cache: Optional[MemoCache] = None,
    ):
        """Initialize the football API client.

        Args:
            api_key: API-Football key, sent on every request
            base_url: Base URL for the API (defaults to the public API)
            request_timeout: Request timeout in seconds
            cache: Memo cache to use (defaults to an unbounded one)
        """
        self.api_key = api_key
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.request_timeout = request_timeout
        self.cache = cache if cache is not None else MemoCache()
        self.client = httpx.AsyncClient(timeout=request_timeout)

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.client.aclose()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def get_teams_by_name(self, name: str) -> List[TeamInfo]:
        """Get every team whose name matches.

        Raises:
            NotFoundError: If no team matches
            NotAuthorizedError: If the API plan does not allow the query
            InternalError: For other API errors
        """
        return await self.cache.get_or_create(
            make_cache_key("teams_by_name", name),
            lambda: self._fetch_teams({"name": name}, f"Team {name} not found"),
        )

    async def get_leagues_by_team(self, team_id: Any) -> List[LeagueInfo]:
        """Get every league the team has played in."""
        return await self.cache.get_or_create(
            make_cache_key("leagues_by_team", team_id),
            lambda: self._fetch_leagues({"team": team_id}, f"Leagues for team {team_id} not found"),
        )

    async def get_teams(self, selector: Mapping[str, Any]) -> List[TeamInfo]:
        """Get teams matching a selector such as ``{"id", "league", "season"}``."""
        selector = dict(selector)
        return await self.cache.get_or_create(
            make_cache_key("teams", selector),
            lambda: self._fetch_teams(selector, "Team not found"),
        )

    async def get_leagues(self, selector: Mapping[str, Any]) -> List[LeagueInfo]:
        """Get leagues matching a selector such as ``{"id"}``."""
        selector = dict(selector)
        return await self.cache.get_or_create(
            make_cache_key("leagues", selector),
            lambda: self._fetch_leagues(selector, "League not found"),
        )

    async def _fetch_teams(self, params: Dict[str, Any], not_found: str) -> List[TeamInfo]:
        data = await self._make_request("/teams", params, not_found)
        return [TeamInfo.from_api(entry) for entry in data]

    async def _fetch_leagues(self, params: Dict[str, Any], not_found: str) -> List[LeagueInfo]:
        data = await self._make_request("/leagues", params, not_found)
        return [LeagueInfo.from_api(entry) for entry in data]

    async def _make_request(
        self, path: str, params: Dict[str, Any], not_found: str
    ) -> List[Dict[str, Any]]:
        """Query the API and classify the response.

        Args:
            path: Endpoint path, ``/teams`` or ``/leagues``
            params: Query parameters
            not_found: Message used when nothing matches
        """
        url = f"{self.base_url}{path}"
        headers = {"x-apisports-key": self.api_key, "Accept": "application/json"}

        logger.info("Querying football API", path=path, params=params)

        try:
            response = await self.client.get(url, params=params, headers=headers)
        except httpx.RequestError as e:
            logger.error("HTTP request failed", path=path, error=str(e))
            raise InternalError(f"Request to football API failed: {e}")

        if response.status_code == 404:
            raise NotFoundError(not_found)

        if not response.is_success:
            logger.error(
                "Football API error",
                path=path,
                status_code=response.status_code,
                response=response.text,
            )
            raise InternalError(f"Error fetching {path.lstrip('/')}: {response.status_code}")

        try:
            body = response.json() if response.content else {}
        except ValueError:
            logger.error("Malformed football API response", path=path, response=response.text)
            raise InternalError(f"Malformed response from {path}")
        if not isinstance(body, dict):
            raise InternalError(f"Malformed response from {path}")

        errors = body.get("errors") or {}
        if isinstance(errors, dict) and errors:
            if "bug" in errors:
                raise InternalError(str(errors["bug"]))
            if "plan" in errors:
                raise NotAuthorizedError(str(errors["plan"]))
            logger.error("Football API reported errors", path=path, errors=errors)
            raise InternalError("; ".join(str(v) for v in errors.values()))

        results = body.get("response")
        if not results or body.get("results") == 0:
            raise NotFoundError(not_found)

        return results
