"""Thin async client over the Elasticsearch REST API."""

from dataclasses import dataclass
from typing import Optional, Dict, Any

import httpx
import structlog

from foccacia.core.errors import InternalError

logger = structlog.get_logger()


@dataclass
class ElasticResponse:
    """Status code and decoded body of an Elasticsearch call."""

    status_code: int
    body: Dict[str, Any]

    @property
    def error(self) -> Optional[Dict[str, Any]]:
        error = self.body.get("error")
        if error is None:
            return None
        # some endpoints answer a bare string
        if isinstance(error, str):
            return {"type": "unknown", "reason": error}
        return error

    @property
    def error_type(self) -> Optional[str]:
        error = self.error
        return error.get("type") if error else None

    @property
    def total_hits(self) -> int:
        return self.body["hits"]["total"]["value"]

    @property
    def hits(self) -> list:
        return self.body["hits"]["hits"]


class ElasticClient:
    """Sends JSON requests to Elasticsearch and decodes the answers.

    Error bodies are returned, not raised, so callers can tell a missing
    document from a broken store. Transport failures raise InternalError.
    """

    def __init__(self, base_url: str = "http://localhost:9200", request_timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.request_timeout = request_timeout
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

    async def request(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> ElasticResponse:
        """Send a request to Elasticsearch.

        Args:
            method: HTTP method
            path: Path below the base URL, starting with ``/``
            body: JSON body
            params: Query parameters such as ``refresh``
        """
        url = f"{self.base_url}{path}"

        try:
            response = await self.client.request(method, url, json=body, params=params)
        except httpx.RequestError as e:
            logger.error("Elasticsearch request failed", method=method, path=path, error=str(e))
            raise InternalError(f"Elasticsearch request failed: {e}")

        try:
            decoded = response.json() if response.content else {}
        except ValueError:
            logger.error(
                "Malformed Elasticsearch response",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            raise InternalError(f"Malformed Elasticsearch response for {method} {path}")

        if response.status_code >= 500:
            logger.error(
                "Elasticsearch error",
                method=method,
                path=path,
                status_code=response.status_code,
                response=response.text,
            )

        return ElasticResponse(status_code=response.status_code, body=decoded)
