"""Application container for the FOCCACIA service."""

import logging
from typing import Optional

from foccacia.config import Config
from foccacia.adapters.football_api import FootballAPIClient, MemoCache
from foccacia.adapters.storage import (
    ElasticClient,
    ElasticStorage,
    MemoryStorage,
    MemoryStore,
    StorageBackend,
)
from foccacia.application import FoccaciaServices
from foccacia.logging_config import configure_logging


logger = logging.getLogger(__name__)


class FoccaciaApplication:
    """Wires configuration, football API client, storage and services.

    Boundary adapters obtain the service layer from ``services`` after
    ``start()`` and must call ``stop()`` on shutdown.
    """

    def __init__(
        self,
        config: Config,
        storage: Optional[StorageBackend] = None,
        football_api: Optional[FootballAPIClient] = None,
    ):
        """Initialize the application.

        Args:
            config: Service configuration
            storage: Optional storage backend for dependency injection.
                     If not provided, one is created from config.
            football_api: Optional football API client for dependency injection.
        """
        self.config = config
        self._provided_storage = storage
        self._provided_football_api = football_api

        self._football_api: Optional[FootballAPIClient] = None
        self._storage: Optional[StorageBackend] = None
        self._services: Optional[FoccaciaServices] = None

    @property
    def services(self) -> FoccaciaServices:
        if self._services is None:
            raise RuntimeError("Application not started. Call start() first.")
        return self._services

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()

    async def start(self) -> None:
        """Configure logging, then create and initialize every component."""
        if self._services is not None:
            logger.warning("Application already started")
            return

        configure_logging(self.config)
        logger.info("Starting FOCCACIA application")

        if self._provided_football_api is not None:
            self._football_api = self._provided_football_api
        else:
            self._football_api = FootballAPIClient(
                self.config.football_api_key,
                base_url=self.config.football_api_url,
                request_timeout=self.config.football_api_timeout_seconds,
                cache=MemoCache(max_entries=self.config.cache_max_entries()),
            )
        logger.info(f"Using football API at: {self.config.football_api_url}")

        if self._provided_storage is not None:
            self._storage = self._provided_storage
        else:
            self._storage = self._create_storage(self._football_api)

        try:
            await self._storage.initialize()
        except Exception:
            await self._cleanup()
            raise

        self._services = FoccaciaServices(self._storage, self._football_api)
        logger.info("FOCCACIA application started")

    async def stop(self) -> None:
        """Release every component."""
        logger.info("Stopping FOCCACIA application")
        self._services = None
        await self._cleanup()
        logger.info("FOCCACIA application stopped")

    def _create_storage(self, football_api: FootballAPIClient) -> StorageBackend:
        if self.config.use_elastic():
            logger.info(f"Using Elasticsearch storage at: {self.config.elastic_url}")
            return ElasticStorage(
                football_api,
                ElasticClient(
                    self.config.elastic_url,
                    request_timeout=self.config.elastic_timeout_seconds,
                ),
                max_results=self.config.elastic_max_results,
            )

        logger.info("Using in-memory storage")
        store = MemoryStore.with_demo_data() if self.config.seed_demo_data else MemoryStore()
        return MemoryStorage(football_api, store)

    async def _cleanup(self) -> None:
        """Close storage and football API client."""
        if self._storage is not None:
            try:
                await self._storage.close()
            except Exception as e:
                logger.error(f"Error closing storage: {e}")
            self._storage = None

        if self._football_api is not None:
            try:
                await self._football_api.close()
            except Exception as e:
                logger.error(f"Error closing football API client: {e}")
            self._football_api = None
