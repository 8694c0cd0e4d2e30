"""Configuration management for the FOCCACIA service."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from decouple import Choices
from decouple import config


class Environment(Enum):
    """Supported deployment environments."""

    DEVELOPMENT = "development"
    CI = "CI"
    PRODUCTION = "production"


class StorageBackendType(Enum):
    """Available storage backends."""

    MEMORY = "memory"
    ELASTIC = "elastic"


@dataclass
class Config:
    """Configuration for the FOCCACIA service."""

    # Required fields
    football_api_key: str

    # Environment configuration
    environment: Environment = Environment.DEVELOPMENT
    storage_backend: StorageBackendType = StorageBackendType.MEMORY

    # Football API configuration
    football_api_url: str = "https://v3.football.api-sports.io"
    football_api_timeout_seconds: int = 30
    football_api_cache_max_entries: int = 0  # 0 keeps every entry

    # Elasticsearch configuration
    elastic_url: str = "http://localhost:9200"
    elastic_timeout_seconds: int = 10
    elastic_max_results: int = 1000

    # Seed the in-memory backend with the demo users and groups
    seed_demo_data: bool = False

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables."""
        # Helper function to simplify config calls
        def get_config(key: str, default=None, cast=None):
            if default is not None:
                if cast is not None:
                    return config(key, default=default, cast=cast)
                else:
                    return config(key, default=default)
            else:
                return config(key)

        env = Environment(
            get_config("ENVIRONMENT", "development", Choices(["development", "CI", "production"]))
        )
        backend = StorageBackendType(
            get_config("STORAGE_BACKEND", "memory", Choices(["memory", "elastic"]))
        )

        return cls(
            # Required
            football_api_key=get_config("FOOTBALL_API_KEY"),
            # Environment
            environment=env,
            storage_backend=backend,
            # Football API
            football_api_url=get_config("FOOTBALL_API_URL", "https://v3.football.api-sports.io"),
            football_api_timeout_seconds=get_config("FOOTBALL_API_TIMEOUT_SECONDS", 30, int),
            football_api_cache_max_entries=get_config("FOOTBALL_API_CACHE_MAX_ENTRIES", 0, int),
            # Elasticsearch
            elastic_url=get_config("ELASTIC_URL", "http://localhost:9200"),
            elastic_timeout_seconds=get_config("ELASTIC_TIMEOUT_SECONDS", 10, int),
            elastic_max_results=get_config("ELASTIC_MAX_RESULTS", 1000, int),
            seed_demo_data=get_config("SEED_DEMO_DATA", False, bool),
            # Logging
            log_level=get_config("LOG_LEVEL", "INFO"),
            log_format=get_config("LOG_FORMAT", "json", Choices(["json", "text"])),
        )

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == Environment.CI

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    def use_elastic(self) -> bool:
        """Check if groups are persisted in Elasticsearch."""
        return self.storage_backend == StorageBackendType.ELASTIC

    def cache_max_entries(self) -> Optional[int]:
        """Bound for the football API cache, None when unbounded."""
        if self.football_api_cache_max_entries <= 0:
            return None
        return self.football_api_cache_max_entries
