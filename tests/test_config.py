"""Tests for configuration module."""
import pytest
from decouple import UndefinedValueError

from foccacia.config import Config, Environment, StorageBackendType


def clear_all_env_vars(monkeypatch):
    """Helper to clear all environment variables that could affect config."""
    env_vars = [
        "FOOTBALL_API_KEY",  # Add required vars to clear list
        "ENVIRONMENT", "STORAGE_BACKEND", "FOOTBALL_API_URL",
        "FOOTBALL_API_TIMEOUT_SECONDS", "FOOTBALL_API_CACHE_MAX_ENTRIES",
        "ELASTIC_URL", "ELASTIC_TIMEOUT_SECONDS", "ELASTIC_MAX_RESULTS",
        "SEED_DEMO_DATA", "LOG_LEVEL", "LOG_FORMAT",
    ]
    for var in env_vars:
        monkeypatch.delenv(var, raising=False)


def test_config_from_env_with_required_vars(monkeypatch):
    """Test creating config from environment variables."""
    clear_all_env_vars(monkeypatch)

    monkeypatch.setenv("FOOTBALL_API_KEY", "test_api_key")

    config = Config.from_env()

    assert config.football_api_key == "test_api_key"
    assert config.environment == Environment.DEVELOPMENT
    assert config.storage_backend == StorageBackendType.MEMORY
    assert config.football_api_url == "https://v3.football.api-sports.io"
    assert config.football_api_timeout_seconds == 30
    assert config.football_api_cache_max_entries == 0
    assert config.elastic_url == "http://localhost:9200"
    assert config.elastic_max_results == 1000
    assert config.seed_demo_data is False
    assert config.log_level == "INFO"
    assert config.log_format == "json"


def test_config_requires_api_key(monkeypatch):
    """Test that the football API key is mandatory."""
    clear_all_env_vars(monkeypatch)

    with pytest.raises(UndefinedValueError):
        Config.from_env()


def test_config_from_env_with_optional_vars(monkeypatch):
    """Test creating config with optional environment variables."""
    clear_all_env_vars(monkeypatch)
    monkeypatch.setenv("FOOTBALL_API_KEY", "test_api_key")
    monkeypatch.setenv("STORAGE_BACKEND", "elastic")
    monkeypatch.setenv("FOOTBALL_API_URL", "http://localhost:8080")
    monkeypatch.setenv("FOOTBALL_API_TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("FOOTBALL_API_CACHE_MAX_ENTRIES", "500")
    monkeypatch.setenv("ELASTIC_URL", "http://es:9200")
    monkeypatch.setenv("ELASTIC_MAX_RESULTS", "50")
    monkeypatch.setenv("SEED_DEMO_DATA", "true")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LOG_FORMAT", "text")
    monkeypatch.setenv("ENVIRONMENT", "production")

    config = Config.from_env()

    assert config.storage_backend == StorageBackendType.ELASTIC
    assert config.football_api_url == "http://localhost:8080"
    assert config.football_api_timeout_seconds == 5
    assert config.football_api_cache_max_entries == 500
    assert config.elastic_url == "http://es:9200"
    assert config.elastic_max_results == 50
    assert config.seed_demo_data is True
    assert config.log_level == "DEBUG"
    assert config.log_format == "text"
    assert config.environment == Environment.PRODUCTION


def test_environment_validation(monkeypatch):
    """Test environment validation using Choices."""
    clear_all_env_vars(monkeypatch)
    monkeypatch.setenv("FOOTBALL_API_KEY", "test_api_key")
    monkeypatch.setenv("ENVIRONMENT", "invalid")

    with pytest.raises(ValueError):
        Config.from_env()


def test_storage_backend_validation(monkeypatch):
    """Test storage backend validation using Choices."""
    clear_all_env_vars(monkeypatch)
    monkeypatch.setenv("FOOTBALL_API_KEY", "test_api_key")
    monkeypatch.setenv("STORAGE_BACKEND", "postgres")

    with pytest.raises(ValueError):
        Config.from_env()


def test_environment_helper_methods(monkeypatch):
    """Test environment helper methods."""
    clear_all_env_vars(monkeypatch)
    monkeypatch.setenv("FOOTBALL_API_KEY", "test_api_key")

    # Test development
    monkeypatch.setenv("ENVIRONMENT", "development")
    config = Config.from_env()
    assert config.is_development()
    assert not config.is_test()
    assert not config.is_production()

    # Test production
    monkeypatch.setenv("ENVIRONMENT", "production")
    config = Config.from_env()
    assert not config.is_development()
    assert not config.is_test()
    assert config.is_production()

    # Test CI environment
    monkeypatch.setenv("ENVIRONMENT", "CI")
    config = Config.from_env()
    assert not config.is_development()
    assert config.is_test()
    assert not config.is_production()


def test_storage_helpers():
    """Test backend and cache helper methods."""
    config = Config(football_api_key="key")
    assert not config.use_elastic()
    assert config.cache_max_entries() is None

    config = Config(
        football_api_key="key",
        storage_backend=StorageBackendType.ELASTIC,
        football_api_cache_max_entries=128,
    )
    assert config.use_elastic()
    assert config.cache_max_entries() == 128
