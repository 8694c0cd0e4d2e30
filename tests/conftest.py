"""Shared pytest fixtures for FOCCACIA tests."""

import pytest
import pytest_asyncio
import respx

from foccacia.adapters.football_api import FootballAPIClient
from foccacia.adapters.storage import (
    ElasticClient,
    ElasticStorage,
    MemoryStorage,
    MemoryStore,
)
from foccacia.application import FoccaciaServices
from tests.elastic_mocks import ELASTIC_URL, FakeElasticsearch
from tests.football_api_mocks import FOOTBALL_API_URL, FootballAPIMock


@pytest.fixture
def mock_router():
    """respx router intercepting every httpx request made by a test."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture
def football_mock(mock_router):
    """API-Football routes registered on the test router."""
    return FootballAPIMock(mock_router, FOOTBALL_API_URL)


@pytest.fixture
def fake_elastic(mock_router):
    """Elasticsearch double registered on the test router."""
    return FakeElasticsearch(mock_router)


@pytest_asyncio.fixture
async def football_api(mock_router):
    """Football API client pointed at the mocked API."""
    client = FootballAPIClient("test-api-key", base_url=FOOTBALL_API_URL)
    yield client
    await client.close()


@pytest_asyncio.fixture
async def memory_storage(football_api):
    """In-memory backend with its own empty store."""
    storage = MemoryStorage(football_api, MemoryStore())
    await storage.initialize()
    yield storage
    await storage.close()


@pytest_asyncio.fixture
async def elastic_storage(football_api, fake_elastic):
    """Elasticsearch backend talking to the in-process double."""
    storage = ElasticStorage(football_api, ElasticClient(ELASTIC_URL))
    await storage.initialize()
    yield storage
    await storage.close()


@pytest_asyncio.fixture(params=["memory", "elastic"])
async def storage(request, football_api, mock_router):
    """Each storage backend in turn, for contract tests."""
    if request.param == "memory":
        backend = MemoryStorage(football_api, MemoryStore())
    else:
        FakeElasticsearch(mock_router)
        backend = ElasticStorage(football_api, ElasticClient(ELASTIC_URL))
    await backend.initialize()
    yield backend
    await backend.close()


@pytest.fixture
def services(storage, football_api):
    """Service layer over each storage backend in turn."""
    return FoccaciaServices(storage, football_api)
