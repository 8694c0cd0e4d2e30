"""Storage backends for FOCCACIA users, groups and memberships."""

from .base import StorageBackend
from .memory import MemoryStorage, MemoryStore
from .elastic import ElasticStorage
from .elastic_client import ElasticClient, ElasticResponse

__all__ = [
    "StorageBackend",
    "MemoryStorage",
    "MemoryStore",
    "ElasticStorage",
    "ElasticClient",
    "ElasticResponse",
]
