"""Application layer for FOCCACIA.

This layer validates input, resolves callers and enforces group ownership
before delegating to the storage backend and the football API.
"""

from .group_service import FoccaciaServices

__all__ = ["FoccaciaServices"]
