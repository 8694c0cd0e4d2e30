"""Memoization of football API calls."""

import asyncio
import json
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Optional, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


def make_cache_key(operation: str, *args: Any) -> str:
    """Build the cache key for an operation call.

    Arguments are serialized as JSON with sorted mapping keys, so two
    selectors with the same fields in a different order share one entry.
    Values are stringified first: ``{"id": 529}`` and ``{"id": "529"}`` hit
    the same remote query and therefore the same entry.
    """
    return json.dumps([operation, _normalize(list(args))], sort_keys=True)


def _normalize(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _normalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    return str(value)


class MemoCache:
    """Shares one in-flight or finished task per key.

    Entries live for the process lifetime unless ``max_entries`` is set, in
    which case the least recently used entry is evicted. Failed tasks are
    dropped so the next call queries the remote API again.
    """

    def __init__(self, max_entries: Optional[int] = None):
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, asyncio.Task]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    async def get_or_create(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        """Return the result for ``key``, running ``factory`` only on a miss."""
        task = self._entries.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            task.add_done_callback(lambda t, key=key: self._discard_failed(key, t))
            self._entries[key] = task
            self._evict()
        else:
            self._entries.move_to_end(key)
        # shield keeps a cancelled caller from cancelling the shared task
        return await asyncio.shield(task)

    def clear(self) -> None:
        """Forget every entry."""
        self._entries.clear()

    def _discard_failed(self, key: str, task: asyncio.Task) -> None:
        if task.cancelled() or task.exception() is not None:
            if self._entries.get(key) is task:
                del self._entries[key]
                logger.debug("Dropped failed cache entry", key=key)

    def _evict(self) -> None:
        if self.max_entries is None:
            return
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted cache entry", key=evicted)
