"""Injected cache for per-query results.

The pipeline only talks to the ``RecordCache`` protocol; eviction policy
(TTL, capacity) belongs to whoever constructs the cache.
"""

import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from equipment_intel.data import EquipmentRecord, NewsArticle, normalize_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedIntel:
    """The values kept beyond one query: the record and its news."""

    record: EquipmentRecord
    articles: tuple[NewsArticle, ...] = ()


def cache_key(query: str, region: str | None) -> str:
    """Key like ``"t-90 tank|US"``; case- and whitespace-insensitive in the query."""
    return f"{normalize_query(query)}|{(region or '').upper()}"


class RecordCache(Protocol):
    """Interface for a query result cache."""

    def get(self, key: str) -> CachedIntel | None:
        """Return the cached value, or None when missing or expired."""
        ...

    def put(self, key: str, value: CachedIntel, ttl: float) -> None:
        """Store ``value`` for ``ttl`` seconds."""
        ...


class InMemoryRecordCache:
    """Process-local TTL cache with least-recently-used eviction.

    Args:
        max_entries: Capacity; the least recently used entry is evicted.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(self, *, max_entries: int = 256, clock: Callable[[], float] = time.monotonic) -> None:
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, CachedIntel]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> CachedIntel | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return value

    def put(self, key: str, value: CachedIntel, ttl: float) -> None:
        if ttl <= 0:
            return
        self._entries[key] = (self._clock() + ttl, value)
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted cache entry %s", evicted)


class NoOpRecordCache:
    """Cache that never stores anything."""

    def get(self, key: str) -> CachedIntel | None:
        return None

    def put(self, key: str, value: CachedIntel, ttl: float) -> None:
        return None
