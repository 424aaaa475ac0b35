"""
In-memory metric cache for Code Pulse.

Bounded by capacity and by age:
- At most ``max_size`` live entries; inserting a new key at capacity evicts
  the entry with the oldest write time.
- Entries older than ``ttl_seconds`` are logically absent and are purged
  lazily, on the next read of that key or the next eviction scan.

Eviction is by write age, not by access recency: reading an entry does not
protect it from eviction.
"""

import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Iterator, Optional, Tuple, TypeVar

from .logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

MAX_CACHE_SIZE = 500
CACHE_TTL_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value and the clock time it was written."""

    value: T
    written_at: float


class MetricCache(Generic[T]):
    """
    Bounded, time-limited key-value store.

    No operation raises; absence (None) is the only failure signal.
    """

    def __init__(
        self,
        max_size: int = MAX_CACHE_SIZE,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize cache.

        Args:
            max_size: Maximum number of live entries
            ttl_seconds: Time-to-live in seconds
            clock: Time source returning seconds
        """
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry[T]] = {}

    def _is_live(self, entry: CacheEntry[T], now: float) -> bool:
        return now - entry.written_at <= self.ttl_seconds

    def get(self, key: str) -> Optional[T]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found/expired
        """
        entry = self._entries.get(key)
        if entry is None:
            return None

        if not self._is_live(entry, self._clock()):
            del self._entries[key]
            logger.debug(f"Cache expired: {key}")
            return None

        return entry.value

    def set(self, key: str, value: T) -> None:
        """
        Set value in cache, evicting the oldest entry if at capacity.

        Args:
            key: Cache key
            value: Value to cache
        """
        now = self._clock()
        if key not in self._entries:
            self._evict_if_full(now)
        self._entries[key] = CacheEntry(value=value, written_at=now)

    def delete(self, key: str) -> None:
        """Remove a key if present."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Clear all cache entries."""
        self._entries.clear()

    def _evict_if_full(self, now: float) -> None:
        # Expired entries go first; they are invisible anyway
        expired = [k for k, entry in self._entries.items() if not self._is_live(entry, now)]
        for k in expired:
            del self._entries[k]
        if expired:
            logger.debug(f"Cache purged {len(expired)} expired entries")

        while len(self._entries) >= self.max_size:
            oldest_key = min(self._entries, key=lambda k: self._entries[k].written_at)
            del self._entries[oldest_key]
            logger.debug(f"Cache evicted oldest entry: {oldest_key}")

    def items(self) -> Iterator[Tuple[str, T]]:
        """Iterate (key, value) pairs of live entries, in insertion order."""
        now = self._clock()
        for key, entry in list(self._entries.items()):
            if self._is_live(entry, now):
                yield key, entry.value

    def for_each(self, visit: Callable[[T, str], None]) -> None:
        """Call ``visit(value, key)`` for every live entry."""
        for key, value in self.items():
            visit(value, key)

    @property
    def size(self) -> int:
        """Number of live entries."""
        return len(self)

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for entry in self._entries.values() if self._is_live(entry, now))

    def stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dictionary with live and physically stored entry counts
        """
        return {
            "size": len(self),
            "stored": len(self._entries),
            "max_size": self.max_size,
            "ttl_seconds": self.ttl_seconds,
        }
