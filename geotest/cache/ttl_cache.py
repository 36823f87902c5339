"""
TTL Cache

In-memory key/value cache with per-entry time-to-live and bounded size.

- Entries expire ``ttl`` seconds after insertion; expired entries are removed
  lazily on ``get``/``has``
- Inserting into a full cache first evicts the oldest entries by insertion
  time (``eviction_fraction`` of capacity, at least one)
- A stored ``None`` is reported as a miss
- ``get_or_fetch`` does not deduplicate concurrent fetches for the same key
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """Cache entry with metadata."""
    value: Any
    created_at: float
    ttl: float
    hit_count: int = 0

    def is_expired(self, now: float) -> bool:
        """Check if entry has expired."""
        return now - self.created_at > self.ttl


class TTLCache:
    """
    Bounded TTL cache.

    Usage:
        cache = TTLCache(default_ttl=300)
        data = await cache.get_or_fetch(f"serper:{domain}", lambda: client.analyze_website_seo(domain))
    """

    def __init__(
        self,
        default_ttl: float = 300,
        max_entries: int = 100,
        eviction_fraction: float = 0.2,
        clock: Callable[[], float] = time.monotonic,
        enabled: bool = True,
    ):
        """
        Initialize cache.

        Args:
            default_ttl: Entry lifetime in seconds
            max_entries: Capacity before eviction
            eviction_fraction: Share of capacity evicted when full
            clock: Monotonic time source in seconds
            enabled: When False every lookup misses and nothing is stored
        """
        self.default_ttl = default_ttl
        self.max_entries = max(1, max_entries)
        self.eviction_fraction = eviction_fraction
        self.enabled = enabled
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

        # Stats
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @classmethod
    def from_config(cls, config=None, clock: Callable[[], float] = time.monotonic) -> "TTLCache":
        """Build a cache from ``CacheConfig`` (env-backed by default)."""
        from .config import get_cache_config

        config = config or get_cache_config()
        return cls(
            default_ttl=config.default_ttl,
            max_entries=config.max_entries,
            eviction_fraction=config.eviction_fraction,
            clock=clock,
            enabled=config.enabled,
        )

    def _live_entry(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            return None
        return entry

    def get(self, key: str) -> Optional[Any]:
        """
        Get cached value.

        Returns:
            Cached value or None if absent, expired or stored as None
        """
        entry = self._live_entry(key) if self.enabled else None
        if entry is None or entry.value is None:
            self._misses += 1
            return None

        entry.hit_count += 1
        self._hits += 1
        return entry.value

    def has(self, key: str) -> bool:
        """Check if a live entry exists for key."""
        if not self.enabled:
            return False
        return self._live_entry(key) is not None

    def set(self, key: str, value: Any, ttl: Optional[float] = None):
        """
        Cache a value.

        Args:
            key: Cache key
            value: Value to store
            ttl: Lifetime in seconds (overrides default)
        """
        if not self.enabled:
            return

        if key not in self._entries and len(self._entries) >= self.max_entries:
            self._evict_oldest()

        self._entries[key] = CacheEntry(
            value=value,
            created_at=self._clock(),
            ttl=self.default_ttl if ttl is None else ttl,
        )

    def _evict_oldest(self):
        count = max(1, math.floor(self.max_entries * self.eviction_fraction))
        oldest = sorted(self._entries.items(), key=lambda item: item[1].created_at)[:count]
        for key, _ in oldest:
            del self._entries[key]
        self._evictions += len(oldest)
        logger.debug(f"Evicted {len(oldest)} oldest cache entries")

    def clear(self, key: str):
        """Remove a single entry."""
        self._entries.pop(key, None)

    def clear_all(self):
        """Remove every entry."""
        self._entries.clear()
        logger.info("Cleared entire cache")

    def size(self) -> int:
        """Number of stored entries, including any not yet lazily expired."""
        return len(self._entries)

    async def get_or_fetch(
        self,
        key: str,
        fetch_fn: Callable[[], Awaitable[Any]],
        ttl: Optional[float] = None,
    ) -> Any:
        """
        Return the cached value or await ``fetch_fn`` and cache its result.

        Exceptions from ``fetch_fn`` propagate and nothing is cached.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug(f"Cache HIT for {key}")
            return cached

        logger.debug(f"Cache MISS for {key}, fetching")
        value = await fetch_fn()
        self.set(key, value, ttl)
        return value

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        total_requests = self._hits + self._misses
        hit_rate = (self._hits / total_requests * 100) if total_requests else 0

        return {
            "enabled": self.enabled,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate_percent": round(hit_rate, 1),
            "evictions": self._evictions,
            "entry_count": len(self._entries),
            "max_entries": self.max_entries,
        }
