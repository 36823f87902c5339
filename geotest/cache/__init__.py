"""
Caching Layer

In-process TTL cache for collaborator responses.

Usage:
    from geotest.cache import TTLCache

    cache = TTLCache.from_config()
    metrics = await cache.get_or_fetch(key, fetch)
"""

from .config import CacheConfig, get_cache_config
from .ttl_cache import CacheEntry, TTLCache

__all__ = [
    "CacheConfig",
    "get_cache_config",
    "CacheEntry",
    "TTLCache",
]
