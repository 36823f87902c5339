"""
Cache Configuration

Settings for the in-process TTL cache used in front of the SERP and
page-speed collaborators.

Settings can be overridden via environment variables:
- CACHE_ENABLED: Enable/disable caching globally
- CACHE_TTL_SECONDS: Default time-to-live for entries
- CACHE_MAX_ENTRIES: Capacity before eviction kicks in
- CACHE_EVICTION_FRACTION: Share of oldest entries dropped when full
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache


@dataclass
class CacheConfig:
    """Main cache configuration."""

    # Global cache toggle
    enabled: bool = field(default_factory=lambda: os.getenv(
        "CACHE_ENABLED",
        "true"
    ).lower() == "true")

    # Entry lifetime measured from insertion
    default_ttl: float = field(default_factory=lambda: float(os.getenv(
        "CACHE_TTL_SECONDS",
        "300"
    )))

    max_entries: int = field(default_factory=lambda: int(os.getenv(
        "CACHE_MAX_ENTRIES",
        "100"
    )))

    eviction_fraction: float = field(default_factory=lambda: float(os.getenv(
        "CACHE_EVICTION_FRACTION",
        "0.2"
    )))


@lru_cache(maxsize=1)
def get_cache_config() -> CacheConfig:
    """Get singleton cache configuration."""
    return CacheConfig()
