"""
Caching Layer.

Provides the read-through cache in front of asset repositories:
    - CacheManager: TTL cache with LRU eviction and single-flight loading
    - CacheConfig: Configuration for cache behavior
    - CacheStats: Statistics tracking for cache operations
"""

from asset_river.caching.cache_manager import (
    CacheConfig,
    CacheEntry,
    CacheManager,
    CacheManagerProtocol,
    CacheStats,
)

__all__ = [
    "CacheConfig",
    "CacheEntry",
    "CacheManager",
    "CacheManagerProtocol",
    "CacheStats",
]
