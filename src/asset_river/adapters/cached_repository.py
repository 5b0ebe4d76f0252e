"""
Cached Asset Repository - Single-Flight Read-Through Cache.

Wraps any AssetRepository so that loading a user's collection hits the
underlying store at most once per TTL, and concurrent loads for the same
user share one request.

Design Notes:
    - Decorator/Wrapper pattern
    - Only load() is cached; every write invalidates that user's entry
    - A load already in flight when a write lands is not stored
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from asset_river.caching.cache_manager import CacheConfig, CacheManager
from asset_river.domain.entities import Asset, AssetCollection
from asset_river.interfaces.asset_repository import AssetRepository

logger = logging.getLogger(__name__)


class CachedAssetRepository:
    """
    Caching wrapper for AssetRepository implementations.

    Usage:
        repository = CachedAssetRepository(FallbackAssetRepository(api, local))

        # First call: miss, loads from the store
        collection = repository.load("user-1")

        # Second call within TTL: hit
        collection = repository.load("user-1")
    """

    OPERATION = "load_assets"

    def __init__(
        self,
        repository: AssetRepository,
        cache_manager: Optional[CacheManager] = None,
        cache_config: Optional[CacheConfig] = None,
        ttl_seconds: Optional[float] = None,
    ) -> None:
        """
        Initialize cached repository.

        Args:
            repository: Underlying repository to wrap
            cache_manager: Cache manager instance (creates one if None)
            cache_config: Cache configuration (used if cache_manager is None)
            ttl_seconds: TTL for collections (cache default if None)
        """
        self.repository = repository
        self.cache = cache_manager or CacheManager(cache_config)
        self.ttl_seconds = ttl_seconds
        self._loads = 0

    def cache_key(self, user_id: str) -> str:
        return CacheManager.make_key(self.OPERATION, user_id=user_id)

    def load(self, user_id: str) -> AssetCollection:
        return self.cache.get_or_compute(
            self.cache_key(user_id),
            lambda: self._load_uncached(user_id),
            self.ttl_seconds,
        )

    def save_asset(self, user_id: str, asset: Asset) -> Asset:
        try:
            return self.repository.save_asset(user_id, asset)
        finally:
            self.invalidate(user_id)

    def delete_asset(self, user_id: str, asset_id: str) -> bool:
        try:
            return self.repository.delete_asset(user_id, asset_id)
        finally:
            self.invalidate(user_id)

    def clear(self, user_id: str) -> None:
        try:
            self.repository.clear(user_id)
        finally:
            self.invalidate(user_id)

    def save_tag_defaults(self, user_id: str, tag_defaults: Dict[str, int]) -> None:
        try:
            self.repository.save_tag_defaults(user_id, tag_defaults)
        finally:
            self.invalidate(user_id)

    def invalidate(self, user_id: str) -> bool:
        """Drop the cached collection of one user."""
        return self.cache.invalidate(self.cache_key(user_id))

    def get_cache_stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dict with cache stats and the number of loads that reached the store
        """
        stats = self.cache.get_stats()
        return {
            "cache": {
                "hits": stats.hits,
                "misses": stats.misses,
                "hit_rate": stats.hit_rate,
                "coalesced": stats.coalesced,
                "evictions": stats.evictions,
                "expirations": stats.expirations,
                "entries": stats.current_entries,
            },
            "store_loads": self._loads,
        }

    def _load_uncached(self, user_id: str) -> AssetCollection:
        self._loads += 1
        logger.debug(f"Loading asset collection from store (load #{self._loads})")
        return self.repository.load(user_id)
