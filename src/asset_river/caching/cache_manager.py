"""
Cache Manager - TTL Cache with Single-Flight Loading.

Provides thread-safe caching for repository reads.

Design Notes:
    - TTL-based expiration for freshness
    - LRU eviction when max entry count exceeded
    - Single flight: one computation per key at a time; concurrent callers
      wait for it and share its result (or its exception)
    - Failures are never cached
    - Invalidation during a computation keeps its result out of the cache
"""

from __future__ import annotations

import hashlib
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


class CacheManagerProtocol(Protocol):
    """Protocol for cache manager implementations."""

    def get_or_compute(
        self,
        key: str,
        compute_fn: Callable[[], T],
        ttl_seconds: Optional[float] = None,
    ) -> T:
        """Return the cached value or compute it once for all waiters."""
        ...

    def invalidate(self, key: str) -> bool:
        """Invalidate a cache entry."""
        ...

    def clear(self) -> None:
        """Clear all cache entries."""
        ...


@dataclass
class CacheEntry:
    """A single cache entry with metadata."""

    value: Any
    created_at: float = field(default_factory=time.time)
    expires_at: Optional[float] = None

    @property
    def is_expired(self) -> bool:
        """Check if entry has expired."""
        if self.expires_at is None:
            return False
        return time.time() > self.expires_at


@dataclass
class CacheConfig:
    """Configuration for cache manager."""

    # Maximum number of entries before LRU eviction
    max_entries: int = 1024

    # Default TTL in seconds (<= 0 means no expiry)
    default_ttl_seconds: float = 60.0

    # When disabled nothing is stored, but loads are still coalesced
    enabled: bool = True

    # Log cache hits/misses
    log_access: bool = False


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    coalesced: int = 0
    evictions: int = 0
    expirations: int = 0
    current_entries: int = 0
    in_flight: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


class _Flight:
    """A computation in progress that other callers can wait on."""

    def __init__(self) -> None:
        self.done = threading.Event()
        self.value: Any = None
        self.error: Optional[BaseException] = None
        self.stale = False


class CacheManager:
    """
    TTL cache with LRU bound and single-flight ``get_or_compute``.

    Usage:
        cache = CacheManager(CacheConfig(default_ttl_seconds=30))
        collection = cache.get_or_compute(
            CacheManager.make_key("assets", user_id="u1"),
            lambda: repository.load("u1"),
        )

    Cache Key Format:
        f"{operation}:{params_hash}"
    """

    def __init__(self, config: Optional[CacheConfig] = None) -> None:
        """
        Initialize cache manager.

        Args:
            config: Cache configuration
        """
        self.config = config or CacheConfig()
        self._cache: OrderedDict[str, CacheEntry] = OrderedDict()
        self._in_flight: Dict[str, _Flight] = {}
        self._lock = threading.RLock()
        self._stats = CacheStats()

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found/expired
        """
        with self._lock:
            value = self._lookup(key)
        return None if value is _MISSING else value

    def set(
        self,
        key: str,
        value: Any,
        ttl_seconds: Optional[float] = None,
    ) -> None:
        """
        Set value in cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl_seconds: TTL in seconds (uses default if None)
        """
        if not self.config.enabled:
            return

        ttl = ttl_seconds if ttl_seconds is not None else self.config.default_ttl_seconds
        expires_at = time.time() + ttl if ttl > 0 else None

        with self._lock:
            self._cache.pop(key, None)
            self._cache[key] = CacheEntry(value=value, expires_at=expires_at)
            self._evict_if_needed()

            if self.config.log_access:
                logger.debug(f"Cache SET: {key} (TTL={ttl}s)")

    def get_or_compute(
        self,
        key: str,
        compute_fn: Callable[[], T],
        ttl_seconds: Optional[float] = None,
    ) -> T:
        """
        Get from cache, or compute once and share with concurrent callers.

        The first caller for a missing key runs ``compute_fn``; callers
        arriving while it runs block until it finishes and receive the same
        value, or the same exception. Exceptions are not cached.

        Args:
            key: Cache key
            compute_fn: Function to compute value if not cached
            ttl_seconds: TTL in seconds

        Returns:
            Cached or computed value
        """
        with self._lock:
            cached = self._lookup(key)
            if cached is not _MISSING:
                return cached

            flight = self._in_flight.get(key)
            leader = flight is None
            if leader:
                flight = _Flight()
                self._in_flight[key] = flight
            else:
                self._stats.coalesced += 1

        if not leader:
            logger.debug(f"Cache WAIT: {key}")
            flight.done.wait()
            if flight.error is not None:
                raise flight.error
            return flight.value

        try:
            value = compute_fn()
        except Exception as e:
            flight.error = e
            raise
        else:
            flight.value = value
            with self._lock:
                if not flight.stale:
                    self.set(key, value, ttl_seconds)
            return value
        finally:
            with self._lock:
                if self._in_flight.get(key) is flight:
                    del self._in_flight[key]
            flight.done.set()

    def invalidate(self, key: str) -> bool:
        """
        Invalidate a cache entry.

        A computation for the key that is still running will not store its
        result.

        Args:
            key: Cache key to invalidate

        Returns:
            True if a stored entry was removed, False if not found
        """
        with self._lock:
            self._drop_flight(key)
            if self._cache.pop(key, None) is not None:
                logger.debug(f"Cache INVALIDATED: {key}")
                return True
            return False

    def invalidate_pattern(self, pattern: str) -> int:
        """
        Invalidate all entries whose key starts with ``pattern``.

        Returns:
            Number of stored entries invalidated
        """
        with self._lock:
            for key in [k for k in self._in_flight if k.startswith(pattern)]:
                self._drop_flight(key)

            keys_to_remove = [k for k in self._cache if k.startswith(pattern)]
            for key in keys_to_remove:
                del self._cache[key]

            if keys_to_remove:
                logger.debug(
                    f"Cache INVALIDATED {len(keys_to_remove)} entries matching '{pattern}'"
                )
            return len(keys_to_remove)

    def clear(self) -> None:
        """Clear all cache entries."""
        with self._lock:
            for key in list(self._in_flight):
                self._drop_flight(key)
            self._cache.clear()
            logger.info("Cache CLEARED")

    def get_stats(self) -> CacheStats:
        """Get a copy of the cache statistics."""
        with self._lock:
            return CacheStats(
                hits=self._stats.hits,
                misses=self._stats.misses,
                coalesced=self._stats.coalesced,
                evictions=self._stats.evictions,
                expirations=self._stats.expirations,
                current_entries=len(self._cache),
                in_flight=len(self._in_flight),
            )

    def _lookup(self, key: str) -> Any:
        """Return the live value for key or _MISSING (must hold lock)."""
        if not self.config.enabled:
            return _MISSING

        entry = self._cache.get(key)
        if entry is None:
            self._stats.misses += 1
            if self.config.log_access:
                logger.debug(f"Cache MISS: {key}")
            return _MISSING

        if entry.is_expired:
            del self._cache[key]
            self._stats.expirations += 1
            self._stats.misses += 1
            if self.config.log_access:
                logger.debug(f"Cache EXPIRED: {key}")
            return _MISSING

        self._cache.move_to_end(key)
        self._stats.hits += 1
        if self.config.log_access:
            logger.debug(f"Cache HIT: {key}")
        return entry.value

    def _drop_flight(self, key: str) -> None:
        """Detach a running computation so its result is not stored."""
        flight = self._in_flight.pop(key, None)
        if flight is not None:
            flight.stale = True

    def _evict_if_needed(self) -> None:
        while len(self._cache) > self.config.max_entries:
            key, _ = self._cache.popitem(last=False)
            self._stats.evictions += 1
            logger.debug(f"Cache EVICTED (LRU): {key}")

    @staticmethod
    def make_key(operation: str, **params: Any) -> str:
        """
        Create a cache key from operation and parameters.

        Args:
            operation: Operation name (e.g., "load_assets")
            **params: Parameters to hash

        Returns:
            Cache key in format "operation:params_hash"
        """
        sorted_params = sorted(params.items())
        param_hash = hashlib.sha256(str(sorted_params).encode()).hexdigest()[:16]
        return f"{operation}:{param_hash}"
