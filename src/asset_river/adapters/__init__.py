"""
Adapters Package - Infrastructure Implementations.

This package contains concrete implementations of the AssetRepository
protocol defined in the interfaces package, following the Hexagonal
Architecture (Ports & Adapters) pattern.

Repositories:
    - InMemoryAssetRepository: Process-local store for development/testing
    - JsonFileAssetRepository: Local JSON documents (fallback tier)

Wrappers:
    - FallbackAssetRepository: Primary store with local fallback
    - CachedAssetRepository: Single-flight read-through cache

Design Principles:
    - All adapters implement the same protocol
    - Easily swappable via Dependency Injection
    - No valuation logic in adapters
"""

from asset_river.adapters.in_memory_repository import InMemoryAssetRepository
from asset_river.adapters.json_file_repository import (
    JsonFileAssetRepository,
    StorageError,
)
from asset_river.adapters.fallback_repository import FallbackAssetRepository
from asset_river.adapters.cached_repository import CachedAssetRepository

__all__ = [
    "CachedAssetRepository",
    "FallbackAssetRepository",
    "InMemoryAssetRepository",
    "JsonFileAssetRepository",
    "StorageError",
]
