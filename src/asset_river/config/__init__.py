"""
Configuration Package - Models and Loaders.

This package handles all configuration aspects of Asset River:
    - Pydantic models for type-safe configuration
    - YAML loader with validation
    - Support for configuration profiles

Configuration Structure:
    - AppConfig: Root configuration object
    - ValuationConfig: Display currency and locale
    - ValidationConfig: Write-side validation rules
    - CacheSettings: Asset collection cache
    - StorageConfig: Local fallback store
    - ResilienceConfig: Retry and circuit breaker for the primary store
"""

from asset_river.config.models import (
    AppConfig,
    CacheSettings,
    CircuitBreakerSettings,
    ResilienceConfig,
    RetrySettings,
    StorageConfig,
    ValidationConfig,
    ValuationConfig,
)
from asset_river.config.loader import ConfigLoader, load_config

__all__ = [
    "AppConfig",
    "CacheSettings",
    "CircuitBreakerSettings",
    "ConfigLoader",
    "ResilienceConfig",
    "RetrySettings",
    "StorageConfig",
    "ValidationConfig",
    "ValuationConfig",
    "load_config",
]
