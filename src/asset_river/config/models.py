"""
Configuration Models - Pydantic Models for Type-Safe Config.

All configuration is validated at load time using Pydantic.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class ValuationConfig(BaseModel):
    """Display settings for monetary values."""

    currency: str = Field(default="USD", min_length=3, max_length=3)
    locale: str = Field(default="en-US")


class ValidationConfig(BaseModel):
    """Rules applied to assets before they are written."""

    require_positive_purchase_value: bool = True
    allow_future_purchase_date: bool = False
    max_expected_life_weeks: int = Field(default=5200, ge=1)


class CacheSettings(BaseModel):
    """Configuration for the asset collection cache."""

    enabled: bool = True
    ttl_seconds: float = Field(default=60.0, ge=0)
    max_entries: int = Field(default=1024, ge=1)


class StorageConfig(BaseModel):
    """Configuration for the local fallback store."""

    local_path: Path = Field(default=Path(".asset_river"))
    fallback_enabled: bool = True
    mirror_to_local: bool = True


class RetrySettings(BaseModel):
    """Retry policy for calls to the primary store."""

    max_attempts: int = Field(default=3, ge=1)
    base_delay_seconds: float = Field(default=0.5, ge=0)
    max_delay_seconds: float = Field(default=5.0, ge=0)


class CircuitBreakerSettings(BaseModel):
    """Circuit breaker policy for the primary store."""

    failure_threshold: int = Field(default=5, ge=1)
    recovery_timeout_seconds: float = Field(default=30.0, ge=0)
    success_threshold: int = Field(default=2, ge=1)


class ResilienceConfig(BaseModel):
    """Resilience settings for the primary store."""

    retry: RetrySettings = Field(default_factory=RetrySettings)
    circuit_breaker: CircuitBreakerSettings = Field(
        default_factory=CircuitBreakerSettings
    )


class AppConfig(BaseModel):
    """Root configuration object."""

    version: str = "1.0"
    valuation: ValuationConfig = Field(default_factory=ValuationConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    resilience: ResilienceConfig = Field(default_factory=ResilienceConfig)

    model_config = {"populate_by_name": True}
