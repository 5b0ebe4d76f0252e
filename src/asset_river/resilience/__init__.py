"""
Resilience Package - Fault Tolerance for the Primary Store.

This package provides resilience patterns for store access:
    - ErrorHandler: Retry with backoff and circuit breaker
    - Falling back to the local store is the repository's decision
      (see adapters.fallback_repository)

Design Principles:
    - Fail fast for permanent errors
    - Retry with backoff for transient errors
    - Circuit breaker for persistent failures
"""

from asset_river.resilience.error_handler import (
    CircuitBreakerConfig,
    CircuitBreakerOpen,
    CircuitState,
    ErrorHandler,
    RetryConfig,
    RetryExhausted,
)

__all__ = [
    "CircuitBreakerConfig",
    "CircuitBreakerOpen",
    "CircuitState",
    "ErrorHandler",
    "RetryConfig",
    "RetryExhausted",
]
