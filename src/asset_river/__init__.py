"""
Asset River - Time-Value Model for Physical Assets and Income.

Tracks physical assets (purchase value, depreciation schedule, upgrade and
repair events, optional sale) together with income sources, and derives
the numbers the dashboard and the "river" view are drawn from.

Architecture:
    - Hexagonal Architecture (Ports & Adapters)
    - Pure valuation engine with no I/O
    - Repositories injected behind a protocol (primary + local fallback)
    - Configuration-driven behavior via YAML

Main Components:
    - domain: Asset, AssetEvent, IncomeSource, IncomeEntry and snapshots
    - valuation: Depreciation engine, currency formatting, monthly cash flow
    - validation: Write-side validation and import document parsing
    - transfer: JSON export document
    - caching: Single-flight read-through cache
    - adapters: Repository implementations and wrappers
    - services: PortfolioService used by the presentation layer
    - config: Configuration models and loaders

Example:
    >>> from datetime import date
    >>> from asset_river.domain.entities import Asset
    >>> from asset_river.valuation import calculate_current_value
    >>> laptop = Asset(
    ...     purchase_value=1000, expected_life_weeks=52, purchase_date=date(2024, 1, 1)
    ... )
    >>> calculate_current_value(laptop)
    0.0

"""

import logging

__version__ = "0.4.0"


def configure_logging(
    level: int = logging.INFO,
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
) -> None:
    """
    Configure logging for Asset River.

    Call this at application startup to see log messages.
    By default, only WARNING and above are visible.

    Args:
        level: Logging level (default: INFO)
        format: Log message format

    Example:
        >>> import asset_river
        >>> asset_river.configure_logging(logging.DEBUG)
    """
    logging.basicConfig(
        level=level,
        format=format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("asset_river").setLevel(level)
