"""
Services Package - Application Services.

    - PortfolioService: Valuations, totals and asset writes for one user
    - create_portfolio_service: Wires cache, fallback and primary store
"""

from asset_river.services.portfolio import (
    AssetNotFound,
    PortfolioService,
    create_portfolio_service,
)

__all__ = ["AssetNotFound", "PortfolioService", "create_portfolio_service"]
