"""
Domain Layer - Core Entities and Value Objects.

This package contains the domain model for Asset River.
All entities here are pure Python with no infrastructure dependencies
(except Pydantic for parsing).

Entities:
    - Asset: A physical asset with its depreciation schedule
    - AssetEvent: A dated, signed value adjustment (upgrade, repair)
    - IncomeSource / IncomeEntry: Money flowing into the river
    - AssetCollection: One user's assets plus per-tag defaults
    - PendingWrite: A local write waiting to reach the remote store

Value Objects:
    - AssetValuation: Derived metrics for one asset at one instant
    - MonthlyCashFlow: Income vs. depreciation for one month
    - IncomeHead: One source's contribution to a month
    - PortfolioTotals: Dashboard header figures

Design Principles:
    - Immutable (frozen models); the engine never mutates input
    - camelCase on the wire, snake_case in Python
    - No infrastructure dependencies
"""

from asset_river.domain.entities import (
    UNTAGGED,
    Asset,
    AssetCollection,
    AssetEvent,
    IncomeEntry,
    IncomeSource,
    IncomeSourceType,
    PendingOperation,
    PendingWrite,
)
from asset_river.domain.value_objects import (
    AssetGroups,
    AssetValuation,
    IncomeHead,
    MonthlyCashFlow,
    PortfolioTotals,
)

__all__ = [
    "UNTAGGED",
    "Asset",
    "AssetCollection",
    "AssetEvent",
    "AssetGroups",
    "AssetValuation",
    "IncomeEntry",
    "IncomeHead",
    "IncomeSource",
    "IncomeSourceType",
    "MonthlyCashFlow",
    "PendingOperation",
    "PendingWrite",
    "PortfolioTotals",
]
