"""
Value Objects for Domain Layer.

Value objects are immutable results derived from entities at a point in
time. They carry no identity of their own.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, computed_field

from asset_river.domain.entities import Asset, IncomeSourceType


# =============================================================================
# Type Aliases for improved readability
# =============================================================================

# Assets grouped by tag, in input order within each group
AssetGroups = Dict[str, List[Asset]]

# Tag -> default expected life in weeks
TagDefaultsDict = Dict[str, int]


class AssetValuation(BaseModel):
    """Derived metrics for one asset at one instant."""

    asset_id: Optional[str] = None
    name: str = ""
    tag: str = ""
    as_of: datetime
    current_value: float
    daily_depreciation: float = Field(ge=0)
    total_invested: float
    percent_remaining: float = Field(
        description="Current value as a percentage of total invested"
    )
    lifetime_remaining_pct: float = Field(ge=0, le=100)
    is_sold: bool = False

    model_config = {"frozen": True}


class IncomeHead(BaseModel):
    """One income source's contribution to a month (a river head)."""

    source_id: Optional[str]
    name: str
    type: IncomeSourceType
    amount: float

    model_config = {"frozen": True}


class MonthlyCashFlow(BaseModel):
    """Income against depreciation cost for one calendar month."""

    year: int
    month: int = Field(ge=1, le=12)
    days_in_month: int = Field(ge=28, le=31)
    daily_cost: float = Field(ge=0)
    total_income: float
    total_expenses: float
    income_heads: List[IncomeHead] = Field(default_factory=list)

    model_config = {"frozen": True}

    @computed_field
    @property
    def remaining(self) -> float:
        """Money left at month end (negative when assets cost more than income)."""
        return self.total_income - self.total_expenses

    def balance_on_day(self, day: float) -> float:
        """Money left after ``day`` days of depreciation, income paid up front."""
        return self.total_income - self.daily_cost * day


class PortfolioTotals(BaseModel):
    """Dashboard header figures over the assets still held."""

    as_of: datetime
    asset_count: int = Field(ge=0)
    current_value: float
    total_invested: float
    daily_cost: float = Field(ge=0)

    model_config = {"frozen": True}
