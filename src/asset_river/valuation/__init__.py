"""
Valuation Package - Depreciation Engine and Derived Figures.

    - engine: Current value, daily depreciation, totals, grouping
    - formatting: Locale-aware currency strings
    - cash_flow: Monthly income vs. depreciation (river view numbers)
    - search: Name and description lookup

Every function here is pure and stateless.
"""

from asset_river.valuation.engine import (
    calculate_current_value,
    calculate_daily_depreciation,
    calculate_total_invested,
    group_assets_by_tag,
    lifetime_remaining_pct,
    percent_of_investment_remaining,
    sort_by_daily_cost,
    value_asset,
    weeks_between,
)
from asset_river.valuation.formatting import format_currency
from asset_river.valuation.cash_flow import (
    days_in_month,
    missing_dynamic_income,
    previous_month,
    summarize_month,
)
from asset_river.valuation.search import search_assets

__all__ = [
    "calculate_current_value",
    "calculate_daily_depreciation",
    "calculate_total_invested",
    "days_in_month",
    "format_currency",
    "group_assets_by_tag",
    "lifetime_remaining_pct",
    "missing_dynamic_income",
    "percent_of_investment_remaining",
    "previous_month",
    "search_assets",
    "sort_by_daily_cost",
    "summarize_month",
    "value_asset",
    "weeks_between",
]
