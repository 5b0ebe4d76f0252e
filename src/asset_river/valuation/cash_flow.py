"""
Monthly Cash Flow - The Numbers Behind the River View.

Income flows in at the head of the month; unsold assets drain it at their
daily depreciation rate. This module computes that balance; drawing it is
the presentation layer's business.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence, Union

from asset_river.domain.entities import (
    Asset,
    IncomeEntry,
    IncomeSource,
    IncomeSourceType,
)
from asset_river.domain.value_objects import IncomeHead, MonthlyCashFlow
from asset_river.valuation.engine import calculate_daily_depreciation


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month."""
    return calendar.monthrange(year, month)[1]


def _entries_in_month(
    entries: Iterable[IncomeEntry], year: int, month: int
) -> List[IncomeEntry]:
    return [e for e in entries if e.in_month(year, month)]


def summarize_month(
    assets: Iterable[Asset],
    sources: Sequence[IncomeSource],
    entries: Iterable[IncomeEntry],
    year: int,
    month: int,
    as_of: Optional[Union[date, datetime]] = None,
) -> MonthlyCashFlow:
    """
    Summarise income against depreciation for one month.

    Expenses are the summed daily depreciation of unsold assets times the
    days in the month. Income is every FIXED source amount plus every entry
    dated in the month (dynamic and one-time alike).

    Args:
        assets: Assets to charge against the month
        sources: Income sources
        entries: Recorded income entries (any month; filtered here)
        year: Calendar year
        month: Calendar month (1-12)
        as_of: Instant the daily rates are taken at (default: now)

    Returns:
        MonthlyCashFlow for the month
    """
    n_days = days_in_month(year, month)
    month_entries = _entries_in_month(entries, year, month)

    daily_cost = sum(
        calculate_daily_depreciation(asset, as_of)
        for asset in assets
        if not asset.is_sold
    )

    fixed_income = sum(
        s.amount or 0.0 for s in sources if s.type == IncomeSourceType.FIXED
    )
    recorded_income = sum(e.amount for e in month_entries)

    heads: List[IncomeHead] = []
    for source in sources:
        if source.type == IncomeSourceType.FIXED:
            amount = source.amount or 0.0
        else:
            amount = sum(
                e.amount for e in month_entries if e.source_id == source.id
            )
        if amount > 0:
            heads.append(
                IncomeHead(
                    source_id=source.id,
                    name=source.name,
                    type=source.type,
                    amount=amount,
                )
            )

    return MonthlyCashFlow(
        year=year,
        month=month,
        days_in_month=n_days,
        daily_cost=daily_cost,
        total_income=fixed_income + recorded_income,
        total_expenses=daily_cost * n_days,
        income_heads=heads,
    )


def missing_dynamic_income(
    sources: Iterable[IncomeSource],
    entries: Iterable[IncomeEntry],
    year: int,
    month: int,
) -> List[IncomeSource]:
    """DYNAMIC sources with no entry recorded in the given month."""
    recorded = {e.source_id for e in _entries_in_month(entries, year, month)}
    return [
        s
        for s in sources
        if s.type == IncomeSourceType.DYNAMIC and s.id not in recorded
    ]


def previous_month(year: int, month: int) -> tuple[int, int]:
    """The (year, month) before the given one."""
    if month == 1:
        return year - 1, 12
    return year, month - 1
