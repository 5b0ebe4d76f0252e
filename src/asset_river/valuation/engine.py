"""
Valuation Engine - Straight-Line Depreciation with Decaying Events.

Computes what an asset is worth at a given instant from its purchase
value, expected life and terminal price, plus every recorded event. Each
event decays to zero on its own schedule, spread over the life the asset
had left on the event's date.

Design Notes:
    - Pure functions: no I/O, no shared state, safe to call from any thread
    - Time unit is the fractional week (7 * 24 * 3600 seconds)
    - Calendar dates are midnight UTC; naive datetimes are taken as UTC
    - Only the final current value is rounded (to cents); intermediate
      values keep full float precision
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional, Union

from asset_river.domain.entities import UNTAGGED, Asset, AssetEvent
from asset_river.domain.value_objects import AssetGroups, AssetValuation

SECONDS_PER_WEEK = 7 * 24 * 3600

DAYS_PER_WEEK = 7

_CENT = Decimal("0.01")

Instant = Union[date, datetime]


def _as_utc(value: Instant) -> datetime:
    """Normalise a date or datetime to an aware UTC datetime."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def _resolve_as_of(as_of: Optional[Instant]) -> datetime:
    if as_of is None:
        return datetime.now(timezone.utc)
    return _as_utc(as_of)


def _round_cents(value: float) -> float:
    """Round half away from zero to two decimals."""
    return float(Decimal(repr(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def weeks_between(start: Instant, as_of: Optional[Instant] = None) -> float:
    """
    Elapsed fractional weeks from ``start`` to ``as_of``.

    A start after ``as_of`` yields 0, never a negative age.

    Args:
        start: Start date or datetime
        as_of: End instant (default: now)

    Returns:
        Weeks elapsed, clamped to >= 0
    """
    elapsed = _resolve_as_of(as_of) - _as_utc(start)
    return max(0.0, elapsed.total_seconds() / SECONDS_PER_WEEK)


def _remaining_weeks_at(asset: Asset, event: AssetEvent) -> float:
    """Weeks of expected life the asset had left when the event happened."""
    used = weeks_between(asset.purchase_date, event.date)
    return max(0.0, asset.expected_life_weeks - used)


def _is_effective(event: AssetEvent, as_of: datetime) -> bool:
    return _as_utc(event.date) <= as_of


def calculate_current_value(
    asset: Asset,
    as_of: Optional[Instant] = None,
) -> float:
    """
    Current worth of an asset, rounded to cents.

    The base value falls in a straight line from purchase value to terminal
    price over the expected life. Every event dated on or before ``as_of``
    adds its amount, which itself falls linearly to zero over the weeks the
    asset had left on the event date. An event recorded with no life left
    keeps its full amount. The result is clamped once, at the end, to the
    terminal price.

    A non-positive expected life means no depreciation at all.

    Args:
        asset: Asset to value
        as_of: Valuation instant (default: now)

    Returns:
        Value in currency units, never below ``asset.terminal_price``
    """
    when = _resolve_as_of(as_of)
    life = asset.expected_life_weeks
    age = weeks_between(asset.purchase_date, when)

    rate = (asset.purchase_value - asset.terminal_price) / life if life > 0 else 0.0
    base = asset.purchase_value - rate * min(age, life)
    if life > 0 and age >= life:
        base = asset.terminal_price

    adjustments = 0.0
    for event in asset.events:
        if not _is_effective(event, when):
            continue
        event_age = weeks_between(event.date, when)
        remaining = _remaining_weeks_at(asset, event)
        event_rate = event.amount / remaining if remaining > 0 else 0.0
        adjustments += event.amount - event_rate * min(event_age, remaining)

    return _round_cents(max(asset.terminal_price, base + adjustments))


def calculate_daily_depreciation(
    asset: Asset,
    as_of: Optional[Instant] = None,
) -> float:
    """
    Instantaneous cost per day of holding the asset.

    Sums the daily rate of the base schedule while the asset is within its
    expected life and of every effective event still inside its own decay
    window. Expired components contribute nothing. Returned as an absolute
    value, so negative events can reduce but never flip the sign.

    Args:
        asset: Asset to rate
        as_of: Instant to evaluate at (default: now)

    Returns:
        Daily depreciation, >= 0
    """
    when = _resolve_as_of(as_of)
    life = asset.expected_life_weeks
    age = weeks_between(asset.purchase_date, when)

    daily = 0.0
    if age < life:
        daily = (asset.purchase_value - asset.terminal_price) / (life * DAYS_PER_WEEK)

    for event in asset.events:
        if not _is_effective(event, when):
            continue
        remaining = _remaining_weeks_at(asset, event)
        if weeks_between(event.date, when) < remaining:
            daily += (event.amount / remaining) / DAYS_PER_WEEK

    return abs(daily)


def calculate_total_invested(asset: Asset) -> float:
    """Purchase value plus every event amount, ignoring decay."""
    return asset.purchase_value + sum(event.amount for event in asset.events)


def percent_of_investment_remaining(
    asset: Asset,
    as_of: Optional[Instant] = None,
) -> float:
    """Current value as a percentage of total invested (0 if nothing invested)."""
    invested = calculate_total_invested(asset)
    if invested <= 0:
        return 0.0
    return calculate_current_value(asset, as_of) / invested * 100


def lifetime_remaining_pct(
    asset: Asset,
    as_of: Optional[Instant] = None,
) -> float:
    """Share of the expected life still ahead, in percent."""
    life = asset.expected_life_weeks
    if life <= 0:
        return 100.0
    age = weeks_between(asset.purchase_date, as_of)
    return max(0.0, 1.0 - age / life) * 100


def group_assets_by_tag(assets: Iterable[Asset]) -> AssetGroups:
    """
    Partition assets by tag.

    Blank or whitespace-only tags land in ``UNTAGGED``. Tags are trimmed.
    Groups appear in first-seen order and keep input order inside.

    Args:
        assets: Assets to group

    Returns:
        Tag -> assets
    """
    grouped: AssetGroups = {}
    for asset in assets:
        key = asset.tag.strip() if asset.has_tag else UNTAGGED
        grouped.setdefault(key, []).append(asset)
    return grouped


def sort_by_daily_cost(
    assets: Iterable[Asset],
    as_of: Optional[Instant] = None,
) -> List[Asset]:
    """Assets ordered by daily depreciation, most expensive first (stable)."""
    when = _resolve_as_of(as_of)
    return sorted(
        assets,
        key=lambda a: calculate_daily_depreciation(a, when),
        reverse=True,
    )


def value_asset(
    asset: Asset,
    as_of: Optional[Instant] = None,
) -> AssetValuation:
    """
    Snapshot all derived metrics of one asset at a single instant.

    Args:
        asset: Asset to value
        as_of: Valuation instant (default: now)

    Returns:
        AssetValuation with every metric computed against the same instant
    """
    when = _resolve_as_of(as_of)
    return AssetValuation(
        asset_id=asset.id,
        name=asset.name,
        tag=asset.tag,
        as_of=when,
        current_value=calculate_current_value(asset, when),
        daily_depreciation=calculate_daily_depreciation(asset, when),
        total_invested=calculate_total_invested(asset),
        percent_remaining=percent_of_investment_remaining(asset, when),
        lifetime_remaining_pct=lifetime_remaining_pct(asset, when),
        is_sold=asset.is_sold,
    )
