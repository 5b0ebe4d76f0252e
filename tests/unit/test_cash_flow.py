"""
Unit Tests for the Monthly Cash Flow.

Test Aspects Covered:
    ✅ Business Logic: Income vs. depreciation per month, income heads
    ✅ Edge Cases: Sold assets, leap February, missing dynamic income
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List

import pytest

from asset_river.domain.entities import (
    Asset,
    IncomeEntry,
    IncomeSource,
    IncomeSourceType,
)
from asset_river.valuation.cash_flow import (
    days_in_month,
    missing_dynamic_income,
    previous_month,
    summarize_month,
)

AS_OF = datetime(2024, 11, 15, tzinfo=timezone.utc)


@pytest.fixture
def assets() -> List[Asset]:
    return [
        Asset(
            name="Bike",
            purchase_value=700,
            expected_life_weeks=10,
            purchase_date=date(2024, 11, 1),
        ),
        Asset(
            name="Old phone",
            purchase_value=1400,
            expected_life_weeks=10,
            purchase_date=date(2024, 11, 1),
            is_sold=True,
            sold_date=date(2024, 11, 10),
        ),
    ]


@pytest.fixture
def sources() -> List[IncomeSource]:
    return [
        IncomeSource(id="s1", name="Salary", type=IncomeSourceType.FIXED, amount=3000),
        IncomeSource(id="s2", name="Freelance", type=IncomeSourceType.DYNAMIC),
        IncomeSource(id="s3", name="Paused job", type=IncomeSourceType.FIXED, amount=0),
    ]


@pytest.fixture
def entries() -> List[IncomeEntry]:
    return [
        IncomeEntry(id="e1", date=date(2024, 11, 20), amount=500, source_id="s2"),
        IncomeEntry(id="e2", date=date(2024, 10, 5), amount=200, source_id="s2"),
        IncomeEntry(id="e3", date=date(2024, 11, 2), amount=100, description="Gift"),
    ]


class TestDaysInMonth:
    """Test cases for days_in_month."""

    @pytest.mark.parametrize(
        "year, month, expected",
        [(2024, 2, 29), (2023, 2, 28), (2024, 4, 30), (2024, 12, 31)],
    )
    def test_days(self, year: int, month: int, expected: int) -> None:
        assert days_in_month(year, month) == expected


class TestSummarizeMonth:
    """Test cases for summarize_month."""

    def test_income_against_depreciation(self, assets, sources, entries) -> None:
        """
        SCENARIO: November with 3000 fixed, 500 dynamic, 100 one-time income
                  and one unsold asset costing 10 per day
        EXPECTED: Income 3600, expenses 300, 3300 remaining
        """
        # Act
        flow = summarize_month(assets, sources, entries, 2024, 11, AS_OF)

        # Assert
        assert flow.days_in_month == 30
        assert flow.daily_cost == pytest.approx(10.0)
        assert flow.total_income == 3600
        assert flow.total_expenses == pytest.approx(300.0)
        assert flow.remaining == pytest.approx(3300.0)

    def test_income_heads(self, assets, sources, entries) -> None:
        """
        SCENARIO: Sources with and without income this month
        EXPECTED: One head per paying source; one-time income has no head
        """
        flow = summarize_month(assets, sources, entries, 2024, 11, AS_OF)

        assert [(h.name, h.amount) for h in flow.income_heads] == [
            ("Salary", 3000),
            ("Freelance", 500),
        ]

    def test_sold_assets_cost_nothing(self, assets, sources) -> None:
        """
        SCENARIO: Only a sold asset
        EXPECTED: No daily cost
        """
        flow = summarize_month(assets[1:], sources, [], 2024, 11, AS_OF)

        assert flow.daily_cost == 0
        assert flow.total_expenses == 0

    def test_balance_on_day(self, assets, sources, entries) -> None:
        """
        SCENARIO: Halfway through November
        EXPECTED: Income minus 15 days of depreciation
        """
        flow = summarize_month(assets, sources, entries, 2024, 11, AS_OF)

        assert flow.balance_on_day(15) == pytest.approx(3450.0)
        assert flow.balance_on_day(30) == pytest.approx(flow.remaining)

    def test_leap_february_expenses(self, assets) -> None:
        """
        SCENARIO: February of a leap year
        EXPECTED: 29 days charged
        """
        flow = summarize_month(assets, [], [], 2024, 2, AS_OF)

        assert flow.days_in_month == 29
        assert flow.total_expenses == pytest.approx(290.0)
        assert flow.remaining == pytest.approx(-290.0)


class TestMissingDynamicIncome:
    """Test cases for missing_dynamic_income."""

    def test_reports_dynamic_sources_without_entries(self, sources, entries) -> None:
        """
        SCENARIO: No Freelance entry in December
        EXPECTED: Freelance reported; fixed sources never reported
        """
        missing = missing_dynamic_income(sources, entries, 2024, 12)

        assert [s.name for s in missing] == ["Freelance"]

    def test_nothing_missing(self, sources, entries) -> None:
        """A month with an entry for every dynamic source reports nothing."""
        assert missing_dynamic_income(sources, entries, 2024, 11) == []


class TestPreviousMonth:
    """Test cases for previous_month."""

    def test_wraps_year(self) -> None:
        assert previous_month(2025, 1) == (2024, 12)

    def test_same_year(self) -> None:
        assert previous_month(2024, 7) == (2024, 6)
