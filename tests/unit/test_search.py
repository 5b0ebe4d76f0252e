"""
Unit Tests for Asset Search.

Test Aspects Covered:
    ✅ Business Logic: Name and description substring match, case folding
    ✅ Edge Cases: Blank term, missing description, order kept
"""

from __future__ import annotations

import pytest

from asset_river.valuation.search import search_assets


@pytest.fixture
def assets(make_asset):
    return [
        make_asset(name="MacBook Pro", description="Work laptop"),
        make_asset(name="Road Bike"),
        make_asset(name="Desk", description="Standing desk for the LAPTOP"),
    ]


class TestSearchAssets:
    """Test cases for search_assets."""

    @pytest.mark.parametrize("term", ["", "   ", "\t"])
    def test_blank_term_finds_nothing(self, term: str, assets) -> None:
        assert search_assets(assets, term) == []

    def test_name_match_ignores_case(self, assets) -> None:
        """
        SCENARIO: Term typed in a different case than the name
        EXPECTED: Asset still found
        """
        assert [a.name for a in search_assets(assets, "BIKE")] == ["Road Bike"]

    def test_description_match(self, assets) -> None:
        """
        SCENARIO: Term only in descriptions, in mixed case
        EXPECTED: Both describing assets, in collection order
        """
        found = search_assets(assets, "Laptop")

        assert [a.name for a in found] == ["MacBook Pro", "Desk"]

    def test_asset_without_description(self, make_asset) -> None:
        """Assets with no description are matched on name only."""
        asset = make_asset(name="Phone", description=None)

        assert search_assets([asset], "pho") == [asset]
        assert search_assets([asset], "none") == []

    def test_no_match(self, assets) -> None:
        assert search_assets(assets, "kayak") == []
