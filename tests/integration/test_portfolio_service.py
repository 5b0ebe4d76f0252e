"""
Integration Tests for PortfolioService.

Tests cover:
    - Full stack: cache -> local fallback -> primary store
    - Valuations, groups and totals over stored assets
    - Validated writes, tag defaults
    - Export/import between accounts
    - Serving from the local store while the primary is down
"""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

from asset_river.adapters.cached_repository import CachedAssetRepository
from asset_river.adapters.json_file_repository import JsonFileAssetRepository
from asset_river.config.models import AppConfig
from asset_river.domain.entities import (
    UNTAGGED,
    AssetEvent,
    IncomeSource,
    IncomeSourceType,
)
from asset_river.services.portfolio import (
    AssetNotFound,
    PortfolioService,
    create_portfolio_service,
)
from asset_river.validation.asset_validator import ValidationError
from asset_river.validation.document_parser import DocumentError

USER = "user-1"


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    """Config with a temp local store and no retry delays."""
    return AppConfig.model_validate(
        {
            "storage": {"local_path": str(tmp_path / "local")},
            "resilience": {
                "retry": {"max_attempts": 1, "base_delay_seconds": 0},
                "circuit_breaker": {
                    "failure_threshold": 1,
                    "recovery_timeout_seconds": 60,
                },
            },
        }
    )


@pytest.fixture
def service(flaky_primary, config) -> PortfolioService:
    return create_portfolio_service(flaky_primary, config)


@pytest.fixture
def stocked_service(service, sample_assets, reference_date) -> PortfolioService:
    for asset in sample_assets:
        service.add_asset(USER, asset, today=reference_date)
    return service


class TestStackAssembly:
    """Test cases for create_portfolio_service."""

    def test_default_stack_is_cached(self, service) -> None:
        assert isinstance(service.repository, CachedAssetRepository)

    def test_layers_can_be_switched_off(self, flaky_primary) -> None:
        """
        SCENARIO: Cache and fallback disabled
        EXPECTED: Service talks to the primary directly
        """
        config = AppConfig.model_validate(
            {"cache": {"enabled": False}, "storage": {"fallback_enabled": False}}
        )

        service = create_portfolio_service(flaky_primary, config)

        assert service.repository is flaky_primary


class TestValuations:
    """Test cases for derived figures."""

    def test_valuations_sorted_by_daily_cost(
        self, stocked_service, reference_instant: datetime
    ) -> None:
        """
        SCENARIO: Desktop 3/day, Bike ~8.9/day, Phone sold
        EXPECTED: Bike then Desktop; sold Phone left out
        """
        valuations = stocked_service.valuations(USER, reference_instant)

        assert [v.name for v in valuations] == ["Bike", "Desktop"]
        assert valuations[1].current_value == 1890
        assert all(v.as_of == reference_instant for v in valuations)

    def test_include_sold(self, stocked_service, reference_instant: datetime) -> None:
        valuations = stocked_service.valuations(
            USER, reference_instant, include_sold=True
        )

        assert [v.name for v in valuations] == ["Phone", "Bike", "Desktop"]
        assert valuations[0].is_sold

    def test_filter_by_tag(self, stocked_service, reference_instant: datetime) -> None:
        """
        SCENARIO: Ask for the PC group and the Untagged group
        EXPECTED: Only the matching assets
        """
        pc = stocked_service.valuations(USER, reference_instant, tag="PC")
        untagged = stocked_service.valuations(USER, reference_instant, tag=UNTAGGED)

        assert [v.name for v in pc] == ["Desktop"]
        assert [v.name for v in untagged] == ["Bike"]

    def test_blank_tag_selects_untagged(
        self, stocked_service, reference_instant: datetime
    ) -> None:
        """A blank tag filter means the Untagged group, as in grouping."""
        blank = stocked_service.valuations(USER, reference_instant, tag="  ")

        assert [v.name for v in blank] == ["Bike"]

    def test_search_includes_sold(self, stocked_service) -> None:
        """
        SCENARIO: Search for a sold asset and for a blank term
        EXPECTED: Sold asset found; blank term finds nothing
        """
        assert [a.name for a in stocked_service.search(USER, "phone")] == ["Phone"]
        assert stocked_service.search(USER, " ") == []

    def test_grouped(self, stocked_service) -> None:
        groups = stocked_service.grouped(USER, include_sold=True)

        assert list(groups) == ["iPhone", UNTAGGED, "PC"]

    def test_totals_cover_held_assets(
        self, stocked_service, reference_instant: datetime
    ) -> None:
        """
        SCENARIO: Two held assets and one sold
        EXPECTED: Sums over the held ones only
        """
        totals = stocked_service.totals(USER, reference_instant)

        assert totals.asset_count == 2
        assert totals.current_value == pytest.approx(1890 + 497.78)
        assert totals.total_invested == pytest.approx(2100 + 700 - 70)
        assert totals.daily_cost == pytest.approx(3 + 10 - 10 / 9)

    def test_cash_flow(self, stocked_service, reference_instant: datetime) -> None:
        """Monthly flow charges the held assets against income."""
        salary = IncomeSource(
            id="s1", name="Salary", type=IncomeSourceType.FIXED, amount=3000
        )

        flow = stocked_service.cash_flow(USER, [salary], [], 2024, 12, reference_instant)

        assert flow.total_income == 3000
        assert flow.total_expenses == pytest.approx((3 + 10 - 10 / 9) * 31)

    def test_format_value_uses_config(self, flaky_primary, config) -> None:
        config = config.model_copy(
            update={"valuation": config.valuation.model_copy(update={"currency": "EUR", "locale": "de-DE"})}
        )
        service = create_portfolio_service(flaky_primary, config)

        assert service.format_value(1234.5) == "1.234,50\xa0€"


class TestWrites:
    """Test cases for validated writes."""

    def test_add_assigns_new_id(self, service, make_asset, reference_date) -> None:
        stored = service.add_asset(USER, make_asset(id="client-id"), today=reference_date)

        assert stored.id and stored.id != "client-id"
        assert service.collection(USER).assets == [stored]

    def test_invalid_asset_not_stored(self, service, make_asset, reference_date) -> None:
        """
        SCENARIO: Asset purchased in the future
        EXPECTED: ValidationError, nothing written
        """
        asset = make_asset(purchase_date=reference_date + timedelta(days=5))

        with pytest.raises(ValidationError):
            service.add_asset(USER, asset, today=reference_date)

        assert service.collection(USER).assets == []

    def test_update_existing(self, service, make_asset, reference_date) -> None:
        """
        SCENARIO: Stored asset gets an upgrade event
        EXPECTED: Stored copy replaced, cache refreshed
        """
        stored = service.add_asset(USER, make_asset(), today=reference_date)
        upgraded = stored.model_copy(
            update={"events": [AssetEvent(date=date(2024, 6, 1), amount=200)]}
        )

        service.update_asset(USER, upgraded, today=reference_date)

        assert service.collection(USER).find(stored.id).events[0].amount == 200

    def test_update_unknown_raises(self, service, make_asset, reference_date) -> None:
        with pytest.raises(AssetNotFound):
            service.update_asset(USER, make_asset(id="nope"), today=reference_date)
        with pytest.raises(AssetNotFound):
            service.update_asset(USER, make_asset(), today=reference_date)

    def test_delete(self, service, make_asset, reference_date) -> None:
        stored = service.add_asset(USER, make_asset(), today=reference_date)

        service.delete_asset(USER, stored.id)

        assert service.collection(USER).assets == []
        with pytest.raises(AssetNotFound):
            service.delete_asset(USER, stored.id)

    def test_tag_defaults(self, service) -> None:
        """
        SCENARIO: Default life set for two tags, one updated
        EXPECTED: Latest value per tag; unknown tag has none
        """
        service.set_tag_default(USER, "PC", 260)
        service.set_tag_default(USER, " Phone ", 104)
        service.set_tag_default(USER, "PC", 300)

        assert service.default_life_weeks(USER, "PC") == 300
        assert service.default_life_weeks(USER, "Phone") == 104
        assert service.default_life_weeks(USER, "Bike") is None

    def test_tag_default_must_be_positive(self, service) -> None:
        with pytest.raises(ValidationError):
            service.set_tag_default(USER, "PC", 0)


class TestImportExport:
    """Test cases for moving collections between accounts."""

    def test_export_then_import_to_other_user(self, stocked_service) -> None:
        """
        SCENARIO: User 1 exports, user 2 imports
        EXPECTED: Same assets under new ids, tag defaults carried over
        """
        # Arrange
        stocked_service.set_tag_default(USER, "PC", 260)
        exported = stocked_service.export(USER)

        # Act
        imported = stocked_service.import_document("user-2", exported)

        # Assert
        original_ids = {a.id for a in stocked_service.collection(USER).assets}
        assert len(imported) == 3
        assert not original_ids & {a.id for a in imported}
        assert [a.name for a in stocked_service.collection("user-2").assets] == [
            "Desktop",
            "Bike",
            "Phone",
        ]
        assert stocked_service.default_life_weeks("user-2", "PC") == 260

    def test_import_merges_tag_defaults(self, service) -> None:
        service.set_tag_default(USER, "PC", 100)

        service.import_document(
            USER, json.dumps({"assets": [], "tagDefaults": {"PC": 200, "Sport": 260}})
        )

        assert service.collection(USER).tag_defaults == {"PC": 200, "Sport": 260}

    def test_import_replacing_current(self, stocked_service, make_asset) -> None:
        exported = json.dumps(
            [make_asset(name="Only one").model_dump(mode="json", by_alias=True)]
        )

        stocked_service.import_document(USER, exported, clear_current=True)

        assert [a.name for a in stocked_service.collection(USER).assets] == ["Only one"]

    def test_malformed_import_changes_nothing(self, stocked_service) -> None:
        """
        SCENARIO: One asset in the file is broken
        EXPECTED: DocumentError, existing collection untouched
        """
        before = stocked_service.collection(USER)
        raw = json.dumps([{"name": "No numbers"}])

        with pytest.raises(DocumentError):
            stocked_service.import_document(USER, raw, clear_current=True)

        assert stocked_service.collection(USER) == before


class TestPrimaryOutage:
    """Test cases for serving from the local store."""

    def test_reads_and_writes_survive_outage(
        self, service, flaky_primary, make_asset, reference_date
    ) -> None:
        """
        SCENARIO: Asset added, primary goes down, cache expires, user adds more
        EXPECTED: Earlier asset read from the local mirror; new write kept locally
        """
        # Arrange
        first = service.add_asset(USER, make_asset(name="Before"), today=reference_date)
        flaky_primary.down = True
        service.repository.invalidate(USER)

        # Act
        during = service.collection(USER)
        second = service.add_asset(USER, make_asset(name="During"), today=reference_date)
        after_write = service.collection(USER)

        # Assert
        assert during.assets == [first]
        assert [a.name for a in after_write.assets] == ["During", "Before"]
        assert second.id
        flaky_primary.down = False
        assert [a.name for a in flaky_primary.load(USER).assets] == ["Before"]

    def test_asset_added_during_outage_kept_after_recovery(
        self, service, flaky_primary, make_asset, reference_date
    ) -> None:
        """
        SCENARIO: Primary down, asset added, primary back, collection reloaded
        EXPECTED: Asset delivered to the primary and present in both tiers
        """
        # Arrange
        service.add_asset(USER, make_asset(name="Before"), today=reference_date)
        flaky_primary.down = True
        service.add_asset(USER, make_asset(name="Bought offline"), today=reference_date)
        fallback = service.repository.repository

        # Act
        flaky_primary.down = False
        fallback.error_handler.reset_circuit("primary")
        service.repository.invalidate(USER)
        after = service.collection(USER)

        # Assert
        local = JsonFileAssetRepository(service.config.storage.local_path)
        assert [a.name for a in after.assets] == ["Bought offline", "Before"]
        assert flaky_primary.load(USER) == after
        assert local.load(USER) == after
        assert local.pending_writes(USER) == []
