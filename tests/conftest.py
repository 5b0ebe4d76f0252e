"""
Pytest Configuration and Shared Fixtures.

This module contains fixtures available to all tests.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, List

import pytest

from asset_river.adapters.in_memory_repository import InMemoryAssetRepository
from asset_river.config.models import AppConfig, ValidationConfig
from asset_river.domain.entities import Asset, AssetCollection, AssetEvent


class FlakyRepository(InMemoryAssetRepository):
    """In-memory store that raises ConnectionError while ``down`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.down = False
        self.calls = 0

    def _check(self) -> None:
        self.calls += 1
        if self.down:
            raise ConnectionError("primary store unreachable")

    def load(self, user_id: str) -> AssetCollection:
        self._check()
        return super().load(user_id)

    def save_asset(self, user_id: str, asset: Asset) -> Asset:
        self._check()
        return super().save_asset(user_id, asset)

    def delete_asset(self, user_id: str, asset_id: str) -> bool:
        self._check()
        return super().delete_asset(user_id, asset_id)

    def clear(self, user_id: str) -> None:
        self._check()
        super().clear(user_id)

    def save_tag_defaults(self, user_id: str, tag_defaults: dict) -> None:
        self._check()
        super().save_tag_defaults(user_id, tag_defaults)


@pytest.fixture
def reference_instant() -> datetime:
    """Standard valuation instant for testing (midnight UTC)."""
    return datetime(2024, 12, 15, tzinfo=timezone.utc)


@pytest.fixture
def reference_date(reference_instant: datetime) -> date:
    """Calendar date of the reference instant."""
    return reference_instant.date()


@pytest.fixture
def make_asset() -> Callable[..., Asset]:
    """Factory for assets with sensible defaults."""

    def _make(**overrides: Any) -> Asset:
        fields: dict = {
            "name": "Laptop",
            "purchase_value": 1000.0,
            "expected_life_weeks": 52,
            "purchase_date": date(2024, 1, 1),
            "terminal_price": 0.0,
        }
        fields.update(overrides)
        return Asset(**fields)

    return _make


@pytest.fixture
def sample_assets(reference_date: date) -> List[Asset]:
    """A small mixed collection: tagged, untagged, with events, sold."""
    return [
        Asset(
            name="Desktop",
            purchase_value=2100.0,
            expected_life_weeks=100,
            purchase_date=reference_date - timedelta(weeks=10),
            tag="PC",
        ),
        Asset(
            name="Bike",
            purchase_value=700.0,
            expected_life_weeks=10,
            purchase_date=reference_date - timedelta(weeks=2),
            tag="",
            events=[
                AssetEvent(
                    date=reference_date - timedelta(weeks=1),
                    amount=-70.0,
                    description="New chain",
                )
            ],
        ),
        Asset(
            name="Phone",
            purchase_value=1400.0,
            expected_life_weeks=20,
            purchase_date=reference_date - timedelta(weeks=4),
            tag="iPhone",
            is_sold=True,
            sold_date=reference_date - timedelta(days=1),
            sold_value=900.0,
        ),
    ]


@pytest.fixture
def default_config() -> AppConfig:
    """Create default application configuration."""
    return AppConfig()


@pytest.fixture
def validation_config() -> ValidationConfig:
    """Create default validation rules."""
    return ValidationConfig()


@pytest.fixture
def flaky_primary() -> FlakyRepository:
    """Primary store that can be switched off."""
    return FlakyRepository()


@pytest.fixture
def memory_repository() -> InMemoryAssetRepository:
    """Empty in-memory store."""
    return InMemoryAssetRepository()
