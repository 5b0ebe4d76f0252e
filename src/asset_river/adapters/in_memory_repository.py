"""
In-Memory Asset Repository.

A process-local store for development and testing. Stands in for the
remote API store and can seed the demo assets a first-time user sees.
New assets go to the front of the collection, newest first.
"""

from __future__ import annotations

import threading
import uuid
from datetime import date
from typing import Dict, List

from asset_river.domain.entities import Asset, AssetCollection, PendingWrite


def with_id(asset: Asset) -> Asset:
    """Return the asset with a fresh id if it has none."""
    if asset.id:
        return asset
    return asset.model_copy(update={"id": str(uuid.uuid4())})


def upsert(assets: List[Asset], stored: Asset) -> List[Asset]:
    """Replace the asset with the same id, or put a new one first."""
    if any(a.id == stored.id for a in assets):
        return [stored if a.id == stored.id else a for a in assets]
    return [stored, *assets]


class InMemoryAssetRepository:
    """Thread-safe dict-backed asset store."""

    DEMO_ASSETS = [
        # (name, purchase value, expected life weeks, purchase date, tag)
        ("Dell Inspiron 5477", 8299.0, 626, date(2018, 7, 11), "PC"),
        ("iPhone 16 Pro", 7721.0, 260, date(2025, 9, 11), "iPhone"),
    ]

    def __init__(self) -> None:
        self._assets: Dict[str, List[Asset]] = {}
        self._tag_defaults: Dict[str, Dict[str, int]] = {}
        self._pending: Dict[str, List[PendingWrite]] = {}
        self._lock = threading.Lock()

    def load(self, user_id: str) -> AssetCollection:
        with self._lock:
            return AssetCollection(
                assets=list(self._assets.get(user_id, [])),
                tag_defaults=dict(self._tag_defaults.get(user_id, {})),
            )

    def save_asset(self, user_id: str, asset: Asset) -> Asset:
        stored = with_id(asset)
        with self._lock:
            self._assets[user_id] = upsert(self._assets.get(user_id, []), stored)
        return stored

    def delete_asset(self, user_id: str, asset_id: str) -> bool:
        with self._lock:
            assets = self._assets.get(user_id, [])
            kept = [a for a in assets if a.id != asset_id]
            self._assets[user_id] = kept
            return len(kept) < len(assets)

    def clear(self, user_id: str) -> None:
        with self._lock:
            self._assets[user_id] = []

    def save_tag_defaults(self, user_id: str, tag_defaults: Dict[str, int]) -> None:
        with self._lock:
            self._tag_defaults[user_id] = dict(tag_defaults)

    def replace_collection(self, user_id: str, collection: AssetCollection) -> None:
        """Overwrite everything stored for a user."""
        with self._lock:
            self._assets[user_id] = [with_id(a) for a in collection.assets]
            self._tag_defaults[user_id] = dict(collection.tag_defaults)

    def pending_writes(self, user_id: str) -> List[PendingWrite]:
        with self._lock:
            return list(self._pending.get(user_id, []))

    def set_pending_writes(self, user_id: str, writes: List[PendingWrite]) -> None:
        with self._lock:
            self._pending[user_id] = list(writes)

    def seed_demo(self, user_id: str) -> List[Asset]:
        """Store the demo assets for a user and return them."""
        return [
            self.save_asset(
                user_id,
                Asset(
                    name=name,
                    purchase_value=value,
                    expected_life_weeks=weeks,
                    purchase_date=purchased,
                    tag=tag,
                ),
            )
            for name, value, weeks, purchased, tag in self.DEMO_ASSETS
        ]
