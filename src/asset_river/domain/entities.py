"""
Core Domain Entities.

This module defines the records the valuation engine reads. They mirror the
JSON shape used by the API and the import/export document (camelCase keys),
and normalise the nulls the storage layer hands back.
"""

from __future__ import annotations

import datetime as dt
import json
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Bucket for assets without a tag
UNTAGGED = "Untagged"

_WIRE_CONFIG = {
    "frozen": True,
    "populate_by_name": True,
    "alias_generator": to_camel,
    "allow_inf_nan": False,
}


def _calendar_date(value: Any) -> Any:
    """Reduce ISO datetimes (``2024-01-01T00:00:00.000Z``) to their UTC date."""
    if isinstance(value, str) and "T" in value:
        text = value[:-1] + "+00:00" if value.endswith("Z") else value
        try:
            value = dt.datetime.fromisoformat(text)
        except ValueError:
            # Fractions other than 3 or 6 digits need Python 3.11
            return value.split("T", 1)[0]
    if isinstance(value, dt.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(dt.timezone.utc)
        return value.date()
    return value


class IncomeSourceType(str, Enum):
    """How an income source contributes to a month."""

    FIXED = "FIXED"  # Same amount every month
    DYNAMIC = "DYNAMIC"  # Recorded month by month as entries


class AssetEvent(BaseModel):
    """A dated value adjustment (positive = upgrade, negative = repair cost)."""

    date: dt.date
    amount: float
    description: Optional[str] = None

    model_config = _WIRE_CONFIG

    @field_validator("date", mode="before")
    @classmethod
    def _strip_time(cls, value: Any) -> Any:
        return _calendar_date(value)


class Asset(BaseModel):
    """A physical asset depreciating from purchase value to terminal price."""

    id: Optional[str] = Field(default=None, description="Assigned by persistence")
    name: str = Field(default="", description="Display name")
    description: Optional[str] = None
    photo_data_url: Optional[str] = Field(
        default=None, description="Inline image as a data: URL"
    )
    purchase_value: float = Field(..., description="Value at acquisition")
    expected_life_weeks: int = Field(
        ..., description="Weeks to depreciate down to terminal price"
    )
    purchase_date: dt.date = Field(..., description="Acquisition date")
    terminal_price: float = Field(
        default=0.0, description="Residual value at end of expected life"
    )
    tag: str = Field(default="", description="Single category label")
    events: List[AssetEvent] = Field(
        default_factory=list, description="Value adjustments in insertion order"
    )
    is_sold: bool = False
    sold_date: Optional[dt.date] = None
    sold_value: Optional[float] = None

    model_config = _WIRE_CONFIG

    @model_validator(mode="before")
    @classmethod
    def _legacy_tags(cls, data: Any) -> Any:
        """Older documents carry ``tags: [...]``; keep the first real one."""
        if isinstance(data, dict) and "tag" not in data and "tags" in data:
            data = dict(data)
            tags = data.pop("tags") or []
            data["tag"] = next(
                (t for t in tags if isinstance(t, str) and t.strip()), ""
            )
        return data

    @field_validator("purchase_date", "sold_date", mode="before")
    @classmethod
    def _strip_time(cls, value: Any) -> Any:
        return _calendar_date(value)

    @field_validator("terminal_price", mode="before")
    @classmethod
    def _terminal_default(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @field_validator("tag", mode="before")
    @classmethod
    def _tag_default(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("events", mode="before")
    @classmethod
    def _decode_events(cls, value: Any) -> Any:
        # Storage keeps events as a JSON text column
        if value is None:
            return []
        if isinstance(value, (str, bytes)):
            try:
                return json.loads(value)
            except json.JSONDecodeError as e:
                raise ValueError(f"events is not valid JSON: {e.msg}") from e
        return value

    @field_validator("photo_data_url")
    @classmethod
    def _photo_is_image(cls, value: Optional[str]) -> Optional[str]:
        if value and not value.startswith("data:image/"):
            raise ValueError("Invalid photo format")
        return value

    @property
    def has_tag(self) -> bool:
        return bool(self.tag and self.tag.strip())


class IncomeSource(BaseModel):
    """A job or other stream of income."""

    id: Optional[str] = None
    name: str
    type: IncomeSourceType
    amount: Optional[float] = Field(
        default=None, description="Monthly amount (FIXED sources only)"
    )

    model_config = _WIRE_CONFIG

    @field_validator("amount", mode="before")
    @classmethod
    def _blank_amount(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class IncomeEntry(BaseModel):
    """A single recorded income amount (dynamic month or one-time)."""

    id: Optional[str] = None
    date: dt.date
    amount: float
    description: Optional[str] = None
    source_id: Optional[str] = Field(
        default=None, description="None for one-time income"
    )

    model_config = _WIRE_CONFIG

    @field_validator("date", mode="before")
    @classmethod
    def _strip_time(cls, value: Any) -> Any:
        return _calendar_date(value)

    def in_month(self, year: int, month: int) -> bool:
        return self.date.year == year and self.date.month == month


class AssetCollection(BaseModel):
    """All assets of one user plus per-tag default expected life (weeks)."""

    assets: List[Asset] = Field(default_factory=list)
    tag_defaults: Dict[str, int] = Field(default_factory=dict)

    model_config = _WIRE_CONFIG

    def find(self, asset_id: str) -> Optional[Asset]:
        """Return the asset with the given id, if present."""
        for asset in self.assets:
            if asset.id == asset_id:
                return asset
        return None


class PendingOperation(str, Enum):
    """Repository write that can be replayed against another store."""

    SAVE_ASSET = "save_asset"
    DELETE_ASSET = "delete_asset"
    CLEAR = "clear"
    SAVE_TAG_DEFAULTS = "save_tag_defaults"


class PendingWrite(BaseModel):
    """A write accepted by the local store while the remote one was down."""

    operation: PendingOperation
    asset: Optional[Asset] = Field(
        default=None, description="Stored asset (SAVE_ASSET)"
    )
    created: bool = Field(
        default=False, description="The asset id was assigned locally"
    )
    asset_id: Optional[str] = Field(default=None, description="DELETE_ASSET target")
    tag_defaults: Optional[Dict[str, int]] = None

    model_config = _WIRE_CONFIG
