"""
Asset Validator - Validate Assets Before They Are Written.

The valuation engine accepts any typed asset and degrades gracefully on
odd input. Forms, routes and imports are stricter; this validator holds
the rules they share:
    - Every amount is a finite number
    - Purchase date not in the future
    - Positive purchase value and expected life
    - Terminal price between 0 and the purchase value
    - Sale record consistent with the purchase
    - No event dated before the purchase

Design Notes:
    - Fail-fast principle, but every problem is reported at once
    - Clear error messages naming the offending field
"""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import Dict, Optional

from asset_river.config.models import ValidationConfig
from asset_river.domain.entities import Asset

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Raised when asset validation fails."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        errors: Optional[Dict[str, str]] = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.message = message
        self.errors = errors or ({field: message} if field else {})


class AssetValidator:
    """
    Validates assets before create/update.

    Validates:
        - Values (purchase, terminal, sold, events) are finite and in range
        - Dates (purchase, sale, events) are ordered and not in the future
        - Expected life is positive and bounded
    """

    def __init__(self, config: Optional[ValidationConfig] = None) -> None:
        """
        Initialize asset validator.

        Args:
            config: Validation rules (defaults if None)
        """
        self.config = config or ValidationConfig()

    def validate(self, asset: Asset, today: Optional[date] = None) -> None:
        """
        Validate an asset.

        Args:
            asset: The asset to validate
            today: Reference date for "not in the future" (default: today)

        Raises:
            ValidationError: If validation fails
        """
        today = today or date.today()
        errors: Dict[str, str] = {}

        self._validate_values(asset, errors)
        self._validate_life(asset, errors)
        self._validate_dates(asset, today, errors)
        self._validate_sale(asset, today, errors)

        if errors:
            error_message = "; ".join(f"{k}: {v}" for k, v in errors.items())
            logger.warning(f"Asset validation failed: {error_message}")
            raise ValidationError(error_message, field=next(iter(errors)), errors=errors)

        logger.debug(f"Asset validated: id={asset.id}, tag={asset.tag!r}")

    def _validate_values(self, asset: Asset, errors: Dict[str, str]) -> None:
        amounts = {
            "purchase_value": asset.purchase_value,
            "terminal_price": asset.terminal_price,
            "sold_value": asset.sold_value,
        }
        amounts.update(
            (f"events[{i}].amount", e.amount) for i, e in enumerate(asset.events)
        )
        non_finite = {
            name: "must be a finite number"
            for name, amount in amounts.items()
            if amount is not None and not math.isfinite(amount)
        }
        if non_finite:
            # Range checks are meaningless for NaN
            errors.update(non_finite)
            return

        if self.config.require_positive_purchase_value:
            if asset.purchase_value <= 0:
                errors["purchase_value"] = "must be greater than 0"
        elif asset.purchase_value < 0:
            errors["purchase_value"] = "must not be negative"

        if asset.terminal_price < 0:
            errors["terminal_price"] = "must not be negative"
        elif asset.terminal_price > asset.purchase_value:
            errors["terminal_price"] = "must not exceed purchase_value"

    def _validate_life(self, asset: Asset, errors: Dict[str, str]) -> None:
        if asset.expected_life_weeks <= 0:
            errors["expected_life_weeks"] = "must be greater than 0"
        elif asset.expected_life_weeks > self.config.max_expected_life_weeks:
            errors["expected_life_weeks"] = (
                f"must be at most {self.config.max_expected_life_weeks}"
            )

    def _validate_dates(
        self, asset: Asset, today: date, errors: Dict[str, str]
    ) -> None:
        if asset.purchase_date > today and not self.config.allow_future_purchase_date:
            errors["purchase_date"] = f"{asset.purchase_date.isoformat()} is in the future"

        for i, event in enumerate(asset.events):
            if event.date < asset.purchase_date:
                errors[f"events[{i}].date"] = (
                    f"{event.date.isoformat()} is before purchase_date"
                )

    def _validate_sale(
        self, asset: Asset, today: date, errors: Dict[str, str]
    ) -> None:
        if not asset.is_sold:
            return

        if asset.sold_date is None:
            errors["sold_date"] = "required when is_sold is set"
        elif asset.sold_date < asset.purchase_date:
            errors["sold_date"] = "must not be before purchase_date"
        elif asset.sold_date > today:
            errors["sold_date"] = f"{asset.sold_date.isoformat()} is in the future"

        if asset.sold_value is not None and asset.sold_value < 0:
            errors["sold_value"] = "must not be negative"

    def validate_tag_default(self, tag: str, weeks: int) -> None:
        """
        Validate a per-tag default expected life.

        Raises:
            ValidationError: If the tag is blank or weeks is not positive
        """
        if not tag or not tag.strip():
            raise ValidationError("tag must not be blank", field="tag")
        if weeks <= 0:
            raise ValidationError("weeks must be greater than 0", field="weeks")
