"""
Portfolio Service - Entry Point for the Presentation Layer.

The PortfolioService ties the repository stack, the write-side validator
and the valuation engine together. Views ask it for valuations, groups and
totals; forms and the import dialog hand it assets to store.

Design Notes:
    - Every figure in one response is computed against one instant
    - Writes are validated before they reach the repository
    - Imports are parsed strictly; the store assigns fresh ids
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, Iterable, List, Optional, Sequence

from asset_river.adapters.cached_repository import CachedAssetRepository
from asset_river.adapters.fallback_repository import FallbackAssetRepository
from asset_river.adapters.json_file_repository import JsonFileAssetRepository
from asset_river.caching.cache_manager import CacheConfig
from asset_river.config.models import AppConfig
from asset_river.domain.entities import (
    UNTAGGED,
    Asset,
    AssetCollection,
    IncomeEntry,
    IncomeSource,
)
from asset_river.domain.value_objects import (
    AssetGroups,
    AssetValuation,
    MonthlyCashFlow,
    PortfolioTotals,
)
from asset_river.interfaces.asset_repository import AssetRepository
from asset_river.resilience.error_handler import (
    CircuitBreakerConfig,
    ErrorHandler,
    RetryConfig,
)
from asset_river.transfer.exporter import dumps_document
from asset_river.validation.asset_validator import AssetValidator
from asset_river.validation.document_parser import parse_asset_document
from asset_river.valuation.cash_flow import summarize_month
from asset_river.valuation.engine import (
    calculate_current_value,
    calculate_daily_depreciation,
    calculate_total_invested,
    group_assets_by_tag,
    sort_by_daily_cost,
    value_asset,
)
from asset_river.valuation.formatting import format_currency
from asset_river.valuation.search import search_assets

logger = logging.getLogger(__name__)


class AssetNotFound(LookupError):
    """Raised when an asset id does not exist in the user's collection."""

    def __init__(self, asset_id: str) -> None:
        super().__init__(f"Asset not found: {asset_id}")
        self.asset_id = asset_id


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PortfolioService:
    """
    Per-user asset operations and derived figures.

    Usage:
        service = create_portfolio_service(api_repository, config)
        for valuation in service.valuations("user-1"):
            print(valuation.name, service.format_value(valuation.current_value))
    """

    def __init__(
        self,
        repository: AssetRepository,
        config: Optional[AppConfig] = None,
        validator: Optional[AssetValidator] = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """
        Initialize portfolio service.

        Args:
            repository: Asset store (typically cached + fallback stack)
            config: Application configuration (defaults if None)
            validator: Write-side validator (built from config if None)
            clock: Source of "now" (injectable for tests)
        """
        self.repository = repository
        self.config = config or AppConfig()
        self.validator = validator or AssetValidator(self.config.validation)
        self._clock = clock

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def collection(self, user_id: str) -> AssetCollection:
        """Everything stored for a user."""
        return self.repository.load(user_id)

    def valuations(
        self,
        user_id: str,
        as_of: Optional[datetime] = None,
        tag: Optional[str] = None,
        include_sold: bool = False,
    ) -> List[AssetValuation]:
        """
        Valuation snapshots, most expensive to hold first.

        Args:
            user_id: Owner of the assets
            as_of: Valuation instant (default: now)
            tag: Only assets of this group (``"Untagged"`` or blank for untagged)
            include_sold: Also value assets that were sold

        Returns:
            One AssetValuation per selected asset, by daily cost descending
        """
        when = as_of or self._clock()
        assets = self._held(self.collection(user_id).assets, include_sold)
        if tag is not None:
            assets = group_assets_by_tag(assets).get(tag.strip() or UNTAGGED, [])
        return [value_asset(a, when) for a in sort_by_daily_cost(assets, when)]

    def grouped(self, user_id: str, include_sold: bool = False) -> AssetGroups:
        """Assets by tag, for navigation."""
        return group_assets_by_tag(
            self._held(self.collection(user_id).assets, include_sold)
        )

    def search(self, user_id: str, term: str) -> List[Asset]:
        """Assets (sold ones included) whose name or description contains the term."""
        return search_assets(self.collection(user_id).assets, term)

    def totals(
        self, user_id: str, as_of: Optional[datetime] = None
    ) -> PortfolioTotals:
        """Summed value, investment and daily cost of the assets still held."""
        when = as_of or self._clock()
        held = self._held(self.collection(user_id).assets, include_sold=False)
        return PortfolioTotals(
            as_of=when,
            asset_count=len(held),
            current_value=sum(calculate_current_value(a, when) for a in held),
            total_invested=sum(calculate_total_invested(a) for a in held),
            daily_cost=sum(calculate_daily_depreciation(a, when) for a in held),
        )

    def cash_flow(
        self,
        user_id: str,
        sources: Sequence[IncomeSource],
        entries: Iterable[IncomeEntry],
        year: int,
        month: int,
        as_of: Optional[datetime] = None,
    ) -> MonthlyCashFlow:
        """Income against the user's depreciation for one month."""
        return summarize_month(
            self.collection(user_id).assets,
            sources,
            entries,
            year,
            month,
            as_of or self._clock(),
        )

    def default_life_weeks(self, user_id: str, tag: str) -> Optional[int]:
        """Expected life to prefill for a new asset with this tag."""
        return self.collection(user_id).tag_defaults.get(tag.strip())

    def format_value(self, value: float) -> str:
        """Format an amount in the configured currency and locale."""
        return format_currency(
            value,
            currency=self.config.valuation.currency,
            locale=self.config.valuation.locale,
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add_asset(
        self, user_id: str, asset: Asset, today: Optional[date] = None
    ) -> Asset:
        """
        Validate and store a new asset.

        Any id on the incoming asset is ignored; the store assigns one.

        Raises:
            ValidationError: If the asset fails validation
        """
        self.validator.validate(asset, today or self._clock().date())
        stored = self.repository.save_asset(
            user_id, asset.model_copy(update={"id": None})
        )
        logger.info(f"Added asset {stored.id} ({stored.name!r})")
        return stored

    def update_asset(
        self, user_id: str, asset: Asset, today: Optional[date] = None
    ) -> Asset:
        """
        Validate and replace an existing asset.

        Raises:
            AssetNotFound: If the asset has no id or the id is unknown
            ValidationError: If the asset fails validation
        """
        if not asset.id or self.collection(user_id).find(asset.id) is None:
            raise AssetNotFound(asset.id or "<none>")
        self.validator.validate(asset, today or self._clock().date())
        stored = self.repository.save_asset(user_id, asset)
        logger.info(f"Updated asset {stored.id}")
        return stored

    def delete_asset(self, user_id: str, asset_id: str) -> None:
        """
        Delete one asset.

        Raises:
            AssetNotFound: If no asset has this id
        """
        if not self.repository.delete_asset(user_id, asset_id):
            raise AssetNotFound(asset_id)
        logger.info(f"Deleted asset {asset_id}")

    def set_tag_default(self, user_id: str, tag: str, weeks: int) -> None:
        """
        Remember the default expected life for a tag.

        Raises:
            ValidationError: If the tag is blank or weeks is not positive
        """
        self.validator.validate_tag_default(tag, weeks)
        tag_defaults = dict(self.collection(user_id).tag_defaults)
        tag_defaults[tag.strip()] = weeks
        self.repository.save_tag_defaults(user_id, tag_defaults)

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def export(self, user_id: str) -> str:
        """The user's collection as export JSON text."""
        return dumps_document(self.collection(user_id))

    def import_document(
        self, user_id: str, raw: Any, clear_current: bool = False
    ) -> List[Asset]:
        """
        Import an export document (or a bare asset array).

        The whole document is parsed before anything is written, so a
        malformed file changes nothing.

        Args:
            user_id: Owner of the imported assets
            raw: JSON text/bytes or decoded document
            clear_current: Delete the existing assets first

        Returns:
            The stored assets with their new ids

        Raises:
            DocumentError: If the document is malformed
        """
        document = parse_asset_document(raw)

        if clear_current:
            self.repository.clear(user_id)

        stored = [self.repository.save_asset(user_id, a) for a in document.assets]

        if document.tag_defaults:
            tag_defaults = dict(self.collection(user_id).tag_defaults)
            tag_defaults.update(document.tag_defaults)
            self.repository.save_tag_defaults(user_id, tag_defaults)

        logger.info(
            f"Imported {len(stored)} assets"
            f"{' (replacing existing)' if clear_current else ''}"
        )
        return stored

    @staticmethod
    def _held(assets: Iterable[Asset], include_sold: bool) -> List[Asset]:
        return [a for a in assets if include_sold or not a.is_sold]


def create_portfolio_service(
    primary: AssetRepository,
    config: Optional[AppConfig] = None,
) -> PortfolioService:
    """
    Build the standard repository stack around a primary store.

    Stack (outermost first): cache -> fallback to local JSON -> primary.
    Either layer can be switched off in the configuration.

    Args:
        primary: The remote store
        config: Application configuration (defaults if None)

    Returns:
        Configured PortfolioService
    """
    config = config or AppConfig()
    repository: AssetRepository = primary

    if config.storage.fallback_enabled:
        retry = config.resilience.retry
        breaker = config.resilience.circuit_breaker
        error_handler = ErrorHandler(
            retry_config=RetryConfig(
                max_attempts=retry.max_attempts,
                base_delay_seconds=retry.base_delay_seconds,
                max_delay_seconds=retry.max_delay_seconds,
            ),
            circuit_breaker_config=CircuitBreakerConfig(
                failure_threshold=breaker.failure_threshold,
                recovery_timeout_seconds=breaker.recovery_timeout_seconds,
                success_threshold=breaker.success_threshold,
            ),
        )
        repository = FallbackAssetRepository(
            primary=primary,
            secondary=JsonFileAssetRepository(config.storage.local_path),
            error_handler=error_handler,
            mirror_to_local=config.storage.mirror_to_local,
        )
        logger.info(f"Local fallback store at {config.storage.local_path}")

    if config.cache.enabled:
        repository = CachedAssetRepository(
            repository,
            cache_config=CacheConfig(
                max_entries=config.cache.max_entries,
                default_ttl_seconds=config.cache.ttl_seconds,
            ),
        )

    return PortfolioService(repository, config)
