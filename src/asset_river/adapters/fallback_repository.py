"""
Fallback Asset Repository - Remote Store with Local Fallback.

Two-tier repository: every call goes to the primary (remote) store through
retry and a circuit breaker. When the primary is unavailable the same call
is served by the secondary (local) store.

Design Notes:
    - Fallback happens only on RetryExhausted / CircuitBreakerOpen;
      non-transient errors from the primary propagate unchanged
    - Writes served by the secondary are journaled there as pending and
      replayed, in order, before the primary handles anything else for
      that user; a primary read is never mirrored over unsent writes
    - Assets created while degraded get their final id from the primary
      during replay; later journaled writes follow the new id
    - Successful primary results are mirrored into the secondary so the
      local copy is current when the next outage starts
    - Mirroring is best effort: a failed mirror is logged, never raised
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List, Optional, Protocol, TypeVar

from asset_river.domain.entities import (
    Asset,
    AssetCollection,
    PendingOperation,
    PendingWrite,
)
from asset_river.interfaces.asset_repository import AssetRepository
from asset_river.resilience.error_handler import (
    CircuitBreakerOpen,
    ErrorHandler,
    RetryExhausted,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LocalAssetStore(AssetRepository, Protocol):
    """A repository that can take a whole collection and keep a write journal."""

    def replace_collection(self, user_id: str, collection: AssetCollection) -> None:
        ...

    def pending_writes(self, user_id: str) -> List[PendingWrite]:
        ...

    def set_pending_writes(self, user_id: str, writes: List[PendingWrite]) -> None:
        ...


def _rekey(write: PendingWrite, old_id: str, new_id: str) -> PendingWrite:
    """Point a journaled write at the id the primary assigned."""
    if write.asset is not None and write.asset.id == old_id:
        return write.model_copy(
            update={"asset": write.asset.model_copy(update={"id": new_id})}
        )
    if write.asset_id == old_id:
        return write.model_copy(update={"asset_id": new_id})
    return write


class FallbackAssetRepository:
    """
    Primary store guarded by retry + circuit breaker, local store behind it.

    Usage:
        repository = FallbackAssetRepository(
            primary=ApiAssetRepository(session),
            secondary=JsonFileAssetRepository(Path(".asset_river")),
        )
        collection = repository.load("user-1")  # local copy if API is down
    """

    def __init__(
        self,
        primary: AssetRepository,
        secondary: LocalAssetStore,
        error_handler: Optional[ErrorHandler] = None,
        mirror_to_local: bool = True,
        name: str = "primary",
    ) -> None:
        """
        Initialize fallback repository.

        Args:
            primary: Remote store
            secondary: Local store used while the primary is unavailable
            error_handler: Retry/circuit policy (defaults if None)
            mirror_to_local: Copy successful primary results to the secondary
            name: Circuit name for the primary
        """
        self.primary = primary
        self.secondary = secondary
        self.error_handler = error_handler or ErrorHandler()
        self.mirror_to_local = mirror_to_local
        self.name = name
        self._fallback_count = 0
        self._replay_lock = threading.RLock()

    @property
    def fallback_count(self) -> int:
        """Number of calls served by the secondary store."""
        return self._fallback_count

    def pending_writes(self, user_id: str) -> List[PendingWrite]:
        """Writes still waiting to reach the primary."""
        return self.secondary.pending_writes(user_id)

    def load(self, user_id: str) -> AssetCollection:
        collection, from_primary = self._call(
            user_id,
            "load",
            lambda: self.primary.load(user_id),
            lambda: self.secondary.load(user_id),
        )
        if from_primary:
            self._mirror(
                "load", lambda: self.secondary.replace_collection(user_id, collection)
            )
        return collection

    def save_asset(self, user_id: str, asset: Asset) -> Asset:
        stored, from_primary = self._call(
            user_id,
            "save_asset",
            lambda: self.primary.save_asset(user_id, asset),
            lambda: self.secondary.save_asset(user_id, asset),
        )
        if from_primary:
            self._mirror("save_asset", lambda: self.secondary.save_asset(user_id, stored))
        else:
            self._journal(
                user_id,
                PendingWrite(
                    operation=PendingOperation.SAVE_ASSET,
                    asset=stored,
                    created=not asset.id,
                ),
            )
        return stored

    def delete_asset(self, user_id: str, asset_id: str) -> bool:
        deleted, from_primary = self._call(
            user_id,
            "delete_asset",
            lambda: self.primary.delete_asset(user_id, asset_id),
            lambda: self.secondary.delete_asset(user_id, asset_id),
        )
        if from_primary:
            self._mirror(
                "delete_asset", lambda: self.secondary.delete_asset(user_id, asset_id)
            )
        elif deleted:
            self._journal(
                user_id,
                PendingWrite(operation=PendingOperation.DELETE_ASSET, asset_id=asset_id),
            )
        return deleted

    def clear(self, user_id: str) -> None:
        _, from_primary = self._call(
            user_id,
            "clear",
            lambda: self.primary.clear(user_id),
            lambda: self.secondary.clear(user_id),
        )
        if from_primary:
            self._mirror("clear", lambda: self.secondary.clear(user_id))
        else:
            self._journal(user_id, PendingWrite(operation=PendingOperation.CLEAR))

    def save_tag_defaults(self, user_id: str, tag_defaults: Dict[str, int]) -> None:
        _, from_primary = self._call(
            user_id,
            "save_tag_defaults",
            lambda: self.primary.save_tag_defaults(user_id, tag_defaults),
            lambda: self.secondary.save_tag_defaults(user_id, tag_defaults),
        )
        if from_primary:
            self._mirror(
                "save_tag_defaults",
                lambda: self.secondary.save_tag_defaults(user_id, tag_defaults),
            )
        else:
            self._journal(
                user_id,
                PendingWrite(
                    operation=PendingOperation.SAVE_TAG_DEFAULTS,
                    tag_defaults=dict(tag_defaults),
                ),
            )

    def _call(
        self,
        user_id: str,
        operation: str,
        primary_fn: Callable[[], T],
        secondary_fn: Callable[[], T],
    ) -> tuple[T, bool]:
        """Run on the primary after replay; on unavailability run on the secondary."""
        try:
            self._replay(user_id)
            return self.error_handler.call(primary_fn, f"{self.name}.{operation}"), True
        except (RetryExhausted, CircuitBreakerOpen) as e:
            self._fallback_count += 1
            logger.warning(
                f"{self.name} store unavailable for {operation}, using local store: {e}"
            )
            return secondary_fn(), False

    def _journal(self, user_id: str, write: PendingWrite) -> None:
        with self._replay_lock:
            pending = self.secondary.pending_writes(user_id)
            self.secondary.set_pending_writes(user_id, [*pending, write])
        logger.debug(f"Journaled {write.operation.value} for later delivery")

    def _replay(self, user_id: str) -> None:
        """
        Deliver journaled writes to the primary, oldest first.

        Each delivered write leaves the journal at once, so an outage in the
        middle of a replay resumes where it stopped.

        Raises:
            RetryExhausted / CircuitBreakerOpen: If the primary fails mid-replay
        """
        with self._replay_lock:
            pending = self.secondary.pending_writes(user_id)
            if not pending:
                return
            logger.info(f"Replaying {len(pending)} local writes to {self.name} store")

            while pending:
                write, rest = pending[0], pending[1:]
                stored = self.error_handler.call(
                    lambda: self._deliver(user_id, write),
                    f"{self.name}.{write.operation.value}",
                )
                if write.created and stored is not None:
                    local_id = write.asset.id
                    rest = [_rekey(w, local_id, stored.id) for w in rest]
                    self._rekey_local(user_id, local_id, stored.id)
                self.secondary.set_pending_writes(user_id, rest)
                pending = rest

            logger.info(f"Local writes delivered to {self.name} store")

    def _rekey_local(self, user_id: str, old_id: str, new_id: str) -> None:
        collection = self.secondary.load(user_id)
        self.secondary.replace_collection(
            user_id,
            AssetCollection(
                assets=[
                    a.model_copy(update={"id": new_id}) if a.id == old_id else a
                    for a in collection.assets
                ],
                tag_defaults=collection.tag_defaults,
            ),
        )

    def _deliver(self, user_id: str, write: PendingWrite) -> Optional[Asset]:
        if write.operation is PendingOperation.SAVE_ASSET:
            asset = write.asset
            if write.created:
                asset = asset.model_copy(update={"id": None})
            return self.primary.save_asset(user_id, asset)
        if write.operation is PendingOperation.DELETE_ASSET:
            self.primary.delete_asset(user_id, write.asset_id)
        elif write.operation is PendingOperation.CLEAR:
            self.primary.clear(user_id)
        elif write.operation is PendingOperation.SAVE_TAG_DEFAULTS:
            self.primary.save_tag_defaults(user_id, write.tag_defaults or {})
        return None

    def _mirror(self, operation: str, fn: Callable[[], None]) -> None:
        if not self.mirror_to_local:
            return
        try:
            fn()
        except OSError as e:
            logger.warning(f"Could not mirror {operation} to local store: {e}")
