"""
JSON File Asset Repository.

The local tier of the two-tier store: one JSON document per user in a
directory on disk. Serves reads and writes while the remote store is
unreachable.

Design Notes:
    - Document shape matches the export document (camelCase keys)
    - Writes go to a temporary file that replaces the document atomically
    - File names are hashed user ids, so any id is a safe file name
    - A corrupt document raises StorageError instead of being
      silently replaced by an empty collection
    - Writes still owed to the remote store live in the same document
      under "pending", so they survive a restart
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Tuple, Union

from pydantic import ValidationError

from asset_river.adapters.in_memory_repository import upsert, with_id
from asset_river.domain.entities import Asset, AssetCollection, PendingWrite

logger = logging.getLogger(__name__)

DOCUMENT_VERSION = 1


class StorageError(OSError):
    """Raised when a stored document cannot be read."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(message)
        self.path = path


class JsonFileAssetRepository:
    """Stores each user's collection as a JSON file."""

    def __init__(self, directory: Union[str, Path]) -> None:
        """
        Initialize the file store.

        Args:
            directory: Directory holding the documents (created on first write)
        """
        self.directory = Path(directory)
        self._lock = threading.RLock()

    def path_for(self, user_id: str) -> Path:
        """Location of a user's document."""
        digest = hashlib.sha256(user_id.encode("utf-8")).hexdigest()[:24]
        return self.directory / f"assets-{digest}.json"

    def load(self, user_id: str) -> AssetCollection:
        return self._read(user_id)[0]

    def save_asset(self, user_id: str, asset: Asset) -> Asset:
        stored = with_id(asset)
        with self._lock:
            collection, pending = self._read(user_id)
            self._write(
                user_id,
                AssetCollection(
                    assets=upsert(collection.assets, stored),
                    tag_defaults=collection.tag_defaults,
                ),
                pending,
            )
        return stored

    def delete_asset(self, user_id: str, asset_id: str) -> bool:
        with self._lock:
            collection, pending = self._read(user_id)
            kept = [a for a in collection.assets if a.id != asset_id]
            if len(kept) == len(collection.assets):
                return False
            self._write(
                user_id,
                AssetCollection(assets=kept, tag_defaults=collection.tag_defaults),
                pending,
            )
            return True

    def clear(self, user_id: str) -> None:
        with self._lock:
            collection, pending = self._read(user_id)
            self._write(
                user_id, AssetCollection(tag_defaults=collection.tag_defaults), pending
            )

    def save_tag_defaults(self, user_id: str, tag_defaults: Dict[str, int]) -> None:
        with self._lock:
            collection, pending = self._read(user_id)
            self._write(
                user_id,
                AssetCollection(assets=collection.assets, tag_defaults=tag_defaults),
                pending,
            )

    def replace_collection(self, user_id: str, collection: AssetCollection) -> None:
        """Overwrite the stored assets and tag defaults of a user."""
        with self._lock:
            pending = self._read(user_id)[1]
            self._write(
                user_id,
                AssetCollection(
                    assets=[with_id(a) for a in collection.assets],
                    tag_defaults=collection.tag_defaults,
                ),
                pending,
            )

    def pending_writes(self, user_id: str) -> List[PendingWrite]:
        """Writes not yet delivered to the remote store, oldest first."""
        return self._read(user_id)[1]

    def set_pending_writes(self, user_id: str, writes: List[PendingWrite]) -> None:
        with self._lock:
            collection = self._read(user_id)[0]
            self._write(user_id, collection, writes)

    def _read(self, user_id: str) -> Tuple[AssetCollection, List[PendingWrite]]:
        path = self.path_for(user_id)
        with self._lock:
            if not path.exists():
                return AssetCollection(), []
            try:
                with open(path, encoding="utf-8") as f:
                    raw = json.load(f)
                pending = [
                    PendingWrite.model_validate(w) for w in raw.get("pending") or []
                ]
                return AssetCollection.model_validate(raw), pending
            except (json.JSONDecodeError, ValidationError, AttributeError) as e:
                logger.error(f"Unreadable asset document {path}: {e}")
                raise StorageError(f"Unreadable asset document: {path}", path) from e

    def _write(
        self,
        user_id: str,
        collection: AssetCollection,
        pending: List[PendingWrite],
    ) -> None:
        path = self.path_for(user_id)
        path.parent.mkdir(parents=True, exist_ok=True)

        document = collection.model_dump(mode="json", by_alias=True)
        document["version"] = DOCUMENT_VERSION
        if pending:
            document["pending"] = [
                w.model_dump(mode="json", by_alias=True) for w in pending
            ]

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(
            f"Wrote {len(collection.assets)} assets ({len(pending)} pending) to {path}"
        )
