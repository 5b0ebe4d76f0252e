"""
Asset Repository Protocol.

Defines the abstract interface for asset storage. The remote API store,
the local file store and the wrappers around them (fallback, cache) all
implement this protocol, so the service never knows which one it talks to.

The repository is responsible for:
    - Loading a user's asset collection (assets plus tag defaults)
    - Creating and replacing single assets, assigning ids
    - Deleting one asset or clearing the collection
    - Storing per-tag default expected life

Design Notes:
    - Uses typing.Protocol for structural subtyping
    - Whole-record writes: assets are replaced, never patched
    - Ownership is by user id; one user never sees another's assets
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Protocol, runtime_checkable

if TYPE_CHECKING:
    from asset_river.domain.entities import Asset, AssetCollection


@runtime_checkable
class AssetRepository(Protocol):
    """Abstract interface for per-user asset storage."""

    def load(self, user_id: str) -> AssetCollection:
        """
        Load everything stored for a user.

        Args:
            user_id: Owner of the collection

        Returns:
            The user's assets (storage order) and tag defaults; empty if none
        """
        ...

    def save_asset(self, user_id: str, asset: Asset) -> Asset:
        """
        Create or replace an asset.

        An asset without an id is created with a fresh one; an asset with
        an id replaces the stored asset of that id.

        Args:
            user_id: Owner of the asset
            asset: Asset to store

        Returns:
            The stored asset, id assigned
        """
        ...

    def delete_asset(self, user_id: str, asset_id: str) -> bool:
        """
        Delete one asset.

        Returns:
            True if an asset was removed, False if it did not exist
        """
        ...

    def clear(self, user_id: str) -> None:
        """Delete all of a user's assets (tag defaults are kept)."""
        ...

    def save_tag_defaults(self, user_id: str, tag_defaults: Dict[str, int]) -> None:
        """Replace the user's per-tag default expected life (weeks)."""
        ...
