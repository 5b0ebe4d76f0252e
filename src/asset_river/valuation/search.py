"""
Asset Search.

Case-insensitive substring match over asset names and descriptions, in
collection order. A blank term matches nothing.
"""

from __future__ import annotations

from typing import Iterable, List

from asset_river.domain.entities import Asset


def matches(asset: Asset, term: str) -> bool:
    """True if ``term`` (already lower-cased) occurs in the name or description."""
    if term in asset.name.lower():
        return True
    return bool(asset.description) and term in asset.description.lower()


def search_assets(assets: Iterable[Asset], term: str) -> List[Asset]:
    """
    Find assets whose name or description contains the term.

    Args:
        assets: Assets to search, in display order
        term: Text typed by the user; surrounding spaces are part of it

    Returns:
        Matching assets in their original order ([] for a blank term)
    """
    if not term.strip():
        return []
    needle = term.lower()
    return [a for a in assets if matches(a, needle)]
