"""
Exporter - Serialize a Collection into the Import/Export Document.

The document is what ``parse_asset_document`` reads back:

    {
      "assets": [{"name": ..., "purchaseValue": ..., "events": [...]}, ...],
      "tagDefaults": {"PC": 260}
    }

Ids are left out; they belong to the store that issued them.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Dict, Optional

from asset_river.domain.entities import AssetCollection

logger = logging.getLogger(__name__)

_EXCLUDED_FIELDS = {"id"}


def export_document(collection: AssetCollection) -> Dict[str, Any]:
    """
    Build the export document for a collection.

    Args:
        collection: Assets and tag defaults to export

    Returns:
        JSON-ready dict with camelCase keys and ISO dates
    """
    assets = [
        asset.model_dump(mode="json", by_alias=True, exclude=_EXCLUDED_FIELDS)
        for asset in collection.assets
    ]
    return {"assets": assets, "tagDefaults": dict(collection.tag_defaults)}


def dumps_document(collection: AssetCollection) -> str:
    """Export document as 2-space indented JSON text."""
    document = export_document(collection)
    logger.info(f"Exporting {len(document['assets'])} assets")
    return json.dumps(document, indent=2, ensure_ascii=False)


def export_filename(today: Optional[date] = None) -> str:
    """Download name for an export made on ``today``."""
    today = today or date.today()
    return f"assets-export-{today.isoformat()}.json"
