"""
Document Parser - Turn an Import File into Typed Assets.

Accepts what the export produces (``{"assets": [...], "tagDefaults":
{...}}``) as well as a bare array of assets, and either returns typed
assets or raises one DocumentError listing every problem found. Untyped
data never reaches the valuation engine.

Design Notes:
    - Client-side ids and owner ids are dropped; the store assigns new ones
    - Issue locations read like JSON paths: ``assets[2].events[0].amount``
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Sequence, Tuple, Union

from pydantic import BaseModel, Field, PositiveInt, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from asset_river.domain.entities import Asset

logger = logging.getLogger(__name__)

# Keys that belong to the exporting account, not the asset
_OWNER_KEYS = ("id", "userId", "user_id")

_TAG_DEFAULTS = TypeAdapter(Dict[str, PositiveInt])


class DocumentIssue(BaseModel):
    """One problem in an import document."""

    location: str
    message: str

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


class DocumentError(Exception):
    """Raised when an import document cannot be turned into assets."""

    def __init__(self, issues: List[DocumentIssue]) -> None:
        self.issues = issues
        preview = "; ".join(str(i) for i in issues[:5])
        if len(issues) > 5:
            preview += f" ... and {len(issues) - 5} more"
        super().__init__(f"Invalid asset document ({len(issues)} issues): {preview}")


class ImportDocument(BaseModel):
    """A parsed import document."""

    assets: List[Asset] = Field(default_factory=list)
    tag_defaults: Dict[str, int] = Field(default_factory=dict)

    model_config = {"frozen": True}


def _format_loc(loc: Sequence[Union[int, str]]) -> str:
    return "".join(f"[{p}]" if isinstance(p, int) else f".{p}" for p in loc)


def _issues_from(
    error: PydanticValidationError, prefix: str
) -> List[DocumentIssue]:
    return [
        DocumentIssue(location=prefix + _format_loc(e["loc"]), message=e["msg"])
        for e in error.errors()
    ]


def _decode(raw: Union[str, bytes, Any]) -> Any:
    if not isinstance(raw, (str, bytes, bytearray)):
        return raw
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise DocumentError(
            [DocumentIssue(location="$", message=f"Invalid JSON: {e.msg} (line {e.lineno})")]
        ) from e


def _split(data: Any) -> Tuple[List[Any], Any]:
    if isinstance(data, list):
        return data, {}
    if isinstance(data, dict) and isinstance(data.get("assets"), list):
        return data["assets"], data.get("tagDefaults") or {}
    raise DocumentError(
        [
            DocumentIssue(
                location="$",
                message="Expected an array of assets or an export object",
            )
        ]
    )


def parse_asset_document(raw: Union[str, bytes, Any]) -> ImportDocument:
    """
    Parse an import document.

    Args:
        raw: JSON text/bytes, or an already decoded list/dict

    Returns:
        ImportDocument with typed, id-less assets and tag defaults

    Raises:
        DocumentError: If the document is not valid JSON, has the wrong
            shape, or any asset or tag default is malformed
    """
    items, raw_defaults = _split(_decode(raw))
    issues: List[DocumentIssue] = []
    assets: List[Asset] = []

    for i, item in enumerate(items):
        prefix = f"assets[{i}]"
        if not isinstance(item, dict):
            issues.append(DocumentIssue(location=prefix, message="Expected an object"))
            continue
        cleaned = {k: v for k, v in item.items() if k not in _OWNER_KEYS}
        try:
            assets.append(Asset.model_validate(cleaned))
        except PydanticValidationError as e:
            issues.extend(_issues_from(e, prefix))

    tag_defaults: Dict[str, int] = {}
    try:
        tag_defaults = _TAG_DEFAULTS.validate_python(raw_defaults)
    except PydanticValidationError as e:
        issues.extend(_issues_from(e, "tagDefaults"))

    if issues:
        logger.warning(f"Rejected import document with {len(issues)} issues")
        raise DocumentError(issues)

    logger.info(
        f"Parsed import document: {len(assets)} assets, {len(tag_defaults)} tag defaults"
    )
    return ImportDocument(assets=assets, tag_defaults=tag_defaults)
