"""
Validation Package - Input Validation and Import Parsing.

This package provides validation for:
    - AssetValidator: Rules applied before an asset is written
    - parse_asset_document: Strict parsing of import documents

Design Principles:
    - Fail fast on invalid input
    - Clear, actionable error messages
    - Parse, don't validate: callers get typed assets or an error
"""

from asset_river.validation.asset_validator import (
    AssetValidator,
    ValidationError,
)
from asset_river.validation.document_parser import (
    DocumentError,
    DocumentIssue,
    ImportDocument,
    parse_asset_document,
)

__all__ = [
    "AssetValidator",
    "DocumentError",
    "DocumentIssue",
    "ImportDocument",
    "ValidationError",
    "parse_asset_document",
]
