"""
Transfer Package - Export Document.

Reading documents back in is the job of
``asset_river.validation.parse_asset_document``.
"""

from asset_river.transfer.exporter import (
    dumps_document,
    export_document,
    export_filename,
)

__all__ = ["dumps_document", "export_document", "export_filename"]
