from __future__ import annotations

import logging

from ..db.catalog import CatalogLookup
from ..models.mapping_result import MappingResult

"""Barcode -> item record resolution.

A barcode is lowercased and looked up as the index key "b" + barcode. No other
validation is applied: any string is attempted.
"""

__all__ = [
    "BARCODE_INDEX_TAG",
    "normalize_barcode",
    "barcode_index_key",
    "BarcodeResolver",
]

BARCODE_INDEX_TAG = "b"

logger = logging.getLogger(__name__)


def normalize_barcode(value: str) -> str:
    """Lowercase a barcode (locale independent)."""
    return value.lower()


def barcode_index_key(value: str) -> str:
    return BARCODE_INDEX_TAG + normalize_barcode(value)


class BarcodeResolver:
    """Resolve single barcodes through a CatalogLookup.

    Lookup errors propagate unchanged; there is no retry.
    """

    def __init__(self, lookup: CatalogLookup) -> None:
        self.lookup = lookup

    def resolve(self, barcode: str) -> MappingResult:
        key = barcode_index_key(barcode)
        result = MappingResult.from_ids(self.lookup.find_item_records(key))
        logger.debug(f"barcode={barcode!r} key={key!r} -> {result.kind.value} {list(result.record_ids)}")
        return result
