from __future__ import annotations

import pytest

from barcode_mapper.db.catalog import InMemoryCatalog
from barcode_mapper.errors import CatalogLookupError
from barcode_mapper.models import MatchKind
from barcode_mapper.services.resolver import BarcodeResolver, barcode_index_key, normalize_barcode


def test_normalize_barcode_lowercases():
    assert normalize_barcode("AB100") == "ab100"
    assert normalize_barcode("ab100") == "ab100"


def test_index_key_prefixes_barcode_tag():
    assert barcode_index_key("AB100") == "bab100"


def test_any_string_is_attempted():
    catalog = InMemoryCatalog()
    resolver = BarcodeResolver(catalog)
    for value in ["", "  ", "not a barcode!"]:
        assert resolver.resolve(value).kind is MatchKind.NONE
    assert catalog.queries == ["b", "b  ", "bnot a barcode!"]


def test_resolve_is_case_insensitive(sample_catalog):
    resolver = BarcodeResolver(sample_catalog)
    assert resolver.resolve("AB100") == resolver.resolve("ab100")
    assert resolver.resolve("Ab100").record_ids == (1001,)


def test_resolve_kinds(sample_catalog):
    resolver = BarcodeResolver(sample_catalog)
    assert resolver.resolve("AB100").kind is MatchKind.SINGLE
    assert resolver.resolve("AB101").kind is MatchKind.NONE
    multiple = resolver.resolve("AB102")
    assert multiple.kind is MatchKind.MULTIPLE
    assert multiple.record_ids == (1002, 1003)


def test_duplicate_ids_collapse_preserving_order():
    resolver = BarcodeResolver(InMemoryCatalog({"bx": [7, 3, 7]}))
    assert resolver.resolve("X").record_ids == (7, 3)


def test_one_lookup_per_resolve(sample_catalog):
    resolver = BarcodeResolver(sample_catalog)
    resolver.resolve("AB100")
    resolver.resolve("AB100")
    assert sample_catalog.queries == ["bab100", "bab100"]


def test_lookup_errors_propagate():
    class Failing:
        def find_item_records(self, index_key):
            raise CatalogLookupError("down")

    with pytest.raises(CatalogLookupError):
        BarcodeResolver(Failing()).resolve("AB100")
