from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol

import psycopg2

from ..errors import CatalogLookupError

"""Catalog lookup capability.

The resolver only needs one question answered: which item records own a given
inverted-index key. `CatalogLookup` is that capability; the PostgreSQL
implementation queries the Sierra read-only views through a DB-API cursor,
and `InMemoryCatalog` serves tests.
"""

__all__ = [
    "CatalogLookup",
    "PostgresCatalogLookup",
    "InMemoryCatalog",
    "ITEM_RECORD_TYPE",
    "ITEM_LOOKUP_SQL",
]

ITEM_RECORD_TYPE = "i"

# index_tag || index_entry で比較 (例: 'b' || '0123456789')
ITEM_LOOKUP_SQL = """
SELECT md.record_num
  FROM sierra_view.phrase_entry AS pe
       JOIN sierra_view.record_metadata AS md ON md.id = pe.record_id
 WHERE md.record_type_code = %s
       AND pe.index_tag || pe.index_entry = %s
 ORDER BY md.record_num
"""


class CatalogLookup(Protocol):
    def find_item_records(self, index_key: str) -> Sequence[int]:
        """Return record numbers of item records whose index entry equals `index_key`."""
        ...


class PostgresCatalogLookup:
    """CatalogLookup over a psycopg2 cursor (read-only usage)."""

    def __init__(self, cursor: Any, *, record_type: str = ITEM_RECORD_TYPE) -> None:
        self.cursor = cursor
        self.record_type = record_type
        self.query_count = 0

    def find_item_records(self, index_key: str) -> list[int]:
        self.query_count += 1
        try:
            self.cursor.execute(ITEM_LOOKUP_SQL, (self.record_type, index_key))
            rows = self.cursor.fetchall()
        except psycopg2.Error as e:
            raise CatalogLookupError(f"catalog query failed for {index_key!r}: {e}") from e
        return [_record_num(r, index_key) for r in rows]


def _record_num(row: Sequence[Any], index_key: str) -> int:
    try:
        value = row[0]
    except (IndexError, TypeError, KeyError) as e:
        raise CatalogLookupError(f"malformed catalog row for {index_key!r}: {row!r}") from e
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise CatalogLookupError(f"invalid record number for {index_key!r}: {value!r}")
    return value


class InMemoryCatalog:
    """Dict backed CatalogLookup.

    Keys are full index keys (tag + normalized value), e.g. ``"bab100"``.
    """

    def __init__(self, entries: Mapping[str, Iterable[int]] | None = None) -> None:
        self.entries: dict[str, list[int]] = {k: list(v) for k, v in (entries or {}).items()}
        self.queries: list[str] = []

    @classmethod
    def from_barcodes(cls, barcodes: Mapping[str, Iterable[int]], tag: str = "b") -> InMemoryCatalog:
        return cls({f"{tag}{code.lower()}": ids for code, ids in barcodes.items()})

    def find_item_records(self, index_key: str) -> list[int]:
        self.queries.append(index_key)
        return list(self.entries.get(index_key, []))
