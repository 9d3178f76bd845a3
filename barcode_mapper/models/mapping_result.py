from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

"""Row and MappingResult models.

A Row is the tuple of string fields parsed from one CSV record. It is never
padded or trimmed. A MappingResult holds the record numbers one barcode
resolved to, in the order the catalog returned them.
"""

__all__ = [
    "Row",
    "MatchKind",
    "MappingResult",
]

Row = tuple[str, ...]


class MatchKind(str, Enum):
    NONE = "none"
    SINGLE = "single"
    MULTIPLE = "multiple"


@dataclass(frozen=True)
class MappingResult:
    """Resolution result for one data row.

    The kind is derived from the number of record ids, so the marker / id-list
    pairing in the advanced output can never disagree with it.
    """
    record_ids: tuple[int, ...] = ()

    @classmethod
    def from_ids(cls, record_ids: Iterable[int]) -> MappingResult:
        # 重複を除去 (順序は維持)
        return cls(tuple(dict.fromkeys(record_ids)))

    @property
    def kind(self) -> MatchKind:
        if not self.record_ids:
            return MatchKind.NONE
        if len(self.record_ids) == 1:
            return MatchKind.SINGLE
        return MatchKind.MULTIPLE

    @property
    def single_id(self) -> int | None:
        """The record id when exactly one matched, otherwise None."""
        return self.record_ids[0] if self.kind is MatchKind.SINGLE else None
