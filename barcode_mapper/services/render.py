from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TextIO

from ..csvio.writer import make_writer
from ..models.config_models import OutputMode
from ..models.mapping_result import MappingResult, MatchKind, Row

"""Output rendering (simple / advanced).

simple:   one line "i<record_num>" per data row that matched exactly one item
          record. Headers, unmatched and ambiguous rows produce nothing.
advanced: every input row echoed with two columns prepended.
          header rows -> "", ""
          data rows   -> marker, id list
              x  no match        (id list empty)
              -  single match    i<id>
              *  multiple match  i<id1>;i<id2>;...
"""

__all__ = [
    "RECORD_PREFIX",
    "ID_SEPARATOR",
    "MARKERS",
    "format_record_id",
    "format_id_list",
    "render_simple",
    "render_advanced",
    "get_renderer",
]

RECORD_PREFIX = "i"
ID_SEPARATOR = ";"
MARKERS: dict[MatchKind, str] = {
    MatchKind.NONE: "x",
    MatchKind.SINGLE: "-",
    MatchKind.MULTIPLE: "*",
}

Renderer = Callable[[Sequence[Row], Sequence[MappingResult], int, TextIO], int]


def format_record_id(record_id: int) -> str:
    """Render a catalog record number as used by Sierra create lists.

    >>> format_record_id(1001)
    'i1001'
    """
    return f"{RECORD_PREFIX}{record_id}"


def format_id_list(result: MappingResult) -> str:
    return ID_SEPARATOR.join(format_record_id(r) for r in result.record_ids)


def _check_alignment(rows: Sequence[Row], mapping: Sequence[MappingResult], skip_count: int) -> None:
    expected = max(len(rows) - skip_count, 0)
    if len(mapping) != expected:
        raise ValueError(f"mapping has {len(mapping)} entries, expected {expected} data rows")


def render_simple(
    rows: Sequence[Row], mapping: Sequence[MappingResult], skip_count: int, out: TextIO
) -> int:
    """Write simple output; returns the number of lines written."""
    _check_alignment(rows, mapping, skip_count)
    writer = make_writer(out)
    written = 0
    for result in mapping:
        if result.single_id is not None:
            writer.writerow([format_record_id(result.single_id)])
            written += 1
    return written


def render_advanced(
    rows: Sequence[Row], mapping: Sequence[MappingResult], skip_count: int, out: TextIO
) -> int:
    """Write advanced output; returns the number of rows written (== len(rows))."""
    _check_alignment(rows, mapping, skip_count)
    writer = make_writer(out)
    written = 0
    for row in rows[:skip_count]:
        writer.writerow(["", "", *row])
        written += 1
    for row, result in zip(rows[skip_count:], mapping, strict=True):
        writer.writerow([MARKERS[result.kind], format_id_list(result), *row])
        written += 1
    return written


_RENDERERS: dict[OutputMode, Renderer] = {
    OutputMode.SIMPLE: render_simple,
    OutputMode.ADVANCED: render_advanced,
}


def get_renderer(mode: OutputMode) -> Renderer:
    return _RENDERERS[mode]
