from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence

from ..errors import ColumnOutOfRangeError
from ..models.config_models import MappingOptions
from ..models.mapping_result import MappingResult, Row
from .resolver import BarcodeResolver

"""Mapping stage: one MappingResult per data row, in row order.

Rows before `skip_count` are headers and are not resolved. Resolution is
strictly sequential over a single catalog session; the output renderers rely
on mapping[i] belonging to rows[skip_count + i].
"""


def extract_barcode(row: Row, options: MappingOptions, row_number: int) -> str:
    """Return the barcode field of a data row.

    Args:
        row: parsed data row
        options: run options (column_index is 0-based)
        row_number: 1-based position of the row in the input, for the error
    """
    if options.column_index >= len(row):
        raise ColumnOutOfRangeError(row_number, options.column_number, len(row))
    return row[options.column_index]


def iter_mappings(
    rows: Sequence[Row],
    options: MappingOptions,
    resolver: BarcodeResolver,
    on_row: Callable[[], None] | None = None,
) -> Iterator[MappingResult]:
    """Lazily resolve the data rows of `rows`."""
    for offset, row in enumerate(rows[options.skip_count:]):
        barcode = extract_barcode(row, options, options.skip_count + offset + 1)
        yield resolver.resolve(barcode)
        if on_row is not None:
            on_row()


def resolve_all(
    rows: Sequence[Row],
    options: MappingOptions,
    resolver: BarcodeResolver,
    on_row: Callable[[], None] | None = None,
) -> tuple[MappingResult, ...]:
    """Resolve every data row; any failure aborts with no partial result."""
    return tuple(iter_mappings(rows, options, resolver, on_row))
