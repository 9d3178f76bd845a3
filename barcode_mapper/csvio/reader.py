from __future__ import annotations

import csv
import io
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

from ..errors import FileAccessError, ParseError
from ..models.mapping_result import Row

"""CSV reader for the barcode input file.

- Source is a file path, or standard input when the path is "-"
- UTF-8 text, comma separated, standard double-quote quoting
- Rows are produced lazily in source order and are never padded
- A blank line is a record with one empty field
- Malformed quoting raises ParseError with the physical line number
"""

__all__ = [
    "STDIN_SENTINEL",
    "open_source",
    "iter_rows",
    "read_rows",
]

STDIN_SENTINEL = "-"
ENCODING = "utf-8"


@contextmanager
def open_source(path: str | Path = STDIN_SENTINEL) -> Iterator[TextIO]:
    """Open the input as a text stream suitable for csv.reader.

    Standard input is wrapped, not closed: only the wrapper is detached on exit.
    """
    if str(path) == STDIN_SENTINEL:
        buffer = getattr(sys.stdin, "buffer", None)
        if buffer is None:
            # already a text stream (e.g. replaced by a test harness)
            yield sys.stdin
            return
        wrapper = io.TextIOWrapper(buffer, encoding=ENCODING, newline="")
        try:
            yield wrapper
        finally:
            wrapper.detach()
        return

    try:
        f = open(path, encoding=ENCODING, newline="")
    except OSError as e:
        raise FileAccessError(e.strerror or str(e), str(path)) from e
    with f:
        yield f


def iter_rows(stream: TextIO, *, source_name: str = STDIN_SENTINEL) -> Iterator[Row]:
    """Yield one Row per CSV record.

    Raises:
        ParseError: unterminated quote, stray quote or undecodable bytes
        FileAccessError: the stream failed while reading
    """
    try:
        reader = csv.reader(stream, strict=True)
    except ValueError as e:
        raise FileAccessError(str(e), source_name) from e
    while True:
        try:
            record = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            raise ParseError(str(e), reader.line_num) from e
        except UnicodeDecodeError as e:
            # 復号はチャンク単位のため行番号は目安
            raise ParseError(
                f"invalid {ENCODING} data: {e.reason} (at or after this line)", reader.line_num + 1
            ) from e
        except (OSError, ValueError) as e:
            # ValueError: I/O operation on closed file
            raise FileAccessError(str(e), source_name) from e
        # 空行は空フィールド 1 つのレコードとして扱う
        yield tuple(record) if record else ("",)


def read_rows(path: str | Path = STDIN_SENTINEL) -> list[Row]:
    """Open `path` and consume all rows."""
    with open_source(path) as stream:
        return list(iter_rows(stream, source_name=str(path)))
