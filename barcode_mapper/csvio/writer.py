from __future__ import annotations

import csv
from typing import Any, TextIO

"""Shared CSV dialect for both output modes.

Same quoting rules as the reader (minimal quoting, doubled quotes), with
"\n" record terminators.
"""


class OutputDialect(csv.excel):
    lineterminator = "\n"


def make_writer(out: TextIO) -> Any:
    """Return a csv writer on `out` using the output dialect."""
    return csv.writer(out, dialect=OutputDialect)
