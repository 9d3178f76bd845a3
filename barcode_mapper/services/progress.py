from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display for barcode resolution (TTY only).

The bar is written to stderr because stdout carries the mapped CSV. In non-TTY
environments (pipes, CI) it is disabled to avoid ANSI control sequence spam.
"""

__all__ = [
    "ResolveProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Return True if stderr is a TTY and progress should be displayed."""
    return sys.stderr.isatty()


class ResolveProgress:
    """Progress tracker over the data rows of one run."""

    def __init__(self, total_rows: int, *, description: str = "Resolving barcodes") -> None:
        self.total_rows = total_rows
        self.description = description
        self.done_rows = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                file=sys.stderr,
                leave=False,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self) -> None:
        self.done_rows += 1
        if self.pbar is not None:
            self.pbar.update(1)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ResolveProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
