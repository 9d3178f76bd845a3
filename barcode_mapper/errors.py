from __future__ import annotations

"""Error taxonomy for the barcode mapping tool.

Every failure is fatal for the run: there is no row-level isolation because the
output formats depend on a complete, positionally aligned mapping sequence.
"""

__all__ = [
    "BarcodeMapperError",
    "ParseError",
    "FileAccessError",
    "ColumnOutOfRangeError",
    "CatalogLookupError",
    "ConfigError",
]


class BarcodeMapperError(Exception):
    """Base class for all errors that abort a mapping run."""


class ParseError(BarcodeMapperError):
    """Raised when the input text is not valid CSV (or not valid UTF-8)."""

    def __init__(self, message: str, line: int) -> None:
        super().__init__(f"line {line}: {message}")
        self.line = line


class FileAccessError(BarcodeMapperError):
    """Raised when the input source or the output stream cannot be accessed."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class ColumnOutOfRangeError(BarcodeMapperError):
    """Raised when a data row has no field at the configured barcode column."""

    def __init__(self, row_number: int, column: int, field_count: int) -> None:
        super().__init__(
            f"row {row_number} has {field_count} field(s), barcode column {column} is out of range"
        )
        self.row_number = row_number  # 1-based, counted from the first input row
        self.column = column  # 1-based
        self.field_count = field_count


class CatalogLookupError(BarcodeMapperError):
    """Raised on catalog connectivity, query or response failures."""


class ConfigError(BarcodeMapperError):
    pass
