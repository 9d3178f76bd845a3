from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Config dataclasses for the barcode mapping tool.

Two kinds of configuration exist:
- connection settings for the catalog database (file / environment driven)
- run options for one mapping run (CLI driven)

Both are frozen and built once per process, then passed into every stage.
"""

DEFAULT_SKIP_COUNT = 1
DEFAULT_COLUMN = 1  # 1-based, as given on the command line


@dataclass(frozen=True)
class DatabaseConfig:
    """Catalog database connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class AppConfig:
    """Root configuration loaded from the YAML config file."""
    database: DatabaseConfig
    source_path: str | None = None  # None when no config file was found


class OutputMode(str, Enum):
    SIMPLE = "simple"
    ADVANCED = "advanced"


@dataclass(frozen=True)
class MappingOptions:
    """Options for a single mapping run.

    Attributes:
        skip_count: number of leading rows treated as header (not resolved)
        column_index: 0-based index of the barcode field in a data row
        mode: output rendering strategy
    """
    skip_count: int = DEFAULT_SKIP_COUNT
    column_index: int = DEFAULT_COLUMN - 1
    mode: OutputMode = OutputMode.ADVANCED

    def __post_init__(self) -> None:
        if self.skip_count < 0:
            raise ValueError(f"skip_count must be >= 0, got {self.skip_count}")
        if self.column_index < 0:
            # frozen dataclass: bypass __setattr__ for the clamp
            object.__setattr__(self, "column_index", 0)

    @classmethod
    def from_cli(cls, skip: int, column: int, simple_output: bool) -> MappingOptions:
        """Build options from 1-based CLI values (negative columns clamp to the first column)."""
        return cls(
            skip_count=skip,
            column_index=max(column - 1, 0),
            mode=OutputMode.SIMPLE if simple_output else OutputMode.ADVANCED,
        )

    @property
    def column_number(self) -> int:
        """1-based column number, for messages."""
        return self.column_index + 1
