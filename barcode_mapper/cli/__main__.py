from __future__ import annotations

import argparse
import io
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from functools import partial
from pathlib import Path
from typing import TextIO

from dotenv import load_dotenv

from ..config.loader import load_config
from ..csvio.reader import STDIN_SENTINEL
from ..db.connection import catalog_session
from ..errors import ConfigError
from ..logging.init import log_summary, set_debug, setup_logging
from ..models.config_models import DEFAULT_COLUMN, DEFAULT_SKIP_COUNT, MappingOptions
from ..services.pipeline import run_pipeline
from ..services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Parse options (help -> usage on stdout, exit 2)
- Load .env, then the optional YAML config
- Run the pipeline against one read-only catalog session
- Mapped CSV goes to stdout; logs, errors and SUMMARY go to stderr
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_USAGE = 2

PROG = "map-barcode"

DESCRIPTION = """\
Map a file of item barcodes into a file of Sierra item record numbers.

<file>, if given, should be the path to a utf-8 csv file with item barcodes in
the first column. If <file> is not given, standard input is used instead.
If the barcodes are not in the first column of the input file, use the
-c/--column option to specify which column has the barcodes."""

OUTPUT_MODES = """\
output modes:
  When -s/--simple-output is given, simple output mode is used; otherwise
  advanced output mode is used.

  simple    Only item record numbers (i<number>) are output, one per line.
            The file can be imported directly into a Sierra review file.
            Barcodes that match no item record or several item records are
            not output, and neither are the skipped header lines.

  advanced  Two columns are added to the start of every row of the input.
            The first column is the mapping result, the second the item
            record number(s):
              x  the barcode matched no item record (second column blank)
              -  the barcode matched a single item record
              *  the barcode matched several item records, separated by ";"
            Skipped header lines are output with two empty columns prepended.

database connection:
  Taken from DATABASE_URL / PGDSN or PGHOST, PGPORT, PGUSER, PGPASSWORD,
  PGDATABASE (a .env file in the working directory is loaded first), with
  config/map_barcode.yml (or --config) as fallback."""


def _non_negative_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0: {n}")
    return n


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog=PROG,
        description=DESCRIPTION,
        epilog=OUTPUT_MODES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    p.add_argument("-h", "--help", action="store_true", help="Print the synopsis and usage, then exit without doing anything")
    p.add_argument(
        "-s", "--simple-output", action="store_true",
        help="Output a file suitable for importing directly into Sierra create lists",
    )
    p.add_argument(
        "--skip", type=_non_negative_int, default=DEFAULT_SKIP_COUNT, metavar="N",
        help="Number of lines in the input file before the actual data starts (default: %(default)s)",
    )
    p.add_argument(
        "-c", "--column", type=int, default=DEFAULT_COLUMN, metavar="N",
        help="Column number holding the barcodes; the first column is 1 (default: %(default)s)",
    )
    p.add_argument("--config", type=Path, default=None, metavar="PATH", help="YAML config file for the catalog connection")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument(
        "input_file", nargs="?", default=STDIN_SENTINEL, metavar="<file>",
        help='UTF-8 csv file with the barcodes; "-" means standard input (default)',
    )
    return p


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv (values override the process environment)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


@contextmanager
def _stdout_writer() -> Iterator[TextIO]:
    """UTF-8 text stream on stdout with csv friendly newline handling."""
    sys.stdout.flush()
    buffer = getattr(sys.stdout, "buffer", None)
    if buffer is None:
        yield sys.stdout
        return
    out = io.TextIOWrapper(buffer, encoding="utf-8", newline="", write_through=True)
    try:
        yield out
    finally:
        out.flush()
        out.detach()


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみシステム引数を読む ([] はテスト用に空引数として扱う)
    if argv is None:
        argv = sys.argv[1:]
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return EXIT_USAGE if e.code else EXIT_SUCCESS

    if args.help:
        parser.print_help(sys.stdout)
        return EXIT_USAGE

    set_debug(args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    if cfg.source_path:
        logger.debug(f"config loaded from {cfg.source_path}")

    options = MappingOptions.from_cli(args.skip, args.column, args.simple_output)
    logger.debug(
        f"options skip={options.skip_count} column={options.column_number} mode={options.mode.value}"
    )

    with _stdout_writer() as out:
        outcome = run_pipeline(args.input_file, options, partial(catalog_session, cfg.database), out)

    if not outcome.ok:
        logger.error(f"{outcome.failed_stage}: {outcome.error}")
        return EXIT_FATAL

    log_summary(render_summary_line(outcome, options.skip_count, options.mode)[len("SUMMARY "):])
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
