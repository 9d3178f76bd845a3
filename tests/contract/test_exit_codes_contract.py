from __future__ import annotations

from contextlib import nullcontext
from pathlib import Path
from unittest.mock import patch

from barcode_mapper.cli import main as cli_main
from barcode_mapper.db.catalog import InMemoryCatalog

"""Exit code contract: 0 success, 1 fatal error, 2 help / usage."""


def _session(catalog):
    return patch("barcode_mapper.cli.__main__.catalog_session", side_effect=lambda cfg: nullcontext(catalog))


def test_exit_code_success(sample_csv: Path, sample_catalog: InMemoryCatalog, capsys):
    with _session(sample_catalog):
        code = cli_main([str(sample_csv)])
    assert code == 0


def test_exit_code_help(capsys):
    assert cli_main(["-h"]) != 0


def test_exit_code_missing_input(temp_workdir: Path, sample_catalog, capsys):
    with _session(sample_catalog):
        code = cli_main([str(temp_workdir / "nope.csv")])
    captured = capsys.readouterr()
    assert code == 1
    assert "ERROR load:" in captured.err
    assert captured.out == ""


def test_exit_code_parse_error(temp_workdir: Path, sample_catalog, capsys):
    f = temp_workdir / "bad.csv"
    f.write_text('Barcode\n"AB100\n', encoding="utf-8")
    with _session(sample_catalog):
        code = cli_main([str(f)])
    assert code == 1
    assert "ERROR load: line" in capsys.readouterr().err


def test_exit_code_column_out_of_range(sample_csv: Path, sample_catalog, capsys):
    with _session(sample_catalog):
        code = cli_main(["-c", "2", str(sample_csv)])
    captured = capsys.readouterr()
    assert code == 1
    assert "ERROR resolve: row 2 has 1 field(s), barcode column 2 is out of range" in captured.err
    assert captured.out == ""
