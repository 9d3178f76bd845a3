# Shared pytest fixtures
from __future__ import annotations

import tempfile
from contextlib import nullcontext
from pathlib import Path

import pytest

from barcode_mapper.db.catalog import InMemoryCatalog
from barcode_mapper.logging.init import reset_logging


@pytest.fixture(autouse=True)
def clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def clean_pg_env(monkeypatch):
    for name in ("DATABASE_URL", "PGDSN", "PGHOST", "PGPORT", "PGUSER", "PGPASSWORD", "PGDATABASE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def sample_catalog() -> InMemoryCatalog:
    # AB100 -> 1 件, AB101 -> 0 件, AB102 -> 複数
    return InMemoryCatalog.from_barcodes({
        "AB100": [1001],
        "AB102": [1002, 1003],
    })


@pytest.fixture()
def catalog_factory(sample_catalog: InMemoryCatalog):
    return lambda: nullcontext(sample_catalog)


@pytest.fixture()
def sample_csv_text() -> str:
    return "Barcode\nAB100\nAB101\nAB102\n"


@pytest.fixture()
def sample_csv(temp_workdir: Path, sample_csv_text: str) -> Path:
    f = temp_workdir / "data" / "barcodes.csv"
    f.write_text(sample_csv_text, encoding="utf-8")
    return f


@pytest.fixture()
def sample_config_yaml() -> str:
    return """database:
  host: sierra.example.edu
  port: 1032
  user: reader
  password: secret
  database: iii
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "map_barcode.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
