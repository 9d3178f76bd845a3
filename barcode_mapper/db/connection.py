from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import psycopg2

from ..errors import CatalogLookupError
from ..models.config_models import DatabaseConfig
from .catalog import PostgresCatalogLookup

"""Catalog database session.

One read-only psycopg2 session is opened per run and shared by every lookup.

接続情報の解決優先順位:
    1. DATABASE_URL / PGDSN 環境変数 (.env 読み込み後)
    2. 設定ファイル database.dsn
    3. 個別 PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE 環境変数
       (不足分は設定ファイルの database セクション、さらに libpq 既定値)
"""

logger = logging.getLogger(__name__)


def resolve_dsn(db_cfg: DatabaseConfig) -> str:
    """Build the libpq connection string from environment and config."""
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn

    parts: list[str] = []
    settings = (
        ("host", "PGHOST", db_cfg.host),
        ("port", "PGPORT", str(db_cfg.port) if db_cfg.port else None),
        ("user", "PGUSER", db_cfg.user),
        ("dbname", "PGDATABASE", db_cfg.database),
        ("password", "PGPASSWORD", db_cfg.password),
    )
    for key, env_name, fallback in settings:
        value = os.getenv(env_name) or fallback
        if value:
            parts.append(f"{key}={value}")
    return " ".join(parts)


def _describe(dsn: str) -> str:
    # パスワードはログに出さない
    if "://" in dsn:
        scheme, _, rest = dsn.partition("://")
        return f"{scheme}://{rest.rpartition('@')[2]}"
    return " ".join(p for p in dsn.split() if not p.startswith("password="))


@contextmanager
def catalog_session(db_cfg: DatabaseConfig) -> Iterator[PostgresCatalogLookup]:
    """Open a read-only catalog session and yield a lookup bound to its cursor.

    Commits when the body completes, rolls back when it raises, always closes.
    Connection failures are reported as CatalogLookupError.
    """
    dsn = resolve_dsn(db_cfg)
    logger.debug(f"connecting to catalog: {_describe(dsn) or '(libpq defaults)'}")
    try:
        conn = psycopg2.connect(dsn)
    except psycopg2.Error as e:
        raise CatalogLookupError(f"catalog connection failed: {str(e).strip()}") from e
    try:
        conn.set_session(readonly=True, autocommit=False)
    except psycopg2.Error as e:
        _quietly(conn.close)
        raise CatalogLookupError(f"catalog session setup failed: {e}") from e

    cur: Any = None
    try:
        cur = conn.cursor()
        yield PostgresCatalogLookup(cur)
    except BaseException:
        _quietly(conn.rollback)
        raise
    else:
        try:
            conn.commit()
        except psycopg2.Error as e:
            raise CatalogLookupError(f"catalog session commit failed: {e}") from e
    finally:
        if cur is not None:
            _quietly(cur.close)
        _quietly(conn.close)


def _quietly(action: Any) -> None:
    try:
        action()
    except psycopg2.Error as e:  # pragma: no cover
        logger.debug(f"ignored error while releasing catalog session: {e}")
