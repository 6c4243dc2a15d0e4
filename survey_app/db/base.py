"""SQLAlchemy engine construction.

PostgreSQL in production, SQLite for local runs and tests. Engines are cached
per URL so repeated app factories share one pool. Table definitions live in
`survey_app.db.tables`.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

DEFAULT_URL = "sqlite+pysqlite:///:memory:"

_ENGINES: Dict[str, Engine] = {}


def resolve_url(url: str | None = None) -> str:
    return url or os.getenv("TEST_DATABASE_URL") or os.getenv("DATABASE_URL") or DEFAULT_URL


def _engine_options(url: str) -> Dict[str, Any]:
    options: Dict[str, Any] = {"pool_pre_ping": True}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url:
            # One shared connection, otherwise each checkout sees an empty database
            options["poolclass"] = StaticPool
    return options


def _sqlite_foreign_keys(dbapi_conn, _record) -> None:  # type: ignore[no-untyped-def]
    cursor = dbapi_conn.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def get_engine(url: str | None = None) -> Engine:
    """Return the cached Engine for `url`, creating it on first use.

    SQLite connections enforce foreign keys so the responses -> questions
    reference behaves as it does on PostgreSQL.
    """
    resolved = resolve_url(url)
    engine = _ENGINES.get(resolved)
    if engine is None:
        engine = create_engine(resolved, **_engine_options(resolved))
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _sqlite_foreign_keys)
        _ENGINES[resolved] = engine
        logger.info("engine_created dialect=%s", engine.dialect.name)
    return engine


def dispose_engine(url: str | None = None) -> None:
    """Dispose one cached engine, or all of them when `url` is None."""
    targets = [resolve_url(url)] if url else list(_ENGINES)
    for key in targets:
        engine = _ENGINES.pop(key, None)
        if engine is not None:
            engine.dispose()
