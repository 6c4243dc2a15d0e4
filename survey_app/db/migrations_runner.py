"""Journaled runner for the plain-SQL migration files.

`migrations/` holds the PostgreSQL scripts and `sqlite_migrations/` the SQLite
equivalents. Files run in name order. Each applied file is recorded with its
SHA-256 in the target database's `schema_migrations` table, in the same
transaction as its DDL, so every database carries its own journal. A recorded
file whose contents have since changed is logged and left alone.
"""

from __future__ import annotations

import hashlib
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List

from sqlalchemy import Column, DateTime, MetaData, String, Table, select
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]

_journal_metadata = MetaData()

schema_migrations = Table(
    "schema_migrations",
    _journal_metadata,
    Column("filename", String(255), primary_key=True),
    Column("sha256", String(64), nullable=False),
    Column("applied_at", DateTime(timezone=True), nullable=False),
)


def default_migrations_dir(engine: Engine) -> Path:
    """Pick the dialect-specific migrations directory for an engine."""
    folder = "sqlite_migrations" if engine.dialect.name == "sqlite" else "migrations"
    return PROJECT_ROOT / folder


def _checksum(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def _sqlite_statements(script: str) -> List[str]:
    # pysqlite runs one statement per execute()
    statements = []
    for chunk in script.split(";"):
        body = "\n".join(ln for ln in chunk.splitlines() if not ln.lstrip().startswith("--")).strip()
        if body and body.upper() not in {"BEGIN", "COMMIT", "END"}:
            statements.append(body)
    return statements


def _run_script(conn: Connection, script: str) -> None:
    if conn.dialect.name == "sqlite":
        for statement in _sqlite_statements(script):
            conn.exec_driver_sql(statement)
    else:
        conn.exec_driver_sql(script)


def applied_migrations(conn: Connection) -> Dict[str, str]:
    """Return `{filename: sha256}` recorded in this database's journal."""
    schema_migrations.create(conn, checkfirst=True)
    rows = conn.execute(select(schema_migrations.c.filename, schema_migrations.c.sha256))
    return {r.filename: r.sha256 for r in rows}


def apply_migrations(engine: Engine, migrations_dir: str | os.PathLike[str] | None = None) -> list[str]:
    """Apply pending migrations in one transaction; return the files applied."""
    folder = Path(migrations_dir) if migrations_dir is not None else default_migrations_dir(engine)
    if not folder.is_dir():
        logger.warning("migrations_dir_missing path=%s", folder)
        return []

    newly_applied: list[str] = []
    with engine.begin() as conn:
        journal = applied_migrations(conn)
        for sql_file in sorted(folder.glob("*.sql")):
            if "rollback" in sql_file.name.lower():
                continue
            script = sql_file.read_text(encoding="utf-8")
            checksum = _checksum(script)
            if sql_file.name in journal:
                if journal[sql_file.name] != checksum:
                    logger.warning("migration_changed_after_apply file=%s", sql_file.name)
                continue
            if not script.strip():
                continue
            _run_script(conn, script)
            conn.execute(
                schema_migrations.insert().values(
                    filename=sql_file.name,
                    sha256=checksum,
                    applied_at=datetime.now(timezone.utc),
                )
            )
            newly_applied.append(sql_file.name)
            logger.info("migration_applied file=%s dialect=%s", sql_file.name, conn.dialect.name)
    return newly_applied


__all__ = ["apply_migrations", "applied_migrations", "default_migrations_dir", "schema_migrations"]
