"""Table-oriented storage client over SQLAlchemy Core.

Exposes the generic select/insert/update/delete surface the catalog, the
submission assembler and the aggregator need: named tables, column-equality
filters and ordering, plus a transaction primitive so multi-row writes commit
or roll back together. Instances are constructed explicitly and handed to the
application factory; nothing here is a module-level client.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import func, select, text as sql_text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.schema import Table

from survey_app.db.tables import TABLES
from survey_app.logic.errors import StorageError

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
OrderBy = Sequence[Tuple[str, str]]


def _table(name: str) -> Table:
    try:
        return TABLES[name]
    except KeyError:
        raise StorageError(f"unknown table {name!r}") from None


def _column(table: Table, name: str):  # type: ignore[no-untyped-def]
    try:
        return table.c[name]
    except KeyError:
        raise StorageError(f"unknown column {table.name}.{name}") from None


def _where(table: Table, filters: Optional[Mapping[str, Any]]) -> list:
    return [_column(table, k) == v for k, v in (filters or {}).items()]


class BatchWriter:
    """Write operations bound to one open transaction."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def count(self, table_name: str, *, filters: Optional[Mapping[str, Any]] = None) -> int:
        table = _table(table_name)
        stmt = select(func.count()).select_from(table).where(*_where(table, filters))
        return int(self._conn.execute(stmt).scalar() or 0)

    def insert(self, table_name: str, rows: Sequence[Mapping[str, Any]]) -> List[Row]:
        table = _table(table_name)
        if not rows:
            return []
        for row in rows:
            for key in row:
                _column(table, key)
        stmt = table.insert().returning(*table.c, sort_by_parameter_order=True)
        result = self._conn.execute(stmt, [dict(r) for r in rows])
        return [dict(r._mapping) for r in result]

    def update(self, table_name: str, values: Mapping[str, Any], *, filters: Mapping[str, Any]) -> int:
        table = _table(table_name)
        if not filters:
            raise StorageError("update requires at least one filter")
        for key in values:
            _column(table, key)
        stmt = table.update().where(*_where(table, filters)).values(**dict(values))
        return int(self._conn.execute(stmt).rowcount or 0)

    def delete(self, table_name: str, *, filters: Mapping[str, Any]) -> int:
        table = _table(table_name)
        if not filters:
            raise StorageError("delete requires at least one filter")
        stmt = table.delete().where(*_where(table, filters))
        return int(self._conn.execute(stmt).rowcount or 0)


class StorageClient:
    """Generic storage collaborator bound to one Engine."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    @contextmanager
    def transaction(self) -> Iterator[BatchWriter]:
        """Yield a writer whose operations commit together.

        Any exception inside the block rolls the whole batch back; driver
        errors surface as StorageError.
        """
        try:
            with self.engine.begin() as conn:
                yield BatchWriter(conn)
        except SQLAlchemyError as exc:
            logger.error("storage transaction failed; rolled back", exc_info=True)
            raise StorageError(str(exc)) from exc

    def select(
        self,
        table_name: str,
        *,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[OrderBy] = None,
    ) -> List[Row]:
        table = _table(table_name)
        stmt = select(table).where(*_where(table, filters))
        for col_name, direction in order_by or ():
            col = _column(table, col_name)
            stmt = stmt.order_by(col.desc() if str(direction).lower() == "desc" else col.asc())
        try:
            with self.engine.connect() as conn:
                return [dict(r._mapping) for r in conn.execute(stmt)]
        except SQLAlchemyError as exc:
            logger.error("storage select failed table=%s filters=%s", table_name, filters, exc_info=True)
            raise StorageError(str(exc)) from exc

    def count(self, table_name: str, *, filters: Optional[Mapping[str, Any]] = None) -> int:
        table = _table(table_name)
        stmt = select(func.count()).select_from(table).where(*_where(table, filters))
        try:
            with self.engine.connect() as conn:
                return int(conn.execute(stmt).scalar() or 0)
        except SQLAlchemyError as exc:
            logger.error("storage count failed table=%s", table_name, exc_info=True)
            raise StorageError(str(exc)) from exc

    def insert(self, table_name: str, rows: Sequence[Mapping[str, Any]]) -> List[Row]:
        """Insert all rows in a single request."""
        with self.transaction() as writer:
            return writer.insert(table_name, rows)

    def update(self, table_name: str, values: Mapping[str, Any], *, filters: Mapping[str, Any]) -> int:
        with self.transaction() as writer:
            return writer.update(table_name, values, filters=filters)

    def delete(self, table_name: str, *, filters: Mapping[str, Any]) -> int:
        with self.transaction() as writer:
            return writer.delete(table_name, filters=filters)

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(sql_text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.error("storage ping failed", exc_info=True)
            return False


__all__ = ["StorageClient", "BatchWriter", "Row"]
