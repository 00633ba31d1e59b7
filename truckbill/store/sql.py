"""Row store backed by SQLAlchemy tables (SQLite for local use, PostgreSQL in production)."""

from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

import structlog
from sqlalchemy import Column, MetaData, Table, insert, select, update
from sqlalchemy import delete as sql_delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
from sqlmodel import SQLModel

from truckbill.db.session import dispose_engine
from truckbill.store.base import CREATED_AT, Row, new_row_id
from truckbill.store.exceptions import RowConflict, RowNotFound, RowStoreError

logger = structlog.get_logger(__name__)

SYSTEM_COLUMNS = ("id", "created_at", "updated_at")


class SqlRowStore:
    """RowStore over plain tables with ``id``, ``created_at`` and ``updated_at`` columns.

    Increments run as a single ``UPDATE ... SET col = col + :delta RETURNING``
    statement, so concurrent callers never read-modify-write.
    """

    def __init__(self, engine: AsyncEngine, metadata: MetaData | None = None):
        self.engine = engine
        self.metadata = metadata if metadata is not None else SQLModel.metadata

    def _table(self, name: str) -> Table:
        table = self.metadata.tables.get(name)
        if table is None:
            raise RowStoreError(f"Unknown table {name!r}")
        return table

    @staticmethod
    def _column(table: Table, name: str) -> Column[Any]:
        for column in table.columns:
            if column.name == name:
                return column
        raise RowStoreError(f"Unknown column {name!r} in table {table.name!r}")

    def _values(self, table: Table, data: Mapping[str, Any]) -> dict[Column[Any], Any]:
        return {self._column(table, name): value for name, value in data.items()}

    @staticmethod
    def _to_row(table: Table, values: Sequence[Any]) -> Row:
        by_name = {column.name: value for column, value in zip(table.columns, values, strict=True)}
        created_at = _as_utc(by_name.pop("created_at"))
        updated_at = _as_utc(by_name.pop("updated_at"))
        row_id = by_name.pop("id")
        return Row(id=row_id, data=by_name, created_at=created_at, updated_at=updated_at)

    @asynccontextmanager
    async def _begin(self) -> AsyncIterator[AsyncConnection]:
        try:
            async with self.engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            logger.error("Row store database error", error=str(e))
            raise RowStoreError(str(e)) from e

    async def get_row(self, table: str, row_id: str) -> Row:
        tbl = self._table(table)
        stmt = select(*tbl.columns).where(self._column(tbl, "id") == row_id)
        async with self._begin() as conn:
            result = await conn.execute(stmt)
            found = result.first()
        if found is None:
            raise RowNotFound(table, row_id)
        return self._to_row(tbl, found)

    async def create_row(self, table: str, row_id: str | None, data: Mapping[str, Any]) -> Row:
        tbl = self._table(table)
        row_id = row_id or new_row_id()
        now = datetime.now(UTC)
        values = {
            **self._values(tbl, data),
            self._column(tbl, "id"): row_id,
            self._column(tbl, "created_at"): now,
            self._column(tbl, "updated_at"): now,
        }
        async with self._begin() as conn:
            try:
                await conn.execute(insert(tbl).values(values))
            except IntegrityError as e:
                raise RowConflict(table, row_id) from e
        return Row(id=row_id, data=dict(data), created_at=now, updated_at=now)

    async def update_row(self, table: str, row_id: str, data: Mapping[str, Any]) -> Row:
        tbl = self._table(table)
        values = {
            **self._values(tbl, data),
            self._column(tbl, "updated_at"): datetime.now(UTC),
        }
        stmt = update(tbl).where(self._column(tbl, "id") == row_id).values(values).returning(*tbl.columns)
        async with self._begin() as conn:
            result = await conn.execute(stmt)
            updated = result.first()
        if updated is None:
            raise RowNotFound(table, row_id)
        return self._to_row(tbl, updated)

    async def delete_row(self, table: str, row_id: str) -> None:
        tbl = self._table(table)
        stmt = sql_delete(tbl).where(self._column(tbl, "id") == row_id)
        async with self._begin() as conn:
            result = await conn.execute(stmt)
            deleted = result.rowcount
        if not deleted:
            raise RowNotFound(table, row_id)

    async def list_rows(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> Sequence[Row]:
        tbl = self._table(table)
        stmt = select(*tbl.columns)
        for name, value in (filters or {}).items():
            stmt = stmt.where(self._column(tbl, name) == value)

        if order_by is not None:
            order_column = self._column(tbl, "created_at" if order_by == CREATED_AT else order_by)
            id_column = self._column(tbl, "id")
            if descending:
                stmt = stmt.order_by(order_column.desc(), id_column.desc())
            else:
                stmt = stmt.order_by(order_column.asc(), id_column.asc())

        if limit is not None:
            stmt = stmt.limit(limit)

        async with self._begin() as conn:
            result = await conn.execute(stmt)
            found = result.all()
        return [self._to_row(tbl, values) for values in found]

    async def increment_column(self, table: str, row_id: str, column: str, delta: int = 1) -> Row:
        tbl = self._table(table)
        target = self._column(tbl, column)
        stmt = (
            update(tbl)
            .where(self._column(tbl, "id") == row_id)
            .values({target: target + delta, self._column(tbl, "updated_at"): datetime.now(UTC)})
            .returning(*tbl.columns)
        )
        async with self._begin() as conn:
            result = await conn.execute(stmt)
            updated = result.first()
        if updated is None:
            raise RowNotFound(table, row_id)
        return self._to_row(tbl, updated)

    async def close(self) -> None:
        await dispose_engine(self.engine)


def _as_utc(value: datetime | None) -> datetime | None:
    """SQLite drops tzinfo; stored values are always UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
