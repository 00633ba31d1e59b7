"""In-process row store for local development and tests."""

import asyncio
import copy
import itertools
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from truckbill.store.base import CREATED_AT, Row, new_row_id
from truckbill.store.exceptions import RowConflict, RowNotFound, RowStoreError


@dataclass
class _StoredRow:
    id: str
    data: dict[str, Any]
    created_at: datetime
    updated_at: datetime
    seq: int

    def to_row(self) -> Row:
        return Row(
            id=self.id,
            data=copy.deepcopy(self.data),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class InMemoryRowStore:
    """Dict-backed RowStore.

    Returned rows are deep copies, so callers never alias stored state.
    Increments are serialised by an asyncio.Lock.
    """

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, _StoredRow]] = {}
        self._seq = itertools.count()
        self._lock = asyncio.Lock()

    def _table(self, table: str) -> dict[str, _StoredRow]:
        return self._tables.setdefault(table, {})

    def _require(self, table: str, row_id: str) -> _StoredRow:
        stored = self._table(table).get(row_id)
        if stored is None:
            raise RowNotFound(table, row_id)
        return stored

    async def get_row(self, table: str, row_id: str) -> Row:
        return self._require(table, row_id).to_row()

    async def create_row(self, table: str, row_id: str | None, data: Mapping[str, Any]) -> Row:
        rows = self._table(table)
        row_id = row_id or new_row_id()
        if row_id in rows:
            raise RowConflict(table, row_id)
        now = datetime.now(UTC)
        stored = _StoredRow(
            id=row_id,
            data=copy.deepcopy(dict(data)),
            created_at=now,
            updated_at=now,
            seq=next(self._seq),
        )
        rows[row_id] = stored
        return stored.to_row()

    async def update_row(self, table: str, row_id: str, data: Mapping[str, Any]) -> Row:
        stored = self._require(table, row_id)
        stored.data.update(copy.deepcopy(dict(data)))
        stored.updated_at = datetime.now(UTC)
        return stored.to_row()

    async def delete_row(self, table: str, row_id: str) -> None:
        self._require(table, row_id)
        del self._table(table)[row_id]

    async def list_rows(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> Sequence[Row]:
        rows = list(self._table(table).values())
        if filters:
            rows = [r for r in rows if all(r.data.get(k) == v for k, v in filters.items())]

        if order_by == CREATED_AT:
            rows.sort(key=lambda r: (r.created_at, r.seq), reverse=descending)
        elif order_by is not None:
            rows.sort(key=lambda r: (r.data.get(order_by), r.seq), reverse=descending)
        elif descending:
            rows.reverse()

        if limit is not None:
            rows = rows[:limit]
        return [r.to_row() for r in rows]

    async def increment_column(self, table: str, row_id: str, column: str, delta: int = 1) -> Row:
        async with self._lock:
            stored = self._require(table, row_id)
            current = stored.data.get(column) or 0
            if not isinstance(current, int):
                raise RowStoreError(f"Column {column!r} of row {row_id!r} is not an integer")
            stored.data[column] = current + delta
            stored.updated_at = datetime.now(UTC)
            return stored.to_row()

    async def close(self) -> None:
        pass
