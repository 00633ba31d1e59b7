"""Backend-agnostic row store interface."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from ulid import ULID

# Pseudo-column accepted by list_rows(order_by=...) for the store-assigned creation time
CREATED_AT = "created_at"


def new_row_id() -> str:
    """Generate a fresh store-side row id."""
    return str(ULID())


@dataclass(frozen=True)
class Row:
    """A row as returned by the store: id, column data and store timestamps."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def get(self, column: str, default: Any = None) -> Any:
        return self.data.get(column, default)


@runtime_checkable
class RowStore(Protocol):
    """Row CRUD, equality-filtered listing and an atomic column increment.

    Implementations raise ``RowNotFound`` / ``RowConflict`` for id-level
    problems and ``RowStoreError`` for anything else.
    """

    async def get_row(self, table: str, row_id: str) -> Row: ...

    async def create_row(self, table: str, row_id: str | None, data: Mapping[str, Any]) -> Row:
        """Create a row; ``row_id=None`` lets the store assign one."""
        ...

    async def update_row(self, table: str, row_id: str, data: Mapping[str, Any]) -> Row:
        """Overwrite the given columns of an existing row."""
        ...

    async def delete_row(self, table: str, row_id: str) -> None: ...

    async def list_rows(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> Sequence[Row]:
        """List rows whose columns equal every value in ``filters``."""
        ...

    async def increment_column(self, table: str, row_id: str, column: str, delta: int = 1) -> Row:
        """Atomically add ``delta`` to an integer column and return the updated row."""
        ...

    async def close(self) -> None: ...
