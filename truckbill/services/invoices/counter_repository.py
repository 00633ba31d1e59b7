"""Invoice sequence counter stored as a single row."""

import structlog

from truckbill.services.exceptions import BackendUnavailable
from truckbill.store.base import RowStore
from truckbill.store.exceptions import RowConflict, RowStoreError

logger = structlog.get_logger(__name__)

COUNT_COLUMN = "count"


class CounterRepository:
    """High-water mark of issued generated invoice numbers.

    The value lives in column ``count`` of one well-known row. Increments are
    delegated to the store's atomic increment, never read-modify-write.
    """

    def __init__(self, store: RowStore, *, table: str = "counters", row_id: str = "invoice_counter"):
        self.store = store
        self.table = table
        self.row_id = row_id

    async def get_counter(self) -> int:
        """Return the current value, creating the row with 0 if it is missing."""
        try:
            row = await self.store.get_row(self.table, self.row_id)
            return row.get(COUNT_COLUMN) or 0
        except RowStoreError as e:
            logger.warning("Counter row not readable, initializing", row_id=self.row_id, error=str(e))

        try:
            await self.store.create_row(self.table, self.row_id, {COUNT_COLUMN: 0})
        except RowConflict:
            # Created concurrently by another client
            return await self._read_existing()
        except RowStoreError as e:
            logger.error("Failed to initialize invoice counter row", row_id=self.row_id, error=str(e))
            raise BackendUnavailable("Failed to initialize invoice counter") from e

        logger.info("Created invoice counter row", row_id=self.row_id)
        return 0

    async def _read_existing(self) -> int:
        try:
            row = await self.store.get_row(self.table, self.row_id)
        except RowStoreError as e:
            raise BackendUnavailable("Failed to read invoice counter") from e
        return row.get(COUNT_COLUMN) or 0

    async def increment_counter(self) -> int:
        """Atomically add one and return the new value."""
        try:
            row = await self.store.increment_column(self.table, self.row_id, COUNT_COLUMN, 1)
        except RowStoreError as e:
            logger.error("Failed to increment invoice counter", row_id=self.row_id, error=str(e))
            raise BackendUnavailable("Failed to increment invoice counter") from e
        return row.get(COUNT_COLUMN)

    async def set_counter(self, value: int) -> int:
        """Overwrite the counter (used to fast-forward past a manual number)."""
        try:
            row = await self.store.update_row(self.table, self.row_id, {COUNT_COLUMN: value})
        except RowStoreError as e:
            logger.error("Failed to set invoice counter", row_id=self.row_id, value=value, error=str(e))
            raise BackendUnavailable("Failed to set invoice counter") from e
        return row.get(COUNT_COLUMN)
