"""Invoice rows keyed by their business invoice number."""

from dataclasses import dataclass

import structlog
from pydantic import ValidationError as PydanticValidationError

from truckbill.models.enums import UpsertStatus
from truckbill.models.invoice import InvoiceRecord, StoredInvoice
from truckbill.services.exceptions import BackendUnavailable
from truckbill.services.invoices.exceptions import InvoiceNotFound, InvoiceUnreadable
from truckbill.store.base import CREATED_AT, Row, RowStore
from truckbill.store.exceptions import RowNotFound, RowStoreError

logger = structlog.get_logger(__name__)

INVOICE_NO_COLUMN = "invoiceNo"
PAYLOAD_COLUMN = "formData"
DEFAULT_LIST_LIMIT = 500


@dataclass(frozen=True)
class UpsertResult:
    status: UpsertStatus
    row_id: str


class InvoiceRepository:
    """Invoice persistence over the row store.

    Each row holds the invoice number in a queryable column and the whole
    record as a JSON blob. The store does not enforce uniqueness of the
    invoice number; callers go through ``upsert_by_invoice_no`` to keep one
    row per number.
    """

    def __init__(self, store: RowStore, *, table: str = "entries"):
        self.store = store
        self.table = table

    def _to_stored(self, row: Row) -> StoredInvoice:
        record = InvoiceRecord.from_blob(row.get(PAYLOAD_COLUMN) or "")
        return StoredInvoice(id=row.id, created_at=row.created_at, record=record)

    async def _find_row(self, invoice_no: str) -> Row | None:
        try:
            rows = await self.store.list_rows(self.table, filters={INVOICE_NO_COLUMN: invoice_no}, limit=1)
        except RowStoreError as e:
            raise BackendUnavailable(f"Failed to look up invoice {invoice_no}") from e
        return rows[0] if rows else None

    async def exists(self, invoice_no: str) -> bool:
        return await self._find_row(invoice_no) is not None

    async def find_by_invoice_no(self, invoice_no: str) -> StoredInvoice | None:
        """Exact-match lookup on the invoice number."""
        row = await self._find_row(invoice_no)
        return self._to_stored(row) if row is not None else None

    async def upsert_by_invoice_no(self, invoice_no: str, record: InvoiceRecord) -> UpsertResult:
        """Overwrite the row holding ``invoice_no``, or create one if there is none."""
        blob = record.to_blob()
        existing = await self._find_row(invoice_no)

        try:
            if existing is not None:
                await self.store.update_row(self.table, existing.id, {PAYLOAD_COLUMN: blob})
                logger.info("Updated invoice", invoice_no=invoice_no, row_id=existing.id)
                return UpsertResult(status=UpsertStatus.UPDATED, row_id=existing.id)

            row = await self.store.create_row(
                self.table,
                None,
                {INVOICE_NO_COLUMN: invoice_no, PAYLOAD_COLUMN: blob},
            )
        except RowStoreError as e:
            logger.error("Failed to persist invoice", invoice_no=invoice_no, error=str(e))
            raise BackendUnavailable(f"Failed to persist invoice {invoice_no}") from e

        logger.info("Created invoice", invoice_no=invoice_no, row_id=row.id)
        return UpsertResult(status=UpsertStatus.CREATED, row_id=row.id)

    async def list_all(self, limit: int = DEFAULT_LIST_LIMIT) -> list[StoredInvoice]:
        """Newest invoices first. Rows whose payload cannot be parsed are skipped."""
        try:
            rows = await self.store.list_rows(self.table, order_by=CREATED_AT, descending=True, limit=limit)
        except RowStoreError as e:
            raise BackendUnavailable("Failed to list invoices") from e

        invoices = []
        for row in rows:
            try:
                invoices.append(self._to_stored(row))
            except PydanticValidationError as e:
                logger.error("Skipping unreadable invoice row", row_id=row.id, error=str(e))
        return invoices

    async def get_by_id(self, row_id: str) -> StoredInvoice:
        try:
            row = await self.store.get_row(self.table, row_id)
        except RowNotFound as e:
            raise InvoiceNotFound(row_id) from e
        except RowStoreError as e:
            raise BackendUnavailable(f"Failed to read invoice {row_id}") from e
        try:
            return self._to_stored(row)
        except PydanticValidationError as e:
            logger.error("Unreadable invoice row", row_id=row_id, error=str(e))
            raise InvoiceUnreadable(row_id) from e

    async def replace_by_id(self, row_id: str, record: InvoiceRecord) -> None:
        """Overwrite the payload of a row addressed by its store id."""
        try:
            await self.store.update_row(self.table, row_id, {PAYLOAD_COLUMN: record.to_blob()})
        except RowNotFound as e:
            raise InvoiceNotFound(row_id) from e
        except RowStoreError as e:
            raise BackendUnavailable(f"Failed to update invoice {row_id}") from e

    async def delete_by_id(self, row_id: str) -> None:
        try:
            await self.store.delete_row(self.table, row_id)
        except RowNotFound as e:
            raise InvoiceNotFound(row_id) from e
        except RowStoreError as e:
            logger.error("Failed to delete invoice", row_id=row_id, error=str(e))
            raise BackendUnavailable(f"Failed to delete invoice {row_id}") from e
        logger.info("Deleted invoice", row_id=row_id)
