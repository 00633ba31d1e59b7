"""Invoice history management service."""

from datetime import date

import structlog

from truckbill.models.invoice import InvoiceRecord, StoredInvoice
from truckbill.services.invoices.invoice_repository import DEFAULT_LIST_LIMIT, InvoiceRepository
from truckbill.services.invoices.numbering import LOADING_PLACEHOLDER

logger = structlog.get_logger(__name__)


class InvoiceService:
    """History, payment and duplication operations on saved invoices.

    Note: new invoices and edits go through InvoiceNumberingService.save_invoice,
    never through this service, so invoice numbers stay unique.
    """

    def __init__(self, invoices: InvoiceRepository, *, history_limit: int = DEFAULT_LIST_LIMIT):
        self.invoices = invoices
        self.history_limit = history_limit

    async def list_history(self) -> list[StoredInvoice]:
        """Saved invoices, newest first."""
        return await self.invoices.list_all(limit=self.history_limit)

    async def get_invoice(self, row_id: str) -> StoredInvoice:
        return await self.invoices.get_by_id(row_id)

    async def delete_invoice(self, row_id: str) -> None:
        await self.invoices.delete_by_id(row_id)

    async def clear_due(self, row_id: str) -> StoredInvoice:
        """Record full payment: zero every vehicle balance and the total balance."""
        stored = await self.invoices.get_by_id(row_id)
        cleared = stored.record.with_balance_cleared()
        await self.invoices.replace_by_id(row_id, cleared)
        logger.info("Cleared invoice balance", row_id=row_id, invoice_no=stored.invoice_no)
        return stored.model_copy(update={"record": cleared})

    async def prepare_duplicate(self, row_id: str, *, bill_date: date | None = None) -> InvoiceRecord:
        """Copy a saved invoice as a new, unsaved one.

        The copy carries the loading placeholder as its number so it cannot be
        saved until a fresh number is filled in, and its bill date is reset.
        """
        stored = await self.invoices.get_by_id(row_id)
        bill_date = bill_date or date.today()
        form_data = stored.record.form_data.model_copy(
            update={"invoice_no": LOADING_PLACEHOLDER, "bill_date": bill_date.isoformat()}
        )
        return stored.record.model_copy(update={"form_data": form_data})
