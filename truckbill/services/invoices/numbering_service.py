"""Invoice number allocation and save orchestration.

Generated numbers (``P-000001``) come from a shared counter row holding the
highest sequence value considered issued. The counter is a high-water mark,
not a row count: it may run ahead of the rows (after a fast-forward or a
collision skip) but never behind any generated number that exists. Before a
number is committed its row is looked up, and that check, not the counter,
is what prevents duplicates.

Every store call is awaited in sequence and nothing is retried here. A failed
save raises OrchestratorFailure carrying the input record; re-running
``save_invoice`` with it either finds the number still free or finds it saved
and falls through to the update path.
"""

from dataclasses import dataclass

import structlog

from truckbill.models.enums import SaveStatus, UpsertStatus
from truckbill.models.invoice import InvoiceRecord
from truckbill.services.exceptions import BackendUnavailable
from truckbill.services.invoices.counter_repository import CounterRepository
from truckbill.services.invoices.exceptions import (
    OrchestratorFailure,
    SequenceExhausted,
    ValidationAbort,
)
from truckbill.services.invoices.invoice_repository import InvoiceRepository
from truckbill.services.invoices.numbering import (
    ensure_persistable,
    format_invoice_no,
    is_generated_invoice_no,
    parse_sequence,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SaveResult:
    status: SaveStatus
    invoice_no: str | None = None


def _save_status(status: UpsertStatus) -> SaveStatus:
    return SaveStatus.UPDATED if status == UpsertStatus.UPDATED else SaveStatus.SAVED


class InvoiceNumberingService:
    """Assigns invoice numbers and persists exactly one row per invoice."""

    def __init__(self, invoices: InvoiceRepository, counter: CounterRepository):
        self.invoices = invoices
        self.counter = counter

    async def save_invoice(self, record: InvoiceRecord) -> SaveResult:
        """Persist ``record``, allocating a sequential number when it carries a generated one.

        Returns ``aborted`` without touching the store for empty or placeholder
        numbers. Raises OrchestratorFailure on any store error.
        """
        try:
            invoice_no = ensure_persistable(record.invoice_no)
        except ValidationAbort:
            logger.info("Save aborted, placeholder invoice number", invoice_no=record.invoice_no)
            return SaveResult(status=SaveStatus.ABORTED)

        try:
            if not is_generated_invoice_no(invoice_no):
                return await self._save_free_form(invoice_no, record)
            return await self._save_generated(invoice_no, record)
        except (BackendUnavailable, SequenceExhausted) as e:
            logger.error("Invoice save failed", invoice_no=invoice_no, error=str(e))
            raise OrchestratorFailure(record) from e

    async def _save_free_form(self, invoice_no: str, record: InvoiceRecord) -> SaveResult:
        # Free-form numbers live outside the sequence; the counter is never touched
        logger.info("Free-form invoice number, saving without counter", invoice_no=invoice_no)
        result = await self.invoices.upsert_by_invoice_no(invoice_no, record)
        return SaveResult(status=_save_status(result.status), invoice_no=invoice_no)

    async def _save_generated(self, invoice_no: str, record: InvoiceRecord) -> SaveResult:
        counter = await self.counter.get_counter()
        incoming = parse_sequence(invoice_no)

        if await self.invoices.exists(invoice_no):
            await self.invoices.upsert_by_invoice_no(invoice_no, record)
            logger.info("Existing invoice number, updated in place", invoice_no=invoice_no)
            if incoming > counter:
                await self.counter.set_counter(incoming)
                logger.info("Counter advanced past edited invoice", counter=incoming)
            return SaveResult(status=SaveStatus.UPDATED, invoice_no=invoice_no)

        if incoming > counter + 1:
            # Manual number ahead of the sequence: treat every skipped number as issued
            await self.counter.set_counter(incoming - 1)
            counter = incoming - 1
            logger.info("Counter fast-forwarded for manual invoice number", invoice_no=invoice_no, counter=counter)

        candidate = format_invoice_no(counter + 1)
        while await self.invoices.exists(candidate):
            logger.info("Invoice number already taken, skipping", invoice_no=candidate)
            counter = await self.counter.increment_counter()
            candidate = format_invoice_no(counter + 1)

        await self.invoices.upsert_by_invoice_no(candidate, record.with_invoice_no(candidate))
        # Reserve the number just used so the next save starts above it
        await self.counter.increment_counter()
        logger.info("Saved new invoice", invoice_no=candidate, requested=invoice_no)
        return SaveResult(status=SaveStatus.SAVED, invoice_no=candidate)

    async def next_invoice_no(self) -> str:
        """The number the next new invoice will most likely receive (for pre-filling forms)."""
        counter = await self.counter.get_counter()
        return format_invoice_no(counter + 1)
