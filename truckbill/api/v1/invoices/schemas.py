"""API schemas for invoice endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from truckbill.models.enums import SaveStatus
from truckbill.models.invoice import InvoiceRecord, StoredInvoice
from truckbill.services.invoices.history import HistoryRollup, is_due
from truckbill.services.invoices.numbering_service import SaveResult

# =============================================================================
# Response Schemas
# =============================================================================


class SaveInvoiceResponse(BaseModel):
    """Outcome of a save request."""

    status: SaveStatus
    invoice_no: str | None = None

    @classmethod
    def from_result(cls, result: SaveResult) -> "SaveInvoiceResponse":
        return cls(status=result.status, invoice_no=result.invoice_no)


class InvoiceResponse(BaseModel):
    """A saved invoice."""

    id: str
    invoice_no: str
    created_at: datetime | None
    is_due: bool
    record: InvoiceRecord

    @classmethod
    def from_model(cls, invoice: StoredInvoice) -> "InvoiceResponse":
        return cls(
            id=invoice.id,
            invoice_no=invoice.invoice_no,
            created_at=invoice.created_at,
            is_due=is_due(invoice),
            record=invoice.record,
        )


class HistoryTotals(BaseModel):
    total_freight: Decimal
    total_advance: Decimal
    total_balance: Decimal
    due_count: int
    paid_count: int


class HistoryResponse(BaseModel):
    """Invoice history, newest first, with rollups."""

    invoices: list[InvoiceResponse]
    totals: HistoryTotals

    @classmethod
    def from_invoices(cls, invoices: list[StoredInvoice], rollup: HistoryRollup) -> "HistoryResponse":
        return cls(
            invoices=[InvoiceResponse.from_model(invoice) for invoice in invoices],
            totals=HistoryTotals(
                total_freight=rollup.total_freight,
                total_advance=rollup.total_advance,
                total_balance=rollup.total_balance,
                due_count=len(rollup.due),
                paid_count=len(rollup.paid),
            ),
        )


class NextInvoiceNoResponse(BaseModel):
    invoice_no: str
