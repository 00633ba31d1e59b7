"""Invoice schemas and row store table definitions."""

from sqlmodel import SQLModel

from truckbill.models.enums import SaveStatus, UpsertStatus
from truckbill.models.invoice import (
    InvoiceFormData,
    InvoiceRecord,
    InvoiceSummary,
    StoredInvoice,
    VehicleEntry,
)
from truckbill.models.rows import CounterRow, InvoiceEntryRow

__all__ = [
    "SQLModel",
    "CounterRow",
    "InvoiceEntryRow",
    "InvoiceFormData",
    "InvoiceRecord",
    "InvoiceSummary",
    "SaveStatus",
    "StoredInvoice",
    "UpsertStatus",
    "VehicleEntry",
]
