"""Invoice services.

- numbering: invoice number format helpers
- counter_repository / invoice_repository: row store wrappers
- numbering_service: number allocation and save orchestration
- invoice_service: history, clear-due, delete and duplicate
- history: display rollups
"""

from truckbill.config import Settings
from truckbill.services.invoices.counter_repository import CounterRepository
from truckbill.services.invoices.invoice_repository import InvoiceRepository
from truckbill.services.invoices.invoice_service import InvoiceService
from truckbill.services.invoices.numbering_service import InvoiceNumberingService, SaveResult
from truckbill.store.base import RowStore


def build_numbering_service(store: RowStore, settings: Settings) -> InvoiceNumberingService:
    return InvoiceNumberingService(
        invoices=InvoiceRepository(store, table=settings.entries_table_id),
        counter=CounterRepository(store, table=settings.counter_table_id, row_id=settings.counter_row_id),
    )


def build_invoice_service(store: RowStore, settings: Settings) -> InvoiceService:
    return InvoiceService(
        InvoiceRepository(store, table=settings.entries_table_id),
        history_limit=settings.history_limit,
    )


__all__ = [
    "CounterRepository",
    "InvoiceNumberingService",
    "InvoiceRepository",
    "InvoiceService",
    "SaveResult",
    "build_invoice_service",
    "build_numbering_service",
]
