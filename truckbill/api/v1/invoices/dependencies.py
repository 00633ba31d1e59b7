"""FastAPI dependencies for service injection."""

from typing import Annotated

from fastapi import Depends, Request

from truckbill.config import settings
from truckbill.services.invoices import (
    InvoiceNumberingService,
    InvoiceService,
    build_invoice_service,
    build_numbering_service,
)
from truckbill.store.base import RowStore


def get_row_store(request: Request) -> RowStore:
    """Get the row store created during application startup."""
    store: RowStore = request.app.state.row_store
    return store


def get_numbering_service(
    store: Annotated[RowStore, Depends(get_row_store)],
) -> InvoiceNumberingService:
    """Get an InvoiceNumberingService bound to the application row store."""
    return build_numbering_service(store, settings)


def get_invoice_service(
    store: Annotated[RowStore, Depends(get_row_store)],
) -> InvoiceService:
    """Get an InvoiceService bound to the application row store."""
    return build_invoice_service(store, settings)


# Type aliases for cleaner endpoint signatures
NumberingServiceDep = Annotated[InvoiceNumberingService, Depends(get_numbering_service)]
InvoiceServiceDep = Annotated[InvoiceService, Depends(get_invoice_service)]
