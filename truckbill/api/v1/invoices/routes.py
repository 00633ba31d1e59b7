"""Invoice API endpoints."""

import structlog
from fastapi import APIRouter, HTTPException, Response

from truckbill.api.v1.invoices.dependencies import InvoiceServiceDep, NumberingServiceDep
from truckbill.api.v1.invoices.schemas import (
    HistoryResponse,
    InvoiceResponse,
    NextInvoiceNoResponse,
    SaveInvoiceResponse,
)
from truckbill.models.invoice import InvoiceRecord
from truckbill.services.exceptions import BackendUnavailable
from truckbill.services.invoices.exceptions import (
    InvoiceNotFound,
    InvoiceUnreadable,
    OrchestratorFailure,
    SequenceExhausted,
)
from truckbill.services.invoices.history import summarize_history

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["invoices"])

BACKEND_UNAVAILABLE = "Invoice storage is unavailable, please retry"


@router.get("/invoices", response_model=HistoryResponse, operation_id="listInvoices")
async def list_invoices(service: InvoiceServiceDep) -> HistoryResponse:
    """List saved invoices, newest first, with totals."""
    try:
        invoices = await service.list_history()
    except BackendUnavailable:
        raise HTTPException(status_code=503, detail=BACKEND_UNAVAILABLE)
    return HistoryResponse.from_invoices(invoices, summarize_history(invoices))


@router.post("/invoices", response_model=SaveInvoiceResponse, operation_id="saveInvoice")
async def save_invoice(record: InvoiceRecord, service: NumberingServiceDep) -> SaveInvoiceResponse:
    """Save a new invoice or update an existing one.

    - Generated numbers (P-000001) are allocated from the shared sequence
    - Any other number is saved as typed
    - Placeholder numbers ("Loading...", "ERR-...") are not saved (status "aborted")

    A 503 response is safe to retry with the same body.
    """
    try:
        result = await service.save_invoice(record)
    except OrchestratorFailure as e:
        if isinstance(e.__cause__, SequenceExhausted):
            raise HTTPException(status_code=422, detail=str(e.__cause__))
        raise HTTPException(status_code=503, detail=BACKEND_UNAVAILABLE)
    return SaveInvoiceResponse.from_result(result)


@router.get("/invoices/next-number", response_model=NextInvoiceNoResponse, operation_id="getNextInvoiceNo")
async def get_next_invoice_no(service: NumberingServiceDep) -> NextInvoiceNoResponse:
    """Preview the number the next new invoice will receive."""
    try:
        invoice_no = await service.next_invoice_no()
    except BackendUnavailable:
        raise HTTPException(status_code=503, detail=BACKEND_UNAVAILABLE)
    except SequenceExhausted as e:
        raise HTTPException(status_code=422, detail=str(e))
    return NextInvoiceNoResponse(invoice_no=invoice_no)


@router.get("/invoices/{row_id}", response_model=InvoiceResponse, operation_id="getInvoice")
async def get_invoice(row_id: str, service: InvoiceServiceDep) -> InvoiceResponse:
    """Get a single saved invoice by its row id."""
    try:
        invoice = await service.get_invoice(row_id)
    except InvoiceNotFound:
        raise HTTPException(status_code=404, detail="Invoice not found")
    except InvoiceUnreadable as e:
        raise HTTPException(status_code=422, detail=str(e))
    except BackendUnavailable:
        raise HTTPException(status_code=503, detail=BACKEND_UNAVAILABLE)
    return InvoiceResponse.from_model(invoice)


@router.delete("/invoices/{row_id}", status_code=204, operation_id="deleteInvoice")
async def delete_invoice(row_id: str, service: InvoiceServiceDep) -> Response:
    """Permanently delete an invoice."""
    try:
        await service.delete_invoice(row_id)
    except InvoiceNotFound:
        raise HTTPException(status_code=404, detail="Invoice not found")
    except BackendUnavailable:
        raise HTTPException(status_code=503, detail=BACKEND_UNAVAILABLE)
    return Response(status_code=204)


@router.post("/invoices/{row_id}/clear-due", response_model=InvoiceResponse, operation_id="clearInvoiceDue")
async def clear_invoice_due(row_id: str, service: InvoiceServiceDep) -> InvoiceResponse:
    """Mark an invoice as paid by setting its balance due to zero."""
    try:
        invoice = await service.clear_due(row_id)
    except InvoiceNotFound:
        raise HTTPException(status_code=404, detail="Invoice not found")
    except InvoiceUnreadable as e:
        raise HTTPException(status_code=422, detail=str(e))
    except BackendUnavailable:
        raise HTTPException(status_code=503, detail=BACKEND_UNAVAILABLE)
    return InvoiceResponse.from_model(invoice)


@router.post("/invoices/{row_id}/duplicate", response_model=InvoiceRecord, operation_id="duplicateInvoice")
async def duplicate_invoice(row_id: str, service: InvoiceServiceDep) -> InvoiceRecord:
    """Copy an invoice into a new unsaved record (needs a fresh number before saving)."""
    try:
        return await service.prepare_duplicate(row_id)
    except InvoiceNotFound:
        raise HTTPException(status_code=404, detail="Invoice not found")
    except InvoiceUnreadable as e:
        raise HTTPException(status_code=422, detail=str(e))
    except BackendUnavailable:
        raise HTTPException(status_code=503, detail=BACKEND_UNAVAILABLE)
