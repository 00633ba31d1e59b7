"""Tests for history, clear-due, delete and duplicate operations."""

import json
from datetime import date
from decimal import Decimal

import pytest

from tests.factories import RecordingRowStore, insert_invoice_row, make_record
from truckbill.models.enums import SaveStatus
from truckbill.services.invoices.exceptions import InvoiceNotFound
from truckbill.services.invoices.invoice_repository import InvoiceRepository
from truckbill.services.invoices.invoice_service import InvoiceService
from truckbill.services.invoices.numbering_service import InvoiceNumberingService


async def test_list_history_respects_limit(invoice_repo: InvoiceRepository, store: RecordingRowStore) -> None:
    service = InvoiceService(invoice_repo, history_limit=2)
    for invoice_no in ["P-000001", "P-000002", "P-000003"]:
        await insert_invoice_row(store, invoice_no)

    history = await service.list_history()

    assert [invoice.invoice_no for invoice in history] == ["P-000003", "P-000002"]


async def test_clear_due_zeroes_balances(invoice_service: InvoiceService, store: RecordingRowStore) -> None:
    row = await insert_invoice_row(store, "P-000001")

    cleared = await invoice_service.clear_due(row.id)

    assert cleared.record.summary.total_balance == Decimal("0")
    assert all(vehicle.balance == Decimal("0") for vehicle in cleared.record.vehicles)
    # Freight and advance are untouched
    assert cleared.record.summary.total_freight == Decimal("33102.00")
    assert cleared.record.summary.total_advance == Decimal("26000.00")

    reloaded = await invoice_service.get_invoice(row.id)
    assert reloaded.record == cleared.record


async def test_clear_due_missing_invoice(invoice_service: InvoiceService) -> None:
    with pytest.raises(InvoiceNotFound):
        await invoice_service.clear_due("missing")


async def test_delete_invoice(invoice_service: InvoiceService, store: RecordingRowStore) -> None:
    row = await insert_invoice_row(store, "P-000001")

    await invoice_service.delete_invoice(row.id)

    with pytest.raises(InvoiceNotFound):
        await invoice_service.delete_invoice(row.id)


async def test_prepare_duplicate_resets_number_and_bill_date(
    invoice_service: InvoiceService,
    store: RecordingRowStore,
) -> None:
    row = await insert_invoice_row(store, "P-000001")

    duplicate = await invoice_service.prepare_duplicate(row.id, bill_date=date(2025, 3, 1))

    assert duplicate.invoice_no == "Loading..."
    assert duplicate.form_data.bill_date == "2025-03-01"
    assert duplicate.form_data.party_name == "SAHIL ROADWAYS"
    assert duplicate.vehicles == make_record().vehicles


async def test_duplicate_cannot_be_saved_until_numbered(
    invoice_service: InvoiceService,
    numbering_service: InvoiceNumberingService,
    store: RecordingRowStore,
) -> None:
    original = await numbering_service.save_invoice(make_record("P-000000"))
    stored = await numbering_service.invoices.find_by_invoice_no(original.invoice_no)
    assert stored is not None

    duplicate = await invoice_service.prepare_duplicate(stored.id)
    assert (await numbering_service.save_invoice(duplicate)).status == SaveStatus.ABORTED

    numbered = duplicate.with_invoice_no(await numbering_service.next_invoice_no())
    result = await numbering_service.save_invoice(numbered)

    assert result.status == SaveStatus.SAVED
    assert result.invoice_no == "P-000002"
    assert len(await store.list_rows("entries")) == 2


async def test_clear_due_keeps_keys_unknown_to_the_schema(
    invoice_service: InvoiceService,
    store: RecordingRowStore,
) -> None:
    blob = json.dumps(
        {
            "formData": {"invoiceNo": "P-000001", "partyName": "SAHIL ROADWAYS"},
            "vehicles": [{"lrNo": "1", "freight": "1000", "balance": "1000", "driverName": "RAJU"}],
            "summary": {"totalFreight": "1000", "totalBalance": "1000", "note": "keep"},
            "createdBy": "mobile",
        }
    )
    row = await store.create_row("entries", None, {"invoiceNo": "P-000001", "formData": blob})

    await invoice_service.clear_due(row.id)

    payload = json.loads((await store.get_row("entries", row.id)).get("formData"))
    assert payload["vehicles"][0]["driverName"] == "RAJU"
    assert payload["vehicles"][0]["balance"] == "0.00"
    assert payload["summary"]["note"] == "keep"
    assert payload["summary"]["totalBalance"] == "0.00"
    assert payload["createdBy"] == "mobile"
