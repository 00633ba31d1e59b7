"""Test helpers: recording row store and invoice factories."""

from collections.abc import Mapping, Sequence
from typing import Any

from truckbill.models.invoice import InvoiceFormData, InvoiceRecord, VehicleEntry
from truckbill.store.base import Row
from truckbill.store.exceptions import RowStoreError
from truckbill.store.memory import InMemoryRowStore


class RecordingRowStore(InMemoryRowStore):
    """In-memory store that records every call and can fail on demand."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[str, str]] = []
        self._failures: dict[tuple[str, str | None], int] = {}

    def fail_next(self, method: str, table: str | None = None, times: int = 1) -> None:
        self._failures[(method, table)] = times

    def calls_to(self, table: str) -> list[str]:
        return [method for method, called_table in self.calls if called_table == table]

    def _record(self, method: str, table: str) -> None:
        self.calls.append((method, table))
        for key in ((method, table), (method, None)):
            if self._failures.get(key):
                self._failures[key] -= 1
                raise RowStoreError(f"injected failure in {method} on {table}")

    async def get_row(self, table: str, row_id: str) -> Row:
        self._record("get_row", table)
        return await super().get_row(table, row_id)

    async def create_row(self, table: str, row_id: str | None, data: Mapping[str, Any]) -> Row:
        self._record("create_row", table)
        return await super().create_row(table, row_id, data)

    async def update_row(self, table: str, row_id: str, data: Mapping[str, Any]) -> Row:
        self._record("update_row", table)
        return await super().update_row(table, row_id, data)

    async def delete_row(self, table: str, row_id: str) -> None:
        self._record("delete_row", table)
        await super().delete_row(table, row_id)

    async def list_rows(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> Sequence[Row]:
        self._record("list_rows", table)
        return await super().list_rows(table, filters=filters, order_by=order_by, descending=descending, limit=limit)

    async def increment_column(self, table: str, row_id: str, column: str, delta: int = 1) -> Row:
        self._record("increment_column", table)
        return await super().increment_column(table, row_id, column, delta)


def make_record(
    invoice_no: str = "P-000001",
    *,
    party_name: str = "SAHIL ROADWAYS",
    freight: str = "28000",
    unloading_charges: str = "4602",
    others: str = "500",
    advance: str = "26000",
) -> InvoiceRecord:
    """A realistic single-vehicle invoice with derived totals filled in."""
    return InvoiceRecord(
        form_data=InvoiceFormData(
            invoice_no=invoice_no,
            bill_date="2024-08-20",
            party_name=party_name,
            party_address="KALAMBOLI",
            origin="IMPEX",
            destination="BHILAD",
            back_to="PANINDIA",
            loading_date="2024-08-16",
            unloading_date="2024-08-18",
        ),
        vehicles=[
            VehicleEntry(
                lr_no="LR-101",
                vehicle_no="MH 43 Y 7655",
                container_no="TGHU 123456 7",
                freight=freight,
                unloading_charges=unloading_charges,
                others=others,
                advance=advance,
            )
        ],
    ).recalculated()


async def set_counter(store: InMemoryRowStore, value: int) -> None:
    """Put the counter row into a known state without going through the repository."""
    try:
        await store.update_row("counters", "invoice_counter", {"count": value})
    except RowStoreError:
        await store.create_row("counters", "invoice_counter", {"count": value})


async def insert_invoice_row(store: InMemoryRowStore, invoice_no: str) -> Row:
    """Insert an invoice row out of band (bypassing the numbering service)."""
    record = make_record(invoice_no)
    return await store.create_row("entries", None, {"invoiceNo": invoice_no, "formData": record.to_blob()})
