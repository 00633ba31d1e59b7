"""Tests for the invoice record schema."""

import json
from decimal import Decimal

import pytest

from tests.factories import make_record
from truckbill.models.invoice import InvoiceRecord, VehicleEntry

# A row blob as written by the mobile client
CLIENT_BLOB = json.dumps(
    {
        "formData": {
            "invoiceNo": "P-000017",
            "billDate": "2024-08-20",
            "partyName": "SAHIL ROADWAYS",
            "from": "IMPEX",
            "to": "BHILAD",
            "commission": "",
            "gstNo": "27ABCDE1234F1Z5",
        },
        "vehicles": [
            {
                "lrNo": "LR-1",
                "vehicleNo": "MH 43 Y 7655",
                "freight": "28000",
                "unloadingCharges": 4602.5,
                "detention": "",
                "advance": "26000",
                "totalFreight": "32602.50",
                "balance": "6602.50",
            }
        ],
        "summary": {"totalFreight": "32602.50", "totalAdvance": "26000", "totalBalance": "6602.50"},
    }
)


def test_reads_client_blob() -> None:
    record = InvoiceRecord.from_blob(CLIENT_BLOB)

    assert record.invoice_no == "P-000017"
    assert record.form_data.origin == "IMPEX"
    assert record.form_data.destination == "BHILAD"
    assert record.form_data.commission == Decimal("0")
    assert record.vehicles[0].detention == Decimal("0")
    assert record.vehicles[0].unloading_charges == Decimal("4602.5")


def test_unknown_form_fields_survive_a_round_trip() -> None:
    record = InvoiceRecord.from_blob(CLIENT_BLOB)

    payload = json.loads(record.to_blob())

    assert payload["formData"]["gstNo"] == "27ABCDE1234F1Z5"
    assert payload["formData"]["from"] == "IMPEX"


def test_vehicle_recalculation() -> None:
    vehicle = VehicleEntry(
        freight="1000.005",
        unloading_charges="10",
        detention="5",
        weight_charges="2.5",
        others="",
        commission="50",
        advance="500",
    ).recalculated()

    assert vehicle.total_freight == Decimal("1067.51")
    assert vehicle.balance == Decimal("567.51")


def test_record_recalculation_sums_vehicles() -> None:
    record = make_record()
    record = record.model_copy(update={"vehicles": [*record.vehicles, *record.vehicles]}).recalculated()

    assert record.summary.total_freight == Decimal("66204.00")
    assert record.summary.total_advance == Decimal("52000.00")
    assert record.summary.total_balance == Decimal("14204.00")


def test_with_invoice_no_leaves_original_untouched() -> None:
    record = make_record("P-000000")

    renumbered = record.with_invoice_no("P-000005")

    assert renumbered.invoice_no == "P-000005"
    assert record.invoice_no == "P-000000"
    assert renumbered.vehicles == record.vehicles


def test_with_balance_cleared() -> None:
    cleared = make_record().with_balance_cleared()

    assert cleared.summary.total_balance == Decimal("0")
    assert [vehicle.balance for vehicle in cleared.vehicles] == [Decimal("0")]
    assert cleared.summary.total_freight == Decimal("33102.00")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("28,000", "28"), ("  1500.50 ", "1500.50"), ("12abc", "12"), ("-5", "-5"), (".5", "0.5"), ("abc", "0"), ("-", "0")],
)
def test_amounts_are_read_like_the_form_reads_them(raw: str, expected: str) -> None:
    assert VehicleEntry(freight=raw).freight == Decimal(expected)


def test_unknown_vehicle_and_summary_keys_survive_a_round_trip() -> None:
    record = InvoiceRecord.from_blob(
        json.dumps(
            {
                "vehicles": [{"lrNo": "1", "driverName": "RAJU"}],
                "summary": {"note": "keep"},
                "createdBy": "mobile",
            }
        )
    )

    payload = json.loads(record.recalculated().with_balance_cleared().to_blob())

    assert payload["vehicles"][0]["driverName"] == "RAJU"
    assert payload["summary"]["note"] == "keep"
    assert payload["createdBy"] == "mobile"
