"""Invoice record schema.

Field aliases are camelCase so the JSON blob stays compatible with rows
written by the mobile client (``formData``, ``invoiceNo``, ``totalFreight``...).
"""

import re
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


# Leading decimal number of a string, as JavaScript's parseFloat reads it ("28,000" -> 28)
_LEADING_NUMBER = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _parse_amount(value: Any) -> Any:
    """Read form amounts the way the form does with ``parseFloat(x || 0)``.

    Blank or unparseable strings become zero and trailing junk is ignored,
    so legacy rows with values like ``"28,000"`` stay readable.
    """
    if value is None:
        return ZERO
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value.strip())
        return Decimal(match.group(0)) if match else ZERO
    return value


Money = Annotated[Decimal, BeforeValidator(_parse_amount)]


def round_money(value: Decimal) -> Decimal:
    """Round to two decimal places (half up)."""
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


class CamelModel(BaseModel):
    """Base model with camelCase aliases, accepting both names on input.

    Keys the schema does not know are kept and written back unchanged, so a
    rewrite (edit, clear-due) never drops data other clients stored.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class InvoiceFormData(CamelModel):
    """Header fields of an invoice.

    Only ``invoice_no`` has meaning for numbering; everything else is carried
    as-is, including keys this schema does not know about.
    """

    invoice_no: str = ""
    bill_date: str = ""
    party_name: str = ""
    party_address: str = ""
    origin: str = Field(default="", alias="from")
    destination: str = Field(default="", alias="to")
    back_to: str = ""
    loading_date: str = ""
    unloading_date: str = ""
    commission: Money = ZERO


class VehicleEntry(CamelModel):
    """One vehicle/trip line on the invoice."""

    lr_no: str = ""
    vehicle_no: str = ""
    container_no: str = ""
    freight: Money = ZERO
    unloading_charges: Money = ZERO
    detention: Money = ZERO
    weight_charges: Money = ZERO
    others: Money = ZERO
    commission: Money = ZERO
    advance: Money = ZERO
    total_freight: Money = ZERO
    balance: Money = ZERO

    def recalculated(self) -> "VehicleEntry":
        """Return a copy with ``total_freight`` and ``balance`` derived from the charges."""
        total = (
            self.freight
            + self.unloading_charges
            + self.detention
            + self.weight_charges
            + self.others
            + self.commission
        )
        return self.model_copy(
            update={
                "total_freight": round_money(total),
                "balance": round_money(total - self.advance),
            }
        )


class InvoiceSummary(CamelModel):
    """Totals stored alongside the vehicles for fast display."""

    total_freight: Money = ZERO
    total_advance: Money = ZERO
    total_balance: Money = ZERO

    @classmethod
    def from_vehicles(cls, vehicles: list[VehicleEntry]) -> "InvoiceSummary":
        return cls(
            total_freight=round_money(sum((v.total_freight for v in vehicles), ZERO)),
            total_advance=round_money(sum((v.advance for v in vehicles), ZERO)),
            total_balance=round_money(sum((v.balance for v in vehicles), ZERO)),
        )


class InvoiceRecord(CamelModel):
    """The unit of persistence: header, vehicle lines and summary."""

    form_data: InvoiceFormData = Field(default_factory=InvoiceFormData)
    vehicles: list[VehicleEntry] = Field(default_factory=list)
    summary: InvoiceSummary = Field(default_factory=InvoiceSummary)

    @property
    def invoice_no(self) -> str:
        return self.form_data.invoice_no

    def with_invoice_no(self, invoice_no: str) -> "InvoiceRecord":
        """Return a copy carrying a different invoice number."""
        form_data = self.form_data.model_copy(update={"invoice_no": invoice_no})
        return self.model_copy(update={"form_data": form_data})

    def recalculated(self) -> "InvoiceRecord":
        """Return a copy with vehicle totals, form commission and summary recomputed."""
        vehicles = [vehicle.recalculated() for vehicle in self.vehicles]
        commission = round_money(sum((v.commission for v in vehicles), ZERO))
        form_data = self.form_data.model_copy(update={"commission": commission})
        return self.model_copy(
            update={
                "form_data": form_data,
                "vehicles": vehicles,
                "summary": InvoiceSummary.from_vehicles(vehicles),
            }
        )

    def with_balance_cleared(self) -> "InvoiceRecord":
        """Return a copy marked as fully paid (every balance set to zero)."""
        vehicles = [vehicle.model_copy(update={"balance": ZERO}) for vehicle in self.vehicles]
        summary = self.summary.model_copy(update={"total_balance": ZERO})
        return self.model_copy(update={"vehicles": vehicles, "summary": summary})

    def to_blob(self) -> str:
        """Serialize to the JSON blob stored in the ``formData`` column."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_blob(cls, blob: str) -> "InvoiceRecord":
        return cls.model_validate_json(blob)


class StoredInvoice(BaseModel):
    """An invoice record as read back from the row store."""

    id: str
    created_at: datetime | None = None
    record: InvoiceRecord

    @property
    def invoice_no(self) -> str:
        return self.record.invoice_no
