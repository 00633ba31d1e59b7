"""Display rollups over persisted invoices."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from truckbill.models.invoice import ZERO, StoredInvoice, round_money

# Balances at or below this are treated as settled (rounding leftovers)
DUE_THRESHOLD = Decimal("0.01")


def is_due(invoice: StoredInvoice) -> bool:
    return invoice.record.summary.total_balance > DUE_THRESHOLD


@dataclass
class HistoryRollup:
    total_freight: Decimal = ZERO
    total_advance: Decimal = ZERO
    total_balance: Decimal = ZERO
    due: list[StoredInvoice] = field(default_factory=list)
    paid: list[StoredInvoice] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.due) + len(self.paid)


def summarize_history(invoices: Iterable[StoredInvoice]) -> HistoryRollup:
    """Sum invoice summaries and split invoices into due and paid, keeping input order."""
    rollup = HistoryRollup()
    for invoice in invoices:
        summary = invoice.record.summary
        rollup.total_freight += summary.total_freight
        rollup.total_advance += summary.total_advance
        rollup.total_balance += summary.total_balance
        (rollup.due if is_due(invoice) else rollup.paid).append(invoice)

    rollup.total_freight = round_money(rollup.total_freight)
    rollup.total_advance = round_money(rollup.total_advance)
    rollup.total_balance = round_money(rollup.total_balance)
    return rollup
