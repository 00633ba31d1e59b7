"""Table definitions backing the SQL row store.

Column names match the row store's column keys (``count``, ``invoiceNo``,
``formData``) so every backend shares one data shape.
"""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlmodel import Field, SQLModel


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


class CounterRow(SQLModel, table=True):
    """Named integer counters (the invoice high-water mark lives here)."""

    __tablename__ = "counters"

    id: str = Field(primary_key=True, max_length=64)
    count: int = Field(default=0, sa_column=Column("count", Integer, nullable=False))
    created_at: datetime = Field(default_factory=_utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=_utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))


class InvoiceEntryRow(SQLModel, table=True):
    """One persisted invoice: business key plus the serialized record."""

    __tablename__ = "entries"

    id: str = Field(primary_key=True, max_length=64)
    invoice_no: str = Field(sa_column=Column("invoiceNo", String(64), nullable=False, index=True))
    form_data: str = Field(sa_column=Column("formData", Text, nullable=False))
    created_at: datetime = Field(default_factory=_utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=_utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
