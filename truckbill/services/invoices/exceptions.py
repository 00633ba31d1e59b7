"""Invoice domain exceptions."""

from typing import TYPE_CHECKING

from truckbill.services.exceptions import NotFoundError, ServiceError, ValidationError

if TYPE_CHECKING:
    from truckbill.models.invoice import InvoiceRecord


class InvoiceNotFound(NotFoundError):
    """Invoice row not found."""

    def __init__(self, row_id: str):
        self.row_id = row_id
        super().__init__(f"Invoice {row_id} not found")


class ValidationAbort(ValidationError):
    """Invoice number is empty or a placeholder; nothing may be persisted."""

    def __init__(self, invoice_no: str):
        self.invoice_no = invoice_no
        super().__init__(f"Invoice number {invoice_no!r} cannot be saved")


class SequenceExhausted(ValidationError):
    """The six-digit generated number space is used up."""

    pass


class OrchestratorFailure(ServiceError):
    """Saving an invoice failed part way; retry with the same record.

    The underlying error is chained as ``__cause__``.
    """

    def __init__(self, record: "InvoiceRecord", message: str = "Failed to complete invoice save"):
        self.record = record
        super().__init__(message)


class InvoiceUnreadable(ValidationError):
    """A stored invoice row holds a payload that cannot be parsed."""

    def __init__(self, row_id: str):
        self.row_id = row_id
        super().__init__(f"Invoice {row_id} has unreadable data")
