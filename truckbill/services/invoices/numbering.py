"""Invoice number format helpers.

Generated numbers are ``P-`` followed by exactly six digits (``P-000042``).
Anything else is a free-form number typed by the user.
"""

import re

from truckbill.services.invoices.exceptions import SequenceExhausted, ValidationAbort

PREFIX = "P-"
DIGITS = 6
MAX_SEQUENCE = 10**DIGITS - 1

GENERATED_PATTERN = re.compile(rf"{PREFIX}([0-9]{{{DIGITS}}})")

# Values the form shows while a number is being fetched or after a fetch failed
PLACEHOLDER_PATTERN = re.compile(r"Load|ERR")
LOADING_PLACEHOLDER = "Loading..."


def format_invoice_no(count: int) -> str:
    """Format a sequence value: ``42 -> "P-000042"``."""
    if count < 0 or count > MAX_SEQUENCE:
        raise SequenceExhausted(f"Sequence value {count} does not fit {DIGITS} digits")
    return f"{PREFIX}{count:0{DIGITS}d}"


def is_generated_invoice_no(invoice_no: str) -> bool:
    return GENERATED_PATTERN.fullmatch(invoice_no) is not None


def parse_sequence(invoice_no: str) -> int:
    """Return the numeric part of a generated invoice number."""
    match = GENERATED_PATTERN.fullmatch(invoice_no)
    if match is None:
        raise ValueError(f"{invoice_no!r} is not a generated invoice number")
    return int(match.group(1))


def is_placeholder(invoice_no: str | None) -> bool:
    """True for empty numbers and the form's loading/error sentinels."""
    if invoice_no is None or not invoice_no.strip():
        return True
    return PLACEHOLDER_PATTERN.search(invoice_no) is not None


def ensure_persistable(invoice_no: str | None) -> str:
    """Return the invoice number, or raise ValidationAbort if it must not be saved."""
    if is_placeholder(invoice_no):
        raise ValidationAbort(invoice_no or "")
    assert invoice_no is not None
    return invoice_no
