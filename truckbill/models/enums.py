"""Enum definitions for invoice persistence."""

from enum import StrEnum


class SaveStatus(StrEnum):
    """Outcome of a save request."""

    SAVED = "saved"
    UPDATED = "updated"
    ABORTED = "aborted"


class UpsertStatus(StrEnum):
    """Row mutation performed by an upsert keyed on the invoice number."""

    CREATED = "created"
    UPDATED = "updated"
