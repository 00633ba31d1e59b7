"""Command line interface for invoice maintenance."""

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

import click
from pydantic import ValidationError as PydanticValidationError

from truckbill.config import settings
from truckbill.db import create_schema
from truckbill.logging import setup_logging
from truckbill.models.invoice import InvoiceRecord
from truckbill.services.exceptions import ServiceError
from truckbill.services.invoices import build_invoice_service, build_numbering_service
from truckbill.services.invoices.exceptions import InvoiceNotFound, OrchestratorFailure
from truckbill.services.invoices.history import is_due, summarize_history
from truckbill.store.base import RowStore
from truckbill.store.factory import create_row_store
from truckbill.store.sql import SqlRowStore

T = TypeVar("T")


async def _with_store(action: Callable[[RowStore], Awaitable[T]]) -> T:
    store = create_row_store(settings)
    try:
        if isinstance(store, SqlRowStore):
            await create_schema(store.engine)
        return await action(store)
    finally:
        await store.close()


def run_with_store(action: Callable[[RowStore], Awaitable[T]]) -> T:
    """Run an async action against the configured row store, mapping service errors to CLI errors."""
    if settings.row_store_backend == "memory":
        # Each command runs in its own process; an in-memory store is gone when it exits
        raise click.ClickException(
            "The memory row store does not persist between commands. "
            "Set ROW_STORE_BACKEND to 'sql' or 'appwrite'."
        )
    try:
        return asyncio.run(_with_store(action))
    except InvoiceNotFound as e:
        raise click.ClickException(str(e))
    except OrchestratorFailure as e:
        raise click.ClickException(f"{e}: {e.__cause__}. Run the same command again to retry.")
    except ServiceError as e:
        raise click.ClickException(str(e))


@click.group()
def cli() -> None:
    """Trucking invoice maintenance commands."""
    setup_logging()


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def save(path: Path) -> None:
    """Save the invoice record stored as JSON in PATH."""
    try:
        record = InvoiceRecord.model_validate_json(path.read_text(encoding="utf-8"))
    except PydanticValidationError as e:
        raise click.ClickException(f"Invalid invoice file: {e}")

    result = run_with_store(lambda store: build_numbering_service(store, settings).save_invoice(record))
    if result.invoice_no:
        click.echo(f"{result.status}: {result.invoice_no}")
    else:
        click.echo(str(result.status))


@cli.command()
def history() -> None:
    """List saved invoices, newest first."""
    invoices = run_with_store(lambda store: build_invoice_service(store, settings).list_history())
    for invoice in invoices:
        summary = invoice.record.summary
        marker = "DUE " if is_due(invoice) else "PAID"
        click.echo(
            f"{invoice.id}  {invoice.invoice_no:<12}  {marker}  "
            f"{invoice.record.form_data.party_name:<30}  {summary.total_balance:>12}"
        )

    rollup = summarize_history(invoices)
    click.echo(
        f"{rollup.count} invoices, freight {rollup.total_freight}, "
        f"advance {rollup.total_advance}, balance due {rollup.total_balance}"
    )


@cli.command("next-number")
def next_number() -> None:
    """Show the number the next new invoice will receive."""
    click.echo(run_with_store(lambda store: build_numbering_service(store, settings).next_invoice_no()))


@cli.command()
@click.argument("row_id")
@click.confirmation_option(prompt="Permanently delete this invoice?")
def delete(row_id: str) -> None:
    """Delete the invoice with store id ROW_ID."""
    run_with_store(lambda store: build_invoice_service(store, settings).delete_invoice(row_id))
    click.echo(f"Deleted {row_id}")


@cli.command("clear-due")
@click.argument("row_id")
def clear_due(row_id: str) -> None:
    """Mark the invoice with store id ROW_ID as paid."""
    invoice = run_with_store(lambda store: build_invoice_service(store, settings).clear_due(row_id))
    click.echo(f"Cleared balance of {invoice.invoice_no}")
