"""Shared fixtures for invoice service tests."""

import pytest

from tests.factories import RecordingRowStore
from truckbill.logging import setup_logging
from truckbill.services.invoices.counter_repository import CounterRepository
from truckbill.services.invoices.invoice_repository import InvoiceRepository
from truckbill.services.invoices.invoice_service import InvoiceService
from truckbill.services.invoices.numbering_service import InvoiceNumberingService


@pytest.fixture(autouse=True, scope="session")
def configured_logging() -> None:
    # Bind the log handler to the session stdout, not to a CliRunner capture buffer
    setup_logging()


@pytest.fixture
def store() -> RecordingRowStore:
    return RecordingRowStore()


@pytest.fixture
def counter_repo(store: RecordingRowStore) -> CounterRepository:
    return CounterRepository(store)


@pytest.fixture
def invoice_repo(store: RecordingRowStore) -> InvoiceRepository:
    return InvoiceRepository(store)


@pytest.fixture
def numbering_service(invoice_repo: InvoiceRepository, counter_repo: CounterRepository) -> InvoiceNumberingService:
    return InvoiceNumberingService(invoices=invoice_repo, counter=counter_repo)


@pytest.fixture
def invoice_service(invoice_repo: InvoiceRepository) -> InvoiceService:
    return InvoiceService(invoice_repo)
