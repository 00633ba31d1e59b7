"""Build the configured row store backend."""

import structlog

from truckbill.config import Settings
from truckbill.db import create_engine
from truckbill.store.appwrite import AppwriteRowStore
from truckbill.store.base import RowStore
from truckbill.store.memory import InMemoryRowStore
from truckbill.store.sql import SqlRowStore

logger = structlog.get_logger(__name__)


def create_row_store(settings: Settings) -> RowStore:
    """Create the RowStore selected by ``settings.row_store_backend``."""
    backend = settings.row_store_backend
    logger.info("Creating row store", backend=backend)

    if backend == "memory":
        return InMemoryRowStore()

    if backend == "sql":
        return SqlRowStore(create_engine(settings.database_url, echo=settings.debug))

    if backend == "appwrite":
        return AppwriteRowStore(
            endpoint=settings.appwrite_endpoint,
            project_id=settings.appwrite_project_id,
            database_id=settings.appwrite_database_id,
            api_key=settings.appwrite_api_key,
            timeout=settings.appwrite_timeout,
        )

    raise ValueError(f"Unknown row store backend: {backend}")
