"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from truckbill.api.v1 import health, invoices
from truckbill.config import settings
from truckbill.db import create_schema
from truckbill.logging import setup_logging
from truckbill.store.factory import create_row_store
from truckbill.store.sql import SqlRowStore

# Configure logging before anything else
setup_logging()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting Truckbill API", debug=settings.debug, backend=settings.row_store_backend)

    store = create_row_store(settings)
    if isinstance(store, SqlRowStore):
        await create_schema(store.engine)
        logger.info("Database schema ready")
    app.state.row_store = store

    yield

    logger.info("Shutting down Truckbill API")
    await store.close()
    logger.info("Row store closed")


app = FastAPI(
    title="Truckbill API",
    description="Invoice numbering and history API for trucking invoices",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.backend_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(health.router, prefix="/api/v1", tags=["health"])
app.include_router(invoices.router, prefix="/api/v1", tags=["invoices"])
