"""Database engine configuration for the SQL row store."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel

# Register table definitions with SQLModel.metadata
import truckbill.models.rows  # noqa: F401


def create_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine; pool tuning only applies to server databases."""
    options: dict[str, Any] = {}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,  # Verify connections before use
            pool_recycle=300,  # Recycle connections after 5 minutes
        )
    return create_async_engine(database_url, echo=echo, future=True, **options)


async def create_schema(engine: AsyncEngine) -> None:
    """Create the row store tables if they do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """Dispose of the engine and release all connections.

    Should be called during application shutdown.
    """
    await engine.dispose()
