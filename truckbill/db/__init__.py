"""Database package with engine management for the SQL row store."""

from truckbill.db.session import create_engine, create_schema, dispose_engine

__all__ = [
    "create_engine",
    "create_schema",
    "dispose_engine",
]
