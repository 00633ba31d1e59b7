"""Row store interface and backends.

- base: RowStore protocol and Row type
- memory: in-process store for development and tests
- sql: SQLAlchemy tables (SQLite / PostgreSQL)
- appwrite: Appwrite TablesDB REST API
"""

from truckbill.store.base import CREATED_AT, Row, RowStore, new_row_id
from truckbill.store.exceptions import RowConflict, RowNotFound, RowStoreError

__all__ = [
    "CREATED_AT",
    "Row",
    "RowConflict",
    "RowNotFound",
    "RowStore",
    "RowStoreError",
    "new_row_id",
]
