"""Row store exceptions.

Every backend translates its own failures (HTTP errors, database errors)
into these, so repositories handle a single hierarchy.
"""


class RowStoreError(Exception):
    """The row store rejected an operation or could not be reached."""

    pass


class RowNotFound(RowStoreError):
    """No row with the requested id exists in the table."""

    def __init__(self, table: str, row_id: str):
        self.table = table
        self.row_id = row_id
        super().__init__(f"Row {row_id!r} not found in table {table!r}")


class RowConflict(RowStoreError):
    """A row with the requested id already exists in the table."""

    def __init__(self, table: str, row_id: str):
        self.table = table
        self.row_id = row_id
        super().__init__(f"Row {row_id!r} already exists in table {table!r}")
