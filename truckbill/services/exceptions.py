"""Service layer exceptions.

Repositories translate row store failures into these, so nothing above the
service layer sees a backend-specific error. The API maps them to HTTP
statuses and the CLI to click errors.
"""


class ServiceError(Exception):
    """Base for every error a service raises."""

    pass


class NotFoundError(ServiceError):
    """The addressed invoice or row does not exist."""

    pass


class ValidationError(ServiceError):
    """Input that must not be persisted as given."""

    pass


class BackendUnavailable(ServiceError):
    """The row store failed or could not be reached.

    Operations that raise it may be retried with the same input.
    """

    pass
