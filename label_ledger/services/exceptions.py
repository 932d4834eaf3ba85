"""Base service exceptions.

These exceptions are raised by the service layer and should be caught
by the API layer and converted to appropriate HTTP responses.
"""


class ServiceError(Exception):
    """Base service exception."""

    pass


class NotFoundError(ServiceError):
    """Resource not found."""

    pass


class ValidationError(ServiceError):
    """Validation error."""

    pass


class StorageFailure(ServiceError):
    """Database I/O or transaction failure. The transaction has been rolled back.

    Not retried by the service; retry policy belongs to the caller.
    """

    pass
