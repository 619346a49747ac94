"""
Domain errors raised by the data-access layer and mapped to HTTP statuses.
"""

from __future__ import annotations


class BlogError(Exception):
    """Base class for failures the API reports back to the caller."""

    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConflictError(BlogError):
    status_code = 409
    default_message = "User already exists"


class UnauthorizedError(BlogError):
    status_code = 401
    default_message = "Invalid credentials"


class ValidationError(BlogError):
    status_code = 400
    default_message = "Invalid request"


class NotFoundError(BlogError):
    status_code = 404
    default_message = "Not found"


class StoreUnavailableError(BlogError):
    """The key-value store could not be reached or returned unreadable data."""

    status_code = 500
    default_message = "Store unavailable"


ERRORS_BY_STATUS: dict[int, type[BlogError]] = {
    ConflictError.status_code: ConflictError,
    UnauthorizedError.status_code: UnauthorizedError,
    ValidationError.status_code: ValidationError,
    NotFoundError.status_code: NotFoundError,
}


def error_for_status(status_code: int, message: str | None = None) -> BlogError:
    """Build the domain error matching an HTTP status returned by the API."""
    error_cls = ERRORS_BY_STATUS.get(status_code, BlogError)
    return error_cls(message)
