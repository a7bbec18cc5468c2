"""
Exception classes for the Car Rental API.

Services raise these; the handlers registered in ``carrental.errors`` turn
them into the JSON response envelope with the matching HTTP status code.
"""
from typing import Optional


class AppError(Exception):
    """Base class for errors that map onto an HTTP status code."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message


class ValidationError(AppError):
    """Raised when the request is well-formed but cannot be honoured."""

    status_code = 400
    default_message = "Bad request"


class AuthenticationError(AppError):
    """Raised when the caller is not (or no longer) authenticated."""

    status_code = 401
    default_message = "Unauthorized"


class AuthorizationError(AppError):
    """Raised when the caller's role does not allow the operation."""

    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    """Raised for unmatched routes and missing resources."""

    status_code = 404
    default_message = "Not found"


class ServerError(AppError):
    """Wraps an unexpected fault."""

    status_code = 500
