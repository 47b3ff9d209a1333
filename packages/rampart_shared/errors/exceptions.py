"""Typed domain exceptions recognised by the classifier.

The classifier matches on the exception class name, so each subclass name is
part of the contract.
"""

from __future__ import annotations

from typing import Any, Mapping


class DomainError(Exception):
    """Base error for failures raised deliberately by application code."""

    default_message = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = dict(details or {})
        super().__init__(self.message)


class ValidationError(DomainError):
    """Input failed validation."""

    default_message = "Validation failed"

    def __init__(
        self,
        message: str | None = None,
        *,
        errors: list[str] | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        merged = dict(details or {})
        if errors:
            merged.setdefault("errors", list(errors))
        super().__init__(message, details=merged)
        self.errors = list(errors or [])


class AuthenticationError(DomainError):
    """Caller identity could not be established."""

    default_message = "Authentication required"


class AuthorizationError(DomainError):
    """Caller lacks permission for the requested action."""

    default_message = "Access denied"


class NotFoundError(DomainError):
    """Requested resource does not exist."""

    default_message = "Resource not found"


class ConflictError(DomainError):
    """Request conflicts with current resource state."""

    default_message = "Resource conflict"


class RateLimitError(DomainError):
    """Caller exceeded its request allowance."""

    default_message = "Rate limit exceeded"


class DatabaseError(DomainError):
    """Persistence layer operation failed."""

    default_message = "Database operation failed"


class NetworkError(DomainError):
    """Outbound network operation failed."""

    default_message = "Network operation failed"


ERROR_TYPE_BY_STATUS: dict[int, type[DomainError]] = {
    400: ValidationError,
    401: AuthenticationError,
    403: AuthorizationError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
    429: RateLimitError,
}


def error_type_for_status(status_code: int) -> type[DomainError] | None:
    """Return the domain error an HTTP status stands for, if any."""
    return ERROR_TYPE_BY_STATUS.get(status_code)
