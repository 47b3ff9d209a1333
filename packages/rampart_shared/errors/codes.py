"""Stable machine-readable failure codes.

Codes are independent of, but conventionally aligned with, the classifier
categories. Service-specific codes may extend this set locally; unknown codes
still resolve to a status through the envelope status table.
"""

from .types import ErrorCategory

VALIDATION_ERROR = "VALIDATION_ERROR"
AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
NOT_FOUND_ERROR = "NOT_FOUND_ERROR"
CONFLICT_ERROR = "CONFLICT_ERROR"
RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
DATABASE_ERROR = "DATABASE_ERROR"
NETWORK_ERROR = "NETWORK_ERROR"
SERVER_ERROR = "SERVER_ERROR"

CODE_FOR_CATEGORY: dict[ErrorCategory, str] = {
    ErrorCategory.VALIDATION: VALIDATION_ERROR,
    ErrorCategory.AUTHENTICATION: AUTHENTICATION_ERROR,
    ErrorCategory.AUTHORIZATION: AUTHORIZATION_ERROR,
    ErrorCategory.NOT_FOUND: NOT_FOUND_ERROR,
    ErrorCategory.CONFLICT: CONFLICT_ERROR,
    ErrorCategory.RATE_LIMIT: RATE_LIMIT_ERROR,
    ErrorCategory.DATABASE: DATABASE_ERROR,
    ErrorCategory.NETWORK: NETWORK_ERROR,
    ErrorCategory.SERVER: SERVER_ERROR,
}


def code_for_category(category: ErrorCategory) -> str:
    """Return the conventional code for one category."""
    return CODE_FOR_CATEGORY[category]
