"""Public shared error API for Rampart components."""

from . import codes
from .classifier import (
    RULES,
    ClassificationRule,
    RecoveryGuidance,
    categorize,
    classify,
    priority_for,
    recovery_guidance,
    suggestions_for,
    user_message,
)
from .exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DatabaseError,
    DomainError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ValidationError,
    error_type_for_status,
)
from .types import ClassifiedError, ErrorCategory, ErrorContext, ErrorPriority, FailureRecord

__all__ = [
    "RULES",
    "AuthenticationError",
    "AuthorizationError",
    "ClassificationRule",
    "ClassifiedError",
    "ConflictError",
    "DatabaseError",
    "DomainError",
    "ErrorCategory",
    "ErrorContext",
    "ErrorPriority",
    "FailureRecord",
    "NetworkError",
    "NotFoundError",
    "RateLimitError",
    "RecoveryGuidance",
    "ValidationError",
    "categorize",
    "classify",
    "codes",
    "error_type_for_status",
    "priority_for",
    "recovery_guidance",
    "suggestions_for",
    "user_message",
]
