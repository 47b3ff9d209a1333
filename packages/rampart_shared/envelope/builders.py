"""Constructors for success and failure envelopes.

``failure`` is the single path through which request handlers turn a raw
exception into a classified, logged, counted failure envelope.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any, TypeVar

from packages.rampart_shared.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DatabaseError,
    ErrorCategory,
    ErrorContext,
    FailureRecord,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ValidationError,
    categorize,
    classify,
    codes,
    user_message,
)
from packages.rampart_shared.logging import fields, log_safely
from packages.rampart_shared.metrics import ErrorMetrics, default_error_metrics

from .envelope import ErrorBody, FailureEnvelope, FailureMeta, SuccessEnvelope, SuccessMeta

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

_GENERIC_MESSAGE_CATEGORIES = frozenset(
    {ErrorCategory.DATABASE, ErrorCategory.NETWORK, ErrorCategory.SERVER}
)


def success(
    data: T,
    message: str | None = None,
    *,
    timestamp: datetime | None = None,
) -> SuccessEnvelope[T]:
    """Build a success envelope around ``data``."""
    return SuccessEnvelope[T](
        data=data,
        message=message,
        meta=SuccessMeta(timestamp=timestamp or _utc_now()),
    )


def failure(
    code: str,
    message: str,
    failure: BaseException | FailureRecord | str | None,
    context: ErrorContext | None = None,
    *,
    details: Any | None = None,
    metrics: ErrorMetrics | None = None,
    timestamp: datetime | None = None,
) -> FailureEnvelope:
    """Classify ``failure`` and wrap it into a failure envelope for ``code``."""
    record = FailureRecord.coerce(failure if failure is not None else message)
    classified = classify(record, context)
    component = context.component if context is not None else "api"
    action = context.action if context is not None else "request"

    frequency = (metrics or default_error_metrics()).record(
        classified.category, component=component, action=action
    )
    log_safely(
        _LOGGER,
        logging.ERROR,
        f"API error [{code}]: {record.message}",
        context={
            fields.ERROR_CODE: code,
            fields.ERROR_ID: classified.error_id,
            fields.ERROR_NAME: record.name,
            fields.ERROR_CATEGORY: classified.category.value,
            fields.ERROR_PRIORITY: classified.priority.value,
            fields.COMPONENT: component,
            fields.ACTION: action,
            fields.FREQUENCY: frequency,
        },
    )

    return FailureEnvelope(
        error=ErrorBody(
            code=code,
            message=message,
            details=details,
            error_id=classified.error_id,
            category=classified.category,
            priority=classified.priority,
            retryable=classified.retryable,
            suggestions=list(classified.suggestions),
        ),
        meta=FailureMeta(
            timestamp=timestamp or _utc_now(),
            retryable=classified.retryable,
        ),
    )


def failure_from_exception(
    exc: BaseException | FailureRecord | str,
    context: ErrorContext | None = None,
    *,
    fallback_message: str | None = None,
    details: Any | None = None,
    metrics: ErrorMetrics | None = None,
) -> FailureEnvelope:
    """Pick the code from the classifier and build a failure envelope.

    Database, network and server failures carry a generic message so internal
    detail never reaches API consumers; other categories keep their message.
    """
    record = FailureRecord.coerce(exc)
    category = categorize(record)
    if fallback_message:
        message = fallback_message
    elif category in _GENERIC_MESSAGE_CATEGORIES or not record.message:
        message = user_message(category)
    else:
        message = record.message
    if details is None and isinstance(exc, ValidationError) and exc.errors:
        details = {"errors": exc.errors}
    return failure(
        codes.code_for_category(category),
        message,
        record,
        context,
        details=details,
        metrics=metrics,
    )


def validation_failure(
    message: str = "Validation failed",
    cause: BaseException | FailureRecord | None = None,
    context: ErrorContext | None = None,
    *,
    details: Any | None = None,
    metrics: ErrorMetrics | None = None,
) -> FailureEnvelope:
    """Build a ``VALIDATION_ERROR`` envelope."""
    return failure(
        codes.VALIDATION_ERROR,
        message,
        cause or ValidationError(message),
        _with_action(context, "Validation"),
        details=details,
        metrics=metrics,
    )


def authentication_failure(
    message: str = "Authentication required",
    cause: BaseException | FailureRecord | None = None,
    context: ErrorContext | None = None,
    *,
    details: Any | None = None,
    metrics: ErrorMetrics | None = None,
) -> FailureEnvelope:
    """Build an ``AUTHENTICATION_ERROR`` envelope."""
    return failure(
        codes.AUTHENTICATION_ERROR,
        message,
        cause or AuthenticationError(message),
        _with_action(context, "Authentication"),
        details=details,
        metrics=metrics,
    )


def authorization_failure(
    message: str = "Access denied",
    cause: BaseException | FailureRecord | None = None,
    context: ErrorContext | None = None,
    *,
    details: Any | None = None,
    metrics: ErrorMetrics | None = None,
) -> FailureEnvelope:
    """Build an ``AUTHORIZATION_ERROR`` envelope."""
    return failure(
        codes.AUTHORIZATION_ERROR,
        message,
        cause or AuthorizationError(message),
        _with_action(context, "Authorization"),
        details=details,
        metrics=metrics,
    )


def not_found_failure(
    message: str = "Resource not found",
    cause: BaseException | FailureRecord | None = None,
    context: ErrorContext | None = None,
    *,
    details: Any | None = None,
    metrics: ErrorMetrics | None = None,
) -> FailureEnvelope:
    """Build a ``NOT_FOUND_ERROR`` envelope."""
    return failure(
        codes.NOT_FOUND_ERROR,
        message,
        cause or NotFoundError(message),
        _with_action(context, "ResourceLookup"),
        details=details,
        metrics=metrics,
    )


def conflict_failure(
    message: str = "Resource conflict",
    cause: BaseException | FailureRecord | None = None,
    context: ErrorContext | None = None,
    *,
    details: Any | None = None,
    metrics: ErrorMetrics | None = None,
) -> FailureEnvelope:
    """Build a ``CONFLICT_ERROR`` envelope."""
    return failure(
        codes.CONFLICT_ERROR,
        message,
        cause or ConflictError(message),
        _with_action(context, "Conflict"),
        details=details,
        metrics=metrics,
    )


def rate_limit_failure(
    message: str = "Rate limit exceeded",
    cause: BaseException | FailureRecord | None = None,
    context: ErrorContext | None = None,
    *,
    details: Any | None = None,
    metrics: ErrorMetrics | None = None,
) -> FailureEnvelope:
    """Build a ``RATE_LIMIT_ERROR`` envelope."""
    return failure(
        codes.RATE_LIMIT_ERROR,
        message,
        cause or RateLimitError(message),
        _with_action(context, "RateLimit"),
        details=details,
        metrics=metrics,
    )


def database_failure(
    message: str = "Database operation failed",
    cause: BaseException | FailureRecord | None = None,
    context: ErrorContext | None = None,
    *,
    details: Any | None = None,
    metrics: ErrorMetrics | None = None,
) -> FailureEnvelope:
    """Build a ``DATABASE_ERROR`` envelope."""
    return failure(
        codes.DATABASE_ERROR,
        message,
        cause or DatabaseError(message),
        _with_action(context, "DatabaseOperation"),
        details=details,
        metrics=metrics,
    )


def network_failure(
    message: str = "Network operation failed",
    cause: BaseException | FailureRecord | None = None,
    context: ErrorContext | None = None,
    *,
    details: Any | None = None,
    metrics: ErrorMetrics | None = None,
) -> FailureEnvelope:
    """Build a ``NETWORK_ERROR`` envelope."""
    return failure(
        codes.NETWORK_ERROR,
        message,
        cause or NetworkError(message),
        _with_action(context, "NetworkOperation"),
        details=details,
        metrics=metrics,
    )


def server_failure(
    message: str = "Internal server error",
    cause: BaseException | FailureRecord | None = None,
    context: ErrorContext | None = None,
    *,
    details: Any | None = None,
    metrics: ErrorMetrics | None = None,
) -> FailureEnvelope:
    """Build a ``SERVER_ERROR`` envelope."""
    return failure(
        codes.SERVER_ERROR,
        message,
        cause or RuntimeError(message),
        _with_action(context, "ServerOperation"),
        details=details,
        metrics=metrics,
    )


def _with_action(context: ErrorContext | None, action: str) -> ErrorContext:
    """Keep caller component while stamping the operation family."""
    if context is None:
        return ErrorContext(component="api", action=action)
    return ErrorContext(component=context.component, action=action, extra=context.extra)


def _utc_now() -> datetime:
    """Return current UTC timestamp."""
    return datetime.now(UTC)
