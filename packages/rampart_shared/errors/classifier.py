"""Ordered, first-match-wins failure classification.

The rule list below is order-sensitive. Messages are matched by
case-insensitive substring, which is inherently fragile: ``"authorization
failed"`` contains ``"auth"`` and lands in Authentication, and ``"database fetch
failed"`` lands in Database only because the persistence rule precedes the
network rule. The order is kept literal rather than reshuffled per message.

Category, priority, retryability and suggestions depend only on the failure's
``(name, message)`` pair. The error id is generated alongside and never feeds
the decision.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from packages.rampart_shared.ids import generate_error_id
from packages.rampart_shared.logging import fields, log_safely

from .types import ClassifiedError, ErrorCategory, ErrorContext, ErrorPriority, FailureRecord

_LOGGER = logging.getLogger(__name__)

PERSISTENCE_MARKERS: tuple[str, ...] = ("prisma", "sqlalchemy", "psycopg", "database")


@dataclass(frozen=True)
class ClassificationRule:
    """One ordered classification rule."""

    category: ErrorCategory
    retryable: bool
    names: tuple[str, ...]
    markers: tuple[str, ...] = ()

    def matches(self, failure: FailureRecord) -> bool:
        """Return ``True`` when the failure name or message selects this rule."""
        if failure.name in self.names:
            return True
        message = failure.message.lower()
        return any(marker in message for marker in self.markers)


RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(ErrorCategory.VALIDATION, False, ("ValidationError",), ("validation",)),
    ClassificationRule(ErrorCategory.AUTHENTICATION, False, ("AuthenticationError",), ("auth",)),
    ClassificationRule(ErrorCategory.AUTHORIZATION, False, ("AuthorizationError",), ("forbidden",)),
    ClassificationRule(ErrorCategory.NOT_FOUND, False, ("NotFoundError",), ("not found",)),
    ClassificationRule(ErrorCategory.DATABASE, True, ("DatabaseError",), PERSISTENCE_MARKERS),
    ClassificationRule(ErrorCategory.NETWORK, True, ("NetworkError",), ("fetch",)),
    ClassificationRule(ErrorCategory.CONFLICT, False, ("ConflictError",)),
    ClassificationRule(ErrorCategory.RATE_LIMIT, True, ("RateLimitError",)),
)

DEFAULT_RULE = ClassificationRule(ErrorCategory.SERVER, True, ())

PRIORITY_BY_CATEGORY: Mapping[ErrorCategory, ErrorPriority] = {
    ErrorCategory.VALIDATION: ErrorPriority.LOW,
    ErrorCategory.NOT_FOUND: ErrorPriority.LOW,
    ErrorCategory.CONFLICT: ErrorPriority.LOW,
    ErrorCategory.AUTHENTICATION: ErrorPriority.MEDIUM,
    ErrorCategory.AUTHORIZATION: ErrorPriority.MEDIUM,
    ErrorCategory.RATE_LIMIT: ErrorPriority.HIGH,
    ErrorCategory.NETWORK: ErrorPriority.HIGH,
    ErrorCategory.DATABASE: ErrorPriority.CRITICAL,
    ErrorCategory.SERVER: ErrorPriority.CRITICAL,
}

SUGGESTIONS_BY_CATEGORY: Mapping[ErrorCategory, tuple[str, ...]] = {
    ErrorCategory.VALIDATION: ("Check required fields", "Verify format constraints"),
    ErrorCategory.AUTHENTICATION: ("Please log in again", "Check your credentials"),
    ErrorCategory.AUTHORIZATION: (
        "Confirm you have access to this resource",
        "Ask an administrator to grant the required role",
    ),
    ErrorCategory.NOT_FOUND: (
        "Check the identifier or link",
        "The resource may have been moved or deleted",
    ),
    ErrorCategory.CONFLICT: (
        "Refresh to load the latest version",
        "Re-apply your changes and try again",
    ),
    ErrorCategory.RATE_LIMIT: (
        "Wait a moment before retrying",
        "Reduce the frequency of requests",
    ),
    ErrorCategory.DATABASE: (
        "Please try again later",
        "Contact support if the problem persists",
    ),
    ErrorCategory.NETWORK: (
        "Check your internet connection",
        "Try again in a moment",
    ),
    ErrorCategory.SERVER: (
        "Please try again",
        "Contact support if the problem persists",
    ),
}

USER_MESSAGE_BY_CATEGORY: Mapping[ErrorCategory, str] = {
    ErrorCategory.VALIDATION: "Please check your input and try again.",
    ErrorCategory.AUTHENTICATION: "Authentication required. Please log in again.",
    ErrorCategory.AUTHORIZATION: "You do not have permission to perform this action.",
    ErrorCategory.NOT_FOUND: "The requested resource could not be found.",
    ErrorCategory.CONFLICT: "This item was changed by someone else. Please refresh.",
    ErrorCategory.RATE_LIMIT: "Too many requests. Please slow down and try again.",
    ErrorCategory.DATABASE: "A database error occurred. Please try again later.",
    ErrorCategory.NETWORK: "Network error. Please check your connection and try again.",
    ErrorCategory.SERVER: "An error occurred. Please try again or contact support.",
}


@dataclass(frozen=True)
class RecoveryGuidance:
    """User-facing recovery advice for one failure."""

    message: str
    actions: tuple[str, ...]
    next_steps: tuple[str, ...]


def match_rule(failure: FailureRecord) -> ClassificationRule:
    """Return the first rule matching ``failure``, or the default rule."""
    for rule in RULES:
        if rule.matches(failure):
            return rule
    return DEFAULT_RULE


def categorize(failure: FailureRecord) -> ErrorCategory:
    """Return the category for one failure."""
    return match_rule(failure).category


def priority_for(category: ErrorCategory) -> ErrorPriority:
    """Return the priority for one category."""
    return PRIORITY_BY_CATEGORY[category]


def suggestions_for(category: ErrorCategory) -> tuple[str, ...]:
    """Return remediation suggestions for one category."""
    return SUGGESTIONS_BY_CATEGORY[category]


def user_message(category: ErrorCategory) -> str:
    """Return the actionable user-facing message for one category."""
    return USER_MESSAGE_BY_CATEGORY[category]


def classify(
    failure: FailureRecord | BaseException,
    context: ErrorContext | None = None,
    *,
    error_id: str | None = None,
) -> ClassifiedError:
    """Classify one failure into a fresh ``ClassifiedError``."""
    record = FailureRecord.coerce(failure)
    rule = match_rule(record)
    classified = ClassifiedError(
        category=rule.category,
        priority=priority_for(rule.category),
        retryable=rule.retryable,
        suggestions=suggestions_for(rule.category),
        error_id=error_id or generate_error_id(),
    )
    log_safely(
        _LOGGER,
        logging.DEBUG,
        "Failure classified",
        context={
            fields.ERROR_ID: classified.error_id,
            fields.ERROR_NAME: record.name,
            fields.ERROR_CATEGORY: classified.category.value,
            fields.ERROR_PRIORITY: classified.priority.value,
            fields.COMPONENT: None if context is None else context.component,
            fields.ACTION: None if context is None else context.action,
        },
    )
    return classified


def recovery_guidance(failure: FailureRecord | BaseException) -> RecoveryGuidance:
    """Return message, actions and next steps for one failure."""
    category = categorize(FailureRecord.coerce(failure))
    priority = priority_for(category)
    return RecoveryGuidance(
        message=user_message(category),
        actions=suggestions_for(category),
        next_steps=_next_steps(category, priority),
    )


def _next_steps(category: ErrorCategory, priority: ErrorPriority) -> tuple[str, ...]:
    if priority is ErrorPriority.CRITICAL:
        return ("Contact support", "Include the error id in your report")
    if category is ErrorCategory.VALIDATION:
        return ("Review your input", "Check field requirements")
    if category in (ErrorCategory.NETWORK, ErrorCategory.RATE_LIMIT):
        return ("Wait a moment", "Try again")
    return ("Try again", "Contact support if needed")
