"""Unit tests for ordered failure classification."""

from __future__ import annotations

import pytest

from packages.rampart_shared.errors import (
    RULES,
    ConflictError,
    DatabaseError,
    ErrorCategory,
    ErrorContext,
    ErrorPriority,
    FailureRecord,
    RateLimitError,
    ValidationError,
    categorize,
    classify,
    priority_for,
    recovery_guidance,
    suggestions_for,
    user_message,
)
from packages.rampart_shared.ids import is_error_id


def test_validation_error_name_classifies_as_low_priority_validation() -> None:
    """A ValidationError record should be Validation, Low and not retryable."""
    classified = classify(FailureRecord(name="ValidationError", message="bad input"))

    assert classified.category is ErrorCategory.VALIDATION
    assert classified.priority is ErrorPriority.LOW
    assert classified.retryable is False


def test_fetch_message_classifies_as_high_priority_network() -> None:
    """A generic error mentioning fetch should be Network, High and retryable."""
    classified = classify(FailureRecord(name="Error", message="fetch failed"))

    assert classified.category is ErrorCategory.NETWORK
    assert classified.priority is ErrorPriority.HIGH
    assert classified.retryable is True


@pytest.mark.parametrize(
    ("name", "message", "expected"),
    [
        ("Error", "Validation failed for email", ErrorCategory.VALIDATION),
        ("AuthenticationError", "token expired", ErrorCategory.AUTHENTICATION),
        ("Error", "missing auth header", ErrorCategory.AUTHENTICATION),
        ("Error", "authorization failed", ErrorCategory.AUTHENTICATION),
        ("AuthorizationError", "nope", ErrorCategory.AUTHORIZATION),
        ("Error", "Forbidden resource", ErrorCategory.AUTHORIZATION),
        ("Error", "user not found", ErrorCategory.NOT_FOUND),
        ("Error", "sqlalchemy.exc.OperationalError", ErrorCategory.DATABASE),
        ("Error", "database fetch failed", ErrorCategory.DATABASE),
        ("NetworkError", "socket closed", ErrorCategory.NETWORK),
        ("ConflictError", "stale revision", ErrorCategory.CONFLICT),
        ("RateLimitError", "slow down", ErrorCategory.RATE_LIMIT),
        ("KeyError", "boom", ErrorCategory.SERVER),
    ],
)
def test_first_matching_rule_wins(name: str, message: str, expected: ErrorCategory) -> None:
    """Rules should apply in literal order with case-insensitive substrings."""
    assert categorize(FailureRecord(name=name, message=message)) is expected


def test_classification_is_deterministic_but_error_ids_are_fresh() -> None:
    """Same name/message should give the same verdict with a new error id."""
    record = FailureRecord(name="Error", message="fetch failed")

    first = classify(record)
    second = classify(record)

    assert (first.category, first.priority, first.retryable, first.suggestions) == (
        second.category,
        second.priority,
        second.retryable,
        second.suggestions,
    )
    assert first.error_id != second.error_id
    assert is_error_id(first.error_id)


def test_classify_accepts_exceptions_and_explicit_error_id() -> None:
    """Exceptions should be classified by class name and keep a supplied id."""
    classified = classify(
        DatabaseError("pool exhausted"),
        ErrorContext(component="orders", action="list"),
        error_id="error_1_abcdefghi",
    )

    assert classified.category is ErrorCategory.DATABASE
    assert classified.priority is ErrorPriority.CRITICAL
    assert classified.error_id == "error_1_abcdefghi"


def test_priority_and_suggestion_tables_are_total() -> None:
    """Every category should map to exactly one priority and some suggestions."""
    for category in ErrorCategory:
        assert isinstance(priority_for(category), ErrorPriority)
        assert suggestions_for(category)
        assert user_message(category)


def test_priorities_are_ordered() -> None:
    """Priorities should compare Low < Medium < High < Critical."""
    assert ErrorPriority.LOW < ErrorPriority.MEDIUM < ErrorPriority.HIGH < ErrorPriority.CRITICAL
    assert max(ErrorPriority) is ErrorPriority.CRITICAL


def test_typed_domain_exceptions_line_up_with_rules() -> None:
    """Domain exception class names should select their own categories."""
    assert categorize(FailureRecord.coerce(ValidationError())) is ErrorCategory.VALIDATION
    assert categorize(FailureRecord.coerce(ConflictError())) is ErrorCategory.CONFLICT
    assert categorize(FailureRecord.coerce(RateLimitError())) is ErrorCategory.RATE_LIMIT
    assert len(RULES) == 8


def test_failure_record_coerces_unknown_values() -> None:
    """Unrecognized failure values should become a generic record."""
    assert FailureRecord.coerce({"error": "upstream down"}).message == "upstream down"
    assert FailureRecord.coerce(42).message == "An unknown error occurred"
    assert FailureRecord.coerce("plain text").name == "Error"


def test_failure_record_from_raised_exception_carries_stack() -> None:
    """Raised exceptions should keep their class name and formatted traceback."""
    try:
        raise LookupError("missing widget")
    except LookupError as exc:
        record = FailureRecord.from_exception(exc)

    assert record.name == "LookupError"
    assert record.message == "missing widget"
    assert record.stack is not None and "LookupError" in record.stack


def test_recovery_guidance_sends_critical_failures_to_support() -> None:
    """Critical failures should direct users to support with the error id."""
    guidance = recovery_guidance(FailureRecord(message="prisma client crashed"))

    assert guidance.message == user_message(ErrorCategory.DATABASE)
    assert guidance.next_steps == ("Contact support", "Include the error id in your report")

    network = recovery_guidance(FailureRecord(message="fetch failed"))
    assert network.next_steps == ("Wait a moment", "Try again")
