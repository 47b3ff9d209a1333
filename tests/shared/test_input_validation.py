"""Tests for schema validation and string sanitization."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, Field

from packages.rampart_shared.errors import ErrorCategory, FailureRecord, ValidationError, categorize
from packages.rampart_shared.validation import (
    raise_for_invalid,
    sanitize,
    sanitize_string,
    validate,
)


class _Signup(BaseModel):
    email: str = Field(min_length=3)
    age: int


def test_sanitize_string_strips_control_characters_and_extra_spaces() -> None:
    """Control characters should vanish and horizontal runs collapse."""
    assert sanitize_string("  hello\x00\x07   world \t ") == "hello world"


def test_sanitize_string_keeps_line_breaks() -> None:
    """Multi-line text such as stack traces should keep its lines."""
    assert sanitize_string("line one\n    line two") == "line one\n line two"


def test_sanitize_recurses_into_containers() -> None:
    """Nested strings in mappings and lists should be sanitized."""
    assert sanitize({"a": [" x  y ", 3], "b": {"c": "\x01z"}}) == {
        "a": ["x y", 3],
        "b": {"c": "z"},
    }


def test_validate_returns_sanitized_model_data() -> None:
    """Valid payloads should return sanitized, schema-coerced data."""
    result = validate({"email": "  a@b.co ", "age": "30"}, _Signup)

    assert result.is_valid is True
    assert result.errors == ()
    assert result.sanitized_value == {"email": "a@b.co", "age": 30}


def test_validate_collects_field_errors() -> None:
    """Invalid payloads should report one message per failing field."""
    result = validate({"email": "x"}, _Signup)

    assert result.is_valid is False
    assert result.sanitized_value is None
    assert any(message.startswith("email:") for message in result.errors)
    assert any(message.startswith("age:") for message in result.errors)


def test_raise_for_invalid_raises_classifiable_validation_error() -> None:
    """Invalid results should raise a ValidationError the classifier recognises."""
    result = validate({}, _Signup)

    with pytest.raises(ValidationError) as exc_info:
        raise_for_invalid(result, "Invalid signup")

    assert exc_info.value.message == "Invalid signup"
    assert exc_info.value.errors == list(result.errors)
    assert categorize(FailureRecord.coerce(exc_info.value)) is ErrorCategory.VALIDATION
