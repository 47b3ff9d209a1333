"""Input validation and string sanitization against pydantic schemas.

Validation failures surface as ``ValidationError`` domain exceptions so the
classifier files them under the Validation category.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

import pydantic
from pydantic import BaseModel

from packages.rampart_shared.errors import ValidationError

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_WHITESPACE = re.compile(r"[^\S\n]+")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one payload."""

    is_valid: bool
    errors: tuple[str, ...]
    sanitized_value: Any = None


def sanitize_string(value: str) -> str:
    """Strip control characters and collapse horizontal whitespace."""
    cleaned = _CONTROL_CHARS.sub("", value.replace("\x00", ""))
    return _WHITESPACE.sub(" ", cleaned).strip()


def sanitize(value: Any) -> Any:
    """Recursively sanitize strings inside mappings and sequences."""
    if isinstance(value, str):
        return sanitize_string(value)
    if isinstance(value, Mapping):
        return {key: sanitize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [sanitize(item) for item in value]
    return value


def validate(payload: Any, schema: type[BaseModel]) -> ValidationResult:
    """Sanitize ``payload`` and validate it against ``schema``."""
    cleaned = sanitize(payload)
    try:
        model = schema.model_validate(cleaned)
    except pydantic.ValidationError as exc:
        return ValidationResult(is_valid=False, errors=_messages(exc))
    return ValidationResult(
        is_valid=True,
        errors=(),
        sanitized_value=model.model_dump(mode="python"),
    )


def raise_for_invalid(result: ValidationResult, message: str = "Validation failed") -> Any:
    """Return the sanitized value or raise ``ValidationError`` with field errors."""
    if not result.is_valid:
        raise ValidationError(message, errors=list(result.errors))
    return result.sanitized_value


def _messages(exc: pydantic.ValidationError) -> tuple[str, ...]:
    """Flatten pydantic errors into ``field: message`` strings."""
    messages: list[str] = []
    for item in exc.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        text = str(item.get("msg", "invalid value"))
        messages.append(f"{location}: {text}" if location else text)
    return tuple(messages)
