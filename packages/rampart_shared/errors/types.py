"""Canonical failure types for the Rampart resilience core.

These shapes are transport-agnostic: the classifier produces them, the
envelope builder serializes them, and the boundary runtime stores them.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class ErrorCategory(str, Enum):
    """Closed set of failure categories."""

    VALIDATION = "Validation"
    AUTHENTICATION = "Authentication"
    AUTHORIZATION = "Authorization"
    NOT_FOUND = "NotFound"
    CONFLICT = "Conflict"
    RATE_LIMIT = "RateLimit"
    DATABASE = "Database"
    NETWORK = "Network"
    SERVER = "Server"


class ErrorPriority(str, Enum):
    """Ordered failure priority, ``LOW < MEDIUM < HIGH < CRITICAL``."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ErrorPriority):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, ErrorPriority):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, ErrorPriority):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, ErrorPriority):
            return NotImplemented
        return self.rank >= other.rank


_PRIORITY_RANK = {
    ErrorPriority.LOW: 0,
    ErrorPriority.MEDIUM: 1,
    ErrorPriority.HIGH: 2,
    ErrorPriority.CRITICAL: 3,
}


@dataclass(frozen=True)
class FailureRecord:
    """Raw captured failure; immutable once captured."""

    message: str
    name: str = "Error"
    stack: str | None = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> FailureRecord:
        """Capture name, message and formatted traceback from an exception."""
        stack = None
        if exc.__traceback__ is not None:
            stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return cls(message=str(exc), name=type(exc).__name__, stack=stack)

    @classmethod
    def coerce(cls, value: object) -> FailureRecord:
        """Normalize an exception, record, string or mapping into a record."""
        if isinstance(value, FailureRecord):
            return value
        if isinstance(value, BaseException):
            return cls.from_exception(value)
        if isinstance(value, str):
            return cls(message=value)
        if isinstance(value, Mapping):
            for key in ("message", "error", "statusText"):
                candidate = value.get(key)
                if isinstance(candidate, str) and candidate:
                    return cls(message=candidate, name=str(value.get("name") or "Error"))
        return cls(message="An unknown error occurred")


@dataclass(frozen=True)
class ErrorContext:
    """Caller-supplied provenance attached at classification time."""

    component: str
    action: str
    extra: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ClassifiedError:
    """Structured classification of exactly one failure."""

    category: ErrorCategory
    priority: ErrorPriority
    retryable: bool
    suggestions: tuple[str, ...]
    error_id: str
