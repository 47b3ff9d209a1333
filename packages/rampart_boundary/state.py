"""Boundary state value and its pure transition function.

States are ``Stable`` (``has_failure`` false) and ``Failed(retry_count)``.
``retry_count`` counts consecutive failures that followed a retry attempt:
the first failure after a reset is ``Failed(0)``; a failure captured right
after an automatic or manual retry is ``Failed(n + 1)``. A successful render
after a retry returns to the zero state. Reset-key changes and external resets
always return to the zero state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Union

from packages.rampart_shared.errors import FailureRecord


@dataclass(frozen=True)
class ErrorInfo:
    """Runtime-supplied detail about where a failure was raised."""

    component_stack: str = ""


@dataclass(frozen=True)
class BoundaryState:
    """State owned by exactly one fault boundary."""

    has_failure: bool = False
    failure: FailureRecord | None = None
    error_id: str | None = None
    retry_count: int = 0
    info: ErrorInfo | None = None
    retried: bool = False


ZERO_STATE = BoundaryState()


@dataclass(frozen=True)
class FailureCaptured:
    failure: FailureRecord
    error_id: str
    info: ErrorInfo = field(default_factory=ErrorInfo)


@dataclass(frozen=True)
class AutoRetryElapsed:
    pass


@dataclass(frozen=True)
class ManualRetry:
    max_retries: int


@dataclass(frozen=True)
class RenderSucceeded:
    pass


@dataclass(frozen=True)
class ResetKeysChanged:
    pass


@dataclass(frozen=True)
class Reset:
    pass


BoundaryEvent = Union[
    FailureCaptured,
    AutoRetryElapsed,
    ManualRetry,
    RenderSucceeded,
    ResetKeysChanged,
    Reset,
]


def transition(state: BoundaryState, event: BoundaryEvent) -> BoundaryState:
    """Return the state that follows ``state`` after ``event``."""
    if isinstance(event, FailureCaptured):
        retry_count = state.retry_count
        if not state.has_failure and state.retried:
            retry_count += 1
        return BoundaryState(
            has_failure=True,
            failure=event.failure,
            error_id=event.error_id,
            retry_count=retry_count,
            info=event.info,
            retried=False,
        )

    if isinstance(event, AutoRetryElapsed):
        if not state.has_failure:
            return state
        return BoundaryState(retry_count=state.retry_count, retried=True)

    if isinstance(event, ManualRetry):
        if not state.has_failure or retries_exhausted(state, event.max_retries):
            return state
        return BoundaryState(retry_count=state.retry_count, retried=True)

    if isinstance(event, RenderSucceeded):
        if state.has_failure or not state.retried:
            return state
        return ZERO_STATE

    if isinstance(event, (ResetKeysChanged, Reset)):
        return ZERO_STATE

    raise TypeError(f"Unsupported boundary event: {event!r}")


def retries_exhausted(state: BoundaryState, max_retries: int) -> bool:
    """Return ``True`` when the retry control must be disabled."""
    return state.retry_count >= max_retries


def should_schedule_retry(state: BoundaryState, max_retries: int) -> bool:
    """Return ``True`` when a failed state still has automatic retry budget."""
    return state.has_failure and state.retry_count < max_retries


def retry_delay_ms(retry_count: int, base_delay_ms: int) -> int:
    """Return the exponential backoff delay for attempt ``retry_count``."""
    return base_delay_ms * (2**retry_count)


def reset_keys_changed(
    previous: Sequence[object] | None,
    current: Sequence[object] | None,
) -> bool:
    """Compare reset keys by position; a key absent before counts as changed."""
    if current is None:
        return False
    before = list(previous or ())
    for index, key in enumerate(current):
        if index >= len(before) or key != before[index]:
            return True
    return False
