"""Tests for the pure fault boundary state transitions."""

from __future__ import annotations

import pytest

from packages.rampart_boundary.state import (
    ZERO_STATE,
    AutoRetryElapsed,
    ErrorInfo,
    FailureCaptured,
    ManualRetry,
    RenderSucceeded,
    Reset,
    ResetKeysChanged,
    reset_keys_changed,
    retries_exhausted,
    retry_delay_ms,
    should_schedule_retry,
    transition,
)
from packages.rampart_shared.errors import FailureRecord

_FAILURE = FailureRecord(message="boom", name="RuntimeError")


def _captured(error_id: str = "error_1_aaaaaaaaa") -> FailureCaptured:
    return FailureCaptured(failure=_FAILURE, error_id=error_id, info=ErrorInfo("    in Widget"))


def test_first_capture_from_stable_is_failed_zero() -> None:
    """Capturing from the zero state should store the failure with count 0."""
    state = transition(ZERO_STATE, _captured())

    assert state.has_failure is True
    assert state.failure == _FAILURE
    assert state.error_id == "error_1_aaaaaaaaa"
    assert state.retry_count == 0
    assert state.info == ErrorInfo("    in Widget")


def test_failure_after_auto_retry_increments_count() -> None:
    """A failure captured right after an automatic retry should count it."""
    state = transition(ZERO_STATE, _captured())
    state = transition(state, AutoRetryElapsed())

    assert state.has_failure is False
    assert state.retry_count == 0

    state = transition(state, _captured("error_2_bbbbbbbbb"))
    assert state.retry_count == 1
    assert state.error_id == "error_2_bbbbbbbbb"


def test_manual_retry_preserves_count_and_next_failure_increments() -> None:
    """Manual retry should not reset the counter."""
    state = transition(ZERO_STATE, _captured())
    state = transition(state, AutoRetryElapsed())
    state = transition(state, _captured())
    assert state.retry_count == 1

    state = transition(state, ManualRetry(max_retries=3))
    assert state.has_failure is False
    assert state.retry_count == 1

    state = transition(state, _captured())
    assert state.retry_count == 2


def test_manual_retry_is_ignored_once_exhausted() -> None:
    """An exhausted boundary should stay failed on manual retry."""
    state = transition(ZERO_STATE, _captured())

    assert transition(state, ManualRetry(max_retries=0)) is state


def test_successful_render_after_retry_returns_to_zero_state() -> None:
    """Recovering after a retry should reset the counter."""
    state = transition(ZERO_STATE, _captured())
    state = transition(state, AutoRetryElapsed())
    state = transition(state, _captured())
    state = transition(state, ManualRetry(max_retries=3))

    assert transition(state, RenderSucceeded()) == ZERO_STATE


def test_plain_successful_render_leaves_state_alone() -> None:
    """A successful render without a pending retry should be a no-op."""
    assert transition(ZERO_STATE, RenderSucceeded()) is ZERO_STATE


@pytest.mark.parametrize("event", [ResetKeysChanged(), Reset()])
def test_reset_events_clear_even_an_exhausted_boundary(event: object) -> None:
    """Reset-key changes and resets should always return to the zero state."""
    state = transition(ZERO_STATE, _captured())
    for _ in range(5):
        state = transition(transition(state, AutoRetryElapsed()), _captured())
    assert state.retry_count == 5

    assert transition(state, event) == ZERO_STATE


def test_retry_budget_helpers() -> None:
    """Budget helpers should agree on the exhaustion boundary."""
    failed = transition(ZERO_STATE, _captured())

    assert should_schedule_retry(failed, 1) is True
    assert retries_exhausted(failed, 1) is False
    assert should_schedule_retry(failed, 0) is False
    assert retries_exhausted(failed, 0) is True
    assert should_schedule_retry(ZERO_STATE, 3) is False


def test_retry_delay_doubles_per_attempt() -> None:
    """Backoff should be base * 2**attempt."""
    assert [retry_delay_ms(n, 1000) for n in range(4)] == [1000, 2000, 4000, 8000]


@pytest.mark.parametrize(
    ("previous", "current", "changed"),
    [
        (["a"], ["b"], True),
        (["a"], ["a"], False),
        (["a"], ["a", 1], True),
        (None, ["a"], True),
        (["a", "b"], ["a"], False),
        (["a"], None, False),
        ([1], [1], False),
    ],
)
def test_reset_keys_compare_by_position(
    previous: list[object] | None, current: list[object] | None, changed: bool
) -> None:
    """A differing or previously-absent position should count as a change."""
    assert reset_keys_changed(previous, current) is changed


def test_unknown_event_is_rejected() -> None:
    """The reducer should refuse events it does not know."""
    with pytest.raises(TypeError):
        transition(ZERO_STATE, object())  # type: ignore[arg-type]
