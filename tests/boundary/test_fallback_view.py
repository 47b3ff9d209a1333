"""Tests for the default degraded view."""

from __future__ import annotations

import pytest

from packages.rampart_boundary import EXHAUSTED_LABEL, TRY_AGAIN_LABEL, build_fallback_view
from packages.rampart_boundary.view import GENERIC_MESSAGE
from packages.rampart_shared.errors import FailureRecord


@pytest.mark.parametrize(
    ("name", "message"),
    [
        ("ValidationError", "bad input"),
        ("AuthenticationError", "expired"),
        ("AuthorizationError", "nope"),
        ("NotFoundError", "gone"),
    ],
)
def test_actionable_categories_get_specific_messages(name: str, message: str) -> None:
    """User-correctable failures should not show the generic message."""
    view = build_fallback_view(
        FailureRecord(name=name, message=message),
        error_id="error_1_abcdefghi",
        exhausted=False,
    )

    assert view.message != GENERIC_MESSAGE
    assert view.retry.label == TRY_AGAIN_LABEL


@pytest.mark.parametrize("message", ["prisma timeout", "fetch failed", "boom"])
def test_infrastructure_failures_get_generic_message(message: str) -> None:
    """Database, network and server failures should stay generic."""
    view = build_fallback_view(
        FailureRecord(message=message),
        error_id="error_1_abcdefghi",
        exhausted=True,
    )

    assert view.message == GENERIC_MESSAGE
    assert view.retry.label == EXHAUSTED_LABEL
    assert view.retry.disabled is True
    assert view.error_id == "error_1_abcdefghi"


def test_details_are_hidden_outside_developer_mode() -> None:
    """Technical details should only appear when developer mode is on."""
    failure = FailureRecord(message="boom", name="RuntimeError", stack="Traceback")

    hidden = build_fallback_view(failure, error_id=None, exhausted=False)
    shown = build_fallback_view(
        failure,
        error_id=None,
        exhausted=False,
        component_stack="    in Widget",
        developer_mode=True,
    )

    assert hidden.details is None
    assert hidden.can_report is False
    assert shown.details is not None
    assert shown.details.stack == "Traceback"
    assert shown.details.component_stack == "    in Widget"
