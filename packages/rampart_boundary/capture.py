"""Explicit capture of failures raised outside the render phase.

Event handlers, timers and async callbacks are not covered by a boundary's
render-time catch. They hand their failure to an ``ErrorHandler``; the next
render calls ``check()``, which re-raises it inside the boundary.
"""

from __future__ import annotations

import logging

from packages.rampart_shared.errors import FailureRecord
from packages.rampart_shared.logging import fields, log_safely

_LOGGER = logging.getLogger(__name__)


class ErrorHandler:
    """Holds at most one pending out-of-render failure."""

    def __init__(self, *, component: str = "unknown") -> None:
        self._component = component
        self._pending: BaseException | None = None

    @property
    def captured(self) -> BaseException | None:
        return self._pending

    def capture_error(self, exc: BaseException | str) -> None:
        """Store ``exc`` so the next render delivers it to the boundary."""
        if isinstance(exc, str):
            exc = RuntimeError(exc)
        self._pending = exc
        record = FailureRecord.from_exception(exc)
        log_safely(
            _LOGGER,
            logging.ERROR,
            f"Error captured outside render: {record.message}",
            context={
                fields.COMPONENT: self._component,
                fields.ERROR_NAME: record.name,
            },
        )

    def reset_error(self) -> None:
        self._pending = None

    def check(self) -> None:
        """Re-raise the pending failure, clearing it first."""
        pending = self._pending
        if pending is None:
            return
        self._pending = None
        raise pending
