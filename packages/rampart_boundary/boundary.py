"""Fault isolation boundary runtime.

A ``FaultBoundary`` wraps one render callable. While stable it returns the
child's view untouched; once a render raises it captures the failure, renders a
degraded view and drives the retry state machine in ``state``. All mutation
happens on the single UI loop thread, so no locking is needed. The only
concurrent work the boundary owns is one pending retry timer and fire-and-forget
report submissions.
"""

from __future__ import annotations

import functools
import logging
import traceback
from datetime import UTC, datetime
from typing import Any, Callable

from packages.rampart_shared.config import BoundarySettings, load_settings
from packages.rampart_shared.errors import ErrorContext, FailureRecord, classify
from packages.rampart_shared.ids import generate_error_id
from packages.rampart_shared.logging import fields, log_safely
from packages.rampart_shared.metrics import ErrorMetrics, default_error_metrics

from .options import BoundaryOptions
from .reporter import ErrorReport, ErrorReporter, default_reporter
from .scheduler import LoopScheduler, Scheduler, TimerHandle
from .state import (
    ZERO_STATE,
    AutoRetryElapsed,
    BoundaryEvent,
    BoundaryState,
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
from .view import RetryControl, build_fallback_view, retry_control

_LOGGER = logging.getLogger(__name__)

RenderFn = Callable[[], Any]


class FaultBoundary:
    """Catch render failures of one subtree and recover with bounded retries."""

    def __init__(
        self,
        render_children: RenderFn,
        options: BoundaryOptions | None = None,
        *,
        name: str = "FaultBoundary",
        scheduler: Scheduler | None = None,
        reporter: ErrorReporter | None = None,
        metrics: ErrorMetrics | None = None,
        settings: BoundarySettings | None = None,
    ) -> None:
        self._render_children = render_children
        self.options = options or BoundaryOptions()
        self.name = name
        self._scheduler = scheduler
        self._reporter = reporter
        self._metrics = metrics
        self._settings = settings or load_settings().boundary
        self._state = ZERO_STATE
        self._reset_keys = self.options.reset_keys
        self._timer: TimerHandle | None = None
        self._timer_generation = 0
        self._unmounted = False

    @property
    def state(self) -> BoundaryState:
        return self._state

    @property
    def unmounted(self) -> bool:
        return self._unmounted

    @property
    def retry_pending(self) -> bool:
        return self._timer is not None

    @property
    def retry_control(self) -> RetryControl | None:
        """Return the retry control while failed, else ``None``."""
        if not self._state.has_failure:
            return None
        return retry_control(exhausted=retries_exhausted(self._state, self.options.max_retries))

    def render(self) -> Any:
        """Render the subtree, or the fallback once a failure was captured."""
        if self._state.has_failure:
            return self._fallback()
        try:
            view = self._render_children()
        except Exception as exc:  # noqa: BLE001
            self.capture(exc, component_stack=_component_stack(exc, self.name))
            return self._fallback()
        self._dispatch(RenderSucceeded())
        return view

    def capture(self, failure: BaseException | FailureRecord | str, component_stack: str = "") -> None:
        """Move to ``Failed`` for ``failure`` and schedule a retry if budget remains."""
        if self._unmounted:
            return
        record = FailureRecord.coerce(failure)
        error_id = generate_error_id()
        info = ErrorInfo(component_stack=component_stack)

        if not self._state.has_failure:
            self._cancel_timer()
        self._dispatch(FailureCaptured(failure=record, error_id=error_id, info=info))

        context = ErrorContext(component=self.name, action="render")
        classified = classify(record, context, error_id=error_id)
        frequency = (self._metrics or default_error_metrics()).record(
            classified.category, component=self.name, action="render"
        )
        log_safely(
            _LOGGER,
            logging.ERROR,
            f"Fault boundary caught error: {record.message}",
            context={
                fields.EVENT: fields.FAILURE_CAPTURED_EVENT,
                fields.BOUNDARY: self.name,
                fields.ERROR_ID: error_id,
                fields.ERROR_NAME: record.name,
                fields.ERROR_CATEGORY: classified.category.value,
                fields.ERROR_PRIORITY: classified.priority.value,
                fields.RETRY_COUNT: self._state.retry_count,
                fields.FREQUENCY: frequency,
            },
        )
        self._notify_on_error(record, info)
        self._schedule_retry()

    def update(
        self,
        *,
        render_children: RenderFn | None = None,
        reset_keys: tuple[str | int, ...] | list[str | int] | None = None,
    ) -> None:
        """Apply new props; a reset-key change while failed resets the boundary."""
        if render_children is not None:
            self._render_children = render_children
        if reset_keys is None:
            return
        previous = self._reset_keys
        self._reset_keys = tuple(reset_keys)
        if self._unmounted or not self._state.has_failure:
            return
        if self.options.reset_on_props_change and reset_keys_changed(previous, self._reset_keys):
            self._cancel_timer()
            self._dispatch(ResetKeysChanged())
            self._log_reset("reset_keys")

    def retry(self) -> None:
        """Manual retry; a no-op while the retry control is disabled."""
        if self._unmounted or not self._state.has_failure:
            return
        if retries_exhausted(self._state, self.options.max_retries):
            return
        self._cancel_timer()
        self._dispatch(ManualRetry(max_retries=self.options.max_retries))

    def reset(self) -> None:
        """External reset to the zero state, ignoring retry budget."""
        if self._unmounted:
            return
        self._cancel_timer()
        self._dispatch(Reset())
        self._log_reset("reset")

    def report(self) -> bool:
        """Submit the captured failure to the reporting sink in the background.

        Returns whether a submission was started. Nothing raised here reaches
        the caller and the boundary state is never touched.
        """
        state = self._state
        if not state.has_failure or state.failure is None or state.error_id is None:
            return False
        report = ErrorReport(
            error_id=state.error_id,
            message=state.failure.message,
            stack=state.failure.stack,
            component_stack=state.info.component_stack if state.info else None,
            user_agent=self._settings.user_agent,
            url=self._settings.url,
            timestamp=datetime.now(UTC),
        )
        coroutine = None
        try:
            coroutine = (self._reporter or default_reporter()).submit(report)
            self._get_scheduler().spawn(coroutine)
        except Exception as exc:  # noqa: BLE001
            if coroutine is not None:
                coroutine.close()
            log_safely(
                _LOGGER,
                logging.WARNING,
                f"Failed to start error report: {exc}",
                context={
                    fields.EVENT: fields.REPORT_FAILED_EVENT,
                    fields.ERROR_ID: state.error_id,
                },
            )
            return False
        return True

    def unmount(self) -> None:
        """Tear down; pending retry timers never fire a transition afterwards."""
        self._cancel_timer()
        self._unmounted = True

    def __enter__(self) -> FaultBoundary:
        return self

    def __exit__(self, *_: object) -> None:
        self.unmount()

    def _fallback(self) -> Any:
        if self.options.fallback is not None:
            return self.options.fallback
        state = self._state
        return build_fallback_view(
            state.failure or FailureRecord(message=""),
            error_id=state.error_id,
            exhausted=retries_exhausted(state, self.options.max_retries),
            component_stack=state.info.component_stack if state.info else "",
            developer_mode=self._settings.developer_mode,
        )

    def _dispatch(self, event: BoundaryEvent) -> None:
        self._state = transition(self._state, event)

    def _notify_on_error(self, record: FailureRecord, info: ErrorInfo) -> None:
        callback = self.options.on_error
        if callback is None:
            return
        try:
            callback(record, info)
        except Exception:  # noqa: BLE001
            log_safely(
                _LOGGER,
                logging.ERROR,
                "Fault boundary on_error callback raised",
                context={fields.BOUNDARY: self.name, fields.ERROR_ID: self._state.error_id},
                exc_info=True,
            )

    def _schedule_retry(self) -> None:
        if self._timer is not None:
            # A capture while a retry is already pending keeps the original deadline.
            return
        if not should_schedule_retry(self._state, self.options.max_retries):
            return
        try:
            scheduler = self._get_scheduler()
        except RuntimeError as exc:
            log_safely(
                _LOGGER,
                logging.WARNING,
                f"Auto-retry skipped, no scheduler available: {exc}",
                context={fields.BOUNDARY: self.name, fields.ERROR_ID: self._state.error_id},
            )
            return
        delay_ms = retry_delay_ms(self._state.retry_count, self.options.retry_delay_ms)
        generation = self._timer_generation
        self._timer = scheduler.call_later(
            delay_ms / 1000.0,
            functools.partial(self._on_retry_timer, generation),
        )
        log_safely(
            _LOGGER,
            logging.INFO,
            "Auto-retry scheduled",
            context={
                fields.EVENT: fields.RETRY_SCHEDULED_EVENT,
                fields.BOUNDARY: self.name,
                fields.RETRY_COUNT: self._state.retry_count,
                fields.RETRY_DELAY_MS: delay_ms,
                fields.MAX_RETRIES: self.options.max_retries,
            },
        )

    def _on_retry_timer(self, generation: int) -> None:
        if self._unmounted or generation != self._timer_generation:
            return
        self._timer = None
        self._timer_generation += 1
        self._dispatch(AutoRetryElapsed())

    def _cancel_timer(self) -> None:
        self._timer_generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _get_scheduler(self) -> Scheduler:
        """Return the injected scheduler or one bound to the running loop.

        Raises ``RuntimeError`` outside a running event loop.
        """
        if self._scheduler is None:
            self._scheduler = LoopScheduler()
        return self._scheduler

    def _log_reset(self, reason: str) -> None:
        log_safely(
            _LOGGER,
            logging.INFO,
            f"Fault boundary reset ({reason})",
            context={fields.EVENT: fields.BOUNDARY_RESET_EVENT, fields.BOUNDARY: self.name},
        )


def with_error_boundary(
    options: BoundaryOptions | None = None,
    **boundary_kwargs: Any,
) -> Callable[[Callable[..., Any]], Callable[..., FaultBoundary]]:
    """Decorate a render function so each call yields a wrapping boundary."""

    def decorate(render: Callable[..., Any]) -> Callable[..., FaultBoundary]:
        settings = {"name": render.__name__, **boundary_kwargs}

        @functools.wraps(render)
        def factory(*args: Any, **kwargs: Any) -> FaultBoundary:
            return FaultBoundary(
                functools.partial(render, *args, **kwargs),
                options,
                **settings,
            )

        return factory

    return decorate


def _component_stack(exc: BaseException, boundary_name: str) -> str:
    """Describe where ``exc`` was raised, innermost frame first."""
    frames = traceback.extract_tb(exc.__traceback__)
    lines = [f"    in {frame.name} ({frame.filename}:{frame.lineno})" for frame in reversed(frames)]
    lines.append(f"    in {boundary_name}")
    return "\n".join(lines)
