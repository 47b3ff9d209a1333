"""Process-wide failure counters for observability.

Counters are updated from concurrently served requests, so every mutation and
every snapshot happens under one lock. Each recorded failure and each error
report is also emitted to an OpenTelemetry counter; without a configured meter provider the OTel API
no-ops.
"""

from __future__ import annotations

import threading
import time
from collections import Counter
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Mapping, Protocol

from opentelemetry import metrics as otel_metrics

from packages.rampart_shared.config import load_settings
from packages.rampart_shared.errors.types import ErrorCategory
from packages.rampart_shared.logging import fields


class _CounterLike(Protocol):
    """Minimal counter interface used for metric emission."""

    def add(self, amount: int | float, attributes: Mapping[str, str]) -> None:
        """Record one counter increment with attributes."""


@dataclass(frozen=True)
class ErrorMetricsSnapshot:
    """Point-in-time copy of aggregated failure counts."""

    total_errors: int
    by_category: Mapping[str, int]
    by_component: Mapping[str, int]
    last_error_at: Mapping[str, float]
    error_rate_per_minute: float
    reports: Mapping[str, int]


@dataclass(frozen=True)
class MonitoringStatus:
    """Health verdict derived from the current error rate."""

    error_count: int
    error_rate_per_minute: float
    is_healthy: bool
    recommendations: tuple[str, ...]


class ErrorMetrics:
    """Thread-safe aggregate of failure counts by category and component."""

    def __init__(
        self,
        *,
        counter: _CounterLike | None = None,
        report_counter: _CounterLike | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._lock = threading.Lock()
        self._counter = counter
        self._report_counter = report_counter
        self._clock = clock
        self._by_category: Counter[str] = Counter()
        self._by_component: Counter[str] = Counter()
        self._last_error_at: dict[str, float] = {}
        self._first_error_at: float | None = None
        self._reports: Counter[str] = Counter()

    def record(
        self,
        category: ErrorCategory,
        *,
        component: str = "unknown",
        action: str = "unknown",
    ) -> int:
        """Count one failure and return the new frequency for its component key."""
        key = f"{component}:{action}"
        now = self._clock()
        with self._lock:
            self._by_category[category.value] += 1
            self._by_component[key] += 1
            self._last_error_at[key] = now
            if self._first_error_at is None:
                self._first_error_at = now
            frequency = self._by_component[key]

        if self._counter is not None:
            self._counter.add(
                1,
                attributes={
                    fields.ERROR_CATEGORY: category.value,
                    fields.COMPONENT: component,
                    fields.ACTION: action,
                },
            )
        return frequency

    def record_report(self, outcome: str, *, source: str = "client") -> int:
        """Count one error report by outcome and return the running total for it."""
        with self._lock:
            self._reports[outcome] += 1
            total = self._reports[outcome]
        if self._report_counter is not None:
            self._report_counter.add(
                1,
                attributes={fields.OUTCOME: outcome, fields.SOURCE: source},
            )
        return total

    def frequency(
self, component: str, action: str) -> int:
        """Return how many failures were recorded for one component/action."""
        with self._lock:
            return self._by_component[f"{component}:{action}"]

    def count(self, category: ErrorCategory) -> int:
        """Return how many failures were recorded for one category."""
        with self._lock:
            return self._by_category[category.value]

    def snapshot(self) -> ErrorMetricsSnapshot:
        """Return a consistent copy of all counters."""
        now = self._clock()
        with self._lock:
            total = sum(self._by_category.values())
            return ErrorMetricsSnapshot(
                total_errors=total,
                by_category=dict(self._by_category),
                by_component=dict(self._by_component),
                last_error_at=dict(self._last_error_at),
                error_rate_per_minute=_rate(total, self._first_error_at, now),
                reports=dict(self._reports),
            )

    def monitoring_status(self) -> MonitoringStatus:
        """Return a health verdict with operator recommendations."""
        snapshot = self.snapshot()
        rate = snapshot.error_rate_per_minute
        return MonitoringStatus(
            error_count=snapshot.total_errors,
            error_rate_per_minute=rate,
            is_healthy=rate < 0.1,
            recommendations=_health_recommendations(rate),
        )

    def reset(self) -> None:
        """Drop all recorded counts."""
        with self._lock:
            self._by_category.clear()
            self._by_component.clear()
            self._last_error_at.clear()
            self._first_error_at = None
            self._reports.clear()


def _rate(total: int, first_error_at: float | None, now: float) -> float:
    if first_error_at is None:
        return 0.0
    elapsed_minutes = (now - first_error_at) / 60.0
    if elapsed_minutes <= 0:
        return 0.0
    return total / elapsed_minutes


def _health_recommendations(rate: float) -> tuple[str, ...]:
    if rate > 0.5:
        return (
            "High error rate detected. Review error logs immediately.",
            "Check system health and dependencies.",
        )
    if rate > 0.2:
        return (
            "Moderate error rate. Monitor closely.",
            "Review recent changes that might have introduced errors.",
        )
    if rate > 0.1:
        return ("Slightly elevated error rate.", "Continue monitoring.")
    return ("System is healthy.", "Continue normal operations.")


@lru_cache(maxsize=1)
def default_error_metrics() -> ErrorMetrics:
    """Return the process-wide metrics aggregate backed by OTel counters."""
    names = load_settings().observability.otel
    meter = otel_metrics.get_meter(names.meter_name)
    counter = meter.create_counter(
        name=names.metric_errors_total,
        description="Count of classified failures by category and component.",
        unit="1",
    )
    report_counter = meter.create_counter(
        name=names.metric_reports_total,
        description="Count of error reports by outcome.",
        unit="1",
    )
    return ErrorMetrics(counter=counter, report_counter=report_counter)
