"""Tests for the thread-safe failure metrics aggregate."""

from __future__ import annotations

import threading

from packages.rampart_shared.errors import ErrorCategory
from packages.rampart_shared.metrics import ErrorMetrics


class _FakeCounter:
    """In-memory fake counter recording each add call."""

    def __init__(self) -> None:
        self.calls: list[tuple[int | float, dict[str, str]]] = []

    def add(self, amount: int | float, attributes: dict[str, str]) -> None:
        self.calls.append((amount, dict(attributes)))


class _FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_record_counts_by_category_and_component_and_emits_counter() -> None:
    """Each record should bump both aggregates and the OTel counter."""
    counter = _FakeCounter()
    metrics = ErrorMetrics(counter=counter)

    assert metrics.record(ErrorCategory.NETWORK, component="orders", action="sync") == 1
    assert metrics.record(ErrorCategory.NETWORK, component="orders", action="sync") == 2
    metrics.record(ErrorCategory.VALIDATION, component="users", action="create")

    assert metrics.count(ErrorCategory.NETWORK) == 2
    assert metrics.frequency("users", "create") == 1
    assert counter.calls[0] == (
        1,
        {"error_category": "Network", "component": "orders", "action": "sync"},
    )
    assert len(counter.calls) == 3


def test_concurrent_records_are_counted_exactly() -> None:
    """Concurrent updates from many threads should not lose increments."""
    metrics = ErrorMetrics()

    def worker() -> None:
        for _ in range(1_000):
            metrics.record(ErrorCategory.SERVER, component="api", action="request")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    snapshot = metrics.snapshot()
    assert snapshot.total_errors == 8_000
    assert snapshot.by_category == {"Server": 8_000}
    assert snapshot.by_component == {"api:request": 8_000}


def test_monitoring_status_flags_high_error_rate() -> None:
    """A burst of errors over one minute should be reported as unhealthy."""
    clock = _FakeClock()
    metrics = ErrorMetrics(clock=clock)
    for _ in range(30):
        metrics.record(ErrorCategory.DATABASE)
    clock.now += 60.0

    status = metrics.monitoring_status()

    assert status.error_count == 30
    assert status.error_rate_per_minute == 30.0
    assert status.is_healthy is False
    assert status.recommendations[0].startswith("High error rate")


def test_empty_metrics_are_healthy_and_reset_clears_counts() -> None:
    """No recorded errors should read as healthy; reset should drop counts."""
    metrics = ErrorMetrics()
    assert metrics.monitoring_status().is_healthy is True

    metrics.record(ErrorCategory.NETWORK)
    metrics.reset()

    assert metrics.snapshot().total_errors == 0
    assert metrics.count(ErrorCategory.NETWORK) == 0


def test_record_report_counts_outcomes_and_emits_report_counter() -> None:
    """Report outcomes should be aggregated and sent to the report counter only."""
    errors = _FakeCounter()
    reports = _FakeCounter()
    metrics = ErrorMetrics(counter=errors, report_counter=reports)

    assert metrics.record_report("submitted") == 1
    assert metrics.record_report("failed") == 1
    assert metrics.record_report("submitted") == 2
    metrics.record_report("received", source="sink")

    assert metrics.snapshot().reports == {"submitted": 2, "failed": 1, "received": 1}
    assert metrics.snapshot().total_errors == 0
    assert reports.calls[0] == (1, {"outcome": "submitted", "source": "client"})
    assert reports.calls[-1] == (1, {"outcome": "received", "source": "sink"})
    assert errors.calls == []

    metrics.reset()
    assert metrics.snapshot().reports == {}
