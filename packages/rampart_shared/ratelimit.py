"""Fixed-window rate limiter over a bounded, lazily expiring map.

Entries expire when they are next touched rather than through a background
sweep. The map is capped at ``max_entries``; the least recently used
identifier is evicted first. All access is serialized by one lock because
requests are served concurrently.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from packages.rampart_shared.config import RateLimitSettings


@dataclass
class _WindowEntry:
    count: int
    reset_at: float
    last_request: float
    blocked_until: float | None = None


@dataclass(frozen=True)
class RateLimitStatus:
    """Current allowance for one identifier."""

    remaining: int
    reset_at: float
    blocked: bool
    blocked_until: float | None


@dataclass(frozen=True)
class RateLimitStats:
    """Aggregate view of tracked identifiers."""

    total_requests: int
    blocked_count: int
    active_identifiers: int
    tracked_identifiers: int


class FixedWindowRateLimiter:
    """Allow ``max_requests`` per identifier per window, then block."""

    def __init__(
        self,
        *,
        max_requests: int = 100,
        window_seconds: float = 900.0,
        block_duration_seconds: float = 300.0,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests <= 0:
            raise ValueError("max_requests must be positive")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._block_duration_seconds = block_duration_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, _WindowEntry] = OrderedDict()
        self._lock = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: RateLimitSettings,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> FixedWindowRateLimiter:
        """Build a limiter from the ``rate_limit`` settings section."""
        return cls(
            max_requests=settings.max_requests,
            window_seconds=settings.window_seconds,
            block_duration_seconds=settings.block_duration_seconds,
            max_entries=settings.max_entries,
            clock=clock,
        )

    def is_allowed(self, identifier: str) -> bool:
        """Count one request for ``identifier`` and return whether it may proceed."""
        now = self._clock()
        with self._lock:
            entry = self._live_entry(identifier, now)
            if entry is None:
                self._insert(
                    identifier,
                    _WindowEntry(
                        count=1,
                        reset_at=now + self._window_seconds,
                        last_request=now,
                    ),
                )
                return True

            if entry.blocked_until is not None:
                if now < entry.blocked_until:
                    return False
                entry.blocked_until = None

            if entry.count >= self._max_requests:
                entry.blocked_until = now + self._block_duration_seconds
                return False

            entry.count += 1
            entry.last_request = now
            return True

    def get_remaining(self, identifier: str) -> int:
        """Return how many requests remain in the current window."""
        now = self._clock()
        with self._lock:
            entry = self._live_entry(identifier, now)
            if entry is None:
                return self._max_requests
            return max(0, self._max_requests - entry.count)

    def get_status(self, identifier: str) -> RateLimitStatus | None:
        """Return the allowance for ``identifier`` or ``None`` when untracked."""
        now = self._clock()
        with self._lock:
            entry = self._live_entry(identifier, now)
            if entry is None:
                return None
            blocked = entry.blocked_until is not None and now < entry.blocked_until
            return RateLimitStatus(
                remaining=max(0, self._max_requests - entry.count),
                reset_at=entry.reset_at,
                blocked=blocked,
                blocked_until=entry.blocked_until,
            )

    def stats(self) -> RateLimitStats:
        """Return aggregate counts over identifiers still inside their window."""
        now = self._clock()
        with self._lock:
            total = 0
            blocked = 0
            active = 0
            for entry in self._entries.values():
                if now > entry.reset_at:
                    continue
                active += 1
                total += entry.count
                if entry.blocked_until is not None and now < entry.blocked_until:
                    blocked += 1
            return RateLimitStats(
                total_requests=total,
                blocked_count=blocked,
                active_identifiers=active,
                tracked_identifiers=len(self._entries),
            )

    def reset(self, identifier: str | None = None) -> None:
        """Forget one identifier, or every identifier when none is given."""
        with self._lock:
            if identifier is None:
                self._entries.clear()
            else:
                self._entries.pop(identifier, None)

    def now(self) -> float:
        """Return the current reading of the limiter's clock."""
        return self._clock()

    def _live_entry(self, identifier: str, now: float) -> _WindowEntry | None:
        """Return the unexpired entry for ``identifier``, dropping a stale one."""
        entry = self._entries.get(identifier)
        if entry is None:
            return None
        blocked = entry.blocked_until is not None and now < entry.blocked_until
        if now > entry.reset_at and not blocked:
            del self._entries[identifier]
            return None
        self._entries.move_to_end(identifier)
        return entry

    def _insert(self, identifier: str, entry: _WindowEntry) -> None:
        self._entries[identifier] = entry
        self._entries.move_to_end(identifier)
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)
