"""Timer and background-task scheduling on the UI event loop."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Coroutine, Protocol


class TimerHandle(Protocol):
    """Cancellable handle for one scheduled callback."""

    def cancel(self) -> None:
        """Prevent the callback from running if it has not run yet."""


class Scheduler(Protocol):
    """Single-threaded scheduling contract used by fault boundaries."""

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once after ``delay_seconds``."""

    def spawn(self, coroutine: Coroutine[Any, Any, Any]) -> None:
        """Run ``coroutine`` in the background without awaiting it."""


class LoopScheduler:
    """``Scheduler`` backed by an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self._tasks: set[asyncio.Task[Any]] = set()

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> TimerHandle:
        return self._loop.call_later(delay_seconds, callback)

    def spawn(self, coroutine: Coroutine[Any, Any, Any]) -> None:
        # The loop only keeps weak references to tasks.
        task = self._loop.create_task(coroutine)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
