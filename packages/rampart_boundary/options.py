"""Construction options for fault boundaries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence

from packages.rampart_shared.config import BoundarySettings
from packages.rampart_shared.errors import FailureRecord

from .state import ErrorInfo

OnError = Callable[[FailureRecord, ErrorInfo], None]


@dataclass(frozen=True)
class BoundaryOptions:
    """Caller configuration for one boundary.

    ``fallback`` replaces the default degraded view when set. Reset keys are
    watched only while ``reset_on_props_change`` is true.
    """

    fallback: Any | None = None
    on_error: OnError | None = None
    max_retries: int = 3
    retry_delay_ms: int = 1000
    reset_on_props_change: bool = True
    reset_keys: tuple[str | int, ...] | None = None

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.retry_delay_ms < 0:
            raise ValueError("retry_delay_ms must be >= 0")
        if self.reset_keys is not None and not isinstance(self.reset_keys, tuple):
            object.__setattr__(self, "reset_keys", tuple(self.reset_keys))

    @classmethod
    def from_settings(
        cls,
        settings: BoundarySettings,
        *,
        fallback: Any | None = None,
        on_error: OnError | None = None,
        reset_on_props_change: bool = True,
        reset_keys: Sequence[str | int] | None = None,
    ) -> BoundaryOptions:
        """Build options using configured retry defaults."""
        return cls(
            fallback=fallback,
            on_error=on_error,
            max_retries=settings.max_retries,
            retry_delay_ms=settings.retry_delay_ms,
            reset_on_props_change=reset_on_props_change,
            reset_keys=None if reset_keys is None else tuple(reset_keys),
        )
