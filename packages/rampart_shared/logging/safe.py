"""Best-effort logging that never raises into the caller."""

from __future__ import annotations

from typing import Any, Mapping

from .context import log_context


def log_safely(
    logger: Any,
    level: int,
    message: str,
    *,
    context: Mapping[str, object] | None = None,
    exc_info: bool = False,
) -> None:
    """Emit one log line with bound context and discard logger failures.

    The resilience layer must not become a source of unhandled failures, so a
    broken handler or formatter is dropped here.
    """
    try:
        with log_context(dict(context or {})):
            logger.log(level, message, exc_info=exc_info)
    except Exception:  # noqa: BLE001
        return
