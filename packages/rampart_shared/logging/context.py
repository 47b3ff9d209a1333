"""Correlation fields carried on every log line.

Failure ids, categories and boundary names are bound once and then ride along
on each emission within the same task or thread. Values keep their native type
so JSON output renders retry counts and flags as numbers and booleans.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Mapping

Scalar = str | int | float | bool

_CORRELATION: ContextVar[Mapping[str, Scalar]] = ContextVar(
    "rampart_log_correlation", default={}
)


def _normalize(value: object) -> Scalar:
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def get_context() -> dict[str, Scalar]:
    """Return a copy of the fields bound in the current context."""
    return dict(_CORRELATION.get())


def bind_context(**values: object) -> None:
    """Merge ``values`` into the current context, skipping ``None``."""
    merged = dict(_CORRELATION.get())
    merged.update({key: _normalize(value) for key, value in values.items() if value is not None})
    _CORRELATION.set(merged)


def clear_context(*keys: str) -> None:
    """Drop the named fields, or every field when none are named."""
    if not keys:
        _CORRELATION.set({})
        return
    _CORRELATION.set({key: value for key, value in _CORRELATION.get().items() if key not in keys})


@contextmanager
def log_context(values: Mapping[str, object]) -> Iterator[None]:
    """Bind ``values`` for the duration of the block only."""
    token = _CORRELATION.set(_CORRELATION.get())
    try:
        bind_context(**values)
        yield
    finally:
        _CORRELATION.reset(token)
