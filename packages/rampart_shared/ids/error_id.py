"""Generation and parsing of failure correlation identifiers.

An error id has the form ``error_<timestamp_ms>_<random>`` where the random
suffix is nine lowercase base-36 characters drawn from ``secrets``. Timestamps
never move backwards within one process, so ids sort by capture time.
"""

from __future__ import annotations

import secrets
import threading
import time

ERROR_ID_PREFIX = "error"
SUFFIX_LENGTH = 9
_BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"

_clock_lock = threading.Lock()
_last_timestamp_ms = 0


def generate_error_id(*, timestamp_ms: int | None = None) -> str:
    """Return a new process-unique, time-ordered error identifier."""
    ts_ms = _next_timestamp_ms() if timestamp_ms is None else int(timestamp_ms)
    if ts_ms < 0:
        raise ValueError("timestamp_ms must be non-negative")
    suffix = "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"{ERROR_ID_PREFIX}_{ts_ms}_{suffix}"


def error_id_timestamp_ms(value: str) -> int:
    """Extract the millisecond timestamp embedded in an error id."""
    prefix, _, remainder = value.partition("_")
    timestamp, _, suffix = remainder.partition("_")
    if prefix != ERROR_ID_PREFIX or not timestamp.isdigit() or not suffix:
        raise ValueError(f"Invalid error id: {value!r}")
    return int(timestamp)


def is_error_id(value: object) -> bool:
    """Return ``True`` when ``value`` is a well-formed error id."""
    if not isinstance(value, str):
        return False
    try:
        error_id_timestamp_ms(value)
    except ValueError:
        return False
    suffix = value.rsplit("_", 1)[-1]
    return len(suffix) == SUFFIX_LENGTH and all(c in _BASE36_ALPHABET for c in suffix)


def _next_timestamp_ms() -> int:
    """Return wall-clock milliseconds clamped to be monotonic per process."""
    global _last_timestamp_ms
    now = int(time.time() * 1000)
    with _clock_lock:
        if now < _last_timestamp_ms:
            now = _last_timestamp_ms
        _last_timestamp_ms = now
    return now
