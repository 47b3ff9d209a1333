"""Shared identifier primitives for failure correlation."""

from packages.rampart_shared.ids.error_id import (
    ERROR_ID_PREFIX,
    SUFFIX_LENGTH,
    error_id_timestamp_ms,
    generate_error_id,
    is_error_id,
)

__all__ = [
    "ERROR_ID_PREFIX",
    "SUFFIX_LENGTH",
    "error_id_timestamp_ms",
    "generate_error_id",
    "is_error_id",
]
