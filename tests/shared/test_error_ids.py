"""Tests for failure correlation identifiers."""

from __future__ import annotations

import pytest

from packages.rampart_shared.ids import (
    SUFFIX_LENGTH,
    error_id_timestamp_ms,
    generate_error_id,
    is_error_id,
)


def test_error_id_has_prefix_timestamp_and_base36_suffix() -> None:
    """Generated ids should follow ``error_<timestamp>_<random>``."""
    value = generate_error_id(timestamp_ms=1_700_000_000_000)

    prefix, timestamp, suffix = value.split("_")
    assert prefix == "error"
    assert timestamp == "1700000000000"
    assert len(suffix) == SUFFIX_LENGTH
    assert is_error_id(value)


def test_error_ids_are_unique_and_time_ordered() -> None:
    """Ids generated in sequence should be distinct with non-decreasing timestamps."""
    values = [generate_error_id() for _ in range(500)]
    timestamps = [error_id_timestamp_ms(value) for value in values]

    assert len(set(values)) == len(values)
    assert timestamps == sorted(timestamps)


@pytest.mark.parametrize("value", ["", "error_", "err_1_abcdefghi", "error_x_abcdefghi", 17])
def test_is_error_id_rejects_malformed_values(value: object) -> None:
    """Malformed values should not be treated as error ids."""
    assert is_error_id(value) is False


def test_negative_timestamp_is_rejected() -> None:
    """Explicit timestamps must be non-negative."""
    with pytest.raises(ValueError):
        generate_error_id(timestamp_ms=-1)
