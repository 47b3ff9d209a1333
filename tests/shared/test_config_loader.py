"""Tests for pydantic-settings-backed Rampart configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from packages.rampart_shared.config import build_settings


def test_build_settings_uses_rampart_precedence_cascade(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Init params should override env, env should override YAML, then defaults."""
    config_file = tmp_path / "rampart.yaml"
    config_file.write_text(
        "\n".join(
            [
                "logging:",
                "  level: WARNING",
                "boundary:",
                "  max_retries: 5",
                "  retry_delay_ms: 250",
                "rate_limit:",
                "  max_requests: 7",
            ]
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("RAMPART_LOGGING__LEVEL", "ERROR")
    monkeypatch.setenv("RAMPART_BOUNDARY__RETRY_DELAY_MS", "400")

    settings = build_settings(
        config_path=config_file,
        logging={"level": "DEBUG"},
    )

    assert settings.logging.level == "DEBUG"
    assert settings.boundary.retry_delay_ms == 400
    assert settings.boundary.max_retries == 5
    assert settings.rate_limit.max_requests == 7


def test_build_settings_uses_model_defaults_when_sources_missing(tmp_path: Path) -> None:
    """Settings should fall back to model defaults when env and YAML are absent."""
    settings = build_settings(config_path=tmp_path / "missing.yaml")

    assert settings.logging.service == "rampart"
    assert settings.logging.level == "INFO"
    assert settings.boundary.max_retries == 3
    assert settings.boundary.retry_delay_ms == 1000
    assert settings.boundary.developer_mode is False
    assert settings.reporting.path == "/errors/report"
    assert settings.rate_limit.window_seconds == 900.0
    assert settings.observability.otel.meter_name == "rampart.errors"


def test_build_settings_rejects_negative_retry_budget(tmp_path: Path) -> None:
    """Boundary retry settings should be validated as non-negative."""
    with pytest.raises(ValueError):
        build_settings(
            config_path=tmp_path / "missing.yaml",
            boundary={"max_retries": -1},
        )
