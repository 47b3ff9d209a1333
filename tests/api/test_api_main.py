"""Tests for the API process entrypoint."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI

from packages.rampart_api import create_api_app
from packages.rampart_api import main as api_main
from packages.rampart_shared.config import build_settings


def test_create_api_app_uses_configured_title(tmp_path: Path) -> None:
    settings = build_settings(config_path=tmp_path / "rampart.yaml", api={"title": "Orders API"})

    app = create_api_app(settings=settings)

    assert app.title == "Orders API"
    assert app.state.rate_limiter is not None


def test_api_main_serves_configured_app(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """The entrypoint should configure logging and bind from settings."""
    settings = build_settings(
        config_path=tmp_path / "rampart.yaml",
        api={"host": "0.0.0.0", "port": 8088},
        logging={"level": "WARNING"},
    )
    configured: list[str] = []
    served: dict[str, Any] = {}

    def _fake_run(app: FastAPI, **kwargs: Any) -> None:
        served["app"] = app
        served["kwargs"] = kwargs

    monkeypatch.setattr(api_main, "load_settings", lambda: settings)
    monkeypatch.setattr(
        api_main, "configure_from_settings", lambda section: configured.append(section.level)
    )
    monkeypatch.setattr(api_main.uvicorn, "run", _fake_run)

    api_main.main()

    assert configured == ["WARNING"]
    assert isinstance(served["app"], FastAPI)
    assert served["kwargs"] == {
        "host": "0.0.0.0",
        "port": 8088,
        "log_level": "warning",
        "log_config": None,
    }
