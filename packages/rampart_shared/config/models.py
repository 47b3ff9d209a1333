"""Typed configuration models for Rampart runtime settings."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "rampart" / "rampart.yaml"


class LoggingSettings(BaseModel):
    """Structured logging configuration shared by Rampart components."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True
    service: str = "rampart"
    environment: str = "dev"


class BoundarySettings(BaseModel):
    """Defaults applied to fault isolation boundaries."""

    max_retries: int = Field(default=3, ge=0)
    retry_delay_ms: int = Field(default=1000, ge=0)
    developer_mode: bool = False
    user_agent: str = "rampart"
    url: str = ""


class ReportingSettings(BaseModel):
    """Reporting sink client settings."""

    base_url: str = "http://localhost:8000"
    path: str = "/errors/report"
    timeout_seconds: float = Field(default=5.0, gt=0)


class ApiSettings(BaseModel):
    """HTTP surface bind settings."""

    host: str = "127.0.0.1"
    port: int = Field(default=8000, gt=0, le=65535)
    title: str = "Rampart API"


class RateLimitSettings(BaseModel):
    """Fixed-window rate limiter settings."""

    max_requests: int = Field(default=100, gt=0)
    window_seconds: float = Field(default=900.0, gt=0)
    block_duration_seconds: float = Field(default=300.0, ge=0)
    max_entries: int = Field(default=10_000, gt=0)


class ErrorMetricsOtelSettings(BaseModel):
    """Configurable OTel names for error metrics."""

    meter_name: str = "rampart.errors"
    metric_errors_total: str = "rampart_errors_total"
    metric_reports_total: str = "rampart_error_reports_total"


class ObservabilitySettings(BaseModel):
    """Global observability configuration."""

    otel: ErrorMetricsOtelSettings = Field(default_factory=ErrorMetricsOtelSettings)


class RampartSettings(BaseSettings):
    """Root runtime settings resolved from init/env/yaml/defaults sources."""

    model_config = SettingsConfigDict(
        env_prefix="RAMPART_",
        env_nested_delimiter="__",
        extra="ignore",
        nested_model_default_partial_update=True,
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    boundary: BoundarySettings = Field(default_factory=BoundarySettings)
    reporting: ReportingSettings = Field(default_factory=ReportingSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    _config_path: ClassVar[Path] = DEFAULT_CONFIG_PATH

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Apply Rampart precedence: init > env > yaml > defaults."""
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(
                settings_cls,
                yaml_file=cls._config_path,
                yaml_file_encoding="utf-8",
            ),
        )


@lru_cache(maxsize=1)
def load_settings() -> RampartSettings:
    """Return process-wide settings resolved once from the cascade."""
    return RampartSettings()


def build_settings(
    *,
    config_path: str | Path | None = None,
    **overrides: Any,
) -> RampartSettings:
    """Resolve settings without caching, optionally from a specific YAML file."""
    if config_path is None:
        return RampartSettings(**overrides)

    class _FileScopedSettings(RampartSettings):
        _config_path: ClassVar[Path] = Path(config_path)

    return _FileScopedSettings(**overrides)
