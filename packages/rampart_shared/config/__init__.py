"""Public API for shared Rampart configuration utilities."""

from .models import (
    DEFAULT_CONFIG_PATH,
    ApiSettings,
    BoundarySettings,
    ErrorMetricsOtelSettings,
    LoggingSettings,
    ObservabilitySettings,
    RampartSettings,
    RateLimitSettings,
    ReportingSettings,
    build_settings,
    load_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ApiSettings",
    "BoundarySettings",
    "ErrorMetricsOtelSettings",
    "LoggingSettings",
    "ObservabilitySettings",
    "RampartSettings",
    "RateLimitSettings",
    "ReportingSettings",
    "build_settings",
    "load_settings",
]
