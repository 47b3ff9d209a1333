"""Stdout logging setup for Rampart processes.

Records are emitted either as newline-delimited JSON or as plain text. Both
formats carry the bound correlation fields; plain text leads with the error id
so support staff can grep for it.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import IO, Any, Mapping

from packages.rampart_shared.config import LoggingSettings

from . import fields
from .context import get_context

# Third-party loggers that log every request at INFO.
_CHATTY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


class ContextFilter(logging.Filter):
    """Attach correlation fields and static service identity to each record."""

    def __init__(self, static_fields: Mapping[str, str] | None = None) -> None:
        super().__init__()
        self._static_fields = dict(static_fields or {})

    def filter(self, record: logging.LogRecord) -> bool:
        record.context = {**self._static_fields, **get_context()}
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record with stable core keys first."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            fields.TIMESTAMP: datetime.fromtimestamp(record.created, UTC).isoformat(),
            fields.LEVEL: record.levelname,
            fields.LOGGER: record.name,
            fields.MESSAGE: record.getMessage(),
        }
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            for key, value in context.items():
                payload.setdefault(key, value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))


class PlainFormatter(logging.Formatter):
    """Readable single-line format; correlation fields trail the message."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)-8s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = dict(getattr(record, "context", None) or {})
        error_id = context.pop(fields.ERROR_ID, None)
        if error_id is not None:
            line = f"{line} [{error_id}]"
        if context:
            line = f"{line} " + " ".join(f"{key}={context[key]}" for key in sorted(context))
        return line


def configure_logging(
    *,
    level: str = "INFO",
    json_output: bool = True,
    service: str | None = None,
    environment: str | None = None,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Install one stdout handler on the root logger and return it.

    Calling again replaces the previous handler. Request-per-line loggers from
    the HTTP stack are capped at WARNING.
    """
    identity = {
        key: value
        for key, value in ((fields.SERVICE, service), (fields.ENVIRONMENT, environment))
        if value
    }
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level.upper())
    handler.addFilter(ContextFilter(identity))
    handler.setFormatter(JsonFormatter() if json_output else PlainFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())
    root.addHandler(handler)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler


def configure_from_settings(settings: LoggingSettings) -> logging.Handler:
    """Configure logging from the ``logging`` settings section."""
    return configure_logging(
        level=settings.level,
        json_output=settings.json_output,
        service=settings.service,
        environment=settings.environment,
    )


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name)
