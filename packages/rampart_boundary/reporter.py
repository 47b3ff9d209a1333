"""Fire-and-forget client for the error reporting sink.

Reporting must never become a new source of failures: every outcome other than
a 2xx response is logged and discarded.
"""

from __future__ import annotations

import logging
from datetime import datetime
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

from packages.rampart_shared.config import ReportingSettings, load_settings
from packages.rampart_shared.http import AsyncHttpClient, HttpClientError
from packages.rampart_shared.logging import fields, log_safely
from packages.rampart_shared.metrics import ErrorMetrics, default_error_metrics

_LOGGER = logging.getLogger(__name__)


class ErrorReport(BaseModel):
    """Report body posted to ``POST /errors/report``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    error_id: str = Field(alias="errorId")
    message: str
    stack: str | None = None
    component_stack: str | None = Field(default=None, alias="componentStack")
    user_agent: str = Field(default="", alias="userAgent")
    url: str = ""
    timestamp: datetime

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)


class ErrorReporter:
    """Post ``ErrorReport`` bodies to the reporting sink."""

    def __init__(
        self,
        client: AsyncHttpClient,
        *,
        path: str = "/errors/report",
        metrics: ErrorMetrics | None = None,
    ) -> None:
        self._client = client
        self._path = path
        self._metrics = metrics

    @classmethod
    def from_settings(
        cls, settings: ReportingSettings, *, metrics: ErrorMetrics | None = None
    ) -> ErrorReporter:
        return cls(AsyncHttpClient.from_settings(settings), path=settings.path, metrics=metrics)

    async def submit(self, report: ErrorReport) -> bool:
        """Submit one report; return ``True`` on 2xx and never raise."""
        try:
            await self._client.post(self._path, json=report.to_wire())
        except HttpClientError as exc:
            failure = exc.to_domain_error()
            self._log_failure(
                report,
                f"Failed to submit error report: {exc}",
                {
                    fields.ERROR_NAME: type(failure).__name__,
                    fields.STATUS_CODE: getattr(exc, "status_code", None),
                    fields.RETRYABLE: exc.retryable,
                },
            )
            return False
        except Exception as exc:  # noqa: BLE001
            self._log_failure(
                report,
                f"Failed to submit error report: {exc}",
                {fields.ERROR_NAME: type(exc).__name__},
            )
            return False

        self._record(fields.REPORT_SUBMITTED)
        log_safely(
            _LOGGER,
            logging.INFO,
            "Error report submitted",
            context={
                fields.EVENT: fields.REPORT_SUBMITTED_EVENT,
                fields.ERROR_ID: report.error_id,
            },
        )
        return True

    def _record(self, outcome: str) -> None:
        try:
            (self._metrics or default_error_metrics()).record_report(outcome)
        except Exception:  # noqa: BLE001
            log_safely(_LOGGER, logging.WARNING, "Failed to record report metric", exc_info=True)

    def _log_failure(
        self, report: ErrorReport, message: str, extra: dict[str, object]
    ) -> None:
        self._record(fields.REPORT_FAILED)
        log_safely(
            _LOGGER,
            logging.WARNING,
            message,
            context={
                fields.EVENT: fields.REPORT_FAILED_EVENT,
                fields.ERROR_ID: report.error_id,
                **extra,
            },
        )

    async def aclose(self) -> None:
        await self._client.aclose()


@lru_cache(maxsize=1)
def default_reporter() -> ErrorReporter:
    """Return the process-wide reporter built from settings.

    Its client is never closed: it lives as long as the process and stays bound
    to the event loop that first submits through it. Hosts that run more than
    one loop pass their own ``ErrorReporter`` to each boundary.
    """
    return ErrorReporter.from_settings(load_settings().reporting)
