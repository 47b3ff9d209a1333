"""Reporting sink and operational routes."""

import logging
from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from packages.rampart_boundary.reporter import ErrorReport
from packages.rampart_shared.envelope import success
from packages.rampart_shared.logging import fields, log_safely
from packages.rampart_shared.metrics import ErrorMetrics
from packages.rampart_shared.validation import raise_for_invalid, validate

from .handlers import api_error_handling, envelope_response

_LOGGER = logging.getLogger(__name__)


def register_routes(
    *,
    router: APIRouter,
    metrics: ErrorMetrics,
    report_path: str = "/errors/report",
) -> None:
    """Register sink, health and metrics routes on ``router``."""

    @router.post(report_path, status_code=202)
    @api_error_handling("errors", metrics=metrics)
    async def receive_error_report(payload: dict[str, Any] = Body(...)) -> JSONResponse:
        report = ErrorReport.model_validate(
            raise_for_invalid(validate(payload, ErrorReport), "Invalid error report")
        )
        log_safely(
            _LOGGER,
            logging.ERROR,
            f"Client error report: {report.message}",
            context={
                fields.EVENT: fields.REPORT_RECEIVED_EVENT,
                fields.ERROR_ID: report.error_id,
                "component_stack": report.component_stack,
                "user_agent": report.user_agent,
                "url": report.url,
            },
        )
        metrics.record_report(fields.REPORT_RECEIVED, source="sink")
        envelope = success({"errorId": report.error_id}, "Error report received")
        return envelope_response(envelope, status_code=202)

    @router.get("/health")
    async def health() -> JSONResponse:
        return envelope_response(success({"status": "ok"}))

    @router.get("/errors/metrics")
    @api_error_handling("errors", metrics=metrics)
    async def error_metrics() -> JSONResponse:
        status = metrics.monitoring_status()
        snapshot = metrics.snapshot()
        return envelope_response(
            success({"status": asdict(status), "snapshot": asdict(snapshot)})
        )
