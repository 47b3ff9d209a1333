"""Conversion of request-handling failures into failure envelopes.

Raw exceptions never leave a request unconverted: route handlers are wrapped
by ``api_error_handling`` and the app carries exception handlers as a net for
anything raised outside a wrapped route.
"""

from __future__ import annotations

import functools
from typing import Any, Awaitable, Callable, Mapping

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from packages.rampart_shared.envelope import (
    FailureEnvelope,
    SuccessEnvelope,
    code_for_status,
    failure,
    failure_from_exception,
    validation_failure,
)
from packages.rampart_shared.errors import (
    DomainError,
    ErrorContext,
    ValidationError,
    error_type_for_status,
)
from packages.rampart_shared.metrics import ErrorMetrics

Handler = Callable[..., Awaitable[Any]]


def envelope_response(
    envelope: SuccessEnvelope[Any] | FailureEnvelope,
    *,
    status_code: int | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Serialize one envelope with its mapped HTTP status."""
    return JSONResponse(
        status_code=status_code or envelope.status_code,
        content=envelope.to_wire(),
        headers=dict(headers) if headers else None,
    )


def request_context(request: Request, component: str = "api") -> ErrorContext:
    """Describe the current request for classification and logging."""
    return ErrorContext(
        component=component,
        action=f"{request.method} {request.url.path}",
    )


def api_error_handling(
    component: str = "api",
    *,
    metrics: ErrorMetrics | None = None,
) -> Callable[[Handler], Handler]:
    """Wrap an async route so any exception becomes a failure envelope.

    ``HTTPException`` keeps its status and headers: it is re-raised and
    converted by the handler installed in ``register_exception_handlers``.
    """

    def decorate(handler: Handler) -> Handler:
        @functools.wraps(handler)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await handler(*args, **kwargs)
            except StarletteHTTPException:
                raise
            except Exception as exc:  # noqa: BLE001
                context = ErrorContext(component=component, action=handler.__name__)
                return envelope_response(
                    failure_from_exception(exc, context, metrics=metrics)
                )

        return wrapper

    return decorate


def register_exception_handlers(app: FastAPI, *, metrics: ErrorMetrics | None = None) -> None:
    """Install envelope-producing handlers for every exception family."""

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [_format_validation_error(item) for item in exc.errors()]
        envelope = validation_failure(
            "Invalid request",
            ValidationError("Invalid request", errors=errors),
            request_context(request),
            details={"errors": errors},
            metrics=metrics,
        )
        return envelope_response(envelope)

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        # Covers HTTPException raised by routes and the router's own 404/405.
        if isinstance(exc.detail, str):
            message, details = exc.detail, None
        else:
            message, details = "Request failed", exc.detail
        error_type = error_type_for_status(exc.status_code)
        envelope = failure(
            code_for_status(exc.status_code),
            message,
            error_type(message) if error_type is not None else exc,
            request_context(request),
            details=details,
            metrics=metrics,
        )
        return envelope_response(envelope, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(DomainError)
    async def _domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        envelope = failure_from_exception(
            exc,
            request_context(request),
            details=exc.details or None,
            metrics=metrics,
        )
        return envelope_response(envelope)

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        envelope = failure_from_exception(exc, request_context(request), metrics=metrics)
        return envelope_response(envelope)


def _format_validation_error(item: Mapping[str, Any]) -> str:
    location = ".".join(str(part) for part in item.get("loc", ()) if part != "body")
    message = str(item.get("msg", "invalid value"))
    return f"{location}: {message}" if location else message
