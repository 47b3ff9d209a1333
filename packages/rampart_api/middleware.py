"""Per-client rate limiting in front of every route."""

from __future__ import annotations

import logging
import math
from typing import Callable, Iterable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from packages.rampart_shared.envelope import rate_limit_failure
from packages.rampart_shared.logging import fields, log_safely
from packages.rampart_shared.metrics import ErrorMetrics
from packages.rampart_shared.ratelimit import FixedWindowRateLimiter

from .handlers import envelope_response, request_context

_LOGGER = logging.getLogger(__name__)


def client_identifier(request: Request) -> str:
    """Prefer the first forwarded address, then the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject over-limit clients with a ``RATE_LIMIT_ERROR`` envelope."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        limiter: FixedWindowRateLimiter,
        metrics: ErrorMetrics | None = None,
        exclude_paths: Iterable[str] = ("/health",),
    ) -> None:
        super().__init__(app)
        self.limiter = limiter
        self.metrics = metrics
        self.exclude_paths = tuple(exclude_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if any(request.url.path.startswith(path) for path in self.exclude_paths):
            return await call_next(request)

        identifier = client_identifier(request)
        if not self.limiter.is_allowed(identifier):
            status = self.limiter.get_status(identifier)
            headers = {"X-RateLimit-Remaining": "0"}
            if status is not None and status.blocked_until is not None:
                retry_after = max(0.0, status.blocked_until - self.limiter.now())
                headers["Retry-After"] = str(math.ceil(retry_after))
            log_safely(
                _LOGGER,
                logging.WARNING,
                "Rate limit exceeded",
                context={
                    fields.EVENT: fields.RATE_LIMITED_EVENT,
                    fields.CLIENT: identifier,
                    fields.METHOD: request.method,
                    fields.PATH: request.url.path,
                },
            )
            envelope = rate_limit_failure(
                "Too many requests. Please try again later.",
                context=request_context(request),
                metrics=self.metrics,
            )
            return envelope_response(envelope, headers=headers)

        response = await call_next(request)
        response.headers["X-RateLimit-Remaining"] = str(self.limiter.get_remaining(identifier))
        return response
