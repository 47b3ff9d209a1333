"""FastAPI application factory for the Rampart HTTP surface."""

from __future__ import annotations

from fastapi import APIRouter, FastAPI

from packages.rampart_shared.config import RampartSettings, load_settings
from packages.rampart_shared.metrics import ErrorMetrics, default_error_metrics
from packages.rampart_shared.ratelimit import FixedWindowRateLimiter

from .handlers import register_exception_handlers
from .middleware import RateLimitMiddleware
from .routes import register_routes


def create_api_app(
    *,
    settings: RampartSettings | None = None,
    limiter: FixedWindowRateLimiter | None = None,
    metrics: ErrorMetrics | None = None,
) -> FastAPI:
    """Build the app with envelope error handling and rate limiting wired in."""
    settings = settings or load_settings()
    metrics = metrics or default_error_metrics()
    limiter = limiter or FixedWindowRateLimiter.from_settings(settings.rate_limit)

    app = FastAPI(title=settings.api.title, version="0.1.0")
    app.state.metrics = metrics
    app.state.rate_limiter = limiter

    register_exception_handlers(app, metrics=metrics)
    app.add_middleware(
        RateLimitMiddleware,
        limiter=limiter,
        metrics=metrics,
        exclude_paths=("/health",),
    )

    router = APIRouter()
    register_routes(router=router, metrics=metrics, report_path=settings.reporting.path)
    app.include_router(router)
    return app
