"""HTTP surface for the Rampart resilience core."""

from .app import create_api_app
from .handlers import api_error_handling, envelope_response, register_exception_handlers
from .middleware import RateLimitMiddleware, client_identifier

__all__ = [
    "RateLimitMiddleware",
    "api_error_handling",
    "client_identifier",
    "create_api_app",
    "envelope_response",
    "register_exception_handlers",
]
