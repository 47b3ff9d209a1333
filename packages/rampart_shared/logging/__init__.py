"""Public logging API for Rampart components.

This package wraps Python's ``logging`` module with stdout defaults, structured
context propagation, and a never-raising emission helper.
"""

from .config import configure_from_settings, configure_logging, get_logger
from .context import bind_context, clear_context, get_context, log_context
from .safe import log_safely

__all__ = [
    "bind_context",
    "clear_context",
    "configure_from_settings",
    "configure_logging",
    "get_context",
    "get_logger",
    "log_context",
    "log_safely",
]
