"""Fault isolation boundary for rendered UI subtrees."""

from .boundary import FaultBoundary, with_error_boundary
from .capture import ErrorHandler
from .options import BoundaryOptions
from .reporter import ErrorReport, ErrorReporter, default_reporter
from .scheduler import LoopScheduler, Scheduler, TimerHandle
from .state import BoundaryState, ErrorInfo, transition
from .view import (
    EXHAUSTED_LABEL,
    TRY_AGAIN_LABEL,
    FallbackView,
    RetryControl,
    TechnicalDetails,
    build_fallback_view,
)

__all__ = [
    "EXHAUSTED_LABEL",
    "TRY_AGAIN_LABEL",
    "BoundaryOptions",
    "BoundaryState",
    "ErrorHandler",
    "ErrorInfo",
    "ErrorReport",
    "ErrorReporter",
    "FallbackView",
    "FaultBoundary",
    "LoopScheduler",
    "RetryControl",
    "Scheduler",
    "TechnicalDetails",
    "TimerHandle",
    "build_fallback_view",
    "default_reporter",
    "transition",
    "with_error_boundary",
]
