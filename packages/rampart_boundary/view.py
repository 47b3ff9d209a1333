"""Default degraded view rendered by a failed boundary."""

from __future__ import annotations

from dataclasses import dataclass

from packages.rampart_shared.errors import ErrorCategory, FailureRecord, categorize, suggestions_for

TRY_AGAIN_LABEL = "Try Again"
EXHAUSTED_LABEL = "Max retries reached"
FALLBACK_TITLE = "Something went wrong"
GENERIC_MESSAGE = (
    "An unexpected error occurred. Please try again, or report the problem "
    "if it persists."
)

SPECIFIC_MESSAGES = {
    ErrorCategory.VALIDATION: "Some of the information provided is invalid. Please review it and try again.",
    ErrorCategory.AUTHENTICATION: "Your session has expired. Please log in again.",
    ErrorCategory.AUTHORIZATION: "You do not have permission to view this content.",
    ErrorCategory.NOT_FOUND: "The content you are looking for could not be found.",
}


@dataclass(frozen=True)
class RetryControl:
    """Retry action state; exhaustion uses its own label, not just ``disabled``."""

    label: str
    disabled: bool


@dataclass(frozen=True)
class TechnicalDetails:
    message: str
    name: str
    stack: str | None
    component_stack: str


@dataclass(frozen=True)
class FallbackView:
    """Degraded view shown in place of a failed subtree."""

    title: str
    message: str
    error_id: str | None
    retry: RetryControl
    can_report: bool
    suggestions: tuple[str, ...] = ()
    details: TechnicalDetails | None = None


def retry_control(*, exhausted: bool) -> RetryControl:
    """Return the retry control for an exhausted or available budget."""
    if exhausted:
        return RetryControl(label=EXHAUSTED_LABEL, disabled=True)
    return RetryControl(label=TRY_AGAIN_LABEL, disabled=False)


def build_fallback_view(
    failure: FailureRecord,
    *,
    error_id: str | None,
    exhausted: bool,
    component_stack: str = "",
    developer_mode: bool = False,
) -> FallbackView:
    """Build the default fallback for one captured failure.

    Technical details are attached only in developer mode. Validation,
    authentication, authorization and not-found failures get a specific
    message; everything else gets the generic one.
    """
    category = categorize(failure)
    details = None
    if developer_mode:
        details = TechnicalDetails(
            message=failure.message,
            name=failure.name,
            stack=failure.stack,
            component_stack=component_stack,
        )
    return FallbackView(
        title=FALLBACK_TITLE,
        message=SPECIFIC_MESSAGES.get(category, GENERIC_MESSAGE),
        error_id=error_id,
        retry=retry_control(exhausted=exhausted),
        can_report=error_id is not None,
        suggestions=suggestions_for(category),
        details=details,
    )
