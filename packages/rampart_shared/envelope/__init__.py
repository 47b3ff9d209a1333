"""Public shared envelope API for Rampart request boundaries."""

from .builders import (
    authentication_failure,
    authorization_failure,
    conflict_failure,
    database_failure,
    failure,
    failure_from_exception,
    network_failure,
    not_found_failure,
    rate_limit_failure,
    server_failure,
    success,
    validation_failure,
)
from .envelope import (
    ErrorBody,
    FailureEnvelope,
    FailureMeta,
    ResponseEnvelope,
    SuccessEnvelope,
    SuccessMeta,
)
from .status import CODE_BY_STATUS, DEFAULT_STATUS, STATUS_BY_CODE, code_for_status, status_for_code

__all__ = [
    "CODE_BY_STATUS",
    "DEFAULT_STATUS",
    "STATUS_BY_CODE",
    "ErrorBody",
    "FailureEnvelope",
    "FailureMeta",
    "ResponseEnvelope",
    "SuccessEnvelope",
    "SuccessMeta",
    "authentication_failure",
    "authorization_failure",
    "code_for_status",
    "conflict_failure",
    "database_failure",
    "failure",
    "failure_from_exception",
    "network_failure",
    "not_found_failure",
    "rate_limit_failure",
    "server_failure",
    "status_for_code",
    "success",
    "validation_failure",
]
