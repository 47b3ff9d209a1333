"""Total mapping from failure codes to HTTP status codes."""

from __future__ import annotations

from http import HTTPStatus
from typing import Mapping

from packages.rampart_shared.errors import codes

DEFAULT_STATUS = HTTPStatus.INTERNAL_SERVER_ERROR.value

STATUS_BY_CODE: Mapping[str, int] = {
    codes.VALIDATION_ERROR: HTTPStatus.BAD_REQUEST.value,
    codes.AUTHENTICATION_ERROR: HTTPStatus.UNAUTHORIZED.value,
    codes.AUTHORIZATION_ERROR: HTTPStatus.FORBIDDEN.value,
    codes.NOT_FOUND_ERROR: HTTPStatus.NOT_FOUND.value,
    codes.CONFLICT_ERROR: HTTPStatus.CONFLICT.value,
    codes.RATE_LIMIT_ERROR: HTTPStatus.TOO_MANY_REQUESTS.value,
    codes.DATABASE_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR.value,
    codes.NETWORK_ERROR: HTTPStatus.SERVICE_UNAVAILABLE.value,
    codes.SERVER_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR.value,
}


def status_for_code(code: object) -> int:
    """Return the HTTP status for ``code``; unrecognized codes map to 500."""
    if not isinstance(code, str):
        return DEFAULT_STATUS
    return STATUS_BY_CODE.get(code, DEFAULT_STATUS)


CODE_BY_STATUS: Mapping[int, str] = {
    HTTPStatus.BAD_REQUEST.value: codes.VALIDATION_ERROR,
    HTTPStatus.UNAUTHORIZED.value: codes.AUTHENTICATION_ERROR,
    HTTPStatus.FORBIDDEN.value: codes.AUTHORIZATION_ERROR,
    HTTPStatus.NOT_FOUND.value: codes.NOT_FOUND_ERROR,
    HTTPStatus.CONFLICT.value: codes.CONFLICT_ERROR,
    HTTPStatus.UNPROCESSABLE_ENTITY.value: codes.VALIDATION_ERROR,
    HTTPStatus.TOO_MANY_REQUESTS.value: codes.RATE_LIMIT_ERROR,
}


def code_for_status(status_code: int) -> str:
    """Return the failure code for an HTTP status; anything unlisted is a server error."""
    return CODE_BY_STATUS.get(status_code, codes.SERVER_ERROR)
