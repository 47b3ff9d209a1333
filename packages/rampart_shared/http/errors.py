"""Typed failures raised by the outbound HTTP client.

Each failure can be lifted into the domain exception taxonomy so the
classifier files it under the same category as an in-process error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

import httpx

from packages.rampart_shared.errors import DomainError, NetworkError, error_type_for_status


@dataclass(frozen=True)
class HttpClientError(Exception):
    """Outbound call failed before a usable response was obtained."""

    message: str
    method: str
    url: str
    retryable: bool = False

    def __str__(self) -> str:
        return self.message

    def to_domain_error(self) -> DomainError:
        return NetworkError(self.message, details={"method": self.method, "url": self.url})


@dataclass(frozen=True)
class HttpRequestError(HttpClientError):
    """Connection, timeout or protocol failure."""

    cause: Exception | None = None


@dataclass(frozen=True)
class HttpStatusError(HttpClientError):
    """Peer answered with a non-2xx status."""

    status_code: int = 0
    response_body: str = ""
    response_headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_response(cls, response: httpx.Response) -> HttpStatusError:
        request = response.request
        try:
            body = response.text
        except UnicodeDecodeError:
            body = ""
        return cls(
            message=f"{request.method} {request.url} answered {response.status_code}",
            method=request.method,
            url=str(request.url),
            retryable=response.status_code == 429 or response.status_code >= 500,
            status_code=response.status_code,
            response_body=body,
            response_headers=dict(response.headers.items()),
        )

    def to_domain_error(self) -> DomainError:
        # Unlisted 4xx and every 5xx count as a failed network dependency.
        error_type = error_type_for_status(self.status_code) or NetworkError
        return error_type(
            self.message,
            details={"method": self.method, "url": self.url, "status": self.status_code},
        )
