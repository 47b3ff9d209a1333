"""Outbound HTTP client with failures mapped onto domain errors."""

from .client import AsyncHttpClient
from .errors import HttpClientError, HttpRequestError, HttpStatusError

__all__ = [
    "AsyncHttpClient",
    "HttpClientError",
    "HttpRequestError",
    "HttpStatusError",
]
