"""Async httpx wrapper used for outbound calls such as error reporting."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from packages.rampart_shared.config import ReportingSettings

from .errors import HttpRequestError, HttpStatusError

_LOGGER = logging.getLogger(__name__)


class AsyncHttpClient:
    """Issue requests through ``httpx.AsyncClient`` and raise typed failures.

    A caller-supplied ``client`` is borrowed and left open on ``aclose``.
    """

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout_seconds: float = 10.0,
        headers: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._borrowed = client is not None
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers={"Accept": "application/json", **dict(headers or {})},
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: ReportingSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> AsyncHttpClient:
        return cls(
            base_url=settings.base_url,
            timeout_seconds=settings.timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if not self._borrowed:
            await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        raise_for_status: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send one request.

        Transport failures always raise ``HttpRequestError``. Non-2xx responses
        raise ``HttpStatusError`` unless ``raise_for_status`` is false.
        """
        method = method.upper()
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.RequestError as exc:
            try:
                target = str(exc.request.url)
            except RuntimeError:
                target = url
            raise HttpRequestError(
                message=f"{method} {target} failed: {exc}",
                method=method,
                url=target,
                retryable=True,
                cause=exc,
            ) from exc

        _LOGGER.debug(
            "outbound %s %s -> %s", method, response.request.url, response.status_code
        )
        if raise_for_status and response.is_error:
            raise HttpStatusError.from_response(response)
        return response

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)
