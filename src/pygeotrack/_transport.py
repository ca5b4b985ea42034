"""HTTP transport for location reports."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pygeotrack._constants import DEFAULT_REQUEST_TIMEOUT, USER_AGENT
from pygeotrack._redact import redact_for_log
from pygeotrack.exceptions import NetworkError, TrackerTransportError
from pygeotrack.models.report import TransportResponse

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the dispatcher.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`AiohttpTransport`) concrete.
    """

    async def submit(self, url: str, headers: Mapping[str, str], body: str) -> TransportResponse:
        ...


class AiohttpTransport:
    """POSTs form-encoded reports with :mod:`aiohttp`.

    Usage::

        async with AiohttpTransport() as transport:
            response = await transport.submit(url, headers, body)

    A caller-owned ``aiohttp.ClientSession`` may be injected; it is then
    left open on close.
    """

    def __init__(
        self,
        *,
        session: aiohttp.ClientSession | None = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._external_session = session is not None
        self._http = session
        self._timeout = aiohttp.ClientTimeout(total=request_timeout)

    async def __aenter__(self) -> AiohttpTransport:
        self._ensure_session()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._http is None:
            self._http = aiohttp.ClientSession(headers={"user-agent": USER_AGENT})
        return self._http

    async def close(self) -> None:
        if not self._external_session and self._http is not None:
            await self._http.close()
        self._http = None

    async def submit(self, url: str, headers: Mapping[str, str], body: str) -> TransportResponse:
        """POST *body* to *url*.

        Any HTTP status is returned as a :class:`TransportResponse`;
        classifying it is the caller's job.

        Raises
        ------
        NetworkError
            On connection failures and timeouts.
        """
        if self._http is not None and self._http.closed:
            raise TrackerTransportError("Transport is closed", endpoint=url)
        http = self._ensure_session()

        _logger.debug("POST %s headers=%s", url, redact_for_log(dict(headers)))

        try:
            async with http.post(url, data=body, headers=dict(headers), timeout=self._timeout) as resp:
                text = await resp.text(errors="replace")
                status = resp.status
        except aiohttp.ClientError as exc:
            raise NetworkError(f"Request to {url} failed: {exc}", endpoint=url) from exc
        except asyncio.TimeoutError as exc:
            raise NetworkError(f"Request to {url} timed out", endpoint=url) from exc

        _logger.debug("POST %s -> HTTP %d %s", url, status, redact_for_log(text, max_string=200))
        return TransportResponse(status_code=status, body=text)
