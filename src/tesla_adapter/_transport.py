"""HTTP transport for the vehicle API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp

from tesla_adapter._redact import redact_for_log
from tesla_adapter.exceptions import AdapterTransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ApiResponse:
    """Status and decoded JSON body of a successful call."""

    status: int
    body: Any


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def request(self, method: str, url: str, *, headers: Mapping[str, str]) -> ApiResponse:
        ...


class HttpTransport:
    """aiohttp-backed transport returning decoded JSON bodies."""

    def __init__(self, http_session: aiohttp.ClientSession) -> None:
        self._http = http_session

    async def request(self, method: str, url: str, *, headers: Mapping[str, str]) -> ApiResponse:
        """Send a request without a body and decode the JSON reply.

        Raises
        ------
        AdapterTransportError
            On network failure, a non-2xx status (``status_code`` set to
            the remote's status) or a body that is not JSON.
        """
        _logger.debug("%s %s headers=%s", method, url, redact_for_log(headers))

        try:
            async with self._http.request(method, url, headers=dict(headers)) as resp:
                text = await resp.text()
                status = resp.status
        except aiohttp.ClientError as exc:
            raise AdapterTransportError(
                f"Request to {url} failed: {exc}",
                endpoint=url,
            ) from exc

        if not 200 <= status < 300:
            raise AdapterTransportError(
                f"HTTP {status} from {url}: {text[:200]}",
                status_code=status,
                endpoint=url,
            )

        if not text.strip():
            return ApiResponse(status=status, body=None)

        try:
            body = json.loads(text)
        except json.JSONDecodeError as exc:
            raise AdapterTransportError(
                f"Invalid JSON from {url}: {text[:200]}",
                endpoint=url,
            ) from exc

        _logger.debug("%s %s -> %s", method, url, status)
        return ApiResponse(status=status, body=body)
