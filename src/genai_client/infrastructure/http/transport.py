"""HTTP transport built on httpx."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import httpx
from structlog import get_logger

from ...core.exceptions import ApiTimeoutError, NetworkError

logger = get_logger(__name__)


@dataclass(frozen=True)
class RawResponse:
    """A complete HTTP response, uninterpreted."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""


class StreamingResponse:
    """An open HTTP response whose body is read frame by frame.

    The body can be consumed once. Transport faults while reading are raised
    as ``NetworkError`` / ``ApiTimeoutError``.
    """

    def __init__(self, response: httpx.Response):
        self._response = response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._response.headers)

    @property
    def is_closed(self) -> bool:
        return self._response.is_closed

    async def aread(self) -> bytes:
        """Read the rest of the body, e.g. to classify an error status."""
        try:
            return await self._response.aread()
        except httpx.HTTPError as e:
            raise map_transport_fault(e) from e

    async def iter_frames(self) -> AsyncIterator[bytes]:
        """Yield body bytes as they arrive."""
        try:
            async for frame in self._response.aiter_bytes():
                yield frame
        except httpx.HTTPError as e:
            raise map_transport_fault(e) from e


def map_transport_fault(error: Exception) -> NetworkError | ApiTimeoutError:
    """Translate an httpx fault into the client's error kinds."""
    if isinstance(error, httpx.TimeoutException):
        return ApiTimeoutError(f"Request timed out: {type(error).__name__}", original_error=error)
    return NetworkError(f"Network error: {str(error) or type(error).__name__}", original_error=error)


class HttpTransport:
    """Owns the connection pool and performs single HTTP exchanges."""

    def __init__(self, timeout: float = 60.0, transport: httpx.AsyncBaseTransport | None = None):
        """Initialize the transport.

        Args:
            timeout: Request timeout in seconds
            transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests
        """
        self._client = httpx.AsyncClient(timeout=httpx.Timeout(timeout), transport=transport)

    async def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        payload: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> RawResponse:
        """Perform one request and read the complete body.

        Raises:
            NetworkError: On connection, TLS or protocol failure
            ApiTimeoutError: If the request times out
        """
        logger.debug("Sending request", method=method, url=url)
        try:
            response = await self._client.request(method, url, headers=headers, json=payload, params=params)
        except httpx.HTTPError as e:
            raise map_transport_fault(e) from e

        return RawResponse(status_code=response.status_code, headers=dict(response.headers), body=response.content)

    @asynccontextmanager
    async def open_stream(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        payload: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> AsyncIterator[StreamingResponse]:
        """Open a streaming request; the response is closed on every exit path.

        Raises:
            NetworkError: On connection, TLS or protocol failure
            ApiTimeoutError: If the request times out
        """
        logger.debug("Opening stream", method=method, url=url)
        request = self._client.build_request(method, url, headers=headers, json=payload, params=params)
        try:
            response = await self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise map_transport_fault(e) from e

        try:
            yield StreamingResponse(response)
        finally:
            await response.aclose()
            logger.debug("Stream closed", url=url)

    async def close(self) -> None:
        """Close HTTP client connections."""
        await self._client.aclose()
