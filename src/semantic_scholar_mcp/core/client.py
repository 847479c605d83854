"""
HTTP transport for the Semantic Scholar API.

Direct async HTTP client using httpx. The transport only sends requests and
reports status + body; classification of failures happens in the dispatcher.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, runtime_checkable

import httpx

from .models import UpstreamRequest, UpstreamResponse

logger = logging.getLogger("semantic-scholar-mcp")


class TransportTimeout(Exception):
    """The upstream request did not complete within the timeout."""


class TransportFailure(Exception):
    """Network or connection-level failure while talking to the upstream."""


@runtime_checkable
class Transport(Protocol):
    """Protocol for sending one upstream request."""

    async def send(self, request: UpstreamRequest) -> UpstreamResponse:
        """
        Send a request and return its status and body.

        Raises:
            TransportTimeout: The request timed out.
            TransportFailure: The request could not be completed.
        """
        ...


class HttpxTransport:
    """
    Async transport backed by a shared httpx.AsyncClient.

    The client is created lazily so the transport can be constructed outside
    of a running event loop.
    """

    def __init__(
        self,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the transport.

        Args:
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (e.g. httpx.MockTransport).
        """
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                limits=httpx.Limits(max_keepalive_connections=10),
            )
        return self._client

    async def send(self, request: UpstreamRequest) -> UpstreamResponse:
        client = await self._get_client()

        try:
            response = await client.request(
                request.method,
                request.url,
                params=request.params,
                headers=request.headers,
                json=request.json_body,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Request timeout for {request.url}: {e}")
            raise TransportTimeout(f"Request timed out after {self.timeout} seconds") from e
        except httpx.TransportError as e:
            logger.error(f"Transport error for {request.url}: {e}")
            raise TransportFailure(str(e) or type(e).__name__) from e

        if response.status_code >= 400:
            logger.warning(f"HTTP {response.status_code} for {request.method} {request.url}")

        return UpstreamResponse(
            status_code=response.status_code,
            text=response.text,
            headers={k.lower(): v for k, v in response.headers.items()},
        )

    async def close(self) -> None:
        """Close the client and release resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
