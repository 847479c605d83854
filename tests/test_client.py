"""
Tests for HttpxTransport.
"""

import json

import httpx
import pytest

from semantic_scholar_mcp.core.client import (
    HttpxTransport,
    Transport,
    TransportFailure,
    TransportTimeout,
)
from semantic_scholar_mcp.core.models import UpstreamRequest


@pytest.fixture
def request_get() -> UpstreamRequest:
    return UpstreamRequest(
        url="https://api.semanticscholar.org/graph/v1/paper/search",
        params={"query": "attention", "limit": "10"},
        headers={"Accept": "application/json", "x-api-key": "secret"},
    )


class TestHttpxTransport:
    """Tests for HttpxTransport."""

    @pytest.mark.asyncio
    async def test_send_get(self, request_get: UpstreamRequest):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json={"data": []}, headers={"X-Request-Id": "r1"})

        transport = HttpxTransport(transport=httpx.MockTransport(handler))
        try:
            response = await transport.send(request_get)
        finally:
            await transport.close()

        assert isinstance(transport, Transport)
        assert response.ok
        assert json.loads(response.text) == {"data": []}
        assert response.headers["x-request-id"] == "r1"
        sent = seen["request"]
        assert sent.method == "GET"
        assert sent.url.params["query"] == "attention"
        assert sent.headers["x-api-key"] == "secret"

    @pytest.mark.asyncio
    async def test_send_post_body(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"recommendedPapers": []})

        transport = HttpxTransport(transport=httpx.MockTransport(handler))
        await transport.send(
            UpstreamRequest(
                method="POST",
                url="https://api.semanticscholar.org/recommendations/v1/papers/",
                json_body={"positivePaperIds": ["a"], "negativePaperIds": []},
            )
        )
        await transport.close()

        assert seen["body"] == {"positivePaperIds": ["a"], "negativePaperIds": []}

    @pytest.mark.asyncio
    async def test_error_status_returned(self, request_get: UpstreamRequest):
        transport = HttpxTransport(
            transport=httpx.MockTransport(
                lambda request: httpx.Response(429, text="Too Many Requests", headers={"Retry-After": "5"})
            )
        )
        response = await transport.send(request_get)
        await transport.close()

        assert not response.ok
        assert response.status_code == 429
        assert response.headers["retry-after"] == "5"

    @pytest.mark.asyncio
    async def test_timeout(self, request_get: UpstreamRequest):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        transport = HttpxTransport(timeout=1.0, transport=httpx.MockTransport(handler))
        with pytest.raises(TransportTimeout):
            await transport.send(request_get)
        await transport.close()

    @pytest.mark.asyncio
    async def test_connection_failure(self, request_get: UpstreamRequest):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport = HttpxTransport(transport=httpx.MockTransport(handler))
        with pytest.raises(TransportFailure, match="connection refused"):
            await transport.send(request_get)
        await transport.close()
