"""
Shared test fixtures for semantic-scholar-mcp tests.
"""

import asyncio
import json
import time
from collections import deque
from pathlib import Path
from typing import Any, Optional

import pytest

from semantic_scholar_mcp.config import Settings
from semantic_scholar_mcp.core.cache import InMemoryCache
from semantic_scholar_mcp.core.dispatcher import ToolDispatcher
from semantic_scholar_mcp.core.models import (
    RateLimitClass,
    UpstreamRequest,
    UpstreamResponse,
)
from semantic_scholar_mcp.core.rate_limiter import RateLimiter


class FakeClock:
    """Manually advanced clock with a matching sleep coroutine."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay
        await asyncio.sleep(0)


class FakeTransport:
    """Transport double recording requests and replaying queued responses."""

    def __init__(self):
        self.requests: list[UpstreamRequest] = []
        self.responses: deque[Any] = deque()
        self.default = UpstreamResponse(status_code=200, text=json.dumps({"data": []}))

    def queue(
        self,
        body: Any = None,
        status_code: int = 200,
        text: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        self.responses.append(
            UpstreamResponse(
                status_code=status_code,
                text=text if text is not None else json.dumps(body),
                headers=headers or {},
            )
        )

    def queue_error(self, error: Exception) -> None:
        self.responses.append(error)

    async def send(self, request: UpstreamRequest) -> UpstreamResponse:
        self.requests.append(request)
        response = self.responses.popleft() if self.responses else self.default
        if isinstance(response, Exception):
            raise response
        return response


class RecordingCache(InMemoryCache):
    """In-memory cache that records every call."""

    def __init__(self, clock=time.time):
        super().__init__(clock=clock)
        self.calls: list[tuple[str, str]] = []

    async def get(self, key):
        self.calls.append(("get", key))
        return await super().get(key)

    async def put(self, key, payload, ttl):
        self.calls.append(("put", key))
        await super().put(key, payload, ttl)


class RecordingRateLimiter(RateLimiter):
    """Rate limiter that records acquisitions and issue times."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.acquired: list[RateLimitClass] = []
        self.issued: list[float] = []

    async def acquire(self, rate_class):
        self.acquired.append(rate_class)
        issued = await super().acquire(rate_class)
        self.issued.append(issued)
        return issued


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def recording_cache(fake_clock: FakeClock) -> RecordingCache:
    return RecordingCache(clock=fake_clock)


@pytest.fixture
def rate_limiter(fake_clock: FakeClock) -> RecordingRateLimiter:
    return RecordingRateLimiter(clock=fake_clock, sleep=fake_clock.sleep)


@pytest.fixture
def dispatcher(
    fake_transport: FakeTransport,
    rate_limiter: RecordingRateLimiter,
    recording_cache: RecordingCache,
) -> ToolDispatcher:
    """Dispatcher wired to fakes; no network, no real sleeping."""
    return ToolDispatcher(
        api_key="test-key",
        timeout=5.0,
        transport=fake_transport,
        rate_limiter=rate_limiter,
        cache=recording_cache,
        cache_ttl=3600,
    )


@pytest.fixture
def search_payload() -> dict:
    """A /paper/search response with more results available."""
    return {
        "total": 1523,
        "offset": 0,
        "next": 2,
        "data": [
            {
                "paperId": "204e3073870fae3d05bcbc2f6a8e263d9b72e776",
                "title": "Attention Is All You Need",
                "year": 2017,
                "citationCount": 90000,
                "authors": [
                    {"authorId": "40348417", "name": "Ashish Vaswani"},
                    {"authorId": "1846258", "name": "Noam Shazeer"},
                ],
                "abstract": None,
            },
            {
                "paperId": "df2b0e26d0599ce3e70df8a9da02e51594e0e992",
                "title": "BERT: Pre-training of Deep Bidirectional Transformers",
                "year": 2019,
                "citationCount": 70000,
                "authors": [{"authorId": "39172707", "name": "Jacob Devlin"}],
            },
        ],
    }


@pytest.fixture
def paper_payload() -> dict:
    """A /paper/{id} response."""
    return {
        "paperId": "204e3073870fae3d05bcbc2f6a8e263d9b72e776",
        "title": "Attention Is All You Need",
        "year": 2017,
        "venue": "NeurIPS",
        "externalIds": {"ArXiv": "1706.03762", "DOI": "10.5555/3295222.3295349"},
        "tldr": {"model": "tldr@v2.0.0", "text": "A new architecture based on attention."},
        "openAccessPdf": {"url": "https://arxiv.org/pdf/1706.03762", "status": "GREEN"},
        "journal": None,
        "authors": [{"authorId": "40348417", "name": "Ashish Vaswani"}],
    }


@pytest.fixture
def citations_payload() -> dict:
    """A /paper/{id}/citations response on its last page."""
    return {
        "offset": 10,
        "data": [
            {
                "contexts": ["We build on the transformer [12]."],
                "intents": ["methodology"],
                "isInfluential": True,
                "citingPaper": {
                    "paperId": "abc",
                    "title": "Citing Paper",
                    "year": 2020,
                },
            },
            {
                "isInfluential": False,
                "citingPaper": {"paperId": "def", "title": "Another Citing Paper"},
            },
        ],
    }


@pytest.fixture
def recommendations_payload() -> dict:
    """A recommendations response."""
    return {
        "recommendedPapers": [
            {"paperId": "r1", "title": "Recommended One", "year": 2023},
            {"paperId": "r2", "title": "Recommended Two", "year": 2024},
        ]
    }


@pytest.fixture
def temp_cache_dir(tmp_path: Path) -> Path:
    """Create a temporary cache directory."""
    cache_path = tmp_path / "cache"
    cache_path.mkdir(parents=True)
    return cache_path


@pytest.fixture
def mock_settings(temp_cache_dir: Path) -> Settings:
    """Create settings with temporary storage and no credentials."""
    return Settings(CACHE_PATH=temp_cache_dir, API_KEY=None)
