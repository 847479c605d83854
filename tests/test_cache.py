"""
Tests for cache backends and cache keys.
"""

import json
from pathlib import Path

import aiofiles.os
import pytest

from semantic_scholar_mcp.core.cache import Cache, InMemoryCache, NullCache, canonical_key
from semantic_scholar_mcp.resources import FileCache


class TestCanonicalKey:
    """Tests for canonical_key."""

    def test_order_independent(self):
        a = canonical_key("paper_search", {"query": "q", "limit": 10, "offset": 0})
        b = canonical_key("paper_search", {"offset": 0, "limit": 10, "query": "q"})
        assert a == b

    def test_distinguishes_tools_and_arguments(self):
        base = canonical_key("paper_search", {"query": "q"})

        assert base != canonical_key("author_search", {"query": "q"})
        assert base != canonical_key("paper_search", {"query": "Q"})
        assert base.startswith("paper_search:")

    def test_backends_satisfy_protocol(self, tmp_path: Path):
        assert isinstance(InMemoryCache(), Cache)
        assert isinstance(NullCache(), Cache)
        assert isinstance(FileCache(path=tmp_path), Cache)


class TestInMemoryCache:
    """Tests for InMemoryCache."""

    @pytest.mark.asyncio
    async def test_put_get(self, fake_clock):
        cache = InMemoryCache(clock=fake_clock)

        await cache.put("k", {"tool": "paper_search"}, ttl=60)

        assert await cache.get("k") == {"tool": "paper_search"}
        assert await cache.get("missing") is None

    @pytest.mark.asyncio
    async def test_expiry(self, fake_clock):
        cache = InMemoryCache(clock=fake_clock)
        await cache.put("k", {"v": 1}, ttl=60)

        fake_clock.advance(59)
        assert await cache.get("k") == {"v": 1}

        fake_clock.advance(1)
        assert await cache.get("k") is None
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_last_write_wins(self, fake_clock):
        cache = InMemoryCache(clock=fake_clock)
        await cache.put("k", {"v": 1}, ttl=60)
        await cache.put("k", {"v": 2}, ttl=60)

        assert await cache.get("k") == {"v": 2}

    @pytest.mark.asyncio
    async def test_null_cache(self):
        cache = NullCache()
        await cache.put("k", {"v": 1}, ttl=60)
        assert await cache.get("k") is None


class TestFileCache:
    """Tests for FileCache."""

    @pytest.fixture
    def file_cache(self, temp_cache_dir: Path, fake_clock) -> FileCache:
        return FileCache(path=temp_cache_dir, clock=fake_clock)

    @pytest.mark.asyncio
    async def test_put_get(self, file_cache: FileCache, temp_cache_dir: Path):
        key = canonical_key("paper_details", {"paper_id": "abc"})
        await file_cache.put(key, {"tool": "paper_details", "data": {"title": "T"}}, ttl=60)

        assert await file_cache.get(key) == {"tool": "paper_details", "data": {"title": "T"}}

        files = list((temp_cache_dir / "paper_details").glob("*.json"))
        assert len(files) == 1
        stored = json.loads(files[0].read_text(encoding="utf-8"))
        assert stored["key"] == key
        assert stored["ttl"] == 60

    @pytest.mark.asyncio
    async def test_missing(self, file_cache: FileCache):
        assert await file_cache.get(canonical_key("paper_details", {})) is None

    @pytest.mark.asyncio
    async def test_expired_entry_removed(self, file_cache: FileCache, temp_cache_dir: Path, fake_clock):
        key = canonical_key("paper_search", {"query": "q"})
        await file_cache.put(key, {"v": 1}, ttl=10)

        fake_clock.advance(10)

        assert await file_cache.get(key) is None
        assert list(temp_cache_dir.glob("*/*.json")) == []

    @pytest.mark.asyncio
    async def test_corrupted_entry(self, file_cache: FileCache, temp_cache_dir: Path):
        key = canonical_key("paper_search", {"query": "q"})
        await file_cache.put(key, {"v": 1}, ttl=60)
        path = next(temp_cache_dir.glob("*/*.json"))
        path.write_text("{not json", encoding="utf-8")

        assert await file_cache.get(key) is None
        assert not path.exists()

    @pytest.mark.asyncio
    async def test_no_temp_files_left(self, file_cache: FileCache, temp_cache_dir: Path):
        key = canonical_key("author_details", {"author_id": "1"})
        await file_cache.put(key, {"v": 1}, ttl=60)
        await file_cache.put(key, {"v": 2}, ttl=60)

        assert await file_cache.get(key) == {"v": 2}
        assert list(temp_cache_dir.rglob("*.tmp")) == []

    @pytest.mark.asyncio
    async def test_failed_write_leaves_no_temp_file(
        self, file_cache: FileCache, temp_cache_dir: Path, monkeypatch
    ):
        async def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(aiofiles.os, "replace", failing_replace)
        key = canonical_key("paper_search", {"query": "q"})

        with pytest.raises(OSError):
            await file_cache.put(key, {"v": 1}, ttl=60)

        assert list(temp_cache_dir.rglob("*.tmp")) == []
        assert await file_cache.get(key) is None

    def test_uses_settings_path(self, mock_settings, temp_cache_dir: Path):
        cache = FileCache(settings=mock_settings)
        assert cache.cache_path == temp_cache_dir
