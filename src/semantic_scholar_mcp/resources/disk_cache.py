"""
Disk-backed response cache.

Each entry is a small JSON file, grouped by tool:

    ~/.semantic-scholar-mcp/cache/
    ├── paper_search/
    │   └── {sha256}.json
    └── paper_details/
        └── {sha256}.json

Entries are human-readable, so the cache is easy to inspect or wipe by hand.
Expired and unreadable entries are deleted lazily when read.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from pathlib import Path
from typing import Any, Callable, Optional

import aiofiles
import aiofiles.os
from pydantic import ValidationError

from ..config import Settings
from ..core.models import CacheEntry

logger = logging.getLogger("semantic-scholar-mcp")


class FileCache:
    """
    Stores cached tool responses as JSON files.

    Writes go to a temporary file first and are then renamed into place, so
    concurrent writers of the same key never leave a half-written entry
    behind; the last rename wins.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        path: Optional[Path] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the file cache.

        Args:
            settings: Optional settings instance. If not provided,
                     creates default settings.
            path: Cache directory; overrides settings.CACHE_PATH.
            clock: Wall-clock time source in epoch seconds.
        """
        if path is None:
            settings = settings or Settings()
            path = settings.CACHE_PATH
        self.cache_path = Path(path)
        self.cache_path.mkdir(parents=True, exist_ok=True)
        self._clock = clock

    def _entry_path(self, key: str) -> Path:
        """Get the file for a cache key ('tool:digest')."""
        tool, _, digest = key.rpartition(":")
        # Sanitize for filesystem
        safe_tool = (tool or "default").replace("/", "_").replace(":", "_")
        safe_digest = digest.replace("/", "_")
        return self.cache_path / safe_tool / f"{safe_digest}.json"

    async def get(self, key: str) -> Optional[dict[str, Any]]:
        path = self._entry_path(key)
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except FileNotFoundError:
            return None

        try:
            entry = CacheEntry.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as e:
            logger.warning(f"Discarding unreadable cache entry {path}: {e}")
            await self._remove(path)
            return None

        if entry.key != key or entry.is_expired(self._clock()):
            await self._remove(path)
            return None

        return entry.payload

    async def put(self, key: str, payload: dict[str, Any], ttl: float) -> None:
        path = self._entry_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        entry = CacheEntry(key=key, payload=payload, created_at=self._clock(), ttl=ttl)
        tmp_path = path.with_name(f".{path.stem}.{uuid.uuid4().hex}.tmp")

        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(entry.model_dump_json(indent=2))
            await aiofiles.os.replace(tmp_path, path)
        except OSError:
            await self._remove(tmp_path)
            raise

        logger.debug(f"Cached {key} at {path}")

    async def _remove(self, path: Path) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass
