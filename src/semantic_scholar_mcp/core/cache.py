"""
Cache capability.

The dispatcher depends on the `Cache` protocol only, so any backend with an
async get/put can be plugged in. Entries past their TTL are treated as
absent on read.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from .models import CacheEntry

logger = logging.getLogger("semantic-scholar-mcp")


def canonical_key(tool: str, arguments: dict[str, Any]) -> str:
    """
    Deterministic fingerprint of a tool call.

    Keys are sorted before hashing, so argument insertion order never
    changes the result.
    """
    encoded = json.dumps(
        {"tool": tool, "arguments": arguments},
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )
    digest = hashlib.sha256(encoded.encode("utf-8")).hexdigest()
    return f"{tool}:{digest}"


@runtime_checkable
class Cache(Protocol):
    """Protocol for response caches.

    Implementations must tolerate concurrent get/put calls; last write wins.
    """

    async def get(self, key: str) -> Optional[dict[str, Any]]:
        """
        Return the payload stored under key, or None if absent or expired.
        """
        ...

    async def put(self, key: str, payload: dict[str, Any], ttl: float) -> None:
        """
        Store a payload for ttl seconds.
        """
        ...


class InMemoryCache:
    """Process-local cache backed by a dict."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> Optional[dict[str, Any]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            self._entries.pop(key, None)
            return None
        return entry.payload

    async def put(self, key: str, payload: dict[str, Any], ttl: float) -> None:
        self._entries[key] = CacheEntry(
            key=key,
            payload=payload,
            created_at=self._clock(),
            ttl=ttl,
        )


class NullCache:
    """Cache that stores nothing."""

    async def get(self, key: str) -> Optional[dict[str, Any]]:
        return None

    async def put(self, key: str, payload: dict[str, Any], ttl: float) -> None:
        return None
