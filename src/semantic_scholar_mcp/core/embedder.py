"""
Embedding capability and semantic cache keys.

When enabled, free-text queries are embedded and near-duplicate queries
(cosine similarity above a threshold, within the same tool and the same
remaining arguments) are folded onto one representative query for cache
keying. This only affects the cache hit rate: the upstream request always
carries the caller's own query.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Optional, Protocol, Sequence, runtime_checkable

import httpx
import numpy as np

logger = logging.getLogger("semantic-scholar-mcp")

DEFAULT_EMBED_MODEL = "nomic-embed-text:latest"
DEFAULT_SIMILARITY_THRESHOLD = 0.95


@runtime_checkable
class Embedder(Protocol):
    """Protocol for text embedding providers."""

    async def vectorize(self, text: str) -> Sequence[float]:
        """
        Embed a piece of text.

        Args:
            text: Text to embed

        Returns:
            The embedding vector
        """
        ...


class OllamaEmbedder:
    """
    Embeds text with a local Ollama server.

    Uses the /api/embed endpoint over httpx.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = DEFAULT_EMBED_MODEL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def vectorize(self, text: str) -> list[float]:
        client = await self._get_client()
        response = await client.post(
            "/api/embed",
            json={"model": self.model, "input": text, "truncate": False},
        )
        response.raise_for_status()
        data = response.json()

        embeddings = data.get("embeddings") if isinstance(data, dict) else None
        if not embeddings or not isinstance(embeddings[0], list):
            raise ValueError("Ollama returned no embeddings")
        return [float(x) for x in embeddings[0]]

    async def close(self) -> None:
        """Close the client and release resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class SemanticKeyIndex:
    """
    Maps near-duplicate query texts onto a representative text.

    Vectors are stored normalized, keyed by (scope, text), where scope
    identifies everything about the call except the query. The index is a
    bounded LRU: the least recently matched entries are evicted first.
    """

    def __init__(
        self,
        threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
        max_entries: int = 1024,
    ):
        self.threshold = threshold
        self.max_entries = max_entries
        self._entries: OrderedDict[tuple[str, str], np.ndarray] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def resolve(self, scope: str, text: str, vector: Sequence[float]) -> str:
        """
        Find the representative text for a query.

        Args:
            scope: Fingerprint of the non-query arguments.
            text: The caller's query text.
            vector: Embedding of the query text.

        Returns:
            The text of a previously seen, similar-enough query in the same
            scope, or `text` itself (which is then remembered).
        """
        v = np.asarray(vector, dtype=np.float32)
        norm = float(np.linalg.norm(v)) if v.size else 0.0
        if v.ndim != 1 or norm == 0.0 or not np.isfinite(norm):
            return text
        v = v / norm

        own_key = (scope, text)
        if own_key in self._entries:
            self._entries.move_to_end(own_key)
            return text

        best_text: Optional[str] = None
        best_score = self.threshold
        for (entry_scope, entry_text), other in self._entries.items():
            if entry_scope != scope or other.shape != v.shape:
                continue
            score = float(np.dot(v, other))
            if score >= best_score:
                best_text, best_score = entry_text, score

        if best_text is not None:
            logger.debug(f"Query {text!r} shares cache key with {best_text!r} ({best_score:.3f})")
            self._entries.move_to_end((scope, best_text))
            return best_text

        self._entries[own_key] = v
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
        return text
