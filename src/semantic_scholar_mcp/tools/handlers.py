"""
MCP tool handlers.

Exposes the catalog as MCP tools and routes every call through a shared
ToolDispatcher. Results and classified errors are returned as JSON text.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import mcp.types as types

from ..config import Settings
from ..core import (
    Cache,
    HttpxTransport,
    InMemoryCache,
    NullCache,
    OllamaEmbedder,
    RateLimiter,
    RequestBuilder,
    SemanticKeyIndex,
    ToolDispatcher,
    ToolError,
    ToolErrorKind,
    TOOL_DEFINITIONS,
)
from ..resources import FileCache

logger = logging.getLogger("semantic-scholar-mcp")

# Lazy initialization
_dispatcher: ToolDispatcher | None = None


def create_dispatcher(settings: Settings) -> ToolDispatcher:
    """
    Build a dispatcher from settings.

    Raises:
        ValueError: If an API key is required but not configured.
    """
    if settings.REQUIRE_API_KEY and not settings.API_KEY:
        raise ValueError("SEMANTIC_SCHOLAR_API_KEY is required but not set")

    cache: Cache
    if settings.CACHE_BACKEND == "disk":
        try:
            cache = FileCache(settings=settings)
        except OSError as e:
            logger.warning(f"Disk cache unavailable at {settings.CACHE_PATH}, caching disabled: {e}")
            cache = NullCache()
    elif settings.CACHE_BACKEND == "memory":
        cache = InMemoryCache()
    else:
        cache = NullCache()

    embedder = None
    semantic_index = None
    if settings.SEMANTIC_CACHE:
        embedder = OllamaEmbedder(base_url=settings.OLLAMA_URL, model=settings.EMBED_MODEL)
        semantic_index = SemanticKeyIndex(
            threshold=settings.SEMANTIC_THRESHOLD,
            max_entries=settings.SEMANTIC_INDEX_SIZE,
        )

    return ToolDispatcher(
        timeout=settings.REQUEST_TIMEOUT,
        transport=HttpxTransport(timeout=settings.REQUEST_TIMEOUT),
        rate_limiter=RateLimiter(),
        request_builder=RequestBuilder(
            api_key=settings.API_KEY,
            graph_url=settings.GRAPH_API_URL,
            recommendations_url=settings.RECOMMENDATIONS_API_URL,
        ),
        cache=cache,
        cache_ttl=settings.CACHE_TTL,
        embedder=embedder,
        semantic_index=semantic_index,
    )


def _get_dispatcher() -> ToolDispatcher:
    """Get or create the tool dispatcher."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = create_dispatcher(Settings())
    return _dispatcher


def set_dispatcher(dispatcher: Optional[ToolDispatcher]) -> None:
    """Replace the shared dispatcher (None resets it)."""
    global _dispatcher
    _dispatcher = dispatcher


async def close_dispatcher() -> None:
    """Close the shared dispatcher, if one was created."""
    global _dispatcher
    if _dispatcher is not None:
        await _dispatcher.close()
        _dispatcher = None


def _text(payload: dict[str, Any]) -> list[types.TextContent]:
    return [types.TextContent(type="text", text=json.dumps(payload, indent=2))]


async def list_tools() -> list[types.Tool]:
    """List the Semantic Scholar tools."""
    return [
        types.Tool(
            name=definition.name,
            description=definition.description,
            inputSchema=definition.input_schema(),
        )
        for definition in TOOL_DEFINITIONS
    ]


async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
    """Handle a tool call."""
    try:
        dispatcher = _get_dispatcher()
    except ValueError as e:
        logger.error(f"Server is not configured: {e}")
        error = ToolError(ToolErrorKind.UNAVAILABLE, name, str(e))
        return _text({"error": error.to_dict()})

    try:
        result = await dispatcher.invoke(name, arguments or {})
    except ToolError as e:
        logger.info(f"Tool {name} failed: {e.kind.value}: {e.reason}")
        return _text({"error": e.to_dict()})

    return _text(result.to_payload())
