"""
Tool dispatcher - main business logic.

This is the core entry point used by the MCP tool layer. It has NO MCP
dependencies and can be driven from any asyncio code.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Mapping, Optional

from .cache import Cache, NullCache, canonical_key
from .catalog import CATALOG
from .client import HttpxTransport, Transport, TransportFailure, TransportTimeout
from .embedder import Embedder, SemanticKeyIndex
from .errors import ToolError, ToolErrorKind, UpstreamError, classify_upstream_error
from .models import ShapedResponse, ToolDefinition, ToolInvocation, UpstreamRequest
from .rate_limiter import RateLimiter
from .request_builder import RequestBuilder
from .shaper import ResponseShaper
from .validation import validate_invocation

logger = logging.getLogger("semantic-scholar-mcp")

DEFAULT_CACHE_TTL = 24 * 60 * 60


class ToolDispatcher:
    """
    Validates, paces, caches and executes tool calls.

    Order of operations for `invoke`:
    1. Look up the tool (UNKNOWN_TOOL if absent)
    2. Validate arguments (MISSING_PARAMETER / INVALID_PARAMETER)
    3. Compute the cache key and consult the cache; a hit returns
       immediately with no rate limiting and no upstream call
    4. Wait for the tool's rate-limit class
    5. Build and send the upstream request, bounded by the timeout
    6. Classify failures, decode and shape the payload
    7. Store the shaped response in the cache

    Example usage:
        dispatcher = ToolDispatcher(api_key="...")
        result = await dispatcher.invoke("paper_search", {"query": "transformers"})
        for paper in result.data:
            print(paper["title"])
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = 60.0,
        transport: Optional[Transport] = None,
        rate_limiter: Optional[RateLimiter] = None,
        request_builder: Optional[RequestBuilder] = None,
        shaper: Optional[ResponseShaper] = None,
        cache: Optional[Cache] = None,
        cache_ttl: float = DEFAULT_CACHE_TTL,
        embedder: Optional[Embedder] = None,
        semantic_index: Optional[SemanticKeyIndex] = None,
        catalog: Optional[Mapping[str, ToolDefinition]] = None,
    ):
        """
        Initialize the dispatcher.

        Args:
            api_key: Optional Semantic Scholar API key (ignored when a
                     request_builder is given).
            timeout: Upper bound in seconds for each upstream call.
            transport: HTTP transport; defaults to HttpxTransport.
            rate_limiter: Shared per-class rate limiter.
            request_builder: Upstream request builder.
            shaper: Upstream response shaper.
            cache: Response cache; defaults to no caching.
            cache_ttl: Seconds a cached response stays valid.
            embedder: Optional embedder for semantic cache keys.
            semantic_index: Index used with the embedder; semantic keys are
                            only used when both are given.
            catalog: Tool definitions by name; defaults to the full catalog.
        """
        self.timeout = timeout
        self.transport = transport or HttpxTransport(timeout=timeout)
        self.rate_limiter = rate_limiter or RateLimiter()
        self.request_builder = request_builder or RequestBuilder(api_key=api_key)
        self.shaper = shaper or ResponseShaper()
        self.cache: Cache = cache if cache is not None else NullCache()
        self.cache_ttl = cache_ttl
        self.embedder = embedder
        self.semantic_index = semantic_index
        self.catalog = dict(catalog if catalog is not None else CATALOG)

    def list_tools(self) -> list[ToolDefinition]:
        """All tool definitions, in catalog order."""
        return list(self.catalog.values())

    async def invoke(
        self,
        name: str,
        arguments: Optional[Mapping[str, Any]] = None,
    ) -> ShapedResponse:
        """
        Execute a tool call.

        Args:
            name: Tool name.
            arguments: Caller-supplied arguments.

        Returns:
            ShapedResponse (with `cached=True` when served from cache).

        Raises:
            ToolError: For every failure, classified by kind.
        """
        definition = self.catalog.get(name)
        if definition is None:
            raise ToolError(
                ToolErrorKind.UNKNOWN_TOOL,
                name,
                f"Unknown tool '{name}'",
            )

        invocation = validate_invocation(definition, arguments)

        key = await self._cache_key(invocation)
        cached = await self._cache_get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {name}")
            return cached

        await self.rate_limiter.acquire(definition.rate_class)

        request = self.request_builder.build(definition, invocation)
        logger.info(f"{request.method} {request.url}")
        body = await self._send(definition, request)

        shaped = self.shaper.shape(definition, invocation, body)
        await self._cache_put(key, shaped)
        return shaped

    async def _send(self, definition: ToolDefinition, request: UpstreamRequest) -> Any:
        """Send the request and return the decoded JSON body."""
        try:
            response = await asyncio.wait_for(self.transport.send(request), timeout=self.timeout)
        except (asyncio.TimeoutError, TransportTimeout) as e:
            raise ToolError(
                ToolErrorKind.TIMEOUT,
                definition.name,
                f"Request timed out after {self.timeout} seconds",
            ) from e
        except TransportFailure as e:
            raise ToolError(
                ToolErrorKind.TRANSPORT_FAILURE,
                definition.name,
                f"Connection to Semantic Scholar failed: {e}",
            ) from e

        if not response.ok:
            raise classify_upstream_error(
                UpstreamError(
                    status_code=response.status_code,
                    body=response.text,
                    retry_after=response.headers.get("retry-after"),
                ),
                definition.name,
            )

        try:
            return json.loads(response.text)
        except ValueError as e:
            raise ToolError(
                ToolErrorKind.UPSTREAM_CONTRACT,
                definition.name,
                "Failed to parse JSON response",
            ) from e

    async def _cache_key(self, invocation: ToolInvocation) -> str:
        arguments = dict(invocation.arguments)
        query = arguments.get("query")

        if self.embedder is not None and self.semantic_index is not None and isinstance(query, str):
            try:
                vector = await self.embedder.vectorize(query)
            except Exception as e:
                logger.warning(f"Embedding failed, using exact cache key: {e}")
            else:
                scope = canonical_key(
                    invocation.tool,
                    {k: v for k, v in arguments.items() if k != "query"},
                )
                arguments["query"] = self.semantic_index.resolve(scope, query, vector)

        return canonical_key(invocation.tool, arguments)

    async def _cache_get(self, key: str) -> Optional[ShapedResponse]:
        try:
            payload = await self.cache.get(key)
        except Exception as e:
            logger.warning(f"Cache read failed for {key}, treating as miss: {e}")
            return None
        if payload is None:
            return None

        try:
            shaped = ShapedResponse.model_validate(payload)
        except ValueError as e:
            logger.warning(f"Ignoring malformed cache entry {key}: {e}")
            return None
        return shaped.model_copy(update={"cached": True})

    async def _cache_put(self, key: str, shaped: ShapedResponse) -> None:
        try:
            await self.cache.put(key, shaped.model_dump(mode="json"), self.cache_ttl)
        except Exception as e:
            logger.warning(f"Cache write failed for {key}: {e}")

    async def close(self) -> None:
        """Clean up resources."""
        for resource in (self.transport, self.embedder):
            close = getattr(resource, "close", None)
            if close is not None:
                await close()
