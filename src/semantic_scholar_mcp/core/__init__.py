"""
Core tool dispatch module.

This module contains the pure Python business logic with NO MCP dependencies.
It can be used directly by web applications or other Python code.

Example usage:
    from semantic_scholar_mcp.core import ToolDispatcher

    dispatcher = ToolDispatcher()
    result = await dispatcher.invoke("paper_details", {"paper_id": "2103.12345"})
"""

from .cache import Cache, InMemoryCache, NullCache, canonical_key
from .catalog import CATALOG, TOOL_DEFINITIONS, get_tool
from .client import HttpxTransport, Transport, TransportFailure, TransportTimeout
from .dispatcher import ToolDispatcher
from .embedder import Embedder, OllamaEmbedder, SemanticKeyIndex
from .errors import ToolError, ToolErrorKind, UpstreamError, classify_upstream_error
from .models import (
    CacheEntry,
    PaginationWindow,
    ParamKind,
    ParameterSpec,
    RateLimitClass,
    ResponseKind,
    ShapedResponse,
    ToolDefinition,
    ToolInvocation,
    UpstreamRequest,
    UpstreamResponse,
)
from .rate_limiter import RateLimiter
from .request_builder import RequestBuilder
from .shaper import ResponseShaper
from .validation import normalize_paper_id, validate_invocation

__all__ = [
    # Models
    "CacheEntry",
    "PaginationWindow",
    "ParamKind",
    "ParameterSpec",
    "RateLimitClass",
    "ResponseKind",
    "ShapedResponse",
    "ToolDefinition",
    "ToolInvocation",
    "UpstreamRequest",
    "UpstreamResponse",
    # Catalog
    "CATALOG",
    "TOOL_DEFINITIONS",
    "get_tool",
    # Errors
    "ToolError",
    "ToolErrorKind",
    "UpstreamError",
    "classify_upstream_error",
    # Capabilities
    "Cache",
    "InMemoryCache",
    "NullCache",
    "canonical_key",
    "Embedder",
    "OllamaEmbedder",
    "SemanticKeyIndex",
    "Transport",
    "HttpxTransport",
    "TransportFailure",
    "TransportTimeout",
    # Pipeline
    "RateLimiter",
    "RequestBuilder",
    "ResponseShaper",
    "ToolDispatcher",
    "normalize_paper_id",
    "validate_invocation",
]
