"""
Configuration for the semantic-scholar-mcp server.

Uses Pydantic Settings for environment variable support.
All settings can be overridden via environment variables with
the SEMANTIC_SCHOLAR_ prefix.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Environment variables are prefixed with SEMANTIC_SCHOLAR_.
    Example: SEMANTIC_SCHOLAR_API_KEY=your-key

    Storage:
        With the disk cache backend, responses are stored as JSON files at:
        ~/.semantic-scholar-mcp/cache/{tool}/
    """

    model_config = SettingsConfigDict(
        env_prefix="SEMANTIC_SCHOLAR_",
        extra="ignore",
    )

    # Application info
    APP_NAME: str = "semantic-scholar-mcp"
    APP_VERSION: str = "0.2.1"
    LOG_LEVEL: str = "WARNING"

    # Semantic Scholar API
    API_KEY: Optional[str] = None  # Optional, for higher rate limits
    REQUIRE_API_KEY: bool = False  # Refuse tool calls when no key is configured
    GRAPH_API_URL: str = "https://api.semanticscholar.org/graph/v1"
    RECOMMENDATIONS_API_URL: str = "https://api.semanticscholar.org/recommendations/v1"
    REQUEST_TIMEOUT: float = 60.0  # Seconds

    # Rate limiting is enforced locally per tool class:
    # search and recommendations: 1 request per second
    # everything else: 1 request per 100ms

    # Caching
    CACHE_BACKEND: Literal["disk", "memory", "none"] = "disk"
    CACHE_PATH: Path = Path.home() / ".semantic-scholar-mcp" / "cache"
    CACHE_TTL: float = 24 * 60 * 60  # Seconds before a cached response is refetched

    # Semantic cache keys (requires a local Ollama server)
    SEMANTIC_CACHE: bool = False
    SEMANTIC_THRESHOLD: float = 0.95  # Cosine similarity to share a cache entry
    SEMANTIC_INDEX_SIZE: int = 1024  # Max remembered query vectors
    OLLAMA_URL: str = "http://localhost:11434"
    EMBED_MODEL: str = "nomic-embed-text:latest"
