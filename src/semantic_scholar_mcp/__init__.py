"""
Semantic Scholar MCP Server
===========================

Paper, author, citation and recommendation lookups for language-model agents,
backed by the Semantic Scholar API.

This package provides:
- core: Pure Python tool dispatch (no MCP dependencies, usable by any asyncio app)
- resources: Disk-backed response cache (JSON files)
- tools: MCP tool definitions and call handlers
"""

from .server import main

__version__ = "0.2.1"
__all__ = ["main"]
