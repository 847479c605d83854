"""
MCP Tools for Semantic Scholar.

Provides tools for:
- Papers: search, details, citations, references
- Authors: search, details, papers
- Recommendations: single seed, multiple seeds
"""

from .handlers import (
    call_tool,
    close_dispatcher,
    create_dispatcher,
    list_tools,
    set_dispatcher,
)

__all__ = [
    "call_tool",
    "close_dispatcher",
    "create_dispatcher",
    "list_tools",
    "set_dispatcher",
]
