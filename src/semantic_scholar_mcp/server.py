"""
Semantic Scholar MCP Server
===========================

This module implements an MCP server exposing Semantic Scholar paper,
author, citation and recommendation lookups as tools.
"""

import json
import logging
import sys
from typing import Any, Dict, List

import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server

from .config import Settings
from .tools import call_tool as handle_call_tool
from .tools import close_dispatcher
from .tools import list_tools as handle_list_tools

# Initialize settings and server
settings = Settings()

# Configure logging to stderr (stdout is reserved for MCP JSON-RPC)
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("semantic-scholar-mcp")

# Create MCP server
server = Server(settings.APP_NAME)


@server.list_tools()
async def list_tools() -> List[types.Tool]:
    """List available paper, author and recommendation tools."""
    return await handle_list_tools()


@server.call_tool()
async def call_tool(
    name: str,
    arguments: Dict[str, Any],
) -> List[types.TextContent]:
    """Handle tool calls."""
    logger.debug(f"Calling tool {name} with arguments {arguments}")

    try:
        return await handle_call_tool(name, arguments)
    except Exception as e:
        logger.error(f"Tool error: {str(e)}")
        return [
            types.TextContent(
                type="text",
                text=json.dumps(
                    {
                        "error": {
                            "kind": "unavailable",
                            "tool": name,
                            "reason": str(e),
                            "retryable": False,
                        }
                    },
                    indent=2,
                ),
            )
        ]


async def _async_main():
    """Async entry point for the MCP server."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Cache backend: {settings.CACHE_BACKEND} ({settings.CACHE_PATH})")
    if not settings.API_KEY:
        logger.warning(
            "SEMANTIC_SCHOLAR_API_KEY is not set. Using unauthenticated access with lower rate limits."
        )

    try:
        async with stdio_server() as streams:
            await server.run(
                streams[0],
                streams[1],
                InitializationOptions(
                    server_name=settings.APP_NAME,
                    server_version=settings.APP_VERSION,
                    capabilities=server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                ),
            )
    finally:
        await close_dispatcher()


def main():
    """Run the MCP server (synchronous entry point)."""
    import asyncio
    asyncio.run(_async_main())
