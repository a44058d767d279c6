"""
MCP stdio server exposing a ToolRegistry.

The registry is built once by the caller and closed over by the request
handlers; the module keeps no server or registry globals. stdout carries
the MCP protocol, so logging must go to stderr.
"""

import logging

import anyio
from anyio import to_thread
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from src.exceptions import ToolCallFailedError
from src.tools.registry import ToolRegistry, dispatch

__all__ = [
    "SERVER_NAME",
    "SERVER_VERSION",
    "tool_definitions",
    "call_registry_tool",
    "build_server",
    "serve_stdio",
    "run",
]

logger = logging.getLogger(__name__)

SERVER_NAME = "devonthink-plus"
SERVER_VERSION = "0.1.0"


def tool_definitions(registry: ToolRegistry) -> list[Tool]:
    """Translate registry entries into MCP Tool descriptors."""
    return [
        Tool(name=spec.name, description=spec.description, inputSchema=spec.input_schema)
        for spec in registry
    ]


async def call_registry_tool(registry: ToolRegistry, name: str, arguments: dict) -> list[TextContent]:
    """
    Run one tool off the event loop.

    Error results are raised as ToolCallFailedError; the SDK turns that into
    an isError result carrying the message.
    """
    result = await to_thread.run_sync(dispatch, registry, name, arguments or {})
    if result.is_error:
        raise ToolCallFailedError(result.text)
    return [TextContent(type="text", text=block) for block in result.content]


def build_server(registry: ToolRegistry) -> Server:
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return tool_definitions(registry)

    @server.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[TextContent]:
        return await call_registry_tool(registry, name, arguments)

    return server


async def serve_stdio(registry: ToolRegistry) -> None:
    server = build_server(registry)
    logger.info("%s %s serving %d tools on stdio", SERVER_NAME, SERVER_VERSION, len(registry))
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run(registry: ToolRegistry) -> None:
    """Blocking entry point used by `dtplus serve`."""
    anyio.run(serve_stdio, registry)
