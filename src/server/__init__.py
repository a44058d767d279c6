"""server — MCP stdio transport for the tool registry."""

from src.server.mcp_server import build_server, run, tool_definitions

__all__ = ["build_server", "run", "tool_definitions"]
