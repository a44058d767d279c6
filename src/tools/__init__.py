"""
tools — the read-only DEVONthink tool surface.

Public API
──────────
SearchArgs, ChunkArgs, GroupContextArgs  — validated, clamped arguments
DevonThinkTools                          — the three handlers
ToolRegistry, ToolSpec, ToolResult       — explicit registry + result type
build_registry(tools)                    — register the three tools
build_default_registry(config)           — wire invoker → adapters → handlers
dispatch(registry, name, args)           — run a tool, never raises
"""

from src.tools.args import ChunkArgs, GroupContextArgs, SearchArgs
from src.tools.handlers import DevonThinkTools
from src.tools.registry import (
    ToolRegistry,
    ToolResult,
    ToolSpec,
    build_default_registry,
    build_registry,
    dispatch,
)

__all__ = [
    "SearchArgs",
    "ChunkArgs",
    "GroupContextArgs",
    "DevonThinkTools",
    "ToolRegistry",
    "ToolResult",
    "ToolSpec",
    "build_registry",
    "build_default_registry",
    "dispatch",
]
