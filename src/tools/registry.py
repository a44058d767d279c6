"""
Tool registry and dispatch.

build_registry() is called once at startup; the resulting ToolRegistry is
passed explicitly to dispatch(). dispatch() never raises: every failure
becomes a single error-flagged text block.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Mapping, Optional

from src.bridge import AppleScriptGroupNavigator, JXARecordSource
from src.config import BridgeConfig
from src.exceptions import DTPlusBaseError
from src.runtime import ScriptInvoker
from .args import MAX_GROUP_DOCS, MAX_SEARCH_LIMIT, ChunkArgs, GroupContextArgs, SearchArgs
from .handlers import DevonThinkTools

__all__ = [
    "ToolSpec",
    "ToolResult",
    "ToolRegistry",
    "build_registry",
    "build_default_registry",
    "dispatch",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSpec:
    """
    One exposed tool.

    args_type — dataclass with a from_mapping(args) classmethod
    handler   — callable taking an args_type instance, returning text
    """
    name:         str
    description:  str
    input_schema: dict[str, Any]
    args_type:    Any
    handler:      Callable[[Any], str]


@dataclass(frozen=True)
class ToolResult:
    """Rendered outcome of one tool call."""
    content:  list[str] = field(default_factory=list)
    is_error: bool      = False

    @property
    def text(self) -> str:
        return "\n".join(self.content)


class ToolRegistry:
    """Ordered name → ToolSpec mapping."""

    def __init__(self, specs: Optional[list[ToolSpec]] = None) -> None:
        self._specs: dict[str, ToolSpec] = {}
        for spec in specs or []:
            self.register(spec)

    def register(self, spec: ToolSpec) -> None:
        if spec.name in self._specs:
            raise ValueError(f"Tool already registered: {spec.name}")
        self._specs[spec.name] = spec

    def get(self, name: str) -> Optional[ToolSpec]:
        return self._specs.get(name)

    def names(self) -> list[str]:
        return list(self._specs)

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)


# ── Tool catalogue ────────────────────────────────────────────────────────────

def build_registry(tools: DevonThinkTools) -> ToolRegistry:
    """Register the three DEVONthink read tools against *tools*."""
    return ToolRegistry([
        ToolSpec(
            name="dt_search_with_excerpts",
            description=(
                "Search DEVONthink and return results WITH plain-text excerpts in a single call. "
                "Works for all indexed formats: Markdown, PDF, Email (.eml), Excel, Word. "
                "Prefer this over a plain search when you need to read content immediately "
                "without a second round-trip."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": "Search query. Supports DEVONthink operators: name:, tag:, kind:, etc.",
                    },
                    "database": {
                        "type": "string",
                        "description": "Restrict to this database name (optional). Searches all databases if omitted.",
                    },
                    "limit": {
                        "type": "number",
                        "description": f"Max results to return (default 10, max {MAX_SEARCH_LIMIT}).",
                    },
                    "excerpt_chars": {
                        "type": "number",
                        "description": "Plain-text characters to include per result (default 600).",
                    },
                },
                "required": ["query"],
            },
            args_type=SearchArgs,
            handler=tools.search_with_excerpts,
        ),
        ToolSpec(
            name="dt_get_content_chunked",
            description=(
                "Get the plain-text content of a DEVONthink record in pages. "
                "Use offset + limit to walk through large PDFs, emails, or long notes "
                "without filling the context window. "
                "The response reports total chars and the next offset so you know whether to keep reading."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "uuid": {
                        "type": "string",
                        "description": "Record UUID (from dt_search_with_excerpts or dt_get_group_context).",
                    },
                    "offset": {
                        "type": "number",
                        "description": "Character position to start reading from (default 0).",
                    },
                    "limit": {
                        "type": "number",
                        "description": "Max characters to return in this chunk (default 4000).",
                    },
                },
                "required": ["uuid"],
            },
            args_type=ChunkArgs,
            handler=tools.get_content_chunked,
        ),
        ToolSpec(
            name="dt_get_group_context",
            description=(
                "Load a plain-text snapshot of every document inside a DEVONthink group/folder. "
                "Ideal for priming project context before starting a task "
                '(e.g. group_path="/ONVIF_Offering/Longse", database="Active_Work"). '
                "Returns the first max_chars_per_doc characters of each file plus its UUID "
                "so you can follow up with dt_get_content_chunked for deeper reads."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "group_path": {
                        "type": "string",
                        "description": "Database-relative path of the group, e.g. /ONVIF_Offering/Longse",
                    },
                    "database": {
                        "type": "string",
                        "description": "Database name, e.g. Active_Work",
                    },
                    "max_chars_per_doc": {
                        "type": "number",
                        "description": "Max plain-text characters to include per document (default 800).",
                    },
                    "max_docs": {
                        "type": "number",
                        "description": (
                            f"Max documents to include (default 20, max {MAX_GROUP_DOCS}, "
                            "direct children only, no sub-groups)."
                        ),
                    },
                },
                "required": ["group_path", "database"],
            },
            args_type=GroupContextArgs,
            handler=tools.get_group_context,
        ),
    ])


def build_default_registry(config: Optional[BridgeConfig] = None) -> ToolRegistry:
    """Production wiring: one ScriptInvoker shared by both adapters."""
    invoker = ScriptInvoker(config or BridgeConfig.from_env())
    tools = DevonThinkTools(JXARecordSource(invoker), AppleScriptGroupNavigator(invoker))
    return build_registry(tools)


# ── Dispatch ──────────────────────────────────────────────────────────────────

def _error(message: str) -> ToolResult:
    return ToolResult(content=[message], is_error=True)


def dispatch(
    registry: ToolRegistry,
    name: str,
    arguments: Optional[Mapping[str, Any]] = None,
) -> ToolResult:
    """
    Validate *arguments*, run the named tool and wrap its text.

    Never raises. Project errors surface as "Error: <message>"; anything
    else is logged with its traceback and reported generically.
    """
    spec = registry.get(name)
    if spec is None:
        return _error(f"Unknown tool: {name}")

    try:
        args = spec.args_type.from_mapping(arguments or {})
        text = spec.handler(args)
    except DTPlusBaseError as exc:
        logger.warning("%s failed: %s", name, exc)
        return _error(f"Error: {exc}")
    except Exception:  # noqa: BLE001
        logger.exception("%s raised an unexpected error", name)
        return _error(f"Error: internal error while running {name}")

    return ToolResult(content=[text])
