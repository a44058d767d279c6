"""
CLI entry point for devonthink-plus.

Usage
─────
  # Run the MCP server on stdio (what an assistant host launches)
  dtplus serve

  # Call the tools by hand
  dtplus search "ONVIF" --database Active_Work --limit 5
  dtplus read 8F3C2A1E-1234-4F4E-9C1B-2B7D6A0C9E11 --offset 4000
  dtplus group /ONVIF_Offering/Longse --database Active_Work

Subcommands are implemented as standalone functions (cmd_search, cmd_read,
cmd_group) that go through the same registry and dispatch() as the server,
so they can be unit-tested without invoking argparse.
"""

import argparse
import logging
import sys
from typing import Any, Optional

from src.config import BridgeConfig
from src.tools.registry import ToolRegistry, build_default_registry, dispatch

__all__ = ["build_parser", "cmd_serve", "cmd_search", "cmd_read", "cmd_group", "main"]

logger = logging.getLogger(__name__)


# ── Argument parser ────────────────────────────────────────────────────────────


def _positive_float(value: str) -> float:
    """argparse type for timeouts: seconds, greater than zero."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Subcommands: serve | search | read | group
    """
    parser = argparse.ArgumentParser(
        prog="dtplus",
        description="Read-only DEVONthink tools for AI assistants (MCP server + CLI)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable verbose debug logging",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=None,
        metavar="SECONDS",
        help="Per-script timeout (default: 30, or DTPLUS_TIMEOUT)",
    )
    parser.add_argument(
        "--batch-timeout",
        type=_positive_float,
        default=None,
        dest="batch_timeout",
        metavar="SECONDS",
        help="Timeout for the batch plain-text fetch (default: 60, or DTPLUS_BATCH_TIMEOUT)",
    )

    sub = parser.add_subparsers(dest="subcommand")

    # ── serve ─────────────────────────────────────────────────────────────
    sub.add_parser("serve", help="Run the MCP server on stdio")

    # ── search ────────────────────────────────────────────────────────────
    srch = sub.add_parser("search", help="Search with inline excerpts")
    srch.add_argument("query", help="DEVONthink search query")
    srch.add_argument(
        "--database",
        default=None,
        metavar="NAME",
        help="Only keep results from this database",
    )
    srch.add_argument("--limit", type=int, default=None, help="Max results (default 10, max 50)")
    srch.add_argument(
        "--excerpt-chars",
        type=int,
        default=None,
        dest="excerpt_chars",
        help="Plain-text characters per excerpt (default 600)",
    )

    # ── read ──────────────────────────────────────────────────────────────
    rd = sub.add_parser("read", help="Read one page of a record's plain text")
    rd.add_argument("uuid", help="Record UUID")
    rd.add_argument("--offset", type=int, default=None, help="Start character (default 0)")
    rd.add_argument("--limit", type=int, default=None, help="Page size in characters (default 4000)")

    # ── group ─────────────────────────────────────────────────────────────
    grp = sub.add_parser("group", help="Snapshot the documents directly inside a group")
    grp.add_argument("group_path", help="Database-relative group path, e.g. /Projects/Alpha")
    grp.add_argument("--database", required=True, metavar="NAME", help="Database name")
    grp.add_argument(
        "--max-docs",
        type=int,
        default=None,
        dest="max_docs",
        help="Max documents (default 20, max 50)",
    )
    grp.add_argument(
        "--max-chars",
        type=int,
        default=None,
        dest="max_chars",
        help="Plain-text characters per document (default 800)",
    )

    return parser


# ── Helpers ───────────────────────────────────────────────────────────────────


def _config_from_namespace(ns: argparse.Namespace) -> BridgeConfig:
    """Environment config with CLI timeout overrides applied."""
    config = BridgeConfig.from_env()
    if ns.timeout is not None:
        config.timeout = ns.timeout
    if ns.batch_timeout is not None:
        config.batch_timeout = ns.batch_timeout
    return config


def _run_tool(registry: ToolRegistry, name: str, arguments: dict[str, Any]) -> int:
    """Dispatch one tool, print its text, return a process exit code."""
    args = {k: v for k, v in arguments.items() if v is not None}
    result = dispatch(registry, name, args)
    if result.is_error:
        print(result.text, file=sys.stderr)
        return 1
    print(result.text)
    return 0


# ── Command implementations ───────────────────────────────────────────────────


def cmd_serve(registry: ToolRegistry) -> int:
    """Block serving MCP requests on stdio until the host disconnects."""
    from src.server.mcp_server import run
    run(registry)
    return 0


def cmd_search(
    registry: ToolRegistry,
    query: str,
    database: Optional[str] = None,
    limit: Optional[int] = None,
    excerpt_chars: Optional[int] = None,
) -> int:
    return _run_tool(registry, "dt_search_with_excerpts", {
        "query": query,
        "database": database,
        "limit": limit,
        "excerpt_chars": excerpt_chars,
    })


def cmd_read(
    registry: ToolRegistry,
    uuid: str,
    offset: Optional[int] = None,
    limit: Optional[int] = None,
) -> int:
    return _run_tool(registry, "dt_get_content_chunked", {
        "uuid": uuid,
        "offset": offset,
        "limit": limit,
    })


def cmd_group(
    registry: ToolRegistry,
    group_path: str,
    database: str,
    max_docs: Optional[int] = None,
    max_chars: Optional[int] = None,
) -> int:
    return _run_tool(registry, "dt_get_group_context", {
        "group_path": group_path,
        "database": database,
        "max_docs": max_docs,
        "max_chars_per_doc": max_chars,
    })


# ── Entry point ───────────────────────────────────────────────────────────────


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point. Returns exit code."""
    parser = build_parser()
    ns = parser.parse_args(argv)

    level = logging.DEBUG if ns.debug else logging.INFO
    # stderr only: stdout is the MCP channel under `serve`
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s", stream=sys.stderr)

    if ns.subcommand is None:
        parser.print_help()
        return 0

    registry = build_default_registry(_config_from_namespace(ns))

    if ns.subcommand == "serve":
        return cmd_serve(registry)

    if ns.subcommand == "search":
        return cmd_search(
            registry,
            query=ns.query,
            database=ns.database,
            limit=ns.limit,
            excerpt_chars=ns.excerpt_chars,
        )

    if ns.subcommand == "read":
        return cmd_read(registry, uuid=ns.uuid, offset=ns.offset, limit=ns.limit)

    if ns.subcommand == "group":
        return cmd_group(
            registry,
            group_path=ns.group_path,
            database=ns.database,
            max_docs=ns.max_docs,
            max_chars=ns.max_chars,
        )

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
