"""
cli — command-line interface for devonthink-plus.

Entry points
────────────
  dtplus                    (via pyproject.toml [project.scripts])
  python -m src.cli.main

Subcommands: serve | search | read | group
"""

from src.cli.main import build_parser, cmd_group, cmd_read, cmd_search, cmd_serve, main

__all__ = ["build_parser", "cmd_serve", "cmd_search", "cmd_read", "cmd_group", "main"]
