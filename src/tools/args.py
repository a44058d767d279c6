"""
Typed tool arguments.

Each dataclass is built from the host's raw argument mapping with
from_mapping(), which applies defaults and caps before any script is built:

  • required strings must be present and non-blank  → else ArgumentError
  • counts accept int / float / numeric strings; anything non-numeric or
    non-positive falls back to the default
  • offsets below zero are clamped to 0
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from src.exceptions import ArgumentError

__all__ = [
    "MAX_SEARCH_LIMIT",
    "MAX_GROUP_DOCS",
    "SearchArgs",
    "ChunkArgs",
    "GroupContextArgs",
]

MAX_SEARCH_LIMIT = 50
MAX_GROUP_DOCS = 50


# ── Coercion helpers ──────────────────────────────────────────────────────────

def _number(value: Any) -> Optional[int]:
    """int(value) for finite numbers and numeric strings, else None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number)


def _count(value: Any, default: int, cap: Optional[int] = None) -> int:
    number = _number(value)
    if number is None or number <= 0:
        number = default
    if cap is not None:
        number = min(number, cap)
    return number


def _offset(value: Any) -> int:
    number = _number(value)
    return max(0, number) if number is not None else 0


def _required_str(args: Mapping[str, Any], key: str) -> str:
    value = args.get(key)
    if value is None or isinstance(value, (dict, list)) or not str(value).strip():
        raise ArgumentError(f"Missing required argument '{key}'")
    return str(value)


def _optional_str(args: Mapping[str, Any], key: str) -> Optional[str]:
    value = args.get(key)
    if value is None or isinstance(value, (dict, list)) or not str(value).strip():
        return None
    return str(value)


# ── Argument dataclasses ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class SearchArgs:
    """Arguments of dt_search_with_excerpts."""
    query:         str
    database:      Optional[str] = None
    limit:         int           = 10
    excerpt_chars: int           = 600

    @classmethod
    def from_mapping(cls, args: Mapping[str, Any]) -> "SearchArgs":
        return cls(
            query=_required_str(args, "query"),
            database=_optional_str(args, "database"),
            limit=_count(args.get("limit"), 10, cap=MAX_SEARCH_LIMIT),
            excerpt_chars=_count(args.get("excerpt_chars"), 600),
        )


@dataclass(frozen=True)
class ChunkArgs:
    """Arguments of dt_get_content_chunked."""
    uuid:   str
    offset: int = 0
    limit:  int = 4000

    @classmethod
    def from_mapping(cls, args: Mapping[str, Any]) -> "ChunkArgs":
        return cls(
            uuid=_required_str(args, "uuid").strip(),
            offset=_offset(args.get("offset")),
            limit=_count(args.get("limit"), 4000),
        )


@dataclass(frozen=True)
class GroupContextArgs:
    """Arguments of dt_get_group_context."""
    group_path:        str
    database:          str
    max_chars_per_doc: int = 800
    max_docs:          int = 20

    @classmethod
    def from_mapping(cls, args: Mapping[str, Any]) -> "GroupContextArgs":
        return cls(
            group_path=_required_str(args, "group_path"),
            database=_required_str(args, "database"),
            max_chars_per_doc=_count(args.get("max_chars_per_doc"), 800),
            max_docs=_count(args.get("max_docs"), 20, cap=MAX_GROUP_DOCS),
        )
