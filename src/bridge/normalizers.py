"""
Result normalizers — turn raw osascript output into bridge models.

JXA output is JSON and is parsed directly. AppleScript output needs two
corrections:

  1. Records end with AppleScript's `return` (\\r). Splitting on \\n finds
     nothing.
  2. Fields inside a record are joined with the three-character "|||"
     token, because document names may contain any single punctuation
     character.

Empty fragments left by a trailing terminator are dropped.
"""

import json
import logging
from typing import Any, Optional, Sequence

from src.exceptions import OutputParseError, PartialExtractionError, RecordNotFoundError
from src.runtime.builders import FIELD_DELIMITER, NOT_FOUND_MARKER, RECORD_SEPARATOR
from .extraction import extract_or_empty
from .models import ContentPage, GroupChild, SearchReport, SearchResult

__all__ = [
    "parse_json_output",
    "parse_navigation_output",
    "parse_search_report",
    "parse_content_page",
    "parse_text_map",
]

logger = logging.getLogger(__name__)


# ── Structured (JXA) output ───────────────────────────────────────────────────

def parse_json_output(raw: str) -> Any:
    """
    Parse JXA script output.

    Raises:
        OutputParseError: empty output or malformed JSON.
    """
    if not raw or not raw.strip():
        raise OutputParseError("DEVONthink returned no output")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise OutputParseError(
            f"DEVONthink returned malformed JSON (line {exc.lineno}, column {exc.colno})"
        ) from exc


def _require_dict(payload: Any, what: str) -> dict:
    if not isinstance(payload, dict):
        raise OutputParseError(f"Unexpected {what} output: expected an object")
    return payload


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def _as_int(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise OutputParseError(f"Unexpected {what}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise OutputParseError(f"Unexpected {what}: {value!r}") from exc


def _as_score(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _excerpt_of(item: dict) -> str:
    excerpt = item.get("excerpt")
    if excerpt is None:
        return ""
    if not isinstance(excerpt, str):
        raise PartialExtractionError(f"excerpt is {type(excerpt).__name__}, not text")
    return excerpt


def parse_search_report(payload: Any, database: Optional[str] = None) -> SearchReport:
    """
    Build a SearchReport from the search script's JSON.

    When *database* is given, results from any other database are dropped
    here as well, whatever the script already filtered.
    """
    data = _require_dict(payload, "search")
    raw_results = data.get("results") or []
    if not isinstance(raw_results, list):
        raise OutputParseError("Unexpected search output: results is not a list")

    items = [item for item in raw_results if isinstance(item, dict) and item.get("uuid")]
    excerpts = extract_or_empty(items, _excerpt_of)

    results: list[SearchResult] = []
    for item, excerpt in zip(items, excerpts):
        result = SearchResult(
            name=_as_str(item.get("name")),
            uuid=_as_str(item.get("uuid")),
            location=_as_str(item.get("location")),
            database=_as_str(item.get("database")),
            score=_as_score(item.get("score")),
            kind=_as_str(item.get("kind")),
            excerpt=excerpt,
        )
        if database is not None and result.database != database:
            logger.debug("Dropping %s: database %r != %r", result.uuid, result.database, database)
            continue
        results.append(result)

    total = _as_int(data.get("total", len(results)), "search total")
    logger.debug("Search: %d total, %d kept", total, len(results))
    return SearchReport(total=total, results=results)


def parse_content_page(payload: Any) -> ContentPage:
    """
    Build a ContentPage from the chunk script's JSON.

    Raises:
        RecordNotFoundError: the script reported the UUID did not resolve.
    """
    data = _require_dict(payload, "chunk")
    if data.get("error") == NOT_FOUND_MARKER:
        raise RecordNotFoundError(f"Record not found: {_as_str(data.get('uuid'))}")

    content = data.get("content")
    if not isinstance(content, str):
        raise OutputParseError("Unexpected chunk output: content is not text")

    offset = max(0, _as_int(data.get("offset", 0), "chunk offset"))
    total = _as_int(data.get("total_chars", offset + len(content)), "chunk total_chars")
    return ContentPage(
        name=_as_str(data.get("name")),
        uuid=_as_str(data.get("uuid")),
        kind=_as_str(data.get("kind")),
        content=content,
        offset=offset,
        total_chars=max(total, offset + len(content)),
    )


def parse_text_map(payload: Any, uuids: Sequence[str]) -> dict[str, str]:
    """
    Map every requested UUID to its plain-text prefix.

    UUIDs that are missing from the output, or whose value is not text,
    map to "".
    """
    data = _require_dict(payload, "batch text")

    def _text_of(uuid: str) -> str:
        value = data.get(uuid)
        if value is None:
            raise PartialExtractionError("no text returned")
        if not isinstance(value, str):
            raise PartialExtractionError(f"text is {type(value).__name__}")
        return value

    return dict(zip(uuids, extract_or_empty(uuids, _text_of)))


# ── Navigation (AppleScript) output ───────────────────────────────────────────

def parse_navigation_output(raw: str) -> list[GroupChild]:
    """
    Parse "uuid|||name|||kind\\r..." records into GroupChild entries.

    Records without a uuid or name are dropped. A name that itself
    contains the delimiter is rejoined, since kind is always the last field.
    """
    children: list[GroupChild] = []
    for record in raw.split(RECORD_SEPARATOR):
        if not record.strip():
            continue
        fields = [f.strip() for f in record.split(FIELD_DELIMITER)]
        uuid, rest = fields[0], fields[1:]
        if len(rest) >= 2:
            name, kind = FIELD_DELIMITER.join(rest[:-1]).strip(), rest[-1]
        elif rest:
            name, kind = rest[0], ""
        else:
            name, kind = "", ""
        if not uuid or not name:
            logger.debug("Skipping incomplete record: %r", record)
            continue
        children.append(GroupChild(uuid=uuid, name=name, kind=kind))
    logger.debug("Parsed %d group children", len(children))
    return children
