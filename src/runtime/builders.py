"""
Script builders — pure functions that return literal JXA / AppleScript text.

Parameters are never concatenated raw: JXA strings and lists go through
json.dumps (always ASCII, so the literal is valid JavaScript), numbers are
emitted as integer literals, and AppleScript strings go through
applescript_literal().

Output contracts
────────────────
search      → JSON {total, returned, results: [{name, uuid, location,
                database, score, kind, excerpt}]}
chunk       → JSON ContentPage fields, or {error: "not_found", uuid}
children    → AppleScript text: uuid|||name|||kind followed by `return`
                (\\r), one record per direct non-group child
batch text  → JSON {uuid: plain text prefix}

Per-record plainText() failures are downgraded to "" inside the scripts by
the plainTextOf() helper, so one bad document never aborts a whole call.
"""

import json
import re
from typing import Optional, Sequence

__all__ = [
    "FIELD_DELIMITER",
    "RECORD_SEPARATOR",
    "NOT_FOUND_MARKER",
    "CONTAINER_KINDS",
    "ELLIPSIS",
    "js_literal",
    "applescript_literal",
    "build_search_script",
    "build_chunk_script",
    "build_children_script",
    "build_batch_text_script",
]

# Joins uuid / name / kind inside one AppleScript record. Three characters
# so names containing "|" or "," survive.
FIELD_DELIMITER = "|||"
# AppleScript's `return` constant is CR, not LF.
RECORD_SEPARATOR = "\r"
NOT_FOUND_MARKER = "not_found"
CONTAINER_KINDS = ("group", "smart group")
ELLIPSIS = "…"

_AS_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


# ── Literal escaping ──────────────────────────────────────────────────────────

def js_literal(value: object) -> str:
    """Return *value* as a JavaScript literal (strings, lists, None → null)."""
    return json.dumps(value)


def applescript_literal(value: str) -> str:
    """Return *value* as a double-quoted AppleScript string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    escaped = escaped.replace("\r", "\\r").replace("\n", "\\n").replace("\t", "\\t")
    escaped = _AS_CONTROL_RE.sub("", escaped)
    return f'"{escaped}"'


def _int_literal(value: int) -> str:
    return str(int(value))


# ── Shared JXA fragments ──────────────────────────────────────────────────────

_JXA_PLAIN_TEXT_OF = """\
  function plainTextOf(r) {
    try { return (r && r.plainText()) || ''; } catch (e) { return ''; }
  }
  function recordWithUuid(dt, uuid) {
    try { return dt.getRecordWithUuid(uuid) || null; } catch (e) { return null; }
  }
"""


def _jxa_program(app_name: str, body: str) -> str:
    """Wrap *body* in an IIFE whose return value osascript prints."""
    return (
        "(function () {\n"
        f"  var dt = Application({js_literal(app_name)});\n"
        f"{_JXA_PLAIN_TEXT_OF}"
        f"{body}"
        "})();\n"
    )


# ── Builders ──────────────────────────────────────────────────────────────────

def build_search_script(
    app_name: str,
    query: str,
    database: Optional[str],
    limit: int,
    excerpt_chars: int,
) -> str:
    """
    Global search with inline excerpts.

    The search itself is never database-scoped; *database* only skips
    records whose resolved database name differs.
    """
    body = f"""\
  var query      = {js_literal(query)};
  var dbFilter   = {js_literal(database)};
  var limit      = {_int_literal(limit)};
  var excerptLen = {_int_literal(excerpt_chars)};

  var raw = dt.search(query) || [];
  var out = [];

  for (var i = 0; i < raw.length && out.length < limit; i++) {{
    var r = raw[i];
    var dbName = r.database().name();
    if (dbFilter !== null && dbName !== dbFilter) continue;

    var pt = plainTextOf(r);
    var excerpt = pt.length > excerptLen
      ? pt.substring(0, excerptLen) + {js_literal(ELLIPSIS)}
      : pt;

    out.push({{
      name:     r.name(),
      uuid:     r.uuid(),
      location: r.location(),
      database: dbName,
      score:    Math.round(r.score() * 100) / 100,
      kind:     r.type(),
      excerpt:  excerpt.trim(),
    }});
  }}

  return JSON.stringify({{ total: raw.length, returned: out.length, results: out }});
"""
    return _jxa_program(app_name, body)


def build_chunk_script(app_name: str, uuid: str, offset: int, limit: int) -> str:
    """Read plain text [offset, offset + limit) of one record by UUID."""
    body = f"""\
  var uuid      = {js_literal(uuid)};
  var offset    = {_int_literal(offset)};
  var chunkSize = {_int_literal(limit)};

  var r = recordWithUuid(dt, uuid);
  if (!r) return JSON.stringify({{ error: {js_literal(NOT_FOUND_MARKER)}, uuid: uuid }});

  var pt    = plainTextOf(r);
  var total = pt.length;
  var chunk = pt.slice(offset, offset + chunkSize);

  return JSON.stringify({{
    name:         r.name(),
    uuid:         r.uuid(),
    kind:         r.type(),
    content:      chunk,
    offset:       offset,
    chunk_length: chunk.length,
    total_chars:  total,
    has_more:     offset + chunk.length < total,
    next_offset:  offset + chunk.length,
  }});
"""
    return _jxa_program(app_name, body)


def build_children_script(app_id: str, group_path: str, database: str, max_docs: int) -> str:
    """
    List direct, non-group children of a group as delimited records.

    A missing database or group yields "" rather than a script error.
    """
    delimiter = applescript_literal(FIELD_DELIMITER)
    container_checks = " and ".join(
        f"kKind is not {applescript_literal(kind)}" for kind in CONTAINER_KINDS
    )
    return f"""\
tell application id {applescript_literal(app_id)}
  set g to missing value
  try
    set g to get record at {applescript_literal(group_path)} in database named {applescript_literal(database)}
  end try
  if g is missing value then return ""
  set kids to children of g
  set out to ""
  set counter to 0
  repeat with k in kids
    if counter >= {_int_literal(max_docs)} then exit repeat
    set kKind to type of k as string
    if {container_checks} then
      set out to out & uuid of k & {delimiter} & name of k & {delimiter} & kKind & return
      set counter to counter + 1
    end if
  end repeat
  return out
end tell
"""


def build_batch_text_script(app_name: str, uuids: Sequence[str], max_chars_per_doc: int) -> str:
    """Fetch the first *max_chars_per_doc* plain-text chars of every UUID."""
    body = f"""\
  var uuids    = {js_literal(list(uuids))};
  var maxChars = {_int_literal(max_chars_per_doc)};
  var out      = {{}};

  for (var i = 0; i < uuids.length; i++) {{
    var r = recordWithUuid(dt, uuids[i]);
    out[uuids[i]] = plainTextOf(r).substring(0, maxChars).trim();
  }}

  return JSON.stringify(out);
"""
    return _jxa_program(app_name, body)
