"""
Project-wide custom exception hierarchy.
All modules raise subclasses of DTPlusBaseError — never bare Exception.
"""

__all__ = [
    "DTPlusBaseError",
    "ArgumentError",
    "BridgeError",
    "ScriptProcessError",
    "TargetNotRunningError",
    "ScriptTimeoutError",
    "OutputParseError",
    "RecordNotFoundError",
    "PartialExtractionError",
    "ToolCallFailedError",
]


class DTPlusBaseError(Exception):
    """Root exception for all devonthink-plus errors."""


# ── Tool arguments ────────────────────────────────────────────────────────────

class ArgumentError(DTPlusBaseError):
    """Raised when a tool argument is missing or unusable."""


# ── Scripting bridge ──────────────────────────────────────────────────────────

class BridgeError(DTPlusBaseError):
    """Base class for osascript bridge errors."""


class ScriptProcessError(BridgeError):
    """Raised when osascript exits non-zero or cannot be started."""


class TargetNotRunningError(ScriptProcessError):
    """Raised when a script failed and DEVONthink is not running."""


class ScriptTimeoutError(BridgeError):
    """Raised when a script exceeds its allotted timeout."""


class OutputParseError(BridgeError):
    """Raised when script output cannot be parsed."""


# ── Records ───────────────────────────────────────────────────────────────────

class RecordNotFoundError(DTPlusBaseError):
    """Raised when a record UUID or group path does not resolve."""


class PartialExtractionError(DTPlusBaseError):
    """
    Raised when plain text for a single record cannot be extracted.

    Never reaches a tool handler: extract_or_empty() downgrades it to "".
    """


# ── Tool host ─────────────────────────────────────────────────────────────────

class ToolCallFailedError(DTPlusBaseError):
    """Raised to the MCP SDK so it reports an error-flagged tool result."""
