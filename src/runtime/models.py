"""Data models for the runtime module."""

from dataclasses import dataclass
from enum import Enum

__all__ = ["Dialect", "ScriptJob"]


class Dialect(str, Enum):
    """The two osascript dialects the bridge drives."""
    STRUCTURED = "structured"   # JXA, output is JSON
    NAVIGATION = "navigation"   # AppleScript, output is \r-separated text


# osascript flags and temp-file suffix per dialect
_DIALECT_FLAGS = {
    Dialect.STRUCTURED: (["-l", "JavaScript"], ".js"),
    Dialect.NAVIGATION: ([], ".applescript"),
}


@dataclass(frozen=True)
class ScriptJob:
    """
    One script execution request.

    dialect — which osascript language the body is written in
    body    — literal script text, written to a temp file before running
    timeout — seconds before the osascript process is killed
    """
    dialect: Dialect
    body:    str
    timeout: float = 30.0

    @property
    def flags(self) -> list[str]:
        return list(_DIALECT_FLAGS[self.dialect][0])

    @property
    def suffix(self) -> str:
        return _DIALECT_FLAGS[self.dialect][1]

    def __str__(self) -> str:
        return f"ScriptJob({self.dialect.value}, {len(self.body)} chars, timeout={self.timeout}s)"
