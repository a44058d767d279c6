"""
runtime — osascript execution layer.

Public API
──────────
Dialect        — JXA (structured) or AppleScript (navigation)
ScriptJob      — one script execution request
ScriptInvoker  — runs a ScriptJob from a temp file with a timeout
builders       — pure script-text builders (search, chunk, children, batch text)
"""

from src.runtime.models import Dialect, ScriptJob
from src.runtime.invoker import ScriptInvoker

__all__ = [
    "Dialect",
    "ScriptJob",
    "ScriptInvoker",
]
