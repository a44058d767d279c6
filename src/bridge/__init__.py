"""
bridge — typed capability adapters over the two osascript dialects.

Public API
──────────
AbstractRecordSource       — search / read_chunk / batch_text interface
AbstractGroupNavigator     — list_children interface
JXARecordSource            — AbstractRecordSource over JXA (JSON output)
AppleScriptGroupNavigator  — AbstractGroupNavigator over AppleScript (\\r / ||| output)
SearchResult, SearchReport, ContentPage, GroupChild, GroupSnapshot — result models
"""

from src.bridge.base import AbstractGroupNavigator, AbstractRecordSource
from src.bridge.models import ContentPage, GroupChild, GroupSnapshot, SearchReport, SearchResult
from src.bridge.navigation import AppleScriptGroupNavigator
from src.bridge.structured import JXARecordSource

__all__ = [
    "AbstractRecordSource",
    "AbstractGroupNavigator",
    "JXARecordSource",
    "AppleScriptGroupNavigator",
    "SearchResult",
    "SearchReport",
    "ContentPage",
    "GroupChild",
    "GroupSnapshot",
]
