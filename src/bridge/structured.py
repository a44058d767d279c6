"""
JXARecordSource — AbstractRecordSource over the structured (JXA) runtime.

Each call builds one script, runs it in a fresh osascript process and
parses its JSON. Nothing is cached: a chunked read recomputes the full
plain text on every call.
"""

import logging
from typing import Optional, Sequence

from src.runtime.builders import build_batch_text_script, build_chunk_script, build_search_script
from src.runtime.invoker import ScriptInvoker
from .base import AbstractRecordSource
from .models import ContentPage, SearchReport
from .normalizers import parse_content_page, parse_json_output, parse_search_report, parse_text_map

__all__ = ["JXARecordSource"]

logger = logging.getLogger(__name__)


class JXARecordSource(AbstractRecordSource):
    """Search, chunked reads and batch plain text via JXA."""

    def __init__(self, invoker: ScriptInvoker) -> None:
        self._invoker = invoker

    @property
    def _app_name(self) -> str:
        return self._invoker.config.app_name

    def search(
        self,
        query: str,
        database: Optional[str],
        limit: int,
        excerpt_chars: int,
    ) -> SearchReport:
        script = build_search_script(self._app_name, query, database, limit, excerpt_chars)
        logger.info("Searching %r (database=%s, limit=%d)", query, database or "*", limit)
        payload = parse_json_output(self._invoker.run_structured(script))
        report = parse_search_report(payload, database)
        # the script stops at limit already; keep the cap if it did not
        report.results = report.results[:limit]
        return report

    def read_chunk(self, uuid: str, offset: int, limit: int) -> ContentPage:
        script = build_chunk_script(self._app_name, uuid, offset, limit)
        logger.info("Reading %s [%d:+%d]", uuid, offset, limit)
        return parse_content_page(parse_json_output(self._invoker.run_structured(script)))

    def batch_text(self, uuids: Sequence[str], max_chars_per_doc: int) -> dict[str, str]:
        if not uuids:
            return {}
        script = build_batch_text_script(self._app_name, uuids, max_chars_per_doc)
        logger.info("Fetching plain text for %d records", len(uuids))
        raw = self._invoker.run_structured(script, timeout=self._invoker.config.batch_timeout)
        return parse_text_map(parse_json_output(raw), uuids)
