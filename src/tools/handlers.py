"""
DevonThinkTools — the three read-only tool handlers.

Each handler takes already-validated arguments, drives the bridge
adapters, and returns rendered markdown text. Errors propagate; dispatch()
turns them into a single error block.
"""

import logging

from src.bridge.base import AbstractGroupNavigator, AbstractRecordSource
from src.bridge.models import GroupSnapshot
from .args import ChunkArgs, GroupContextArgs, SearchArgs
from .render import render_empty_group, render_group, render_page, render_search

__all__ = ["DevonThinkTools"]

logger = logging.getLogger(__name__)


class DevonThinkTools:
    """
    Tool handlers over a record source and a group navigator.

    Holds no state between calls; every call goes back to DEVONthink.
    """

    def __init__(self, source: AbstractRecordSource, navigator: AbstractGroupNavigator) -> None:
        self._source = source
        self._navigator = navigator

    def search_with_excerpts(self, args: SearchArgs) -> str:
        """Global search with inline excerpts, optionally limited to one database."""
        report = self._source.search(args.query, args.database, args.limit, args.excerpt_chars)
        return render_search(report)

    def get_content_chunked(self, args: ChunkArgs) -> str:
        """
        One page of a record's plain text.

        Callers continue with offset=next_offset until the header reports
        the end of the document.
        """
        page = self._source.read_chunk(args.uuid, args.offset, args.limit)
        return render_page(page)

    def get_group_context(self, args: GroupContextArgs) -> str:
        """
        Plain-text prefixes of every direct document in a group.

        Phase 1 lists children with AppleScript; phase 2 fetches their text
        with one JXA batch call. Phase 2 is skipped when phase 1 finds no
        documents.
        """
        children = self._navigator.list_children(args.group_path, args.database, args.max_docs)
        if not children:
            logger.info("Group %s in %s has no documents", args.group_path, args.database)
            return render_empty_group(args.group_path, args.database)

        texts = self._source.batch_text([c.uuid for c in children], args.max_chars_per_doc)
        snapshot = GroupSnapshot(
            group_path=args.group_path,
            database=args.database,
            items=[(child, texts.get(child.uuid, "")) for child in children],
        )
        return render_group(snapshot)
