"""Abstract capability interfaces consumed by the tool handlers."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from .models import ContentPage, GroupChild, SearchReport

__all__ = ["AbstractRecordSource", "AbstractGroupNavigator"]


class AbstractRecordSource(ABC):
    """
    Record-level reads: search, UUID resolution and plain-text extraction.

    Implemented over JXA, whose JSON output is the only well-formed way to
    get plain text back from DEVONthink.
    """

    @abstractmethod
    def search(
        self,
        query: str,
        database: Optional[str],
        limit: int,
        excerpt_chars: int,
    ) -> SearchReport:
        """
        Run a global search and return at most *limit* results.

        When *database* is set, results from other databases are excluded;
        the search is not re-run.
        """
        ...

    @abstractmethod
    def read_chunk(self, uuid: str, offset: int, limit: int) -> ContentPage:
        """
        Return plain text [offset, offset + limit) of the record *uuid*.

        Raises:
            RecordNotFoundError: *uuid* does not resolve.
        """
        ...

    @abstractmethod
    def batch_text(self, uuids: Sequence[str], max_chars_per_doc: int) -> dict[str, str]:
        """
        Map every UUID to the first *max_chars_per_doc* plain-text chars.

        Extraction failures map to "" rather than raising.
        """
        ...


class AbstractGroupNavigator(ABC):
    """
    Path-based group navigation.

    Implemented over AppleScript because JXA's location queries return no
    matches for populated groups.
    """

    @abstractmethod
    def list_children(self, group_path: str, database: str, max_docs: int) -> list[GroupChild]:
        """
        Return up to *max_docs* direct, non-group children in display order.

        An unknown database or group yields an empty list.
        """
        ...
