"""Data models for the bridge module."""

from dataclasses import dataclass, field

__all__ = [
    "SearchResult",
    "SearchReport",
    "ContentPage",
    "GroupChild",
    "GroupSnapshot",
]


@dataclass
class SearchResult:
    """
    One record matched by a DEVONthink search.

    uuid     — durable record identity (never the transient numeric id)
    location — group path inside the database, e.g. "/ONVIF_Offering/"
    score    — relevance 0.0 – 1.0, rounded to 2 decimals
    excerpt  — leading plain text, ending in "…" when truncated
    """
    name:     str
    uuid:     str
    location: str   = ""
    database: str   = ""
    score:    float = 0.0
    kind:     str   = ""
    excerpt:  str   = ""

    def __post_init__(self) -> None:
        self.score = round(float(self.score), 2)


@dataclass
class SearchReport:
    """Search outcome: global match count plus the results kept."""
    total:   int
    results: list[SearchResult] = field(default_factory=list)

    @property
    def returned(self) -> int:
        return len(self.results)


@dataclass
class ContentPage:
    """
    One character-offset page of a record's plain text.

    chunk_length, next_offset and has_more are derived from content,
    offset and total_chars so they always satisfy:
        next_offset == offset + chunk_length
        has_more    == (next_offset < total_chars)
    """
    name:        str
    uuid:        str
    kind:        str
    content:     str
    offset:      int
    total_chars: int

    @property
    def chunk_length(self) -> int:
        return len(self.content)

    @property
    def next_offset(self) -> int:
        return self.offset + self.chunk_length

    @property
    def has_more(self) -> bool:
        return self.next_offset < self.total_chars


@dataclass(frozen=True)
class GroupChild:
    """A direct, non-container child of a DEVONthink group."""
    uuid: str
    name: str
    kind: str = ""


@dataclass
class GroupSnapshot:
    """Direct children of a group, each paired with a plain-text prefix."""
    group_path: str
    database:   str
    items:      list[tuple[GroupChild, str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)
