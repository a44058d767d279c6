"""Markdown text rendering for tool results."""

from src.bridge.models import ContentPage, GroupSnapshot, SearchReport

__all__ = ["render_search", "render_page", "render_group", "render_empty_group"]

_SECTION_BREAK = "\n---\n\n"


def render_search(report: SearchReport) -> str:
    parts = [f"Found **{report.total}** results (showing {report.returned}):\n\n"]
    for r in report.results:
        parts.append(f"### {r.name}\n")
        parts.append(f"- **UUID**: `{r.uuid}`\n")
        parts.append(f"- **Location**: {r.database} → {r.location}\n")
        parts.append(f"- **Type**: {r.kind} | **Score**: {r.score:.2f}\n")
        if r.excerpt:
            parts.append(f"\n{r.excerpt}\n")
        parts.append(_SECTION_BREAK)
    return "".join(parts)


def render_page(page: ContentPage) -> str:
    """Header with the covered range and continuation hint, then the raw chunk."""
    span = f"chars {page.offset}–{page.next_offset} of {page.total_chars}"
    if page.has_more:
        more = f" | ▶ more available — use offset: {page.next_offset}"
    else:
        more = " | ✓ end of document"
    return f"**{page.name}** [{page.kind}] ({span}{more})\n\n{page.content}"


def render_group(snapshot: GroupSnapshot) -> str:
    parts = [
        f"**Group**: `{snapshot.group_path}` in **{snapshot.database}** — "
        f"{len(snapshot)} documents\n\n"
    ]
    for child, content in snapshot.items:
        parts.append(f"### {child.name} [{child.kind}]\n")
        parts.append(f"UUID: `{child.uuid}`\n")
        if content:
            parts.append(f"\n{content}\n")
        parts.append(_SECTION_BREAK)
    return "".join(parts)


def render_empty_group(group_path: str, database: str) -> str:
    return f'Group "{group_path}" in "{database}" is empty or not found.'
