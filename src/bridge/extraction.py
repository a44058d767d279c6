"""Fail-open per-record extraction."""

import logging
from typing import Callable, Iterable, TypeVar

from src.exceptions import PartialExtractionError

__all__ = ["extract_or_empty"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


def extract_or_empty(
    items: Iterable[T],
    extract: Callable[[T], str],
    default: str = "",
) -> list[str]:
    """
    Apply *extract* to every item, substituting *default* on failure.

    Only PartialExtractionError is recovered; anything else is a bug in the
    extractor and propagates. The result is aligned with *items*.
    """
    out: list[str] = []
    for item in items:
        try:
            out.append(extract(item))
        except PartialExtractionError as exc:
            logger.warning("Text extraction failed for %r: %s", item, exc)
            out.append(default)
    return out
