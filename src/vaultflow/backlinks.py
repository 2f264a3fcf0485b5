"""Third pass: append a References section listing each note's backlinks."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .config import REFERENCES_HEADING
from .store import DocumentStore
from .vault import MarkdownItem

log = logging.getLogger(__name__)


def _sort_key(item: MarkdownItem) -> tuple[str, str]:
    return (item.stem.casefold(), item.stem)


def find_backlinks(items: Sequence[MarkdownItem]) -> dict[int, list[MarkdownItem]]:
    """Map each item (by position) to the other items whose page links to it.

    A page links to an item when its body contains the item's link anchor,
    whatever label the link carries.
    """
    backlinks: dict[int, list[MarkdownItem]] = {}
    for index, item in enumerate(items):
        if item.page is None:
            continue
        anchor = item.page.anchor
        referrers = [
            other
            for other in items
            if other is not item and other.page is not None and anchor in other.page.body
        ]
        if referrers:
            backlinks[index] = sorted(referrers, key=_sort_key)
    return backlinks


def references_section(referrers: Sequence[MarkdownItem]) -> str:
    lines = [f"- {referrer.link()}" for referrer in referrers]
    return f"\n\n{REFERENCES_HEADING}\n" + "\n".join(lines)


async def create_backlinks(items: Sequence[MarkdownItem], store: DocumentStore) -> int:
    """Append backlinks to every page written by this run.

    Backlinks are computed from all bodies before any section is appended,
    so one note's References list never counts as a link to another.

    Returns:
        Number of pages that received a References section.
    """
    backlinks = find_backlinks(items)
    updated = 0

    for index, referrers in backlinks.items():
        item = items[index]
        if item.page is None or not item.fresh:
            continue
        body = item.page.body + references_section(referrers)
        item.page = await store.pages.update(item.page.id, body=body)
        updated += 1

    log.info("Added backlinks to %d pages", updated)
    return updated
