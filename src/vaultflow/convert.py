"""Final pass: render markdown pages to HTML."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from markdown_it import MarkdownIt

from .models import PageRecord
from .store import DocumentStore

log = logging.getLogger(__name__)


def render_html(body: str) -> str:
    md = MarkdownIt("commonmark", {"html": True}).enable("table")
    return md.render(body)


async def convert_to_html(page: PageRecord, store: DocumentStore) -> PageRecord:
    if page.format == "html":
        return page
    return await store.pages.update(page.id, body=render_html(page.body), format="html")


async def convert_all_to_html(pages: Sequence[PageRecord], store: DocumentStore) -> list[PageRecord]:
    """Convert pages concurrently; each conversion is independent of the others."""
    converted = await asyncio.gather(*(convert_to_html(page, store) for page in pages))
    log.info("Converted %d pages to HTML", len(converted))
    return list(converted)
