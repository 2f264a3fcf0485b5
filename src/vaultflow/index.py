"""Generated index of all imported notes, grouped by top-level folder."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .config import INDEX_NAME, UNCATEGORIZED
from .identity import journal_identity
from .importer import VaultImporter
from .models import FolderRecord, PageRecord
from .vault import MarkdownItem

log = logging.getLogger(__name__)

# Vault paths never start with "/", so no note or combined folder shares this identity.
INDEX_PATH = f"/{INDEX_NAME}"


def index_group(item: MarkdownItem) -> str:
    """First folder below the vault root, or UNCATEGORIZED for root notes."""
    return item.folder_path[0] if item.folder_path else UNCATEGORIZED


def render_index(items: Sequence[MarkdownItem]) -> str:
    """Markdown body of the index: one heading per group, sorted, then its links."""
    groups = sorted({index_group(item) for item in items})
    sections = []
    for group in groups:
        links = [item.link() or "" for item in items if index_group(item) == group]
        sections.append(f"# {group}\n" + "\n".join(f"- {link}" for link in links))
    return "\n\n".join(sections)


async def create_index_file(
    items: Sequence[MarkdownItem],
    importer: VaultImporter,
    root_folder: FolderRecord | None,
) -> PageRecord:
    """Create or rewrite the Index entry in the root folder.

    The entry is found by its own identity. A same-named entry is only
    reused when no imported note lives in it, so a note called Index
    is never overwritten.
    """
    store = importer.store
    content = render_index(items)
    root_id = root_folder.id if root_folder else None
    note_entries = {item.page.parent for item in items if item.page is not None}

    entry = await store.entries.get(journal_identity(INDEX_PATH))
    if entry is None:
        entry = await store.entries.find(INDEX_NAME, root_id)
        if entry is not None and entry.id in note_entries:
            log.debug("Entry %r holds imported notes, creating a separate index", INDEX_NAME)
            entry = None
    if entry is None:
        entry = await importer.create_entry(INDEX_NAME, root_folder, INDEX_PATH)

    page = await store.pages.find(INDEX_NAME, entry.id)
    if page is not None:
        page = await store.pages.update(page.id, body=content)
    else:
        page, _ = await importer.create_page(INDEX_NAME, content, entry, INDEX_PATH)
        if page.body != content:
            page = await store.pages.update(page.id, body=content)

    log.info("Wrote index with %d notes", len(items))
    return page
