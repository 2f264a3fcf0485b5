"""Import of the folder tree into the document store.

Walks the tree depth-first, files before child folders, creating or reusing
folders, entries and pages. Every document is looked up by its
deterministic identity before it is created, so running the same import
twice leaves the store with the same documents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import assert_never
from urllib.parse import unquote

from .assets import asset_location
from .config import ROOT_ENTRY_NAME
from .identity import (
    NAMESPACE_FOLDER,
    NAMESPACE_JOURNAL,
    NAMESPACE_PAGE,
    PAGE_SEPARATOR,
    IdentityRegistry,
    folder_identity,
    journal_identity,
    page_identity,
)
from .models import EntryRecord, FolderRecord, ImportSettings, PageRecord
from .store import AssetStorage, DocumentStore
from .tree import FolderNode
from .vault import MarkdownItem, OtherItem

log = logging.getLogger(__name__)


@dataclass
class ImportStats:
    """Asset counts accumulated over the walk."""

    total_assets: int = 0
    skipped_assets: int = 0

    def __add__(self, other: ImportStats) -> ImportStats:
        return ImportStats(
            self.total_assets + other.total_assets,
            self.skipped_assets + other.skipped_assets,
        )


class VaultImporter:
    """Creates the store documents for one import run."""

    def __init__(
        self,
        settings: ImportSettings,
        store: DocumentStore,
        storage: AssetStorage,
        *,
        existing_assets: dict[str, str] | None = None,
        registry: IdentityRegistry | None = None,
    ) -> None:
        self.settings = settings
        self.store = store
        self.storage = storage
        self.existing_assets = existing_assets or {}
        self.registry = registry or IdentityRegistry()

    # ─────────────────────────────────────────────────────────────────────
    # Folders, entries, pages
    # ─────────────────────────────────────────────────────────────────────

    async def get_or_create_folder(
        self,
        name: str | None,
        parent: FolderRecord | None = None,
        folder_path: list[str] | None = None,
    ) -> FolderRecord | None:
        """Find a folder by name under parent, or create it.

        Returns None for an empty name (the tree root has no folder).
        """
        if not name:
            return None
        parent_id = parent.id if parent else None
        folder = await self.store.folders.find(name, parent_id)
        if folder is not None:
            return folder
        return await self.create_folder(name, parent, folder_path or [])

    async def create_folder(
        self,
        name: str,
        parent: FolderRecord | None,
        folder_path: list[str],
    ) -> FolderRecord:
        full_path = [*folder_path, name]
        folder_id = self.registry.claim(NAMESPACE_FOLDER, "/".join(full_path), folder_identity(full_path))

        existing = await self.store.folders.get(folder_id)
        if existing is not None:
            return existing

        folder = await self.store.folders.create(name, parent.id if parent else None, id=folder_id)
        log.debug("Created folder %r with id %s", name, folder.id)
        return folder

    async def create_entry(
        self,
        name: str,
        folder: FolderRecord | None,
        file_path: str | None = None,
    ) -> EntryRecord:
        """Create an entry, or return the one already holding its identity.

        Without a file_path the store picks the id.
        """
        entry_id: str | None = None
        if file_path is not None:
            entry_id = self.registry.claim(NAMESPACE_JOURNAL, file_path, journal_identity(file_path))
            existing = await self.store.entries.get(entry_id)
            if existing is not None:
                log.debug("Entry %r already exists with id %s", name, entry_id)
                return existing
        else:
            log.debug("Creating entry %r without a path, the store assigns its id", name)

        entry = await self.store.entries.create(
            name,
            folder.id if folder else None,
            id=entry_id,
            public=self.settings.default_public,
        )
        log.debug("Created entry %r with id %s", name, entry.id)
        return entry

    async def create_page(
        self,
        name: str,
        body: str,
        entry: EntryRecord,
        file_path: str | None = None,
    ) -> tuple[PageRecord, bool]:
        """Create a page in entry unless its identity already exists.

        Returns:
            Tuple of (page, created).
        """
        page_id: str | None = None
        if file_path is not None:
            page_id = self.registry.claim(
                NAMESPACE_PAGE,
                f"{file_path}{PAGE_SEPARATOR}{name}",
                page_identity(file_path, name),
            )
            existing = await self.store.pages.get(page_id)
            if existing is not None:
                if existing.parent != entry.id:
                    log.warning(
                        "Page %r (%s) belongs to entry %s, not %s; leaving it in place",
                        name, page_id, existing.parent, entry.id,
                    )
                return existing, False

        page = await self.store.pages.create(name, entry.id, id=page_id, body=body)
        return page, True

    # ─────────────────────────────────────────────────────────────────────
    # Tree walk
    # ─────────────────────────────────────────────────────────────────────

    async def import_folder(
        self,
        folder: FolderNode,
        parent_folder: FolderRecord | None,
        current_path: list[str] | None = None,
    ) -> ImportStats:
        """Import a folder node, its items, then its child folders.

        Args:
            folder: Node to import.
            parent_folder: Store folder the node's documents go into.
            current_path: Names of the nodes above this one, root excluded.

        Returns:
            Asset counts for the subtree.
        """
        settings = self.settings
        current_path = current_path or []
        stats = ImportStats()

        has_markdown = folder.has_markdown()
        combine = (
            settings.combine_notes
            and has_markdown
            and (not settings.combine_notes_no_subfolders or not folder.children)
        )

        parent_entry: EntryRecord | None = None
        if combine:
            entry_path = "/".join([*current_path, folder.name] if folder.name else current_path)
            entry_name = folder.name or settings.root_folder_name or ROOT_ENTRY_NAME
            parent_entry = await self.create_entry(entry_name, parent_folder, entry_path)

        one_entry_per_file = not combine and not folder.is_root and folder.has_markdown_recursive()
        nested_entries = combine and any(child.has_markdown_recursive() for child in folder.children)
        if one_entry_per_file or nested_entries:
            parent_folder = await self.get_or_create_folder(folder.name, parent_folder, current_path)

        for item in folder.items:
            stats = stats + await self.import_item(item, parent_folder, parent_entry)

        child_path = [*current_path, folder.name] if folder.name else current_path
        for child in folder.children:
            stats = stats + await self.import_folder(child, parent_folder, child_path)

        return stats

    async def import_item(
        self,
        item: MarkdownItem | OtherItem,
        parent_folder: FolderRecord | None,
        parent_entry: EntryRecord | None,
    ) -> ImportStats:
        if isinstance(item, MarkdownItem):
            await self.import_markdown(item, parent_folder, parent_entry)
            return ImportStats()
        elif isinstance(item, OtherItem):
            if not self.settings.import_non_markdown:
                return ImportStats()
            skipped = await self.import_other(item)
            return ImportStats(1, 1 if skipped else 0)
        else:
            assert_never(item)

    async def import_markdown(
        self,
        item: MarkdownItem,
        parent_folder: FolderRecord | None,
        parent_entry: EntryRecord | None,
    ) -> None:
        """Import one note as a page.

        Outside a combined folder the note gets its own entry, found by
        identity, then by name and folder (stores filled before identities
        existed), and created otherwise.
        """
        settings = self.settings
        page_name = item.stem
        entry_name = parent_entry.name if parent_entry else page_name
        folder_id = parent_folder.id if parent_folder else None

        entry: EntryRecord | None = None
        if parent_entry is None:
            entry_id = self.registry.claim(NAMESPACE_JOURNAL, item.path, journal_identity(item.path))
            entry = await self.store.entries.get(entry_id)
            if entry is None:
                entry = await self.store.entries.find(entry_name, folder_id)
        entry = entry or parent_entry or await self.create_entry(entry_name, parent_folder, item.path)

        body = item.parse(remove_callouts=settings.strip_callouts, callout_marker=settings.callout_marker)

        page = await self.store.pages.find(page_name, entry.id)
        written = False
        if page is not None and settings.overwrite:
            page = await self.store.pages.update(page.id, body=body)
            written = True
        elif page is None or (not settings.overwrite and not settings.ignore_duplicate):
            page, written = await self.create_page(page_name, body, entry, item.path)

        # A combined entry's visibility is not any single note's to change.
        if parent_entry is None and entry.public != item.is_public:
            entry = await self.store.entries.update(entry.id, public=item.is_public)

        item.page = page
        item.fresh = written

    async def import_other(self, item: OtherItem) -> bool:
        """Upload an asset. Returns True when the upload was skipped as a duplicate."""
        if self.settings.skip_duplicate_assets and item.name in self.existing_assets:
            item.upload_path = self.existing_assets[item.name]
            log.debug("Skipping %s, already at %s", item.path, item.upload_path)
            return True

        path = await self.storage.upload(asset_location(self.settings), item.file)
        if path:
            item.upload_path = unquote(path)
        return False
