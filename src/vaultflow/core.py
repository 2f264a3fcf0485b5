"""Import pipeline.

Stages run strictly one after another, each finishing before the next:

1. build the folder tree from the vault file list
2. import folders, entries, pages and assets
3. resolve wiki-links (needs every document to exist)
4. write the index and append backlinks (needs every link resolved)
5. optionally convert pages to HTML

There is a single writer; nothing here runs concurrently except the
independent per-page HTML conversions of the last stage. A failure aborts
the run without rolling back what was created. Running the import again
is the recovery path.
"""

from __future__ import annotations

import logging

from .assets import scan_existing_assets, validate_storage_settings, validate_upload_location
from .backlinks import create_backlinks
from .config import save_last_settings
from .convert import convert_all_to_html
from .identity import IdentityRegistry
from .importer import VaultImporter
from .index import create_index_file
from .models import ImportReport, ImportSettings
from .resolver import resolve_links
from .store import AssetStorage, DocumentStore
from .tree import build_tree, markdown_items

log = logging.getLogger(__name__)


async def import_vault(
    settings: ImportSettings,
    store: DocumentStore,
    storage: AssetStorage,
    *,
    save_settings: bool = True,
) -> ImportReport:
    """Import the vault files listed in settings into store.

    Args:
        settings: Options for this run, including the vault file list.
        store: Document store receiving folders, entries and pages.
        storage: Asset storage receiving non-markdown files.
        save_settings: Persist settings as the last-used settings.

    Returns:
        ImportReport with asset counts and the completion message.

    Raises:
        ConfigurationError: If remote storage settings are invalid.
        StoreError, StorageError: If a collaborator call fails.
    """
    log.info("Begin import...")

    # Configuration errors surface before anything is written.
    validate_storage_settings(settings)

    if save_settings:
        save_last_settings(settings)

    if not settings.vault_files:
        log.info("No vault files to import")
        return ImportReport(message="Nothing to import.")

    if settings.import_non_markdown:
        await validate_upload_location(settings, storage)

    existing_assets: dict[str, str] = {}
    if settings.import_non_markdown and settings.skip_duplicate_assets:
        existing_assets = await scan_existing_assets(settings, storage)

    importer = VaultImporter(
        settings,
        store,
        storage,
        existing_assets=existing_assets,
        registry=IdentityRegistry(),
    )

    # The root container's identity path starts with '/' so it can never
    # equal the identity of a vault folder with the same name.
    root_folder = await importer.get_or_create_folder(settings.root_folder_name, None, [""])

    tree = build_tree(settings.vault_files)
    stats = await importer.import_folder(tree, root_folder)

    items = list(tree.iter_items())
    notes = markdown_items(items)

    await resolve_links(items, store)

    index_page = None
    if settings.create_index_file:
        index_page = await create_index_file(notes, importer, root_folder)

    if settings.create_backlinks:
        await create_backlinks(notes, store)

    pages = [note.page for note in notes if note.page is not None and note.fresh]
    if settings.convert_to_html:
        await convert_all_to_html(pages, store)

    message = "Import complete."
    if settings.import_non_markdown and settings.skip_duplicate_assets and stats.total_assets > 0:
        message += f" Skipped {stats.skipped_assets}/{stats.total_assets} duplicate assets."
    log.info(message)

    return ImportReport(
        total_assets=stats.total_assets,
        skipped_assets=stats.skipped_assets,
        pages=len([note for note in notes if note.page is not None]),
        index_page=index_page.id if index_page else None,
        message=message,
    )
