"""Pydantic models for vaultflow."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import DEFAULT_CALLOUT_MARKER, DEFAULT_MEDIA_FOLDER
from .vault import VaultFile


class ImportSettings(BaseModel):
    """Options for one import run.

    Built once per run and passed explicitly to every stage; frozen so no
    stage can change behavior for the stages after it.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    # Source files, as produced by vault.scan_vault(). Never persisted.
    vault_files: tuple[VaultFile, ...] = Field(default=(), exclude=True, repr=False)

    root_folder_name: str | None = None  # Container every import nests under
    combine_notes: bool = False  # One entry per folder instead of one per note
    combine_notes_no_subfolders: bool = True  # Only combine leaf folders
    import_non_markdown: bool = True  # Upload assets
    overwrite: bool = True  # Replace bodies of pages that already exist
    ignore_duplicate: bool = False  # Leave existing pages alone without overwriting
    default_public: bool = False  # New entries are visible to everyone
    strip_callouts: bool = False  # Remove > [!marker] callout blocks
    callout_marker: str = DEFAULT_CALLOUT_MARKER
    create_index_file: bool = False
    create_backlinks: bool = True
    media_folder: str = DEFAULT_MEDIA_FOLDER  # Asset destination
    skip_duplicate_assets: bool = False  # Reuse assets already at the destination
    use_remote_storage: bool = False
    remote_bucket: str | None = None
    remote_region: str | None = None
    convert_to_html: bool = False  # Render pages to HTML after all edits

    @field_validator("media_folder")
    @classmethod
    def _normalize_media_folder(cls, value: str) -> str:
        return value.strip().strip("/")

    @field_validator("root_folder_name")
    @classmethod
    def _blank_root_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


class FolderRecord(BaseModel):
    """A container in the document store."""

    id: str
    name: str
    parent: str | None = None  # Parent folder id


class EntryRecord(BaseModel):
    """An entry (one per note, or one per combined folder) holding pages."""

    id: str
    name: str
    parent: str | None = None  # Folder id
    public: bool = False


class PageRecord(BaseModel):
    """A page inside an entry. Every imported note produces exactly one."""

    id: str
    name: str
    parent: str  # Entry id
    body: str = ""
    format: Literal["markdown", "html"] = "markdown"

    @property
    def anchor(self) -> str:
        """Link text without a label; present in every link to this page."""
        return f"@Doc[{self.id}]"

    def link(self, label: str | None = None) -> str:
        return f"{self.anchor}{{{label or self.name}}}"


class ImportReport(BaseModel):
    """Summary of a finished import run."""

    total_assets: int = 0
    skipped_assets: int = 0
    pages: int = 0
    index_page: str | None = None  # Id of the generated index page
    message: str = "Import complete."
