"""Vault files and the items built from them.

A vault file carries the relative path a browser would report for it
(``<vault dir>/<sub dirs>/<file>``); the first segment is the vault's own
directory name and never takes part in identities or the folder tree.

Items come in exactly two kinds, MarkdownItem and OtherItem. Code that
consumes items dispatches over both and fails loudly on anything else.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import quote

from .config import CANVAS_EXTENSION, MARKDOWN_EXTENSION
from .errors import ErrorCode, VaultflowError
from .frontmatter import FrontmatterValue, parse_note

if TYPE_CHECKING:
    from .models import PageRecord

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class VaultFile:
    """One file of the vault, read lazily."""

    relative_path: str
    source: Path | bytes = field(repr=False)

    @classmethod
    def from_text(cls, relative_path: str, text: str) -> VaultFile:
        return cls(relative_path, text.encode("utf-8"))

    @property
    def name(self) -> str:
        return self.relative_path.rsplit("/", 1)[-1]

    def read_bytes(self) -> bytes:
        if isinstance(self.source, bytes):
            return self.source
        return self.source.read_bytes()

    def read_text(self) -> str:
        return self.read_bytes().decode("utf-8", errors="replace")


def scan_vault(directory: Path) -> list[VaultFile]:
    """List every file under a vault directory.

    Paths are prefixed with the directory's own name and sorted, so two
    scans of the same vault always yield the same order.

    Raises:
        VaultflowError: If directory does not exist or is not a directory.
    """
    if not directory.is_dir():
        raise VaultflowError(
            f"Vault directory not found: {directory}",
            code=ErrorCode.VAULT_NOT_FOUND,
            details={"path": str(directory)},
        )

    # "." and ".." have no usable name; the vault is named after the real directory.
    directory = directory.resolve()
    files = [
        VaultFile(f"{directory.name}/{path.relative_to(directory).as_posix()}", path)
        for path in directory.rglob("*")
        if path.is_file()
    ]
    files.sort(key=lambda f: f.relative_path.split("/"))
    log.debug("Scanned %d files in %s", len(files), directory)
    return files


@dataclass(eq=False)
class VaultItem:
    """Common view over a vault file. Compared by identity, never by name."""

    file: VaultFile

    @property
    def segments(self) -> list[str]:
        return self.file.relative_path.split("/")

    @property
    def directories(self) -> list[str]:
        """Directory names including the vault root."""
        return self.segments[:-1]

    @property
    def folder_path(self) -> list[str]:
        """Directory names below the vault root."""
        return self.directories[1:]

    @property
    def name(self) -> str:
        return self.segments[-1]

    @property
    def extension(self) -> str | None:
        if "." not in self.name.lstrip("."):
            return None
        return self.name.rsplit(".", 1)[1].lower()

    @property
    def stem(self) -> str:
        if self.extension is None:
            return self.name
        return self.name.rsplit(".", 1)[0]

    @property
    def path(self) -> str:
        """Path below the vault root; the key for deterministic identities."""
        segments = self.segments
        if len(segments) > 1:
            return "/".join(segments[1:])
        return self.file.relative_path

    def is_hidden(self) -> bool:
        # The vault root segment never counts; it is dropped from the tree.
        segments = self.segments[1:] or self.segments
        return any(segment.startswith(".") for segment in segments)

    def is_canvas(self) -> bool:
        return self.extension == CANVAS_EXTENSION


@dataclass(eq=False)
class MarkdownItem(VaultItem):
    """A note. Produces one page in the store."""

    page: PageRecord | None = None
    fresh: bool = False  # Page body was written by the current run
    frontmatter: dict[str, FrontmatterValue] = field(default_factory=dict)
    is_public: bool = False
    body: str = ""

    @cached_property
    def raw_text(self) -> str:
        return self.file.read_text()

    def parse(self, *, remove_callouts: bool, callout_marker: str) -> str:
        """Extract frontmatter and visibility; returns the importable body."""
        parsed = parse_note(
            self.raw_text,
            remove_callouts=remove_callouts,
            callout_marker=callout_marker,
        )
        self.frontmatter = parsed.frontmatter
        self.is_public = parsed.is_public
        self.body = parsed.body
        return parsed.body

    def link(self, label: str | None = None) -> str | None:
        if self.page is None:
            return None
        return self.page.link(label)


@dataclass(eq=False)
class OtherItem(VaultItem):
    """An attachment (image, pdf, ...). Uploaded to asset storage."""

    upload_path: str | None = None

    def link(self, label: str | None = None) -> str | None:
        # Assets are always labelled by file name.
        if self.upload_path is None:
            return None
        return f"![{self.name}]({quote(self.upload_path, safe='/:')})"


def make_item(file: VaultFile) -> MarkdownItem | OtherItem:
    """Wrap a vault file in the item kind matching its extension."""
    item = VaultItem(file)
    if item.extension == MARKDOWN_EXTENSION:
        return MarkdownItem(file)
    return OtherItem(file)
