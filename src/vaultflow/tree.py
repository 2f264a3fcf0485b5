"""Folder tree built from the flat vault file list."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from .vault import MarkdownItem, OtherItem, VaultFile, make_item

log = logging.getLogger(__name__)


@dataclass(eq=False)
class FolderNode:
    """A directory of the vault. The synthetic root has an empty name.

    Children and items keep first-seen order. Sibling folders have unique
    names; items with equal names stay separate.
    """

    name: str
    children: list[FolderNode] = field(default_factory=list)
    items: list[MarkdownItem | OtherItem] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return self.name == ""

    def child(self, name: str) -> FolderNode | None:
        for folder in self.children:
            if folder.name == name:
                return folder
        return None

    def child_or_create(self, name: str) -> FolderNode:
        folder = self.child(name)
        if folder is None:
            folder = FolderNode(name)
            self.children.append(folder)
        return folder

    def iter_items(self) -> Iterator[MarkdownItem | OtherItem]:
        """Items of this folder, then of each child folder, depth-first."""
        yield from self.items
        for folder in self.children:
            yield from folder.iter_items()

    def has_markdown(self) -> bool:
        return any(isinstance(item, MarkdownItem) for item in self.items)

    def has_markdown_recursive(self) -> bool:
        return any(isinstance(item, MarkdownItem) for item in self.iter_items())

    def render(self, indent: str = "") -> list[str]:
        """Lines of a plain-text outline of this subtree."""
        lines = []
        for item in self.items:
            marker = "*" if isinstance(item, MarkdownItem) else "-"
            lines.append(f"{indent}{marker} {item.name}")
        for folder in self.children:
            lines.append(f"{indent}{folder.name}/")
            lines.extend(folder.render(indent + "  "))
        return lines


def build_tree(files: Iterable[VaultFile]) -> FolderNode:
    """Build the folder hierarchy for a vault file list.

    Hidden files (any path segment starting with '.') and canvas files are
    skipped. The first path segment, the vault's own directory, is dropped
    so the tree does not depend on what the vault directory is called.

    Args:
        files: Vault files in the order they were listed.

    Returns:
        The synthetic root folder.
    """
    root = FolderNode("")
    skipped = 0

    for file in files:
        item = make_item(file)
        if item.is_hidden() or item.is_canvas():
            skipped += 1
            continue

        parent = root
        for name in item.folder_path:
            parent = parent.child_or_create(name)
        parent.items.append(item)

    if skipped:
        log.debug("Skipped %d hidden or canvas files", skipped)
    return root


def markdown_items(items: Iterable[MarkdownItem | OtherItem]) -> list[MarkdownItem]:
    return [item for item in items if isinstance(item, MarkdownItem)]
