"""Interfaces of the collaborators the importer writes to.

The importer needs very little from a document store: get by id, find by
name under a parent, create (honoring a caller-supplied id), and update.
Folders, entries and pages all share that shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, Protocol, TypeVar

from pydantic import BaseModel

if TYPE_CHECKING:
    from ..models import EntryRecord, FolderRecord, PageRecord
    from ..vault import VaultFile

R = TypeVar("R", bound=BaseModel)


class Collection(Protocol[R]):
    """One record type of a document store."""

    async def get(self, id: str) -> R | None: ...

    async def find(self, name: str, parent: str | None) -> R | None: ...

    async def create(self, name: str, parent: str | None, *, id: str | None = ..., **fields: Any) -> R:
        """Create a record. A given id must be kept, not replaced."""
        ...

    async def update(self, id: str, **fields: Any) -> R: ...

    async def all(self) -> list[R]: ...


class DocumentStore(Protocol):
    folders: Collection[FolderRecord]
    entries: Collection[EntryRecord]
    pages: Collection[PageRecord]


@dataclass(frozen=True)
class AssetLocation:
    """Where assets go: a directory in local data or in a remote bucket."""

    path: str
    source: Literal["data", "s3"] = "data"
    bucket: str | None = None


class AssetStorage(Protocol):
    async def upload(self, location: AssetLocation, file: VaultFile) -> str:
        """Store a file and return its (URL-encoded) path."""
        ...

    async def list_files(self, location: AssetLocation) -> list[str]:
        """URL-encoded paths of files at location.

        Raises:
            StorageError: If the location does not exist or cannot be listed.
        """
        ...

    async def ensure_directory(self, location: AssetLocation) -> None: ...
