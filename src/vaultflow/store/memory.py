"""In-process document store."""

from __future__ import annotations

import logging
import secrets
import string
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from ..errors import ErrorCode, StoreError
from ..models import EntryRecord, FolderRecord, PageRecord

log = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)

ID_ALPHABET = string.ascii_letters + string.digits
ID_LENGTH = 16


def generate_id() -> str:
    """Random id for records created without a caller-supplied one."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


class MemoryCollection(Generic[R]):
    """Records of one type kept in insertion order."""

    def __init__(self, model: type[R], on_change: Callable[[], None] | None = None) -> None:
        self.model = model
        self._records: dict[str, R] = {}
        self._on_change = on_change

    def __len__(self) -> int:
        return len(self._records)

    async def get(self, id: str) -> R | None:
        return self._records.get(id)

    async def find(self, name: str, parent: str | None) -> R | None:
        for record in self._records.values():
            if getattr(record, "name") == name and getattr(record, "parent") == parent:
                return record
        return None

    async def create(self, name: str, parent: str | None, *, id: str | None = None, **fields: Any) -> R:
        record_id = id or generate_id()
        if record_id in self._records:
            raise StoreError(
                f"{self.model.__name__} {record_id} already exists",
                details={"id": record_id},
            )
        record = self.model.model_validate({"id": record_id, "name": name, "parent": parent, **fields})
        self._records[record_id] = record
        self._changed()
        return record

    async def update(self, id: str, **fields: Any) -> R:
        current = self._records.get(id)
        if current is None:
            raise StoreError(
                f"{self.model.__name__} {id} not found",
                code=ErrorCode.DOCUMENT_NOT_FOUND,
                details={"id": id},
            )
        if "id" in fields and fields["id"] != id:
            raise StoreError(f"Cannot change the id of {self.model.__name__} {id}")
        record = self.model.model_validate({**current.model_dump(), **fields})
        self._records[id] = record
        self._changed()
        return record

    async def all(self) -> list[R]:
        return list(self._records.values())

    def dump(self) -> list[dict[str, Any]]:
        return [record.model_dump(mode="json") for record in self._records.values()]

    def load(self, rows: list[dict[str, Any]]) -> None:
        self._records = {}
        for row in rows:
            record = self.model.model_validate(row)
            self._records[getattr(record, "id")] = record

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()


class MemoryDocumentStore:
    """Folders, entries and pages held in memory."""

    def __init__(self) -> None:
        self.folders: MemoryCollection[FolderRecord] = MemoryCollection(FolderRecord, self._changed)
        self.entries: MemoryCollection[EntryRecord] = MemoryCollection(EntryRecord, self._changed)
        self.pages: MemoryCollection[PageRecord] = MemoryCollection(PageRecord, self._changed)

    def counts(self) -> dict[str, int]:
        return {
            "folders": len(self.folders),
            "entries": len(self.entries),
            "pages": len(self.pages),
        }

    def _changed(self) -> None:
        """Hook for subclasses that persist every change."""
