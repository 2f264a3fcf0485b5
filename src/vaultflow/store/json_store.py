"""Document store persisted to a single JSON file.

Every create/update rewrites the file, so documents created before a
failure survive it and the next run picks them up by identity.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..errors import StoreError
from .memory import MemoryDocumentStore

log = logging.getLogger(__name__)

STORE_VERSION = 1


class JsonDocumentStore(MemoryDocumentStore):
    def __init__(self, path: Path) -> None:
        self._loading = True
        super().__init__()
        self.path = path
        if path.exists():
            self._load()
        self._loading = False

    def _load(self) -> None:
        try:
            payload: dict[str, Any] = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Cannot read store {self.path}: {e}", details={"path": str(self.path)}) from e

        self.folders.load(payload.get("folders", []))
        self.entries.load(payload.get("entries", []))
        self.pages.load(payload.get("pages", []))
        log.debug("Loaded store %s: %s", self.path, self.counts())

    def _changed(self) -> None:
        if self._loading:
            return
        payload = {
            "version": STORE_VERSION,
            "folders": self.folders.dump(),
            "entries": self.entries.dump(),
            "pages": self.pages.dump(),
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Cannot write store {self.path}: {e}", details={"path": str(self.path)}) from e
