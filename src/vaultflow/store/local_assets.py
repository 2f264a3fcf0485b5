"""Asset storage in a local directory."""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import quote

from ..errors import StorageError
from ..vault import VaultFile
from .base import AssetLocation

log = logging.getLogger(__name__)


class LocalAssetStorage:
    """Stores uploads under root/<location.path>/<file name>.

    Returned paths are relative to root and URL-encoded, the way a web
    file server reports them.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def _directory(self, location: AssetLocation) -> Path:
        if location.source != "data":
            raise StorageError(
                f"Local asset storage cannot reach {location.source} bucket {location.bucket}",
                details={"source": location.source, "bucket": location.bucket},
            )
        return self.root / location.path

    async def upload(self, location: AssetLocation, file: VaultFile) -> str:
        directory = self._directory(location)
        try:
            directory.mkdir(parents=True, exist_ok=True)
            (directory / file.name).write_bytes(file.read_bytes())
        except OSError as e:
            raise StorageError(f"Upload of {file.name} failed: {e}", details={"file": file.relative_path}) from e
        log.debug("Uploaded %s to %s", file.relative_path, directory)
        return quote(f"{location.path}/{file.name}")

    async def list_files(self, location: AssetLocation) -> list[str]:
        directory = self._directory(location)
        if not directory.is_dir():
            raise StorageError(f"{location.path} does not exist", details={"path": location.path})
        return [
            quote(f"{location.path}/{path.name}")
            for path in sorted(directory.iterdir())
            if path.is_file()
        ]

    async def ensure_directory(self, location: AssetLocation) -> None:
        directory = self._directory(location)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create {location.path}: {e}", details={"path": location.path}) from e
