"""Shared test fixtures for the vaultflow test suite.

Design:
- store: in-memory document store, fresh per test
- storage: asset storage double that records uploads
- vault_files / make_settings: build vault file lists and settings inline
- Isolation: state dir and settings discovery never touch the real home
"""

import logging
from collections.abc import Callable
from pathlib import Path
from urllib.parse import quote

import pytest
from click.testing import CliRunner

from vaultflow.errors import StorageError
from vaultflow.models import ImportSettings
from vaultflow.store import AssetLocation, MemoryDocumentStore
from vaultflow.vault import VaultFile


# ─────────────────────────────────────────────────────────────────────────────
# Test doubles
# ─────────────────────────────────────────────────────────────────────────────


class RecordingAssetStorage:
    """Asset storage that keeps uploads in memory.

    existing=None means the destination does not exist yet: listing it
    fails until ensure_directory() is called.
    """

    def __init__(self, existing: list[str] | None = None) -> None:
        self.files: list[str] = list(existing or [])
        self.exists = existing is not None
        self.uploads: list[tuple[AssetLocation, str]] = []
        self.created: list[str] = []

    async def upload(self, location: AssetLocation, file: VaultFile) -> str:
        self.uploads.append((location, file.relative_path))
        path = quote(f"{location.path}/{file.name}")
        self.files.append(path)
        return path

    async def list_files(self, location: AssetLocation) -> list[str]:
        if not self.exists:
            raise StorageError(f"{location.path} does not exist")
        return list(self.files)

    async def ensure_directory(self, location: AssetLocation) -> None:
        self.created.append(location.path)
        self.exists = True


# ─────────────────────────────────────────────────────────────────────────────
# Isolation
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep last-used settings and settings discovery inside tmp_path."""
    monkeypatch.setenv("VAULTFLOW_STATE_DIR", str(tmp_path / "state"))
    monkeypatch.delenv("VAULTFLOW_CONFIG", raising=False)
    monkeypatch.delenv("VAULTFLOW_QUIET", raising=False)
    monkeypatch.delenv("VAULTFLOW_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    # The CLI installs a handler bound to the runner's stderr; drop it.
    package_logger = logging.getLogger("vaultflow")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


# ─────────────────────────────────────────────────────────────────────────────
# Core Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture
def storage() -> RecordingAssetStorage:
    return RecordingAssetStorage()


@pytest.fixture
def runner() -> CliRunner:
    """CLI runner with isolated environment."""
    return CliRunner()


@pytest.fixture
def make_settings() -> Callable[..., ImportSettings]:
    """Build ImportSettings for a list of (path, content) pairs.

    Usage:
        settings = make_settings([("vault/a.md", "Body")], combine_notes=True)
    """

    def _make(files: list[tuple[str, str | bytes]], **options) -> ImportSettings:
        return ImportSettings(vault_files=vault_files(files), **options)

    return _make


@pytest.fixture
def vault_dir(tmp_path: Path) -> Path:
    """A small vault on disk.

    Creates:
    - Campaign/Home.md (links to People/Alice and the map)
    - Campaign/People/Alice.md (public)
    - Campaign/People/Bob.md (links back to Home)
    - Campaign/maps/map.png
    - Campaign/.obsidian/workspace.json (hidden)
    - Campaign/Board.canvas
    """
    root = tmp_path / "Campaign"
    (root / "People").mkdir(parents=True)
    (root / "maps").mkdir()
    (root / ".obsidian").mkdir()

    (root / "Home.md").write_text("Start with [[Alice]].\n\n![[map.png|300]]\n", encoding="utf-8")
    (root / "People" / "Alice.md").write_text("---\npublic: true\n---\nAlice the bard.\n", encoding="utf-8")
    (root / "People" / "Bob.md").write_text("Bob. Back to [[Home|the start]].\n", encoding="utf-8")
    (root / "maps" / "map.png").write_bytes(b"\x89PNG\r\n")
    (root / ".obsidian" / "workspace.json").write_text("{}", encoding="utf-8")
    (root / "Board.canvas").write_text("{}", encoding="utf-8")
    return root


# ─────────────────────────────────────────────────────────────────────────────
# Helper Functions (for test code, not fixtures)
# ─────────────────────────────────────────────────────────────────────────────


def vault_files(files: list[tuple[str, str | bytes]]) -> list[VaultFile]:
    """Vault files from (relative path, content) pairs; str content is UTF-8 encoded."""
    return [
        VaultFile.from_text(path, content) if isinstance(content, str) else VaultFile(path, content)
        for path, content in files
    ]
