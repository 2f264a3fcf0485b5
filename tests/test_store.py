"""Tests for the document stores and local asset storage."""

import json
from pathlib import Path

import pytest

from vaultflow.errors import ErrorCode, StorageError, StoreError
from vaultflow.models import FolderRecord
from vaultflow.store import AssetLocation, JsonDocumentStore, LocalAssetStorage, MemoryCollection
from vaultflow.vault import VaultFile


class TestMemoryCollection:
    @pytest.mark.asyncio
    async def test_caller_id_is_kept(self):
        folders = MemoryCollection(FolderRecord)
        folder = await folders.create("a", None, id="fixedid000000001")

        assert folder.id == "fixedid000000001"
        assert await folders.get("fixedid000000001") == folder

    @pytest.mark.asyncio
    async def test_generated_ids_are_unique(self):
        folders = MemoryCollection(FolderRecord)
        first = await folders.create("a", None)
        second = await folders.create("a", None)

        assert first.id != second.id
        assert len(first.id) == 16

    @pytest.mark.asyncio
    async def test_duplicate_id_is_rejected(self):
        folders = MemoryCollection(FolderRecord)
        await folders.create("a", None, id="x")

        with pytest.raises(StoreError):
            await folders.create("b", None, id="x")

    @pytest.mark.asyncio
    async def test_find_matches_name_and_parent(self):
        folders = MemoryCollection(FolderRecord)
        top = await folders.create("a", None)
        nested = await folders.create("a", top.id)

        assert await folders.find("a", None) == top
        assert await folders.find("a", top.id) == nested
        assert await folders.find("A", None) is None

    @pytest.mark.asyncio
    async def test_update(self):
        folders = MemoryCollection(FolderRecord)
        folder = await folders.create("a", None)

        renamed = await folders.update(folder.id, name="b")

        assert renamed.name == "b"
        assert (await folders.get(folder.id)).name == "b"

    @pytest.mark.asyncio
    async def test_update_missing_record(self):
        folders = MemoryCollection(FolderRecord)
        with pytest.raises(StoreError) as exc_info:
            await folders.update("nope", name="b")
        assert exc_info.value.code == ErrorCode.DOCUMENT_NOT_FOUND

    @pytest.mark.asyncio
    async def test_id_cannot_change(self):
        folders = MemoryCollection(FolderRecord)
        folder = await folders.create("a", None)
        with pytest.raises(StoreError):
            await folders.update(folder.id, id="other")


class TestJsonDocumentStore:
    @pytest.mark.asyncio
    async def test_changes_are_written_through(self, tmp_path: Path):
        path = tmp_path / "store.json"
        store = JsonDocumentStore(path)
        entry = await store.entries.create("n", None, id="entry00000000001", public=True)
        await store.pages.create("n", entry.id, id="page000000000001", body="hello")

        reopened = JsonDocumentStore(path)

        assert reopened.counts() == {"folders": 0, "entries": 1, "pages": 1}
        assert (await reopened.entries.get("entry00000000001")).public is True
        assert (await reopened.pages.get("page000000000001")).body == "hello"
        assert json.loads(path.read_text())["version"] == 1

    def test_missing_file_is_an_empty_store(self, tmp_path: Path):
        store = JsonDocumentStore(tmp_path / "nested" / "store.json")
        assert store.counts() == {"folders": 0, "entries": 0, "pages": 0}
        assert not (tmp_path / "nested").exists()

    def test_corrupt_file(self, tmp_path: Path):
        path = tmp_path / "store.json"
        path.write_text("{not json")

        with pytest.raises(StoreError) as exc_info:
            JsonDocumentStore(path)

        assert exc_info.value.details == {"path": str(path)}


class TestLocalAssetStorage:
    @pytest.mark.asyncio
    async def test_upload_writes_file_and_returns_encoded_path(self, tmp_path: Path):
        storage = LocalAssetStorage(tmp_path / "assets")
        path = await storage.upload(AssetLocation("media"), VaultFile("v/my map.png", b"data"))

        assert path == "media/my%20map.png"
        assert (tmp_path / "assets" / "media" / "my map.png").read_bytes() == b"data"

    @pytest.mark.asyncio
    async def test_list_files(self, tmp_path: Path):
        storage = LocalAssetStorage(tmp_path)
        (tmp_path / "media" / "sub").mkdir(parents=True)
        (tmp_path / "media" / "b c.png").write_bytes(b"")
        (tmp_path / "media" / "a.png").write_bytes(b"")

        assert await storage.list_files(AssetLocation("media")) == ["media/a.png", "media/b%20c.png"]

    @pytest.mark.asyncio
    async def test_listing_a_missing_directory_fails(self, tmp_path: Path):
        with pytest.raises(StorageError):
            await LocalAssetStorage(tmp_path).list_files(AssetLocation("media"))

    @pytest.mark.asyncio
    async def test_ensure_directory(self, tmp_path: Path):
        storage = LocalAssetStorage(tmp_path)
        await storage.ensure_directory(AssetLocation("media/maps"))
        assert (tmp_path / "media" / "maps").is_dir()

    @pytest.mark.asyncio
    async def test_remote_locations_are_rejected(self, tmp_path: Path):
        storage = LocalAssetStorage(tmp_path)
        with pytest.raises(StorageError):
            await storage.upload(AssetLocation("media", source="s3", bucket="b"), VaultFile("v/a.png", b""))
