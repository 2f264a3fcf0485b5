"""Tests for asset destination checks and the duplicate pre-scan."""

import pytest

from conftest import RecordingAssetStorage
from vaultflow.assets import (
    asset_location,
    scan_existing_assets,
    validate_storage_settings,
    validate_upload_location,
)
from vaultflow.errors import ConfigurationError, ErrorCode
from vaultflow.models import ImportSettings
from vaultflow.store import AssetLocation


class TestAssetLocation:
    def test_local(self):
        assert asset_location(ImportSettings(media_folder="/maps/")) == AssetLocation("maps")

    def test_remote(self):
        settings = ImportSettings(use_remote_storage=True, remote_bucket="b", remote_region="eu")
        assert asset_location(settings) == AssetLocation("vault-media", source="s3", bucket="b")


class TestValidateStorageSettings:
    def test_local_storage_needs_nothing(self):
        validate_storage_settings(ImportSettings())

    def test_complete_remote_settings(self):
        validate_storage_settings(ImportSettings(use_remote_storage=True, remote_bucket="b", remote_region="eu"))

    @pytest.mark.parametrize("options, missing", [
        ({}, ["remote_bucket", "remote_region"]),
        ({"remote_bucket": "b"}, ["remote_region"]),
        ({"remote_region": "eu", "remote_bucket": ""}, ["remote_bucket"]),
    ])
    def test_incomplete_remote_settings(self, options, missing):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_storage_settings(ImportSettings(use_remote_storage=True, **options))

        assert exc_info.value.code == ErrorCode.CONFIGURATION_ERROR
        assert exc_info.value.details == {"missing": missing}


class TestValidateUploadLocation:
    @pytest.mark.asyncio
    async def test_missing_destination_is_created(self):
        storage = RecordingAssetStorage()
        await validate_upload_location(ImportSettings(), storage)
        assert storage.created == ["vault-media"]

    @pytest.mark.asyncio
    async def test_existing_destination_is_left_alone(self):
        storage = RecordingAssetStorage(existing=[])
        await validate_upload_location(ImportSettings(), storage)
        assert storage.created == []

    @pytest.mark.asyncio
    async def test_remote_destination_is_not_listed(self):
        storage = RecordingAssetStorage()
        settings = ImportSettings(use_remote_storage=True, remote_bucket="b", remote_region="eu")

        await validate_upload_location(settings, storage)

        assert storage.created == []


class TestScanExistingAssets:
    @pytest.mark.asyncio
    async def test_names_map_to_paths(self):
        storage = RecordingAssetStorage(existing=["vault-media/photo.png", "vault-media/map.jpg"])
        existing = await scan_existing_assets(ImportSettings(), storage)
        assert existing == {"photo.png": "vault-media/photo.png", "map.jpg": "vault-media/map.jpg"}

    @pytest.mark.asyncio
    async def test_names_and_paths_are_decoded(self):
        storage = RecordingAssetStorage(existing=["vault-media/my%20photo%20%231.png"])
        existing = await scan_existing_assets(ImportSettings(), storage)
        assert existing == {"my photo #1.png": "vault-media/my photo #1.png"}

    @pytest.mark.asyncio
    async def test_listing_failure_means_nothing_exists(self):
        assert await scan_existing_assets(ImportSettings(), RecordingAssetStorage()) == {}

    @pytest.mark.asyncio
    async def test_directory_entries_are_ignored(self):
        storage = RecordingAssetStorage(existing=["vault-media/sub/"])
        assert await scan_existing_assets(ImportSettings(), storage) == {}
