"""Asset destination checks and the duplicate pre-scan."""

from __future__ import annotations

import logging
from urllib.parse import unquote

from .errors import ConfigurationError, StorageError
from .models import ImportSettings
from .store import AssetLocation, AssetStorage

log = logging.getLogger(__name__)


def asset_location(settings: ImportSettings) -> AssetLocation:
    if settings.use_remote_storage:
        return AssetLocation(settings.media_folder, source="s3", bucket=settings.remote_bucket)
    return AssetLocation(settings.media_folder)


def validate_storage_settings(settings: ImportSettings) -> None:
    """Fail before any import work if remote storage is half configured.

    Raises:
        ConfigurationError: If remote storage lacks a bucket or region.
    """
    if not settings.use_remote_storage:
        return
    missing = [
        name
        for name, value in (("remote_bucket", settings.remote_bucket), ("remote_region", settings.remote_region))
        if not value
    ]
    if missing:
        raise ConfigurationError(
            "Remote storage settings are invalid: missing " + ", ".join(missing),
            details={"missing": missing},
        )


async def validate_upload_location(settings: ImportSettings, storage: AssetStorage) -> None:
    """Make sure assets have somewhere to go.

    Remote storage only needs valid settings. Local storage gets its
    destination directory created when listing it fails.
    """
    validate_storage_settings(settings)
    if settings.use_remote_storage:
        return

    location = asset_location(settings)
    try:
        await storage.list_files(location)
        return
    except StorageError:
        log.info("Creating asset folder %s", location.path)
    await storage.ensure_directory(location)


async def scan_existing_assets(settings: ImportSettings, storage: AssetStorage) -> dict[str, str]:
    """Map decoded file name -> decoded path for files already at the destination.

    A destination that cannot be listed (usually because it does not exist
    yet) has no existing files.
    """
    location = asset_location(settings)
    try:
        paths = await storage.list_files(location)
    except StorageError as e:
        log.debug("No existing assets at %s: %s", location.path, e)
        return {}

    existing: dict[str, str] = {}
    for path in paths:
        name = path.rsplit("/", 1)[-1]
        if name:
            existing[unquote(name)] = unquote(path)
    log.info("Found %d existing assets in %s", len(existing), location.path)
    return existing
