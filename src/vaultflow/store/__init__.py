"""Document stores and asset storage the importer writes to."""

from .base import AssetLocation, AssetStorage, Collection, DocumentStore
from .json_store import JsonDocumentStore
from .local_assets import LocalAssetStorage
from .memory import MemoryCollection, MemoryDocumentStore

__all__ = [
    "AssetLocation",
    "AssetStorage",
    "Collection",
    "DocumentStore",
    "JsonDocumentStore",
    "LocalAssetStorage",
    "MemoryCollection",
    "MemoryDocumentStore",
]
