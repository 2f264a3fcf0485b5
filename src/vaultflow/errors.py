"""Structured errors for vaultflow.

Every error the pipeline raises on purpose carries an ErrorCode so the CLI
can render it either as a human-readable line or as JSON for scripts.
Anything that is not a VaultflowError is treated as unexpected.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INVALID_SETTINGS = "INVALID_SETTINGS"
    VAULT_NOT_FOUND = "VAULT_NOT_FOUND"
    STORE_ERROR = "STORE_ERROR"
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
    STORAGE_ERROR = "STORAGE_ERROR"
    IDENTITY_COLLISION = "IDENTITY_COLLISION"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


class VaultflowError(Exception):
    """Base class for errors raised deliberately by vaultflow."""

    code: ErrorCode = ErrorCode.UNEXPECTED_ERROR

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        if code is not None:
            self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code.value, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


class ConfigurationError(VaultflowError):
    """Raised when settings are invalid (e.g. remote storage without a bucket)."""

    code = ErrorCode.CONFIGURATION_ERROR


class StoreError(VaultflowError):
    """Raised by a document store when a get/create/update call fails."""

    code = ErrorCode.STORE_ERROR


class StorageError(VaultflowError):
    """Raised by asset storage when an upload or listing fails."""

    code = ErrorCode.STORAGE_ERROR


class IdentityCollisionError(VaultflowError):
    """Two different (namespace, path) pairs hashed to the same identity."""

    code = ErrorCode.IDENTITY_COLLISION


def format_error_json(code: ErrorCode, message: str, details: dict | None = None) -> str:
    """Format an error that is not a VaultflowError the same way."""
    payload: dict[str, Any] = {"error": code.value, "message": message}
    if details:
        payload["details"] = details
    return json.dumps(payload)
