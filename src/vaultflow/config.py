"""Configuration management for vaultflow.

This module contains the configurable constants of the importer and the
discovery of settings files. Magic strings are documented here rather than
scattered throughout the codebase.

Settings for one import run live in models.ImportSettings; this module only
finds and persists the YAML those settings are loaded from.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from .errors import ConfigurationError

if TYPE_CHECKING:
    from .models import ImportSettings

log = logging.getLogger(__name__)

__all__ = [
    "ConfigurationError",
    "discover_settings_file",
    "get_state_dir",
    "load_last_settings",
    "load_settings_file",
    "save_last_settings",
]


# =============================================================================
# Settings files
# =============================================================================

# Project-level settings file, found by walking up from the working directory.
SETTINGS_FILENAME = ".vaultflow.yaml"

# Last-used settings, written at the start of every import run.
LAST_SETTINGS_FILENAME = "last-settings.yaml"

# Maximum directory traversal depth when searching for SETTINGS_FILENAME.
MAX_SETTINGS_SEARCH_DEPTH = 10


# =============================================================================
# Vault layout
# =============================================================================

# Only files with this extension are parsed as notes; everything else is an asset.
MARKDOWN_EXTENSION = "md"

# Canvas boards cannot be represented as pages and are skipped entirely.
CANVAS_EXTENSION = "canvas"


# =============================================================================
# Generated content
# =============================================================================

# Name of the entry and page holding the generated index.
INDEX_NAME = "Index"

# Index group for notes that sit directly in the vault root.
UNCATEGORIZED = "Uncategorized"

# Heading of the appended backlink section.
REFERENCES_HEADING = "# References"

# Entry name used when the vault root itself is combined into one entry
# and no root folder name was configured.
ROOT_ENTRY_NAME = "Vault"

# Default callout marker stripped when strip_callouts is enabled: > [!dm]
DEFAULT_CALLOUT_MARKER = "dm"

# Default asset destination, relative to the asset storage root.
DEFAULT_MEDIA_FOLDER = "vault-media"


def get_state_dir() -> Path:
    """Directory for per-user state (last-used settings).

    Discovery order:
    1. VAULTFLOW_STATE_DIR environment variable
    2. ~/.vaultflow/
    """
    root = os.environ.get("VAULTFLOW_STATE_DIR")
    if root:
        return Path(root)
    return Path.home() / ".vaultflow"


def discover_settings_file(start_dir: Path | None = None) -> Path | None:
    """Find the settings file for the current invocation.

    Discovery order:
    1. VAULTFLOW_CONFIG environment variable (explicit override)
    2. Walk up from start_dir (default cwd) looking for .vaultflow.yaml

    Returns:
        Path to the settings file, or None if there is none.
    """
    explicit = os.environ.get("VAULTFLOW_CONFIG")
    if explicit:
        return Path(explicit)

    current = Path(start_dir or os.getcwd()).resolve()

    for _ in range(MAX_SETTINGS_SEARCH_DEPTH):
        candidate = current / SETTINGS_FILENAME
        if candidate.is_file():
            return candidate

        parent = current.parent
        if parent == current:  # Reached filesystem root
            break
        current = parent

    return None


def load_settings_file(path: Path) -> dict[str, Any]:
    """Read settings overrides from a YAML file.

    Raises:
        ConfigurationError: If the file is missing or is not a YAML mapping.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read settings file {path}: {e}",
            details={"path": str(path)},
        ) from e

    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Settings file {path} is not valid YAML: {e}",
            details={"path": str(path)},
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Settings file {path} must contain a mapping of option names to values",
            details={"path": str(path)},
        )
    return data


def load_last_settings() -> dict[str, Any]:
    """Return the settings saved by the previous run, or {} if unavailable."""
    path = get_state_dir() / LAST_SETTINGS_FILENAME
    if not path.exists():
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        log.debug("Ignoring unreadable last settings %s: %s", path, e)
        return {}

    return data if isinstance(data, dict) else {}


def save_last_settings(settings: ImportSettings) -> Path:
    """Persist settings for the next run. The vault file list is never saved."""
    state_dir = get_state_dir()
    state_dir.mkdir(parents=True, exist_ok=True)
    path = state_dir / LAST_SETTINGS_FILENAME
    path.write_text(
        yaml.safe_dump(settings.model_dump(mode="json"), sort_keys=True),
        encoding="utf-8",
    )
    return path
