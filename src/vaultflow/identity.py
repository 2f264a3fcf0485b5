"""Deterministic document identities.

The same (namespace, path) pair always maps to the same 16-character
identifier, on any machine and in any process, so re-importing a vault finds
the documents the previous import created instead of duplicating them.

The hash is a 32-bit rolling hash applied three times with fixed salts. It is
not collision-free. IdentityRegistry makes that assumption explicit for one
run: a second, different (namespace, path) landing on an identity already
handed out raises IdentityCollisionError instead of silently merging two
documents.
"""

from __future__ import annotations

import logging
import string

from .errors import IdentityCollisionError

log = logging.getLogger(__name__)

IDENTITY_LENGTH = 16

# Salts appended to the input for the second and third hash.
SALTS = ("", "salt1", "salt2")

# Base-36 width of each hash; 6 + 5 + 5 = IDENTITY_LENGTH.
PART_WIDTHS = (6, 5, 5)

NAMESPACE_FOLDER = "folder"
NAMESPACE_JOURNAL = "journal"
NAMESPACE_PAGE = "page"

# Separates a page name from its file path. '#' cannot appear in a path
# Obsidian accepts, so "a.md#b" never collides with a real file.
PAGE_SEPARATOR = "#"

_BASE36_DIGITS = string.digits + string.ascii_lowercase


def _hash32(text: str) -> int:
    """Java-style ``h * 31 + c`` over UTF-16 code units, as a signed 32-bit absolute value."""
    value = 0
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        value = ((value << 5) - value + unit) & 0xFFFFFFFF
    if value & 0x80000000:
        value -= 1 << 32
    return abs(value)


def _to_base36(number: int, width: int) -> str:
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits)).rjust(width, "0")[:width]


def identity(namespace: str, path: str) -> str:
    """Return the deterministic identity for a path within a namespace.

    Args:
        namespace: Document kind, e.g. "folder", "journal" or "page".
        path: Path below the vault root (or any other stable key).

    Returns:
        A 16-character string of digits and lowercase letters.

    Example:
        identity("page", "notes/my-note.md#my-note")
        # Always the same value for this namespace and path
    """
    source = f"{namespace}:{path}"
    return "".join(
        _to_base36(_hash32(source + salt), width)
        for salt, width in zip(SALTS, PART_WIDTHS)
    )


def folder_identity(folder_path: list[str]) -> str:
    return identity(NAMESPACE_FOLDER, "/".join(folder_path))


def journal_identity(file_path: str) -> str:
    return identity(NAMESPACE_JOURNAL, file_path)


def page_identity(file_path: str, page_name: str = "") -> str:
    path = f"{file_path}{PAGE_SEPARATOR}{page_name}" if page_name else file_path
    return identity(NAMESPACE_PAGE, path)


class IdentityRegistry:
    """Identities handed out during one import run.

    Claiming the same (namespace, path) twice is normal (folders are looked
    up once per file); two different keys on one identity is a collision.
    """

    def __init__(self) -> None:
        self._claims: dict[str, tuple[str, str]] = {}

    def __len__(self) -> int:
        return len(self._claims)

    def __contains__(self, value: object) -> bool:
        return value in self._claims

    def claim(self, namespace: str, path: str, value: str) -> str:
        """Record that value identifies (namespace, path) for this run.

        Raises:
            IdentityCollisionError: If value already identifies another key.
        """
        key = (namespace, path)
        existing = self._claims.setdefault(value, key)
        if existing != key:
            log.error(
                "Identity %s produced by both %s:%s and %s:%s",
                value, existing[0], existing[1], namespace, path,
            )
            raise IdentityCollisionError(
                f"Identity {value} is shared by {existing[0]}:{existing[1]} "
                f"and {namespace}:{path}",
                details={"identity": value, "first": list(existing), "second": [namespace, path]},
            )
        return value
