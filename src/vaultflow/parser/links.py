"""Wiki-link patterns.

Notes reference each other as ``[[target]]``, ``[[target#heading]]`` or
``[[target|alias]]``, and embed assets as ``![[image.png]]`` optionally
sized with ``![[image.png|300]]`` or ``![[image.png|300x200]]``. A target is
the file name with or without extension, optionally prefixed by some of the
folders above it (``[[people/alice]]``). Matching is case-insensitive.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import NamedTuple

from ..vault import MarkdownItem, OtherItem

# {key} is substituted with an escaped link key.
WIKILINK_TEMPLATE = r"(?P<embed>!)?\[\[(?P<target>{key})(?P<heading>#[^\]|]*)?(?P<options>\s*\|[^\]]*)?\]\]"

SIZE_RE = re.compile(r"^(?P<width>\d+)(?:x(?P<height>\d+))?$", re.IGNORECASE)


@dataclass(frozen=True)
class LinkPattern:
    """A compiled rule recognizing references to one item by one key."""

    key: str
    regex: re.Pattern[str]


class LinkReference(NamedTuple):
    """What a single matched reference asked for."""

    text: str
    alias: str | None
    width: str | None
    height: str | None


def link_keys(item: MarkdownItem | OtherItem) -> list[str]:
    """Every textual form a reference to item may use, most specific first.

    The bare file name, with and without extension, plus each of those
    prefixed by the trailing folders of the item's path below the vault root.
    """
    names = [item.stem, item.name] if item.stem != item.name else [item.name]
    folders = item.folder_path

    keys: list[str] = []
    for start in range(len(folders) + 1):
        prefix = "/".join(folders[start:])
        for name in names:
            key = f"{prefix}/{name}" if prefix else name
            if key not in keys:
                keys.append(key)
    return keys


def patterns_for(item: MarkdownItem | OtherItem) -> list[LinkPattern]:
    """Compiled link patterns for an item, one per key."""
    return [
        LinkPattern(key, re.compile(WIKILINK_TEMPLATE.format(key=re.escape(key)), re.IGNORECASE))
        for key in link_keys(item)
    ]


def parse_reference(match: re.Match[str], *, sized: bool) -> LinkReference:
    """Split the ``|...`` part of a matched reference.

    The alias is the text after the first ``|``. For assets (sized=True) a
    trailing ``|W`` or ``|WxH`` segment is a size, not an alias.
    """
    options = match.group("options") or ""
    segments = [segment.strip() for segment in options.split("|")[1:]]

    width = height = None
    if sized and segments:
        size = SIZE_RE.match(segments[-1])
        if size is not None:
            width, height = size.group("width"), size.group("height")
            segments = segments[:-1]

    alias = segments[0] if segments and segments[0] else None
    return LinkReference(match.group(0), alias, width, height)
