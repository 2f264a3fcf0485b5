"""Frontmatter extraction for vault notes.

Notes start with an optional block delimited by ``---`` lines. The block is
read line by line rather than as YAML: vaults are full of half-valid
frontmatter (templates, unquoted colons, tabs) and a note must never fail to
import because of it. Lines that are not ``key: value`` are skipped.
"""

from __future__ import annotations

import re
from typing import NamedTuple

from .config import DEFAULT_CALLOUT_MARKER

FrontmatterValue = str | bool

# Leading --- block; the closing delimiter may end the file.
FRONTMATTER_RE = re.compile(r"^---\r?\n([\s\S]*?)\r?\n---(\r?\n)?")

# key: value, keys are letters, digits, '_' and '-'
FRONTMATTER_LINE_RE = re.compile(r"^\s*([A-Za-z0-9_-]+)\s*:\s*(.*?)\s*$")

QUOTED_RE = re.compile(r"""^['"].*['"]$""")

# A heading marker glued to a word (#tag, #1) would render as a heading
# in the store's markdown dialect; a leading space keeps it literal.
GLUED_HEADING_RE = re.compile(r"^#[0-9A-Za-z]+\b", re.MULTILINE)


class ParsedNote(NamedTuple):
    """Result of splitting a note into metadata and body."""

    frontmatter: dict[str, FrontmatterValue]
    body: str
    is_public: bool


def _coerce_value(raw: str) -> FrontmatterValue:
    lowered = raw.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if QUOTED_RE.match(raw):
        return raw[1:-1]
    return raw


def extract_frontmatter(raw: str) -> tuple[dict[str, FrontmatterValue] | None, str]:
    """Split raw note text into frontmatter and body.

    Args:
        raw: Full text of the note.

    Returns:
        Tuple of (frontmatter, body). frontmatter is None when the note has
        no leading block, in which case body is the whole text.
    """
    match = FRONTMATTER_RE.match(raw)
    if match is None:
        return None, raw

    frontmatter: dict[str, FrontmatterValue] = {}
    for line in re.split(r"\r?\n", match.group(1)):
        line_match = FRONTMATTER_LINE_RE.match(line)
        if line_match is None:
            continue
        key, value = line_match.groups()
        frontmatter[key.lower()] = _coerce_value(value.strip())

    return frontmatter, raw[match.end():]


def is_public(frontmatter: dict[str, FrontmatterValue]) -> bool:
    """A note is public if ``public: true`` or ``visibility: public``."""
    if frontmatter.get("public") is True:
        return True
    return str(frontmatter.get("visibility", "")).lower() == "public"


def strip_callouts(body: str, marker: str = DEFAULT_CALLOUT_MARKER) -> str:
    """Remove ``> [!marker]`` callout blocks and their quoted continuation lines."""
    pattern = re.compile(
        rf"^> \[!{re.escape(marker)}\].*$(?:\r?\n>.*$)*",
        re.MULTILINE,
    )
    return pattern.sub("", body)


def parse_note(
    raw: str,
    *,
    remove_callouts: bool = False,
    callout_marker: str = DEFAULT_CALLOUT_MARKER,
) -> ParsedNote:
    """Parse a note into frontmatter, importable body and visibility.

    Args:
        raw: Full text of the note.
        remove_callouts: Strip callout blocks tagged with callout_marker.
        callout_marker: Marker inside ``[!...]`` identifying blocks to strip.

    Returns:
        ParsedNote with lowercase frontmatter keys, the processed body, and
        whether the note is public.
    """
    frontmatter, body = extract_frontmatter(raw)
    public = is_public(frontmatter) if frontmatter is not None else False

    if remove_callouts:
        body = strip_callouts(body, callout_marker)

    body = GLUED_HEADING_RE.sub(r" \g<0>", body)

    return ParsedNote(frontmatter or {}, body, public)
