"""Second pass: rewrite wiki-links into store links.

Runs after every document exists. Each reference to an imported item is
replaced by that item's link; a reference to anything that was not imported
is left exactly as written.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from .parser import LinkPattern, parse_reference, patterns_for
from .store import DocumentStore
from .vault import MarkdownItem, OtherItem

log = logging.getLogger(__name__)

# Closing parenthesis of an asset link, where a dimension directive goes.
_LINK_END_RE = re.compile(r"\)$")


def with_dimensions(link: str, width: str, height: str | None) -> str:
    """Add ``=WxH`` to an asset link; an unspecified height becomes ``*``."""
    return _LINK_END_RE.sub(f" ={width}x{height or '*'})", link)


def rewrite_references(body: str, target: MarkdownItem | OtherItem, patterns: Sequence[LinkPattern]) -> str:
    """Replace every reference to target in body with target's link."""
    is_asset = isinstance(target, OtherItem)

    def replace(match: re.Match[str]) -> str:
        reference = parse_reference(match, sized=is_asset)
        link = target.link(reference.alias)
        if link is None:
            return reference.text
        if is_asset and reference.width:
            link = with_dimensions(link, reference.width, reference.height)
        return link

    for pattern in patterns:
        body = pattern.regex.sub(replace, body)
    return body


async def resolve_links(items: Sequence[MarkdownItem | OtherItem], store: DocumentStore) -> int:
    """Rewrite references in every page written by this run.

    Args:
        items: All items of the import, notes and assets.
        store: Store holding the pages.

    Returns:
        Number of page updates made.
    """
    pages = [item for item in items if isinstance(item, MarkdownItem) and item.page is not None and item.fresh]
    updates = 0

    for target in items:
        if target.link() is None:
            continue
        patterns = patterns_for(target)

        for source in pages:
            assert source.page is not None
            body = source.page.body
            rewritten = rewrite_references(body, target, patterns)
            if rewritten != body:
                source.page = await store.pages.update(source.page.id, body=rewritten)
                updates += 1

    log.info("Resolved links in %d page updates", updates)
    return updates
