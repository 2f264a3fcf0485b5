"""Link syntax of vault notes."""

from .links import LinkPattern, LinkReference, link_keys, parse_reference, patterns_for

__all__ = ["LinkPattern", "LinkReference", "link_keys", "parse_reference", "patterns_for"]
