import re

from bs4 import Tag

DOCTYPE = "<!DOCTYPE html>"

# Only the first match is rewritten; the root marker is the one that must be bare.
MARKER_ATTRIBUTE_RE = re.compile(r'(amp(?:-[^=]+)?)=""')


def serialize(root: Tag) -> str:
    """Renders the assembled document with its doctype."""
    return f"{DOCTYPE}\n{root}"


def collapse_marker_attribute(html: str) -> str:
    """Turns the first amp=""-style attribute back into its bare form (amp)."""
    return MARKER_ATTRIBUTE_RE.sub(r'\1', html, count=1)
