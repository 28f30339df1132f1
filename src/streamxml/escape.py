from __future__ import annotations
import re

# Entity tables: text content never needs quotes escaped, attribute values do.
_TEXT_ENTITIES = {"&": "&amp;", "<": "&lt;", ">": "&gt;"}
_ATTR_ENTITIES = {**_TEXT_ENTITIES, '"': "&quot;"}

_TEXT_RE = re.compile("[&<>]")
_ATTR_RE = re.compile('[&<>"]')

def escape_text(s: str) -> str:
    """Entity-encode &, < and > for element character data."""
    return _TEXT_RE.sub(lambda m: _TEXT_ENTITIES[m.group(0)], s)

def escape_attr(s: str) -> str:
    """
    Entity-encode &, <, > and " for a double-quoted attribute value.
    Single quotes pass through; the writer always quotes with ".
    """
    return _ATTR_RE.sub(lambda m: _ATTR_ENTITIES[m.group(0)], s)
