"""Turning arbitrary titles into safe file names."""

import re

_INVALID_CHARS = re.compile(r'[<>:"/\\|?*]')
_EDGE_JUNK = re.compile(r"\A[\t\n\f\r .]+|[\t\n\f\r .]+\Z")
_RESERVED_NAMES = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{n}" for n in range(1, 10)]
    + [f"LPT{n}" for n in range(1, 10)]
)


def sanitize(value: str) -> str:
    """Replace forbidden characters, trim whitespace and dots, avoid reserved names."""
    value = _INVALID_CHARS.sub("_", value)
    value = _EDGE_JUNK.sub("", value)
    if value in _RESERVED_NAMES:
        value += "_additional"
    return value