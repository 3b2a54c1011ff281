"""Placeholder scanning.

Locates positional ``?`` markers in raw query text. The scan is purely
lexical: it does not track quoting or comment state, so a ``?`` inside a
quoted string literal or a comment is reported as a placeholder too::

    >>> scan_placeholder_offsets("SELECT '?' FROM t WHERE a = ?")
    (8, 28)

Callers depend on this behavior; quote the marker through an argument instead
of writing it literally in the template.
"""

from typing import Final

__all__ = ("PLACEHOLDER_MARKER", "scan_placeholder_offsets")

PLACEHOLDER_MARKER: Final = "?"


def scan_placeholder_offsets(sql: str) -> "tuple[int, ...]":
    """Find the offset of every placeholder marker in ``sql``.

    Args:
        sql: Raw query text.

    Returns:
        Offsets in increasing order, empty when the text has no markers.
    """
    offsets: list[int] = []
    find = sql.find
    position = find(PLACEHOLDER_MARKER)
    while position != -1:
        offsets.append(position)
        position = find(PLACEHOLDER_MARKER, position + 1)
    return tuple(offsets)
