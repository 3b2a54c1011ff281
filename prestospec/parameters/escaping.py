"""Backslash escaping for string and binary literals.

Both entry points apply the same table. Only ASCII code points are rewritten,
so UTF-8 multi-byte sequences in text pass through untouched. Binary input is
decoded with ``surrogateescape`` so bytes that are not valid UTF-8 survive as
lone surrogates and are restored when the query is encoded for transport.
"""

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from prestospec.typing import BinaryValue

__all__ = ("BINARY_ENCODING", "BINARY_ERRORS", "ESCAPE_TABLE", "escape_bytes_backslash", "escape_string_backslash")

BINARY_ENCODING: Final = "utf-8"
BINARY_ERRORS: Final = "surrogateescape"

ESCAPE_TABLE: Final = str.maketrans({
    "\x00": "\\0",
    "\n": "\\n",
    "\r": "\\r",
    "\x1a": "\\Z",
    "'": "\\'",
    '"': '\\"',
    "\\": "\\\\",
})


def escape_string_backslash(value: str) -> str:
    """Escape special characters of a text value with backslashes.

    Args:
        value: Text to escape.

    Returns:
        The escaped text, without surrounding quotes.
    """
    return value.translate(ESCAPE_TABLE)


def escape_bytes_backslash(value: "BinaryValue") -> str:
    """Escape special bytes of a binary value with backslashes.

    Args:
        value: Raw bytes to escape.

    Returns:
        The escaped content as text, without surrounding quotes.
    """
    return bytes(value).decode(BINARY_ENCODING, BINARY_ERRORS).translate(ESCAPE_TABLE)
