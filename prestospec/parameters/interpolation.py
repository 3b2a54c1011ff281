"""Query interpolation.

Builds fully literal query text from a template, its placeholder offsets and
one argument per offset. Offsets always refer to the original template, so
marker characters inside rendered literals are never substituted again.
"""

from typing import TYPE_CHECKING

from prestospec.exceptions import ArgumentCountMismatchError
from prestospec.parameters.literals import encode_literal

if TYPE_CHECKING:
    from collections.abc import Sequence

    from prestospec.typing import ArgumentValue

__all__ = ("interpolate",)


def interpolate(sql: str, offsets: "Sequence[int]", args: "Sequence[ArgumentValue]") -> str:
    """Replace each placeholder marker in ``sql`` with the literal of its argument.

    Args:
        sql: Original query text.
        offsets: Placeholder offsets in ``sql``, in increasing order.
        args: One argument per offset, matched by position.

    Raises:
        ArgumentCountMismatchError: If ``len(args) != len(offsets)``.
        UnsupportedValueTypeError: If an argument cannot be rendered.

    Returns:
        The assembled query text. ``sql`` itself when there are no placeholders.
    """
    if len(args) != len(offsets):
        raise ArgumentCountMismatchError(len(offsets), len(args), sql)
    if not offsets:
        return sql

    parts: list[str] = []
    start = 0
    for position, (offset, arg) in enumerate(zip(offsets, args)):
        parts.append(sql[start:offset])
        parts.append(encode_literal(arg, position))
        start = offset + 1
    parts.append(sql[start:])
    return "".join(parts)
