import datetime
from enum import Enum
from typing import Final, Literal, Union, final

from typing_extensions import TypeAlias

__all__ = (
    "NULL_BINARY",
    "ArgumentValue",
    "BinaryValue",
    "NullBinaryEnum",
    "NullBinaryType",
)


@final
class NullBinaryEnum(Enum):
    """Sentinel for the null binary value.

    ``None`` already means SQL ``NULL``; this marker exists for call sites that
    track binary columns separately and need a typed "no bytes at all" value.
    """

    NULL_BINARY = 0

    def __repr__(self) -> str:
        return "NULL_BINARY"


NullBinaryType: TypeAlias = Literal[NullBinaryEnum.NULL_BINARY]
NULL_BINARY: Final = NullBinaryEnum.NULL_BINARY

BinaryValue: TypeAlias = Union[bytes, bytearray, memoryview]
"""Type alias for raw byte sequences accepted as binary literals."""

ArgumentValue: TypeAlias = Union[
    str, int, float, bool, None, BinaryValue, NullBinaryType, datetime.datetime
]
"""Type alias for the closed set of values that can be interpolated into a query."""
