"""Literal rendering for interpolated arguments.

Each supported argument type maps to one encoder through a type registry.
Lookups are exact first, then walk the MRO, and the result is cached per type,
so ``bool`` resolves to its own encoder even though it subclasses ``int``.
Types with no registered encoder raise :class:`UnsupportedValueTypeError`.
"""

import datetime
import math
from decimal import Decimal
from typing import Any, Callable, Final, Optional

from mypy_extensions import mypyc_attr

from prestospec.exceptions import UnsupportedValueTypeError
from prestospec.parameters.escaping import escape_bytes_backslash, escape_string_backslash
from prestospec.typing import NullBinaryEnum

__all__ = (
    "LiteralEncoder",
    "LiteralEncoderRegistry",
    "encode_literal",
    "format_float",
    "format_integer",
    "format_timestamp",
)

LiteralEncoder = Callable[[Any], str]

MIN_INT64: Final = -(2**63)
MAX_INT64: Final = 2**63 - 1
NULL_LITERAL: Final = "NULL"
ZERO_TIMESTAMP_LITERAL: Final = "'0000-00-00'"

_NANOS_PER_SECOND: Final = 1_000_000_000
_NANOS_PER_MICRO: Final = 1_000
_ROUNDING_BIAS_NANOS: Final = 500
_EXPONENT_LOWER: Final = -4
_EXPONENT_UPPER: Final = 6
_ZERO_INSTANT: Final = datetime.datetime.min
_ONE_SECOND: Final = datetime.timedelta(seconds=1)


@mypyc_attr(allow_interpreted_subclasses=False)
class LiteralEncoderRegistry:
    """Type to encoder lookup with cached MRO resolution."""

    __slots__ = ("_cache", "_encoders")

    def __init__(self) -> None:
        self._cache: dict[type, Optional[LiteralEncoder]] = {}
        self._encoders: dict[type, LiteralEncoder] = {}

    def register(self, type_: type, encoder: LiteralEncoder) -> None:
        """Register the encoder used for values of ``type_`` and its subclasses.

        Args:
            type_: The type to register.
            encoder: Callable rendering one value as literal text.
        """
        self._encoders[type_] = encoder
        self._cache.clear()

    def resolve(self, value_type: type) -> Optional[LiteralEncoder]:
        """Find the encoder for a type.

        Args:
            value_type: The type to resolve.

        Returns:
            The encoder, or None when the type is not supported.
        """
        try:
            return self._cache[value_type]
        except KeyError:
            pass
        encoder = self._encoders.get(value_type)
        if encoder is None:
            encoder = next((self._encoders[base] for base in value_type.__mro__ if base in self._encoders), None)
        self._cache[value_type] = encoder
        return encoder

    def encode(self, value: Any, position: Optional[int] = None) -> str:
        """Render ``value`` as a literal.

        Args:
            value: The argument value.
            position: Index of the argument, used in error messages.

        Raises:
            UnsupportedValueTypeError: If the type is not supported or the
                value is outside the range of its type.

        Returns:
            The literal text.
        """
        value_type = type(value)
        encoder = self.resolve(value_type)
        if encoder is None:
            raise UnsupportedValueTypeError(value_type, position)
        try:
            return encoder(value)
        except (OverflowError, UnicodeError, ValueError) as exc:
            raise UnsupportedValueTypeError(value_type, position, reason=str(exc)) from exc

    def __contains__(self, value_type: object) -> bool:
        return isinstance(value_type, type) and self.resolve(value_type) is not None


def _encode_null(_: Any) -> str:
    return NULL_LITERAL


def _encode_string(value: str) -> str:
    # Text must be valid UTF-8; lone surrogates would otherwise reach the wire as raw bytes.
    value.encode("utf-8")
    return f"'{escape_string_backslash(value)}'"


def _encode_bool(value: bool) -> str:
    return "1" if value else "0"


def _encode_bytes(value: Any) -> str:
    return f"_binary'{escape_bytes_backslash(value)}'"


def format_integer(value: int) -> str:
    """Render a signed 64-bit integer in base 10.

    Raises:
        OverflowError: If the value does not fit in 64 bits.
    """
    number = int(value)
    if number < MIN_INT64 or number > MAX_INT64:
        msg = f"{number} does not fit in a signed 64-bit integer"
        raise OverflowError(msg)
    return str(number)


def format_float(value: float) -> str:
    """Render a float with the shortest digits that round-trip.

    Positional notation is used for decimal exponents in ``[-4, 6)``, scientific
    notation (``1.5e+07``, two exponent digits minimum) outside that range.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    sign, digit_tuple, exponent = Decimal(float.__repr__(value)).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    prefix = "-" if sign else ""
    point = len(digits) + int(exponent)
    decimal_exponent = point - 1

    if decimal_exponent < _EXPONENT_LOWER or decimal_exponent >= _EXPONENT_UPPER:
        mantissa = digits[0] if len(digits) == 1 else f"{digits[0]}.{digits[1:]}"
        exponent_sign = "-" if decimal_exponent < 0 else "+"
        return f"{prefix}{mantissa}e{exponent_sign}{abs(decimal_exponent):02d}"
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return f"{prefix}{digits}{'0' * (point - len(digits))}"
    return f"{prefix}{digits[:point]}.{digits[point:]}"


def _is_zero_instant(value: datetime.datetime) -> bool:
    wall = value.replace(tzinfo=None)
    if wall == _ZERO_INSTANT:
        return True
    offset = value.utcoffset()
    if not offset:
        return False
    try:
        return wall - offset == _ZERO_INSTANT
    except OverflowError:
        return False


def format_timestamp(value: datetime.datetime) -> str:
    """Render a timestamp literal in UTC with microsecond precision.

    The zero instant renders as ``'0000-00-00'``. Other values are converted
    to UTC (naive values are taken as UTC already), biased forward by 500ns so
    sub-microsecond noise rounds up, and printed as ``'YYYY-MM-DD HH:MM:SS'``
    with a six digit fraction only when the microsecond part is nonzero.

    Raises:
        OverflowError: If the UTC instant falls outside the representable range.
    """
    if _is_zero_instant(value):
        return ZERO_TIMESTAMP_LITERAL
    if value.utcoffset() is not None:
        value = value.astimezone(datetime.timezone.utc)

    sub_second = value.microsecond * _NANOS_PER_MICRO + getattr(value, "nanosecond", 0) + _ROUNDING_BIAS_NANOS
    carry, sub_second = divmod(sub_second, _NANOS_PER_SECOND)
    moment = datetime.datetime(value.year, value.month, value.day, value.hour, value.minute, value.second)
    if carry:
        moment += _ONE_SECOND
    micro = sub_second // _NANOS_PER_MICRO

    year_high, year_low = divmod(moment.year, 100)
    text = (
        f"'{year_high:02d}{year_low:02d}-{moment.month:02d}-{moment.day:02d} "
        f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
    if micro:
        text = f"{text}.{micro:06d}"
    return f"{text}'"


_DEFAULT_REGISTRY: Final = LiteralEncoderRegistry()
_DEFAULT_REGISTRY.register(type(None), _encode_null)
_DEFAULT_REGISTRY.register(NullBinaryEnum, _encode_null)
_DEFAULT_REGISTRY.register(str, _encode_string)
_DEFAULT_REGISTRY.register(bool, _encode_bool)
_DEFAULT_REGISTRY.register(int, format_integer)
_DEFAULT_REGISTRY.register(float, format_float)
_DEFAULT_REGISTRY.register(bytes, _encode_bytes)
_DEFAULT_REGISTRY.register(bytearray, _encode_bytes)
_DEFAULT_REGISTRY.register(memoryview, _encode_bytes)
_DEFAULT_REGISTRY.register(datetime.datetime, format_timestamp)


def encode_literal(value: Any, position: Optional[int] = None) -> str:
    """Render one argument value as query literal text.

    Args:
        value: The argument value.
        position: Index of the argument, used in error messages.

    Raises:
        UnsupportedValueTypeError: If the value cannot be rendered.

    Returns:
        The literal text.
    """
    return _DEFAULT_REGISTRY.encode(value, position)
