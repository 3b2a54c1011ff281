"""Tests for literal rendering."""

import datetime
import enum
import uuid
from decimal import Decimal
from typing import Any

import pytest

from prestospec.exceptions import InterpolationError, UnsupportedValueTypeError
from prestospec.parameters.literals import (
    MAX_INT64,
    MIN_INT64,
    LiteralEncoderRegistry,
    encode_literal,
    format_float,
    format_timestamp,
)
from prestospec.typing import NULL_BINARY

UTC = datetime.timezone.utc


class NanosecondDatetime(datetime.datetime):
    """datetime carrying sub-microsecond precision, like ``pandas.Timestamp``."""

    nanosecond = 0

    def __new__(cls, *args: Any, nanosecond: int = 0, **kwargs: Any) -> "NanosecondDatetime":
        instance = super().__new__(cls, *args, **kwargs)
        instance.nanosecond = nanosecond
        return instance


class Color(enum.IntEnum):
    RED = 7


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("def", "'def'"),
        ("it's", "'it\\'s'"),
        ("", "''"),
        ("what?", "'what?'"),
        ("line\nbreak", "'line\\nbreak'"),
        (1, "1"),
        (0, "0"),
        (-42, "-42"),
        (MAX_INT64, "9223372036854775807"),
        (MIN_INT64, "-9223372036854775808"),
        (Color.RED, "7"),
        (True, "1"),
        (False, "0"),
        (None, "NULL"),
        (NULL_BINARY, "NULL"),
        (b"abcdef", "_binary'abcdef'"),
        (b"", "_binary''"),
        (bytearray(b"a'b"), "_binary'a\\'b'"),
        (memoryview(b"\x00"), "_binary'\\0'"),
        (1.01, "1.01"),
    ],
)
def test_encode_literal(value: Any, expected: str) -> None:
    assert encode_literal(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (1.01, "1.01"),
        (-2.5, "-2.5"),
        (100.0, "100"),
        (123456.0, "123456"),
        (1e6, "1e+06"),
        (1234567.0, "1.234567e+06"),
        (0.0001, "0.0001"),
        (0.00001, "1e-05"),
        (0.1 + 0.2, "0.30000000000000004"),
        (1.5e300, "1.5e+300"),
        (-1.5e-10, "-1.5e-10"),
        (5e-324, "5e-324"),
        (0.0, "0"),
        (-0.0, "-0"),
        (float("nan"), "NaN"),
        (float("inf"), "+Inf"),
        (float("-inf"), "-Inf"),
    ],
)
def test_format_float(value: float, expected: str) -> None:
    assert format_float(value) == expected


@pytest.mark.parametrize("value", [0.1, 1 / 3, 2.5e-8, 6.02214076e23, 1e22, 123.456])
def test_format_float_round_trips(value: float) -> None:
    assert float(format_float(value)) == value


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (datetime.datetime(1990, 5, 1, 1, 1, 1), "'1990-05-01 01:01:01'"),
        (datetime.datetime(1990, 5, 1, 1, 1, 1, tzinfo=UTC), "'1990-05-01 01:01:01'"),
        (datetime.datetime(2021, 12, 31, 23, 59, 59, 123456), "'2021-12-31 23:59:59.123456'"),
        (datetime.datetime(2021, 1, 2, 3, 4, 5, 1), "'2021-01-02 03:04:05.000001'"),
        (datetime.datetime(5, 1, 2, 3, 4, 5), "'0005-01-02 03:04:05'"),
        (datetime.datetime(2000, 2, 29), "'2000-02-29 00:00:00'"),
        (
            datetime.datetime(2020, 1, 1, 1, 0, tzinfo=datetime.timezone(datetime.timedelta(hours=2))),
            "'2019-12-31 23:00:00'",
        ),
        (
            datetime.datetime(2020, 6, 1, 12, 30, 0, 500, tzinfo=datetime.timezone(datetime.timedelta(hours=-5))),
            "'2020-06-01 17:30:00.000500'",
        ),
        (datetime.datetime.max, "'9999-12-31 23:59:59.999999'"),
    ],
)
def test_format_timestamp(value: datetime.datetime, expected: str) -> None:
    assert format_timestamp(value) == expected
    assert encode_literal(value) == expected


@pytest.mark.parametrize(
    "value",
    [
        datetime.datetime.min,
        datetime.datetime.min.replace(tzinfo=UTC),
        datetime.datetime.min.replace(tzinfo=datetime.timezone(datetime.timedelta(hours=5))),
        datetime.datetime.min.replace(tzinfo=datetime.timezone(datetime.timedelta(hours=-8))),
        datetime.datetime(1, 1, 1, 5, 0, tzinfo=datetime.timezone(datetime.timedelta(hours=5))),
    ],
    ids=["naive", "utc", "east", "west", "zero_instant_shifted"],
)
def test_zero_timestamp_ignores_time_zone(value: datetime.datetime) -> None:
    assert encode_literal(value) == "'0000-00-00'"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (NanosecondDatetime(1990, 5, 1, 1, 1, 1, nanosecond=1), "'1990-05-01 01:01:01'"),
        (NanosecondDatetime(2020, 1, 1, 0, 0, 0, 5, nanosecond=499), "'2020-01-01 00:00:00.000005'"),
        (NanosecondDatetime(2020, 1, 1, 0, 0, 0, 5, nanosecond=500), "'2020-01-01 00:00:00.000006'"),
        (NanosecondDatetime(2020, 1, 1, 0, 0, 0, 999999, nanosecond=600), "'2020-01-01 00:00:01'"),
        (NanosecondDatetime(2020, 12, 31, 23, 59, 59, 999999, nanosecond=999), "'2021-01-01 00:00:00'"),
    ],
)
def test_sub_microsecond_rounding(value: datetime.datetime, expected: str) -> None:
    assert encode_literal(value) == expected


def test_timestamp_past_max_after_rounding_is_unsupported() -> None:
    value = NanosecondDatetime(9999, 12, 31, 23, 59, 59, 999999, nanosecond=999)

    with pytest.raises(UnsupportedValueTypeError):
        encode_literal(value)


@pytest.mark.parametrize(
    "value",
    [
        Decimal("1.5"),
        datetime.date(2020, 1, 1),
        datetime.time(12, 0),
        datetime.timedelta(seconds=1),
        uuid.UUID(int=1),
        [1, 2],
        (1,),
        {"a": 1},
        object(),
        1 + 2j,
    ],
    ids=lambda value: type(value).__name__,
)
def test_unsupported_types(value: Any) -> None:
    with pytest.raises(UnsupportedValueTypeError) as exc_info:
        encode_literal(value, 3)

    assert exc_info.value.value_type is type(value)
    assert exc_info.value.position == 3
    assert "position 3" in str(exc_info.value)


@pytest.mark.parametrize("value", [MAX_INT64 + 1, MIN_INT64 - 1, 10**30])
def test_integer_out_of_range_is_unsupported(value: int) -> None:
    with pytest.raises(UnsupportedValueTypeError) as exc_info:
        encode_literal(value)

    assert isinstance(exc_info.value.__cause__, OverflowError)


@pytest.mark.parametrize("value", ["\ud800", "a\udcffb"], ids=["high_surrogate", "escaped_byte_surrogate"])
def test_text_with_lone_surrogate_is_unsupported(value: str) -> None:
    with pytest.raises(UnsupportedValueTypeError) as exc_info:
        encode_literal(value, 0)

    assert exc_info.value.value_type is str
    assert exc_info.value.position == 0
    assert isinstance(exc_info.value.__cause__, UnicodeEncodeError)


def test_unsupported_is_interpolation_error() -> None:
    with pytest.raises(InterpolationError):
        encode_literal(object())


def test_registry_resolves_subclasses_and_caches() -> None:
    registry = LiteralEncoderRegistry()
    registry.register(int, lambda value: "int")
    registry.register(bool, lambda value: "bool")

    assert registry.encode(1) == "int"
    assert registry.encode(True) == "bool"
    assert registry.encode(Color.RED) == "int"
    assert Color in registry
    assert str not in registry


def test_registry_unknown_type() -> None:
    registry = LiteralEncoderRegistry()

    with pytest.raises(UnsupportedValueTypeError):
        registry.encode("text")

    registry.register(str, lambda value: "text")
    assert registry.encode("text") == "text"
