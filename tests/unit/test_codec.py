"""Tests for register word encoding and decoding."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from enum import IntEnum

import pytest

from pymodmap import codec
from pymodmap.exceptions import EncodingError, ValueOutOfRangeError
from pymodmap.registers import ETAPU11_SCHEMA, SYMO823M_SCHEMA
from pymodmap.registers.schema import (
    DIV_10,
    DIV_100,
    AccessMode,
    PropertyDescriptor,
    SemanticType,
    TimeUnit,
)


class Color(IntEnum):
    RED = 1
    GREEN = 2


class Shape(IntEnum):
    SQUARE = 1


def _prop(semantic_type: SemanticType, length: int = 2, **kwargs) -> PropertyDescriptor:
    return PropertyDescriptor(
        name="value",
        semantic_type=semantic_type,
        offset=0,
        length=length,
        access=AccessMode.READ_WRITE,
        **kwargs,
    )


def _sample_words(descriptor: PropertyDescriptor) -> list[int]:
    """Register words holding a valid, in-range value for the descriptor."""
    stype = descriptor.semantic_type
    if stype is SemanticType.FIXED_STRING:
        return codec.encode(descriptor, "FRONIUS"[: 2 * descriptor.length])
    if stype is SemanticType.FLOAT32:
        return codec.encode(descriptor, 21.5)

    low, high = descriptor.minimum, descriptor.maximum
    if low is not None and high is not None:
        raw = (low + high) // 2
    elif low is not None:
        raw = low
    elif high is not None:
        raw = high
    elif descriptor.enum is not None:
        raw = int(next(iter(descriptor.enum)))
    else:
        raw = 1
    words = codec.raw_to_words(descriptor, raw)
    if codec.words_to_raw(descriptor, words) == descriptor.invalid:
        words = codec.raw_to_words(descriptor, raw - 1)
    return words


class TestWordHelpers:
    """Tests for word combination and splitting."""

    def test_big_endian_by_default(self) -> None:
        """Test the high word comes first."""
        prop = _prop(SemanticType.UINT32)

        assert codec.words_to_raw(prop, [0x0001, 0x0002]) == 0x00010002
        assert codec.raw_to_words(prop, 0x00010002) == [0x0001, 0x0002]

    def test_little_endian(self) -> None:
        """Test little_endian descriptors put the low word first."""
        prop = _prop(SemanticType.UINT32, little_endian=True)

        assert codec.words_to_raw(prop, [0x0002, 0x0001]) == 0x00010002
        assert codec.raw_to_words(prop, 0x00010002) == [0x0002, 0x0001]

    def test_wrong_word_count(self) -> None:
        """Test a word count that does not match the length is rejected."""
        with pytest.raises(EncodingError, match="expected 2 registers"):
            codec.words_to_raw(_prop(SemanticType.UINT32), [1])

    def test_overflow(self) -> None:
        """Test values wider than the register width are rejected."""
        with pytest.raises(EncodingError, match="does not fit"):
            codec.raw_to_words(_prop(SemanticType.UINT16, length=1), 0x10000)
        with pytest.raises(EncodingError):
            codec.raw_to_words(_prop(SemanticType.UINT16, length=1), -1)


class TestDecode:
    """Tests for decode()."""

    def test_scaled_float(self) -> None:
        """Test raw 215 with scale 0.1 decodes to 21.5."""
        prop = _prop(SemanticType.FLOAT64, scale=DIV_10)

        assert codec.decode(prop, [0, 215]) == 21.5

    def test_enum_without_enum_class(self) -> None:
        """Test a descriptor built outside a schema raises EncodingError, not AssertionError."""
        prop = _prop(SemanticType.ENUM_ORDINAL, length=1)

        with pytest.raises(EncodingError, match="no enum class"):
            codec.decode(prop, [1])
        with pytest.raises(EncodingError, match="no enum class"):
            codec.encode(prop, 1)
        with pytest.raises(EncodingError, match="no enum class"):
            codec.parse(prop, "RED")

    def test_signed_scaled_float(self) -> None:
        """Test signed FLOAT64 values use two's complement."""
        prop = _prop(SemanticType.FLOAT64, scale=DIV_10, signed=True)

        assert codec.decode(prop, [0xFFFF, 0xFF9C]) == -10.0

    def test_unsigned_scaled_float_stays_positive(self) -> None:
        """Test unsigned FLOAT64 values never go negative."""
        prop = _prop(SemanticType.FLOAT64, length=1, scale=DIV_10)

        assert codec.decode(prop, [0xFF9C]) == pytest.approx(6543.6)

    def test_four_word_float(self) -> None:
        """Test 4-word scaled integers."""
        prop = _prop(SemanticType.FLOAT64, length=4)

        assert codec.decode(prop, [0, 0, 0x0001, 0x86A0]) == 100000.0

    def test_int16(self) -> None:
        """Test INT16 is always signed."""
        prop = _prop(SemanticType.INT16, length=1)

        assert codec.decode(prop, [0xFFFE]) == -2

    def test_int32(self) -> None:
        prop = _prop(SemanticType.INT32)

        assert codec.decode(prop, [0xFFFF, 0xFFFF]) == -1

    def test_float32(self) -> None:
        """Test IEEE-754 single precision values."""
        prop = _prop(SemanticType.FLOAT32)

        assert codec.decode(prop, [0x41AC, 0x0000]) == 21.5

    def test_duration_seconds(self) -> None:
        prop = _prop(SemanticType.DURATION, time_unit=TimeUnit.SECONDS)

        assert codec.decode(prop, [0, 3661]) == timedelta(hours=1, minutes=1, seconds=1)

    def test_duration_minutes(self) -> None:
        """Test minute durations such as a time of day."""
        prop = _prop(SemanticType.DURATION, time_unit=TimeUnit.MINUTES)

        assert codec.decode(prop, [0, 390]) == timedelta(hours=6, minutes=30)

    def test_timestamp(self) -> None:
        """Test timestamps decode as UTC datetimes."""
        prop = _prop(SemanticType.TIMESTAMP)

        value = codec.decode(prop, [0x5F5E, 0x1000])

        assert value == datetime.fromtimestamp(0x5F5E1000, tz=timezone.utc)
        assert value.tzinfo is timezone.utc

    def test_enum_member(self) -> None:
        prop = _prop(SemanticType.ENUM_ORDINAL, length=1, enum=Color)

        assert codec.decode(prop, [2]) is Color.GREEN

    def test_unknown_enum_ordinal_is_kept(self) -> None:
        """Test undefined ordinals are preserved as plain integers."""
        prop = _prop(SemanticType.ENUM_ORDINAL, length=1, enum=Color)

        value = codec.decode(prop, [99])

        assert value == 99
        assert not isinstance(value, Color)

    def test_fixed_string(self) -> None:
        """Test strings stop at the first NUL."""
        prop = _prop(SemanticType.FIXED_STRING, length=3)

        assert codec.decode(prop, [0x4672, 0x6F00, 0x4142]) == "Fro"

    def test_non_ascii_string(self) -> None:
        prop = _prop(SemanticType.FIXED_STRING, length=1)

        with pytest.raises(EncodingError, match="non-ASCII"):
            codec.decode(prop, [0xC3A9])

    def test_invalid_sentinel(self) -> None:
        """Test the invalid sentinel decodes to NaN or None."""
        value_prop = _prop(SemanticType.FLOAT64, scale=DIV_10, invalid=0x7FFFFFFF)
        enum_prop = _prop(SemanticType.ENUM_ORDINAL, enum=Color, invalid=0x7FFFFFFF)

        assert math.isnan(codec.decode(value_prop, [0x7FFF, 0xFFFF]))
        assert codec.decode(enum_prop, [0x7FFF, 0xFFFF]) is None


class TestEncode:
    """Tests for encode() and to_raw()."""

    def test_scaled_float(self) -> None:
        prop = _prop(SemanticType.FLOAT64, scale=DIV_10)

        assert codec.encode(prop, 21.5) == [0, 215]

    def test_scaling_is_exact(self) -> None:
        """Test values that are inexact in binary still scale correctly."""
        prop = _prop(SemanticType.FLOAT64, scale=DIV_100)

        assert codec.encode(prop, 0.29) == [0, 29]
        assert codec.encode(prop, 1.15) == [0, 115]

    def test_negative_float_needs_signed(self) -> None:
        """Test negative values only fit signed descriptors."""
        unsigned = _prop(SemanticType.FLOAT64, scale=DIV_10)
        signed = _prop(SemanticType.FLOAT64, scale=DIV_10, signed=True)

        with pytest.raises(EncodingError):
            codec.encode(unsigned, -1.0)
        assert codec.encode(signed, -1.0) == [0xFFFF, 0xFFF6]

    def test_overflow_after_scaling(self) -> None:
        """Test a value that overflows after dividing by the scale."""
        prop = _prop(SemanticType.FLOAT64, length=1, scale=DIV_10)

        with pytest.raises(EncodingError, match="does not fit"):
            codec.encode(prop, 6553.6)

    def test_nan_uses_invalid_sentinel(self) -> None:
        with_sentinel = _prop(SemanticType.FLOAT64, invalid=0x7FFFFFFF)
        without_sentinel = _prop(SemanticType.FLOAT64)

        assert codec.encode(with_sentinel, math.nan) == [0x7FFF, 0xFFFF]
        with pytest.raises(EncodingError, match="NaN"):
            codec.encode(without_sentinel, math.nan)

    def test_type_mismatch(self) -> None:
        """Test values of the wrong runtime type are rejected."""
        with pytest.raises(EncodingError, match="expected a number"):
            codec.encode(_prop(SemanticType.FLOAT64), "21.5")
        with pytest.raises(EncodingError, match="expected an integer"):
            codec.encode(_prop(SemanticType.UINT16, length=1), 1.5)
        with pytest.raises(EncodingError, match="expected an integer"):
            codec.encode(_prop(SemanticType.UINT16, length=1), True)
        with pytest.raises(EncodingError, match="expected a timedelta"):
            codec.encode(_prop(SemanticType.DURATION), 60)
        with pytest.raises(EncodingError, match="expected a datetime"):
            codec.encode(_prop(SemanticType.TIMESTAMP), 0)

    def test_wrong_enum_class(self) -> None:
        prop = _prop(SemanticType.ENUM_ORDINAL, length=1, enum=Color)

        with pytest.raises(EncodingError, match="expected Color"):
            codec.encode(prop, Shape.SQUARE)

    def test_duration_minutes(self) -> None:
        prop = _prop(SemanticType.DURATION, time_unit=TimeUnit.MINUTES)

        assert codec.encode(prop, timedelta(hours=6, minutes=30)) == [0, 390]

    def test_timestamp_wall_clock(self) -> None:
        """Test naive datetimes are stored as device wall clock."""
        prop = _prop(SemanticType.TIMESTAMP)

        words = codec.encode(prop, datetime(2024, 7, 1, 12, 0))

        assert codec.decode(prop, words) == datetime(2024, 7, 1, 12, 0, tzinfo=timezone.utc)

    def test_fixed_string_padding(self) -> None:
        prop = _prop(SemanticType.FIXED_STRING, length=3)

        assert codec.encode(prop, "Fro") == [0x4672, 0x6F00, 0x0000]

    def test_fixed_string_too_long(self) -> None:
        prop = _prop(SemanticType.FIXED_STRING, length=1)

        with pytest.raises(EncodingError, match="longer than 2"):
            codec.encode(prop, "abc")

    def test_float32(self) -> None:
        prop = _prop(SemanticType.FLOAT32)

        assert codec.encode(prop, 21.5) == [0x41AC, 0x0000]

    def test_float32_overflow(self) -> None:
        prop = _prop(SemanticType.FLOAT32)

        with pytest.raises(EncodingError, match="float32"):
            codec.encode(prop, 1e300)


class TestRoundTrip:
    """Tests that decode(encode(x)) == x for representative values."""

    @pytest.mark.parametrize(
        ("prop", "value"),
        [
            (_prop(SemanticType.FLOAT64, scale=DIV_10, signed=True), -12.3),
            (_prop(SemanticType.FLOAT64, scale=DIV_100), 1.15),
            (_prop(SemanticType.UINT32), 4294967295),
            (_prop(SemanticType.INT32), -2147483648),
            (_prop(SemanticType.INT16, length=1), -32768),
            (_prop(SemanticType.DURATION), timedelta(days=1, seconds=5)),
            (_prop(SemanticType.ENUM_ORDINAL, length=1, enum=Color), Color.RED),
            (_prop(SemanticType.FIXED_STRING, length=8), "SYMO 8.2-3-M"),
            (_prop(SemanticType.FLOAT32), 21.5),
            (_prop(SemanticType.FLOAT32), -0.125),
            (_prop(SemanticType.TIMESTAMP), datetime(2024, 7, 1, 12, 30, tzinfo=timezone.utc)),
            (
                _prop(SemanticType.TIMESTAMP),
                datetime(2024, 1, 1, 10, 0, tzinfo=timezone(timedelta(hours=2))),
            ),
        ],
    )
    def test_round_trip(self, prop: PropertyDescriptor, value: object) -> None:
        """Test encoding then decoding returns the original value."""
        assert codec.decode(prop, codec.encode(prop, value)) == value

    def test_timestamp_offset_converted_to_utc(self) -> None:
        """Test aware timestamps are stored as the same instant in UTC."""
        prop = _prop(SemanticType.TIMESTAMP)
        local = datetime(2024, 1, 1, 10, 0, tzinfo=timezone(timedelta(hours=2)))

        decoded = codec.decode(prop, codec.encode(prop, local))

        assert decoded == datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)
        assert decoded.tzinfo is timezone.utc

    def test_naive_timestamp_read_back_as_utc(self) -> None:
        """Test naive timestamps are taken as UTC wall-clock time."""
        prop = _prop(SemanticType.TIMESTAMP)
        naive = datetime(2024, 7, 1, 12, 30)

        decoded = codec.decode(prop, codec.encode(prop, naive))

        assert decoded == naive.replace(tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "descriptor",
        [*ETAPU11_SCHEMA, *SYMO823M_SCHEMA],
        ids=lambda descriptor: descriptor.name,
    )
    def test_shipped_schema_round_trip(self, descriptor: PropertyDescriptor) -> None:
        """Test every shipped descriptor round-trips an in-range sample."""
        value = codec.decode(descriptor, _sample_words(descriptor))

        assert codec.decode(descriptor, codec.encode(descriptor, value)) == value


class TestParse:
    """Tests for parsing wire-format strings."""

    def test_float(self) -> None:
        assert codec.parse(_prop(SemanticType.FLOAT64), " 21.5 ") == 21.5

    def test_float_error(self) -> None:
        """Test unparsable numbers raise EncodingError."""
        with pytest.raises(EncodingError, match="is not a number"):
            codec.parse(_prop(SemanticType.FLOAT64), "abc")

    def test_integer_prefixes(self) -> None:
        prop = _prop(SemanticType.UINT16, length=1)

        assert codec.parse(prop, "42") == 42
        assert codec.parse(prop, "0x1F") == 31
        with pytest.raises(EncodingError, match="is not an integer"):
            codec.parse(prop, "4.2")

    def test_duration_clock_format(self) -> None:
        prop = _prop(SemanticType.DURATION, time_unit=TimeUnit.MINUTES)

        assert codec.parse(prop, "06:30") == timedelta(hours=6, minutes=30)
        assert codec.parse(prop, "1.02:00:15") == timedelta(days=1, hours=2, seconds=15)

    def test_duration_number_uses_time_unit(self) -> None:
        """Test plain numbers are counted in the property's time unit."""
        minutes = _prop(SemanticType.DURATION, time_unit=TimeUnit.MINUTES)
        seconds = _prop(SemanticType.DURATION, time_unit=TimeUnit.SECONDS)

        assert codec.parse(minutes, "90") == timedelta(minutes=90)
        assert codec.parse(seconds, "90") == timedelta(seconds=90)
        with pytest.raises(EncodingError, match="is not a duration"):
            codec.parse(seconds, "later")

    def test_timestamp(self) -> None:
        prop = _prop(SemanticType.TIMESTAMP)

        assert codec.parse(prop, "2024-07-01T12:00:00") == datetime(2024, 7, 1, 12, 0)
        assert codec.parse(prop, "0") == datetime(1970, 1, 1, tzinfo=timezone.utc)
        with pytest.raises(EncodingError, match="ISO-8601"):
            codec.parse(prop, "tomorrow")

    def test_enum(self) -> None:
        prop = _prop(SemanticType.ENUM_ORDINAL, length=1, enum=Color)

        assert codec.parse(prop, "green") is Color.GREEN
        assert codec.parse(prop, "1") is Color.RED
        assert codec.parse(prop, "7") == 7
        with pytest.raises(EncodingError, match="not a member of Color"):
            codec.parse(prop, "blue")

    def test_string_verbatim(self) -> None:
        prop = _prop(SemanticType.FIXED_STRING, length=4)

        assert codec.parse(prop, " a b ") == " a b "

    def test_non_string_input(self) -> None:
        with pytest.raises(EncodingError, match="expected a string"):
            codec.parse(_prop(SemanticType.FLOAT64), 21.5)  # type: ignore[arg-type]


class TestPrepareWrite:
    """Tests for parse + range check + encode."""

    def test_in_range(self) -> None:
        prop = _prop(SemanticType.FLOAT64, scale=DIV_10, minimum=0, maximum=300)

        value, words = codec.prepare_write(prop, "12.5")

        assert value == 12.5
        assert words == [0, 125]

    def test_out_of_range(self) -> None:
        """Test bounds are checked in raw units."""
        prop = _prop(SemanticType.FLOAT64, scale=DIV_10, minimum=0, maximum=300)

        with pytest.raises(ValueOutOfRangeError) as exc_info:
            codec.prepare_write(prop, "30.1")

        assert exc_info.value.raw == 301
        assert exc_info.value.maximum == 300

    def test_invalid_sentinel_skips_range(self) -> None:
        """Test writing NaN stores the sentinel even with bounds declared."""
        prop = _prop(
            SemanticType.FLOAT64, scale=DIV_10, minimum=0, maximum=300, invalid=0x7FFFFFFF
        )

        _, words = codec.prepare_write(prop, "nan")

        assert words == [0x7FFF, 0xFFFF]

    def test_check_range_unbounded(self) -> None:
        codec.check_range(_prop(SemanticType.UINT32), 123456)
