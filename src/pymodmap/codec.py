"""Conversion between property values and Modbus register words.

Pure functions, no I/O.  Every conversion is driven by the descriptor's
:class:`~pymodmap.registers.schema.SemanticType`:

    =============  ==================================================
    FLOAT64        scaled integer of 1, 2 or 4 words -> float
    FLOAT32        IEEE-754 single precision over 2 words -> float
    UINT*/INT*     plain integers, INT* two's complement
    DURATION       raw seconds or minutes -> timedelta
    TIMESTAMP      Unix seconds (device wall clock) -> UTC datetime
    ENUM_ORDINAL   raw ordinal -> IntEnum member (unknown ordinals kept as int)
    FIXED_STRING   ASCII, two characters per word, high byte first
    =============  ==================================================

Multi-word integers are big-endian (high word first) unless the descriptor
sets ``little_endian``.
"""

from __future__ import annotations

import math
import re
import struct
from datetime import datetime, timedelta, timezone
from enum import IntEnum
from fractions import Fraction
from numbers import Real
from typing import Any

from .exceptions import EncodingError, ValueOutOfRangeError
from .registers.schema import PropertyDescriptor, SemanticType, TimeUnit

_SIGNED_TYPES = frozenset({SemanticType.INT16, SemanticType.INT32})
_INTEGER_TYPES = frozenset(
    {SemanticType.UINT16, SemanticType.INT16, SemanticType.UINT32, SemanticType.INT32}
)

# [D.]HH:MM[:SS[.ffffff]]
_DURATION_RE = re.compile(
    r"^(?:(?P<days>\d+)\.)?(?P<hours>\d+):(?P<minutes>\d{1,2})"
    r"(?::(?P<seconds>\d{1,2}(?:\.\d+)?))?$"
)


# ---------------------------------------------------------------------------
# Word helpers
# ---------------------------------------------------------------------------


def _is_signed(descriptor: PropertyDescriptor) -> bool:
    return descriptor.semantic_type in _SIGNED_TYPES or descriptor.signed


def _ordered(descriptor: PropertyDescriptor, words: list[int]) -> list[int]:
    """Return words high word first."""
    return list(reversed(words)) if descriptor.little_endian else list(words)


def words_to_raw(descriptor: PropertyDescriptor, words: list[int]) -> int:
    """Combine register words into the raw unsigned integer."""
    if len(words) != descriptor.length:
        raise EncodingError(
            f"{descriptor.name}: expected {descriptor.length} registers, got {len(words)}"
        )
    raw = 0
    for word in _ordered(descriptor, words):
        raw = (raw << 16) | (word & 0xFFFF)
    return raw


def raw_to_words(descriptor: PropertyDescriptor, raw: int) -> list[int]:
    """Split a raw integer into register words.

    Negative values are stored as two's complement of the full width.

    Raises:
        EncodingError: If the value does not fit the property width
    """
    bits = 16 * descriptor.length
    if _is_signed(descriptor):
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    if not low <= raw <= high:
        raise EncodingError(
            f"{descriptor.name}: raw value {raw} does not fit {bits}-bit "
            f"{'signed' if _is_signed(descriptor) else 'unsigned'} register"
        )
    unsigned = raw & ((1 << bits) - 1)
    words = [(unsigned >> (16 * i)) & 0xFFFF for i in reversed(range(descriptor.length))]
    return list(reversed(words)) if descriptor.little_endian else words


def _to_signed(descriptor: PropertyDescriptor, raw: int) -> int:
    bits = 16 * descriptor.length
    if _is_signed(descriptor) and raw >= 1 << (bits - 1):
        return raw - (1 << bits)
    return raw


def _unit_seconds(descriptor: PropertyDescriptor) -> int:
    return 60 if descriptor.time_unit is TimeUnit.MINUTES else 1


def _enum_class(descriptor: PropertyDescriptor) -> type[IntEnum]:
    if descriptor.enum is None:
        raise EncodingError(f"{descriptor.name}: enum_ordinal property has no enum class")
    return descriptor.enum


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------


def decode(descriptor: PropertyDescriptor, words: list[int]) -> Any:
    """Decode register words into the property's semantic value.

    Args:
        descriptor: Property descriptor
        words: Exactly ``descriptor.length`` register values

    Returns:
        float, int, timedelta, datetime, IntEnum member, str, or None when
        the raw value equals the descriptor's ``invalid`` sentinel
        (NaN for floating point types).

    Raises:
        EncodingError: If the words cannot be decoded
    """
    stype = descriptor.semantic_type

    if stype is SemanticType.FIXED_STRING:
        if len(words) != descriptor.length:
            raise EncodingError(
                f"{descriptor.name}: expected {descriptor.length} registers, got {len(words)}"
            )
        data = b"".join(struct.pack(">H", w & 0xFFFF) for w in words)
        text = data.split(b"\x00", 1)[0]
        try:
            return text.decode("ascii")
        except UnicodeDecodeError as err:
            raise EncodingError(f"{descriptor.name}: non-ASCII string data") from err

    raw = words_to_raw(descriptor, words)

    if descriptor.invalid is not None and raw == descriptor.invalid:
        if stype in (SemanticType.FLOAT64, SemanticType.FLOAT32):
            return math.nan
        return None

    if stype is SemanticType.FLOAT32:
        return struct.unpack(">f", struct.pack(">I", raw))[0]

    value = _to_signed(descriptor, raw)

    if stype is SemanticType.FLOAT64:
        return float(value * descriptor.scale)
    if stype in _INTEGER_TYPES:
        return value
    if stype is SemanticType.DURATION:
        seconds = value * descriptor.scale * _unit_seconds(descriptor)
        return timedelta(seconds=float(seconds))
    if stype is SemanticType.TIMESTAMP:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if stype is SemanticType.ENUM_ORDINAL:
        try:
            return _enum_class(descriptor)(value)
        except ValueError:
            return value

    raise EncodingError(f"{descriptor.name}: unsupported type {stype}")


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------


def _scaled(descriptor: PropertyDescriptor, value: Fraction) -> int:
    """Divide by the scale and round to the nearest raw integer."""
    return round(value / descriptor.scale)


def to_raw(descriptor: PropertyDescriptor, value: Any) -> int:
    """Convert a semantic value to the signed raw integer.

    Not defined for FIXED_STRING and FLOAT32, which are not integer encoded.

    Raises:
        EncodingError: If the value's type does not match the property
    """
    stype = descriptor.semantic_type
    name = descriptor.name

    if stype is SemanticType.FLOAT64:
        if isinstance(value, bool) or not isinstance(value, Real):
            raise EncodingError(f"{name}: expected a number, got {type(value).__name__}")
        if isinstance(value, float) and math.isnan(value):
            if descriptor.invalid is None:
                raise EncodingError(f"{name}: NaN is not representable")
            return descriptor.invalid
        try:
            return _scaled(descriptor, Fraction(value))
        except (OverflowError, ValueError) as err:
            raise EncodingError(f"{name}: cannot encode {value!r}") from err

    if stype in _INTEGER_TYPES:
        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodingError(f"{name}: expected an integer, got {type(value).__name__}")
        return int(value)

    if stype is SemanticType.DURATION:
        if not isinstance(value, timedelta):
            raise EncodingError(f"{name}: expected a timedelta, got {type(value).__name__}")
        seconds = Fraction(value.days * 86400 + value.seconds) + Fraction(
            value.microseconds, 1_000_000
        )
        return _scaled(descriptor, seconds / _unit_seconds(descriptor))

    if stype is SemanticType.TIMESTAMP:
        if not isinstance(value, datetime):
            raise EncodingError(f"{name}: expected a datetime, got {type(value).__name__}")
        # Naive values are device wall-clock time, stored as UTC.
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.astimezone(timezone.utc).timestamp())

    if stype is SemanticType.ENUM_ORDINAL:
        enum_cls = _enum_class(descriptor)
        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodingError(f"{name}: expected an enum ordinal, got {type(value).__name__}")
        if isinstance(value, IntEnum) and not isinstance(value, enum_cls):
            raise EncodingError(
                f"{name}: expected {enum_cls.__name__}, got {type(value).__name__}"
            )
        return int(value)

    raise EncodingError(f"{name}: {stype.value} values are not integer encoded")


def check_range(descriptor: PropertyDescriptor, raw: int) -> None:
    """Check a raw value against the descriptor's declared bounds.

    Raises:
        ValueOutOfRangeError: If ``raw`` lies outside [minimum, maximum]
    """
    if descriptor.invalid is not None and raw == descriptor.invalid:
        return
    if (descriptor.minimum is not None and raw < descriptor.minimum) or (
        descriptor.maximum is not None and raw > descriptor.maximum
    ):
        raise ValueOutOfRangeError(descriptor.name, raw, descriptor.minimum, descriptor.maximum)


def encode(descriptor: PropertyDescriptor, value: Any) -> list[int]:
    """Encode a semantic value into register words.

    Args:
        descriptor: Property descriptor
        value: Value of the property's semantic type

    Returns:
        Exactly ``descriptor.length`` register values

    Raises:
        EncodingError: On type mismatch or when the scaled value overflows
    """
    stype = descriptor.semantic_type
    name = descriptor.name

    if stype is SemanticType.FIXED_STRING:
        if not isinstance(value, str):
            raise EncodingError(f"{name}: expected a string, got {type(value).__name__}")
        try:
            data = value.encode("ascii")
        except UnicodeEncodeError as err:
            raise EncodingError(f"{name}: string must be ASCII") from err
        capacity = 2 * descriptor.length
        if len(data) > capacity:
            raise EncodingError(f"{name}: string longer than {capacity} characters")
        data = data.ljust(capacity, b"\x00")
        return list(struct.unpack(f">{descriptor.length}H", data))

    if stype is SemanticType.FLOAT32:
        if isinstance(value, bool) or not isinstance(value, Real):
            raise EncodingError(f"{name}: expected a number, got {type(value).__name__}")
        try:
            (raw,) = struct.unpack(">I", struct.pack(">f", float(value)))
        except (OverflowError, struct.error) as err:
            raise EncodingError(f"{name}: {value!r} does not fit float32") from err
        words = [raw >> 16, raw & 0xFFFF]
        return list(reversed(words)) if descriptor.little_endian else words

    return raw_to_words(descriptor, to_raw(descriptor, value))


# ---------------------------------------------------------------------------
# Parse (wire-format strings)
# ---------------------------------------------------------------------------


def _parse_int(name: str, text: str) -> int:
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return int(text, 0)
    except ValueError as err:
        raise EncodingError(f"{name}: '{text}' is not an integer") from err


def _parse_duration(descriptor: PropertyDescriptor, text: str) -> timedelta:
    match = _DURATION_RE.match(text)
    if match:
        return timedelta(
            days=int(match["days"] or 0),
            hours=int(match["hours"]),
            minutes=int(match["minutes"]),
            seconds=float(match["seconds"] or 0),
        )
    try:
        amount = float(text)
    except ValueError as err:
        raise EncodingError(f"{descriptor.name}: '{text}' is not a duration") from err
    if not math.isfinite(amount):
        raise EncodingError(f"{descriptor.name}: '{text}' is not a duration")
    return timedelta(seconds=amount * _unit_seconds(descriptor))


def _parse_timestamp(name: str, text: str) -> datetime:
    if text.isdigit():
        return datetime.fromtimestamp(int(text), tz=timezone.utc)
    try:
        return datetime.fromisoformat(text)
    except ValueError as err:
        raise EncodingError(f"{name}: '{text}' is not an ISO-8601 timestamp") from err


def _parse_enum(descriptor: PropertyDescriptor, text: str) -> int:
    enum_cls = _enum_class(descriptor)
    if text.lstrip("-").isdigit():
        ordinal = int(text)
        try:
            return enum_cls(ordinal)
        except ValueError:
            return ordinal
    folded = text.casefold()
    for member in enum_cls:
        if member.name.casefold() == folded:
            return member
    raise EncodingError(f"{descriptor.name}: '{text}' is not a member of {enum_cls.__name__}")


def parse(descriptor: PropertyDescriptor, text: str) -> Any:
    """Parse a wire-format string into the property's semantic value.

    Accepted formats:
        FLOAT64/FLOAT32: any ``float()`` literal ("21.5", "nan")
        integers: decimal or prefixed ("0x1F")
        DURATION: "[D.]HH:MM[:SS]" or a plain number of ``time_unit``
        TIMESTAMP: ISO-8601 or Unix seconds
        ENUM_ORDINAL: member name (case-insensitive) or ordinal
        FIXED_STRING: taken verbatim

    Raises:
        EncodingError: If the text cannot be parsed
    """
    if not isinstance(text, str):
        raise EncodingError(f"{descriptor.name}: expected a string, got {type(text).__name__}")

    stype = descriptor.semantic_type
    if stype is SemanticType.FIXED_STRING:
        return text

    text = text.strip()
    if stype in (SemanticType.FLOAT64, SemanticType.FLOAT32):
        try:
            return float(text)
        except ValueError as err:
            raise EncodingError(f"{descriptor.name}: '{text}' is not a number") from err
    if stype in _INTEGER_TYPES:
        return _parse_int(descriptor.name, text)
    if stype is SemanticType.DURATION:
        return _parse_duration(descriptor, text)
    if stype is SemanticType.TIMESTAMP:
        return _parse_timestamp(descriptor.name, text)
    if stype is SemanticType.ENUM_ORDINAL:
        return _parse_enum(descriptor, text)

    raise EncodingError(f"{descriptor.name}: unsupported type {stype}")


def prepare_write(descriptor: PropertyDescriptor, text: str) -> tuple[Any, list[int]]:
    """Parse, range-check and encode a wire-format string.

    Returns:
        Tuple of (parsed value, register words)

    Raises:
        EncodingError: If the text cannot be parsed or encoded
        ValueOutOfRangeError: If the raw value violates the declared bounds
    """
    value = parse(descriptor, text)
    if descriptor.semantic_type not in (SemanticType.FIXED_STRING, SemanticType.FLOAT32):
        check_range(descriptor, to_raw(descriptor, value))
    return value, encode(descriptor, value)


__all__ = [
    "check_range",
    "decode",
    "encode",
    "parse",
    "prepare_write",
    "raw_to_words",
    "to_raw",
    "words_to_raw",
]
