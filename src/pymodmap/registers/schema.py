"""Register schema building blocks.

A device schema is a static table of :class:`PropertyDescriptor` entries plus
the :class:`Block` ranges that can be fetched in a single transaction.  Device
modules (``etapu11``, ``symo823m``) declare their tables as tuples and wrap
them in a :class:`RegisterSchema`, which validates the table once at import
time and builds the lookup indexes.

Scaling convention: the decoded value is ``raw * scale``.  Scales are
:class:`fractions.Fraction` so that scaling is exact; the ``DIV_*`` constants
cover the usual device divisors.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum, IntEnum
from fractions import Fraction

from pymodmap.exceptions import (
    PropertyNotFoundError,
    SchemaError,
)

_LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Scale constants (decoded = raw * scale)
# ---------------------------------------------------------------------------
NONE = Fraction(1)
DIV_10 = Fraction(1, 10)
DIV_100 = Fraction(1, 100)
DIV_1000 = Fraction(1, 1000)


class SemanticType(str, Enum):
    """Semantic type of a property value."""

    FLOAT64 = "float64"
    FLOAT32 = "float32"
    UINT32 = "uint32"
    INT32 = "int32"
    UINT16 = "uint16"
    INT16 = "int16"
    DURATION = "duration"
    TIMESTAMP = "timestamp"
    ENUM_ORDINAL = "enum_ordinal"
    FIXED_STRING = "fixed_string"


class AccessMode(str, Enum):
    """Access mode of a property."""

    READ_ONLY = "read_only"
    WRITE_ONLY = "write_only"
    READ_WRITE = "read_write"

    @property
    def readable(self) -> bool:
        return self is not AccessMode.WRITE_ONLY

    @property
    def writable(self) -> bool:
        return self is not AccessMode.READ_ONLY


class TimeUnit(str, Enum):
    """Raw unit of a DURATION property."""

    SECONDS = "seconds"
    MINUTES = "minutes"


# Allowed word lengths per semantic type (FIXED_STRING: any length >= 1)
ALLOWED_LENGTHS: dict[SemanticType, frozenset[int]] = {
    SemanticType.FLOAT64: frozenset({1, 2, 4}),
    SemanticType.FLOAT32: frozenset({2}),
    SemanticType.UINT32: frozenset({2}),
    SemanticType.INT32: frozenset({2}),
    SemanticType.UINT16: frozenset({1}),
    SemanticType.INT16: frozenset({1}),
    SemanticType.DURATION: frozenset({2}),
    SemanticType.TIMESTAMP: frozenset({2}),
    SemanticType.ENUM_ORDINAL: frozenset({1, 2}),
}

# Types whose values are never scaled
UNSCALED_TYPES: frozenset[SemanticType] = frozenset(
    {
        SemanticType.FLOAT32,
        SemanticType.UINT32,
        SemanticType.INT32,
        SemanticType.UINT16,
        SemanticType.INT16,
        SemanticType.ENUM_ORDINAL,
        SemanticType.FIXED_STRING,
        SemanticType.TIMESTAMP,
    }
)


@dataclass(frozen=True)
class PropertyDescriptor:
    """Single property definition, the atomic unit of a register schema.

    Attributes:
        name: Property name, unique within a schema.
        semantic_type: How the raw words are interpreted.
        offset: First holding register address.
        length: Number of 16-bit registers.
        scale: Multiplier applied to the raw integer (decoded = raw * scale).
        access: Read/write access mode.
        block_id: Block the property can be demultiplexed from, if any.
        category: Logical grouping used for group reads.
        unit: Engineering unit string ("°C", "kg", "%", ...).
        description: Human-readable description.
        signed: Two's-complement interpretation for FLOAT64 scaled integers.
        little_endian: Low word first for multi-word integers.
        enum: IntEnum class for ENUM_ORDINAL properties.
        time_unit: Raw unit for DURATION properties.
        minimum: Inclusive lower bound in raw units, checked on write.
        maximum: Inclusive upper bound in raw units, checked on write.
        invalid: Raw value the device uses for "not available".
    """

    name: str
    semantic_type: SemanticType
    offset: int
    length: int = 2
    scale: Fraction = NONE
    access: AccessMode = AccessMode.READ_ONLY
    block_id: str | None = None
    category: str = ""
    unit: str = ""
    description: str = ""
    signed: bool = False
    little_endian: bool = False
    enum: type[IntEnum] | None = None
    time_unit: TimeUnit = TimeUnit.SECONDS
    minimum: int | None = None
    maximum: int | None = None
    invalid: int | None = None

    @property
    def readable(self) -> bool:
        return self.access.readable

    @property
    def writable(self) -> bool:
        return self.access.writable

    @property
    def end(self) -> int:
        """First register address after this property."""
        return self.offset + self.length


@dataclass(frozen=True)
class Block:
    """Contiguous register range fetched in one transport read.

    Attributes:
        block_id: Block name referenced by PropertyDescriptor.block_id.
        offset: First register address.
        length: Number of registers.
    """

    block_id: str
    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length

    def contains(self, descriptor: PropertyDescriptor) -> bool:
        return self.offset <= descriptor.offset and descriptor.end <= self.end

    def overlaps(self, other: Block) -> bool:
        return self.offset < other.end and other.offset < self.end

    def slice(self, words: list[int], descriptor: PropertyDescriptor) -> list[int]:
        """Cut the words of ``descriptor`` out of a buffer read for this block."""
        start = descriptor.offset - self.offset
        return words[start : start + descriptor.length]


def _validate_descriptor(descriptor: PropertyDescriptor) -> None:
    """Check one descriptor against its semantic type."""
    name = descriptor.name
    stype = descriptor.semantic_type

    if not 0 <= descriptor.offset <= 0xFFFF:
        raise SchemaError(f"{name}: offset {descriptor.offset} outside 0..65535")
    if descriptor.length < 1 or descriptor.end > 0x10000:
        raise SchemaError(f"{name}: invalid length {descriptor.length}")

    allowed = ALLOWED_LENGTHS.get(stype)
    if allowed is not None and descriptor.length not in allowed:
        raise SchemaError(
            f"{name}: length {descriptor.length} not valid for {stype.value} "
            f"(allowed {sorted(allowed)})"
        )

    if descriptor.scale <= 0:
        raise SchemaError(f"{name}: scale must be positive")
    if stype in UNSCALED_TYPES and descriptor.scale != 1:
        raise SchemaError(f"{name}: {stype.value} properties cannot be scaled")

    if stype is SemanticType.ENUM_ORDINAL and descriptor.enum is None:
        raise SchemaError(f"{name}: enum_ordinal property requires an enum class")

    if (
        descriptor.minimum is not None
        and descriptor.maximum is not None
        and descriptor.minimum > descriptor.maximum
    ):
        raise SchemaError(f"{name}: minimum greater than maximum")


class RegisterSchema:
    """Immutable, validated register table for one device type.

    Example:
        schema = RegisterSchema("demo", properties=(...), blocks=(...))
        descriptor = schema.lookup("BoilerTemperature")
        schema.is_writable("BoilerTarget")
    """

    def __init__(
        self,
        device: str,
        properties: Iterable[PropertyDescriptor],
        blocks: Iterable[Block] = (),
    ) -> None:
        """Build and validate a schema.

        Args:
            device: Device type name used in log messages
            properties: Property descriptors in schema order
            blocks: Block ranges referenced by the descriptors

        Raises:
            SchemaError: If the table is inconsistent
        """
        self._device = device
        self._properties: dict[str, PropertyDescriptor] = {}
        self._blocks: dict[str, Block] = {}
        self._by_block: dict[str, tuple[PropertyDescriptor, ...]] = {}
        self._by_category: dict[str, tuple[PropertyDescriptor, ...]] = {}

        for block in blocks:
            if block.block_id in self._blocks:
                raise SchemaError(f"{device}: duplicate block '{block.block_id}'")
            if block.length < 1 or block.offset < 0 or block.end > 0x10000:
                raise SchemaError(f"{device}: invalid range for block '{block.block_id}'")
            for other in self._blocks.values():
                if block.overlaps(other):
                    raise SchemaError(
                        f"{device}: block '{block.block_id}' overlaps '{other.block_id}'"
                    )
            self._blocks[block.block_id] = block

        by_block: dict[str, list[PropertyDescriptor]] = {bid: [] for bid in self._blocks}
        by_category: dict[str, list[PropertyDescriptor]] = {}

        for descriptor in properties:
            if descriptor.name in self._properties:
                raise SchemaError(f"{device}: duplicate property '{descriptor.name}'")
            _validate_descriptor(descriptor)

            if descriptor.block_id is not None:
                block = self._blocks.get(descriptor.block_id)
                if block is None:
                    raise SchemaError(
                        f"{device}: '{descriptor.name}' references unknown block "
                        f"'{descriptor.block_id}'"
                    )
                if not block.contains(descriptor):
                    raise SchemaError(
                        f"{device}: '{descriptor.name}' lies outside block '{block.block_id}'"
                    )
                by_block[block.block_id].append(descriptor)

            if descriptor.category:
                by_category.setdefault(descriptor.category, []).append(descriptor)
            self._properties[descriptor.name] = descriptor

        self._by_block = {bid: tuple(items) for bid, items in by_block.items()}
        self._by_category = {cat: tuple(items) for cat, items in by_category.items()}

        _LOGGER.debug(
            "Built %s schema: %d properties, %d blocks",
            device,
            len(self._properties),
            len(self._blocks),
        )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def device(self) -> str:
        return self._device

    def __len__(self) -> int:
        return len(self._properties)

    def __iter__(self) -> Iterator[PropertyDescriptor]:
        return iter(self._properties.values())

    def __contains__(self, name: object) -> bool:
        return name in self._properties

    def get(self, name: str) -> PropertyDescriptor | None:
        """Return the descriptor for ``name`` or None if unknown."""
        return self._properties.get(name)

    def lookup(self, name: str) -> PropertyDescriptor:
        """Return the descriptor for ``name``.

        Raises:
            PropertyNotFoundError: If the name is not declared
        """
        try:
            return self._properties[name]
        except KeyError:
            raise PropertyNotFoundError(name) from None

    def is_readable(self, name: str) -> bool:
        descriptor = self._properties.get(name)
        return descriptor is not None and descriptor.readable

    def is_writable(self, name: str) -> bool:
        descriptor = self._properties.get(name)
        return descriptor is not None and descriptor.writable

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._properties)

    @property
    def readable(self) -> tuple[PropertyDescriptor, ...]:
        """Readable properties in schema order."""
        return tuple(d for d in self._properties.values() if d.readable)

    @property
    def writable(self) -> tuple[PropertyDescriptor, ...]:
        """Writable properties in schema order."""
        return tuple(d for d in self._properties.values() if d.writable)

    # ------------------------------------------------------------------
    # Blocks and categories
    # ------------------------------------------------------------------

    @property
    def blocks(self) -> tuple[Block, ...]:
        return tuple(self._blocks.values())

    def block(self, block_id: str) -> Block:
        try:
            return self._blocks[block_id]
        except KeyError:
            raise SchemaError(f"{self._device}: unknown block '{block_id}'") from None

    def properties_in_block(self, block_id: str) -> tuple[PropertyDescriptor, ...]:
        """Properties demultiplexed from ``block_id``, in schema order."""
        return self._by_block.get(block_id, ())

    @property
    def categories(self) -> tuple[str, ...]:
        return tuple(self._by_category)

    def by_category(self, category: str) -> tuple[PropertyDescriptor, ...]:
        return self._by_category.get(category, ())


__all__ = [
    "AccessMode",
    "Block",
    "DIV_10",
    "DIV_100",
    "DIV_1000",
    "NONE",
    "PropertyDescriptor",
    "RegisterSchema",
    "SemanticType",
    "TimeUnit",
]
