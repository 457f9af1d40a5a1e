"""Exception hierarchy for pymodmap.

All library exceptions inherit from :class:`ModmapError` so callers can use a
single ``except ModmapError`` around schema, codec and transport calls.

The mapping engine never lets these escape from its operations; they are
translated into a :class:`~pymodmap.status.DataStatus` instead.  They do
surface when the codec, schema or a transport is used directly.
"""

from __future__ import annotations


class ModmapError(Exception):
    """Base exception for all pymodmap errors."""

    pass


class SchemaError(ModmapError):
    """A register schema definition is inconsistent.

    Raised while a schema is being built (duplicate names, lengths that do
    not match the semantic type, block members outside their block).  This
    is a programming error and is never converted into a status.
    """

    pass


class PropertyNotFoundError(ModmapError):
    """The property name is not declared in the schema."""

    def __init__(self, name: str) -> None:
        """Initialize with the unknown property name.

        Args:
            name: The property name that was looked up
        """
        self.name = name
        super().__init__(f"Property '{name}' not found")


class PropertyAccessError(ModmapError):
    """The property does not allow the requested access."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(message)


class PropertyNotReadableError(PropertyAccessError):
    """Attempt to read a write-only property."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Property '{name}' is not readable")


class PropertyNotWritableError(PropertyAccessError):
    """Attempt to write a read-only property."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Property '{name}' is not writable")


class EncodingError(ModmapError):
    """A value could not be parsed, encoded or decoded."""

    pass


class ValueOutOfRangeError(ModmapError):
    """A raw value lies outside the bounds declared for the property."""

    def __init__(
        self,
        name: str,
        raw: int,
        minimum: int | None,
        maximum: int | None,
    ) -> None:
        """Initialize with the offending raw value and bounds.

        Args:
            name: Property name
            raw: Raw register value after scaling
            minimum: Inclusive lower bound in raw units (None = unbounded)
            maximum: Inclusive upper bound in raw units (None = unbounded)
        """
        self.name = name
        self.raw = raw
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"Raw value {raw} for '{name}' outside range [{minimum}, {maximum}]"
        )


__all__ = [
    "EncodingError",
    "ModmapError",
    "PropertyAccessError",
    "PropertyNotFoundError",
    "PropertyNotReadableError",
    "PropertyNotWritableError",
    "SchemaError",
    "ValueOutOfRangeError",
]
