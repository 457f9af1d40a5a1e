"""Operation status and error taxonomy.

Every mapping engine operation returns a :class:`DataStatus`.  A status is
either good, uncertain (nothing read yet) or bad with exactly one
:class:`ErrorKind` plus a human-readable detail.

The numeric :attr:`DataStatus.code` values follow the OPC UA status code
layout (severity in the top two bits, sub-code in bits 16-27) so that
upstream consumers can forward them unchanged.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum

from .exceptions import (
    EncodingError,
    PropertyNotFoundError,
    PropertyNotReadableError,
    PropertyNotWritableError,
    ValueOutOfRangeError,
)
from .transports.exceptions import (
    TransportConnectionError,
    TransportDeviceError,
    TransportError,
)

STATUS_GOOD = 0x00000000
STATUS_UNCERTAIN = 0x40000000
STATUS_BAD = 0x80000000


class ErrorKind(str, Enum):
    """Closed set of failure classes reported by the mapping engine."""

    NOT_FOUND = "not_found"
    NOT_READABLE = "not_readable"
    NOT_WRITABLE = "not_writable"
    NOT_CONNECTED = "not_connected"
    OUT_OF_RANGE = "out_of_range"
    ENCODING_ERROR = "encoding_error"
    COMMUNICATION_ERROR = "communication_error"
    DEVICE_FAILURE = "device_failure"
    INTERNAL_ERROR = "internal_error"


# OPC UA codes for each kind (BadNotFound, BadNotReadable, ...)
ERROR_CODES: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 0x803E0000,
    ErrorKind.NOT_READABLE: 0x803A0000,
    ErrorKind.NOT_WRITABLE: 0x803B0000,
    ErrorKind.NOT_CONNECTED: 0x808A0000,
    ErrorKind.OUT_OF_RANGE: 0x803C0000,
    ErrorKind.ENCODING_ERROR: 0x80060000,
    ErrorKind.COMMUNICATION_ERROR: 0x80050000,
    ErrorKind.DEVICE_FAILURE: 0x808B0000,
    ErrorKind.INTERNAL_ERROR: 0x80020000,
}

EXPLANATIONS: dict[ErrorKind, str] = {
    ErrorKind.NOT_FOUND: "A requested item was not found.",
    ErrorKind.NOT_READABLE: "The access level does not allow reading.",
    ErrorKind.NOT_WRITABLE: "The access level does not allow writing.",
    ErrorKind.NOT_CONNECTED: "The device is not connected.",
    ErrorKind.OUT_OF_RANGE: "The value was out of range.",
    ErrorKind.ENCODING_ERROR: "Encoding halted because of invalid data.",
    ErrorKind.COMMUNICATION_ERROR: "A low level communication error occurred.",
    ErrorKind.DEVICE_FAILURE: "There has been a failure in the device.",
    ErrorKind.INTERNAL_ERROR: "An internal error occurred.",
}


@dataclass(frozen=True)
class DataStatus:
    """Result of a mapping engine operation.

    Attributes:
        ok: True when the operation fully succeeded.
        kind: Failure class, None for good and uncertain statuses.
        detail: Human-readable description of the failure.
        uncertain: True only for the initial "nothing read yet" status.
    """

    ok: bool = True
    kind: ErrorKind | None = None
    detail: str = ""
    uncertain: bool = False

    @classmethod
    def bad(cls, kind: ErrorKind, detail: str = "") -> DataStatus:
        """Create a bad status of the given kind."""
        return cls(ok=False, kind=kind, detail=detail)

    @property
    def is_good(self) -> bool:
        return self.ok and not self.uncertain

    @property
    def is_bad(self) -> bool:
        return not self.ok

    @property
    def code(self) -> int:
        """Numeric OPC UA style status code."""
        if self.kind is not None:
            return ERROR_CODES[self.kind]
        if self.uncertain:
            return STATUS_UNCERTAIN
        return STATUS_GOOD if self.ok else STATUS_BAD

    @property
    def name(self) -> str:
        if self.kind is not None:
            return "Bad" + "".join(part.title() for part in self.kind.value.split("_"))
        return "Uncertain" if self.uncertain else "Good"

    @property
    def explanation(self) -> str:
        if self.kind is not None:
            return EXPLANATIONS[self.kind]
        if self.uncertain:
            return "The value is uncertain."
        return "The operation completed successfully."

    def __str__(self) -> str:
        if self.detail:
            return f"{self.name}: {self.detail}"
        return self.name


GOOD = DataStatus()
UNCERTAIN = DataStatus(ok=True, uncertain=True)


def kind_from_exception(err: BaseException) -> ErrorKind:
    """Classify an exception into exactly one :class:`ErrorKind`."""
    if isinstance(err, PropertyNotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(err, PropertyNotReadableError):
        return ErrorKind.NOT_READABLE
    if isinstance(err, PropertyNotWritableError):
        return ErrorKind.NOT_WRITABLE
    if isinstance(err, EncodingError):
        return ErrorKind.ENCODING_ERROR
    if isinstance(err, ValueOutOfRangeError):
        return ErrorKind.OUT_OF_RANGE
    if isinstance(err, TransportConnectionError):
        return ErrorKind.NOT_CONNECTED
    if isinstance(err, TransportDeviceError):
        return ErrorKind.DEVICE_FAILURE
    if isinstance(err, (TransportError, TimeoutError, OSError)):
        return ErrorKind.COMMUNICATION_ERROR
    if isinstance(err, asyncio.CancelledError):
        return ErrorKind.INTERNAL_ERROR
    if isinstance(err, (ValueError, IndexError)):
        return ErrorKind.OUT_OF_RANGE
    return ErrorKind.INTERNAL_ERROR


def status_from_exception(err: BaseException) -> DataStatus:
    """Build a bad :class:`DataStatus` from an exception."""
    kind = kind_from_exception(err)
    detail = str(err) or type(err).__name__
    return DataStatus.bad(kind, detail)


__all__ = [
    "DataStatus",
    "ErrorKind",
    "GOOD",
    "UNCERTAIN",
    "kind_from_exception",
    "status_from_exception",
]
