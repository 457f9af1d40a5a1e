"""Transport-specific exceptions.

This module provides exception classes for transport operations,
allowing the mapping engine to classify failures.

All transport exceptions inherit from :class:`~pymodmap.exceptions.ModmapError`
so callers can use a single ``except ModmapError`` to catch both codec and
transport failures.
"""

from __future__ import annotations

from pymodmap.exceptions import ModmapError


class TransportError(ModmapError):
    """Base exception for all transport errors."""

    pass


class TransportConnectionError(TransportError):
    """Failed to connect to the device."""

    pass


class TransportTimeoutError(TransportError):
    """Operation timed out."""

    pass


class TransportReadError(TransportError):
    """Failed to read data from device."""

    pass


class TransportWriteError(TransportError):
    """Failed to write data to device."""

    pass


class TransportProtocolError(TransportError):
    """The device answered with a malformed or unexpected response."""

    pass


class TransportDeviceError(TransportError):
    """The device rejected the request with a Modbus exception response.

    Modbus exception codes:
        1: Illegal function
        2: Illegal data address
        3: Illegal data value
        4: Slave device failure
        6: Slave device busy
    """

    def __init__(self, message: str, exception_code: int | None = None) -> None:
        """Initialize with the Modbus exception code.

        Args:
            message: Human-readable description
            exception_code: Modbus exception code from the response, if known
        """
        self.exception_code = exception_code
        super().__init__(message)
