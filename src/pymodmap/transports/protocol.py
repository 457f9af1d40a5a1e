"""Transport protocol and base class.

A transport performs raw word-oriented I/O against one device.  The mapping
engine only relies on :meth:`BaseTransport.connect`,
:meth:`BaseTransport.disconnect`, :meth:`BaseTransport.read_words` and
:meth:`BaseTransport.write_words`; the typed helpers are built on top of the
word primitives for scripts and ad-hoc access.

Multi-register values are big-endian: high word first, high byte first.
"""

from __future__ import annotations

import struct
from abc import ABC, abstractmethod
from types import TracebackType

from .exceptions import TransportConnectionError, TransportProtocolError


class BaseTransport(ABC):
    """Abstract base class for word-addressed device transports.

    Subclasses implement the connection lifecycle and the two word
    primitives.  All other reads and writes are derived from them.

    Example:
        async with transport:
            words = await transport.read_words(1000, 2)
            temperature = await transport.read_float32(40109)
    """

    transport_type: str = "base"

    def __init__(self, name: str = "") -> None:
        """Initialize transport.

        Args:
            name: Device identifier used in log messages
        """
        self._name = name
        self._connected = False

    @property
    def name(self) -> str:
        """Get the device identifier."""
        return self._name

    @property
    def is_connected(self) -> bool:
        """Check if transport is connected."""
        return self._connected

    def _ensure_connected(self) -> None:
        """Raise if the transport is not connected.

        Raises:
            TransportConnectionError: If not connected
        """
        if not self._connected:
            raise TransportConnectionError("Transport not connected. Call connect() first.")

    async def __aenter__(self) -> BaseTransport:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.disconnect()

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    @abstractmethod
    async def connect(self) -> None:
        """Open the device connection.

        Raises:
            TransportConnectionError: If the connection cannot be established
        """

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the device connection.  Safe to call when not connected."""

    @abstractmethod
    async def read_words(self, offset: int, count: int) -> list[int]:
        """Read ``count`` holding registers starting at ``offset``.

        Raises:
            TransportTimeoutError: If the device does not answer in time
            TransportReadError: On I/O failure
            TransportProtocolError: If the response is malformed
            TransportDeviceError: If the device returns an exception response
        """

    @abstractmethod
    async def write_words(self, offset: int, values: list[int]) -> None:
        """Write holding registers starting at ``offset``.

        Raises:
            TransportTimeoutError: If the device does not answer in time
            TransportWriteError: On I/O failure
            TransportDeviceError: If the device returns an exception response
        """

    # ------------------------------------------------------------------
    # Typed helpers
    # ------------------------------------------------------------------

    async def _read_exact(self, offset: int, count: int) -> list[int]:
        words = await self.read_words(offset, count)
        if len(words) != count:
            raise TransportProtocolError(
                f"Expected {count} registers at {offset}, got {len(words)}"
            )
        return words

    async def _read_bytes(self, offset: int, count: int) -> bytes:
        words = await self._read_exact(offset, count)
        return struct.pack(f">{count}H", *(w & 0xFFFF for w in words))

    async def _write_bytes(self, offset: int, data: bytes) -> None:
        await self.write_words(offset, list(struct.unpack(f">{len(data) // 2}H", data)))

    async def read_bool(self, offset: int) -> bool:
        """Read one register as a boolean (non-zero is True)."""
        (word,) = await self._read_exact(offset, 1)
        return word != 0

    async def write_bool(self, offset: int, value: bool) -> None:
        await self.write_words(offset, [1 if value else 0])

    async def read_uint16(self, offset: int) -> int:
        (value,) = struct.unpack(">H", await self._read_bytes(offset, 1))
        return int(value)

    async def write_uint16(self, offset: int, value: int) -> None:
        await self._write_bytes(offset, struct.pack(">H", value))

    async def read_int16(self, offset: int) -> int:
        (value,) = struct.unpack(">h", await self._read_bytes(offset, 1))
        return int(value)

    async def write_int16(self, offset: int, value: int) -> None:
        await self._write_bytes(offset, struct.pack(">h", value))

    async def read_uint32(self, offset: int) -> int:
        (value,) = struct.unpack(">I", await self._read_bytes(offset, 2))
        return int(value)

    async def write_uint32(self, offset: int, value: int) -> None:
        await self._write_bytes(offset, struct.pack(">I", value))

    async def read_int32(self, offset: int) -> int:
        (value,) = struct.unpack(">i", await self._read_bytes(offset, 2))
        return int(value)

    async def write_int32(self, offset: int, value: int) -> None:
        await self._write_bytes(offset, struct.pack(">i", value))

    async def read_float32(self, offset: int) -> float:
        (value,) = struct.unpack(">f", await self._read_bytes(offset, 2))
        return float(value)

    async def write_float32(self, offset: int, value: float) -> None:
        await self._write_bytes(offset, struct.pack(">f", value))

    async def read_float64(self, offset: int) -> float:
        (value,) = struct.unpack(">d", await self._read_bytes(offset, 4))
        return float(value)

    async def write_float64(self, offset: int, value: float) -> None:
        await self._write_bytes(offset, struct.pack(">d", value))

    async def read_string(self, offset: int, length: int) -> str:
        """Read a NUL-padded ASCII string of ``length`` registers."""
        data = await self._read_bytes(offset, length)
        return data.split(b"\x00", 1)[0].decode("ascii", errors="replace")

    async def write_string(self, offset: int, length: int, value: str) -> None:
        """Write an ASCII string padded with NULs to ``length`` registers.

        Raises:
            ValueError: If the string does not fit
        """
        data = value.encode("ascii")
        if len(data) > 2 * length:
            raise ValueError(f"String longer than {2 * length} characters")
        await self._write_bytes(offset, data.ljust(2 * length, b"\x00"))


__all__ = ["BaseTransport"]
