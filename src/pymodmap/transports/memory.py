"""In-memory register transport.

A sparse holding register store that behaves like a device: unwritten
registers read as zero.  Used for tests, offline development and as a
simulator backend for the device schemas.

Failures can be injected per register address or for connect, which makes
it possible to exercise the mapping engine's error handling without a
device:

    transport = InMemoryTransport()
    transport.set_words(1008, [0, 215])
    transport.fail_read_at(1010, TransportTimeoutError("timeout"))
"""

from __future__ import annotations

import asyncio
import logging

from .exceptions import TransportConnectionError, TransportDeviceError
from .protocol import BaseTransport

_LOGGER = logging.getLogger(__name__)

# Modbus exception code 2: illegal data address
ILLEGAL_DATA_ADDRESS = 2


class InMemoryTransport(BaseTransport):
    """Transport backed by a dictionary of register values.

    Attributes:
        read_calls: (offset, count) of every successful read, in order.
        write_calls: (offset, values) of every successful write, in order.
        connect_count: Number of successful connects.
        max_sessions: Highest number of simultaneously open sessions.
    """

    transport_type: str = "memory"

    def __init__(
        self,
        registers: dict[int, int] | None = None,
        *,
        name: str = "memory",
        latency: float = 0.0,
        address_range: tuple[int, int] | None = None,
    ) -> None:
        """Initialize the in-memory transport.

        Args:
            registers: Initial register values keyed by address
            name: Device identifier used in log messages
            latency: Seconds to sleep inside every read and write
            address_range: Optional (first, last) valid register addresses;
                accesses outside it fail with an illegal data address error
        """
        super().__init__(name)
        self._registers: dict[int, int] = {}
        self._latency = latency
        self._address_range = address_range
        self._read_failures: dict[int, BaseException] = {}
        self._write_failures: dict[int, BaseException] = {}
        self._connect_error: BaseException | None = None
        self._sessions = 0
        self.max_sessions = 0
        self.connect_count = 0
        self.read_calls: list[tuple[int, int]] = []
        self.write_calls: list[tuple[int, list[int]]] = []
        if registers:
            for address, value in registers.items():
                self._registers[address] = value & 0xFFFF

    # ------------------------------------------------------------------
    # Register access
    # ------------------------------------------------------------------

    def get_words(self, offset: int, count: int) -> list[int]:
        return [self._registers.get(offset + i, 0) for i in range(count)]

    def set_words(self, offset: int, values: list[int]) -> None:
        for i, value in enumerate(values):
            self._registers[offset + i] = value & 0xFFFF

    @property
    def registers(self) -> dict[int, int]:
        """Copy of the non-default register values."""
        return dict(self._registers)

    # ------------------------------------------------------------------
    # Failure injection
    # ------------------------------------------------------------------

    def fail_read_at(self, offset: int, error: BaseException | None) -> None:
        """Make reads that cover ``offset`` raise ``error`` (None clears)."""
        if error is None:
            self._read_failures.pop(offset, None)
        else:
            self._read_failures[offset] = error

    def fail_write_at(self, offset: int, error: BaseException | None) -> None:
        """Make writes that cover ``offset`` raise ``error`` (None clears)."""
        if error is None:
            self._write_failures.pop(offset, None)
        else:
            self._write_failures[offset] = error

    def fail_connect(self, error: BaseException | None) -> None:
        """Make connect() raise ``error`` (None clears)."""
        self._connect_error = error

    def _injected(
        self, failures: dict[int, BaseException], offset: int, count: int
    ) -> BaseException | None:
        for address in range(offset, offset + count):
            if address in failures:
                return failures[address]
        return None

    def _check_address(self, offset: int, count: int) -> None:
        if self._address_range is None:
            return
        first, last = self._address_range
        if offset < first or offset + count - 1 > last:
            raise TransportDeviceError(
                f"Illegal data address {offset} (count {count})",
                exception_code=ILLEGAL_DATA_ADDRESS,
            )

    # ------------------------------------------------------------------
    # BaseTransport
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        if self._connect_error is not None:
            raise self._connect_error
        if self._connected:
            raise TransportConnectionError(f"{self._name} is already connected")
        self._connected = True
        self._sessions += 1
        self.max_sessions = max(self.max_sessions, self._sessions)
        self.connect_count += 1
        _LOGGER.debug("In-memory transport %s connected", self._name)

    async def disconnect(self) -> None:
        if self._connected:
            self._sessions -= 1
        self._connected = False

    async def read_words(self, offset: int, count: int) -> list[int]:
        self._ensure_connected()
        if self._latency:
            await asyncio.sleep(self._latency)
        error = self._injected(self._read_failures, offset, count)
        if error is not None:
            raise error
        self._check_address(offset, count)
        self.read_calls.append((offset, count))
        return self.get_words(offset, count)

    async def write_words(self, offset: int, values: list[int]) -> None:
        self._ensure_connected()
        if self._latency:
            await asyncio.sleep(self._latency)
        error = self._injected(self._write_failures, offset, len(values))
        if error is not None:
            raise error
        self._check_address(offset, len(values))
        self.write_calls.append((offset, list(values)))
        self.set_words(offset, values)


__all__ = ["InMemoryTransport"]
