"""Tests for transport protocol and base classes."""

from __future__ import annotations

import pytest

from pymodmap.transports.exceptions import TransportConnectionError, TransportProtocolError
from pymodmap.transports.memory import InMemoryTransport
from pymodmap.transports.protocol import BaseTransport


class ConcreteTransport(BaseTransport):
    """Concrete implementation for testing BaseTransport."""

    def __init__(self, response: list[int] | None = None) -> None:
        super().__init__("concrete")
        self.response = response or []

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    async def read_words(self, offset: int, count: int) -> list[int]:
        self._ensure_connected()
        return self.response

    async def write_words(self, offset: int, values: list[int]) -> None:
        self._ensure_connected()


class TestBaseTransport:
    """Tests for BaseTransport abstract class."""

    def test_init(self) -> None:
        """Test transport initialization."""
        transport = ConcreteTransport()

        assert transport.name == "concrete"
        assert transport.is_connected is False

    def test_ensure_connected_raises(self) -> None:
        transport = ConcreteTransport()

        with pytest.raises(TransportConnectionError, match="Transport not connected"):
            transport._ensure_connected()

    @pytest.mark.asyncio
    async def test_context_manager(self) -> None:
        """Test async context manager connects and disconnects."""
        transport = ConcreteTransport()

        async with transport:
            assert transport.is_connected is True

        assert transport.is_connected is False

    @pytest.mark.asyncio
    async def test_short_read_is_protocol_error(self) -> None:
        """Test typed helpers reject responses with the wrong word count."""
        transport = ConcreteTransport(response=[1])

        async with transport:
            with pytest.raises(TransportProtocolError, match="Expected 2 registers"):
                await transport.read_uint32(0)


class TestTypedHelpers:
    """Tests for the typed reads and writes built on the word primitives."""

    @pytest.mark.asyncio
    async def test_integers(self) -> None:
        transport = InMemoryTransport()

        async with transport:
            await transport.write_int16(0, -2)
            await transport.write_uint32(1, 0x00010002)
            await transport.write_int32(3, -1)

            assert await transport.read_int16(0) == -2
            assert await transport.read_uint16(0) == 0xFFFE
            assert await transport.read_uint32(1) == 0x00010002
            assert await transport.read_int32(3) == -1
            assert transport.get_words(1, 2) == [0x0001, 0x0002]

    @pytest.mark.asyncio
    async def test_floats(self) -> None:
        transport = InMemoryTransport()

        async with transport:
            await transport.write_float32(0, 21.5)
            await transport.write_float64(2, -0.125)

            assert transport.get_words(0, 2) == [0x41AC, 0x0000]
            assert await transport.read_float32(0) == 21.5
            assert await transport.read_float64(2) == -0.125

    @pytest.mark.asyncio
    async def test_bool(self) -> None:
        transport = InMemoryTransport()

        async with transport:
            await transport.write_bool(0, True)
            assert await transport.read_bool(0) is True
            await transport.write_bool(0, False)
            assert await transport.read_bool(0) is False

    @pytest.mark.asyncio
    async def test_string(self) -> None:
        transport = InMemoryTransport()

        async with transport:
            await transport.write_string(0, 4, "Fronius")
            assert await transport.read_string(0, 4) == "Fronius"

            with pytest.raises(ValueError, match="longer than 8"):
                await transport.write_string(0, 4, "Fronius GmbH")
