"""Tests for transport factory functions."""

from __future__ import annotations

import pytest

from pymodmap.transports import (
    InMemoryTransport,
    ModbusSerialTransport,
    ModbusTransport,
    TransportConfig,
    TransportType,
    create_modbus_transport,
    create_serial_transport,
    create_transport,
)


class TestCreateModbusTransport:
    """Tests for create_modbus_transport."""

    def test_defaults(self) -> None:
        transport = create_modbus_transport("192.168.1.100")

        assert isinstance(transport, ModbusTransport)
        assert transport.host == "192.168.1.100"
        assert transport.port == 502
        assert transport.unit_id == 1

    def test_custom(self) -> None:
        transport = create_modbus_transport(
            "192.168.1.100", port=8502, unit_id=3, timeout=5.0, name="eta"
        )

        assert transport.port == 8502
        assert transport.unit_id == 3
        assert transport.timeout == 5.0
        assert transport.name == "eta"


class TestCreateSerialTransport:
    """Tests for create_serial_transport."""

    def test_defaults(self) -> None:
        transport = create_serial_transport("/dev/ttyUSB0", baudrate=9600)

        assert isinstance(transport, ModbusSerialTransport)
        assert transport.port == "/dev/ttyUSB0"
        assert transport.baudrate == 9600


class TestCreateTransport:
    """Tests for create_transport from a configuration."""

    def test_tcp(self) -> None:
        transport = create_transport(TransportConfig(host="10.0.0.5", port=1502, unit_id=7))

        assert isinstance(transport, ModbusTransport)
        assert transport.port == 1502
        assert transport.unit_id == 7

    def test_serial(self) -> None:
        config = TransportConfig(
            transport_type=TransportType.MODBUS_SERIAL,
            serial_port="/dev/ttyUSB1",
            baudrate=38400,
        )

        transport = create_transport(config)

        assert isinstance(transport, ModbusSerialTransport)
        assert transport.baudrate == 38400

    def test_memory(self) -> None:
        transport = create_transport(TransportConfig(transport_type=TransportType.MEMORY))

        assert isinstance(transport, InMemoryTransport)
        assert transport.name == "memory"

    def test_invalid_config(self) -> None:
        """Test the configuration is validated before anything is created."""
        with pytest.raises(ValueError, match="host required"):
            create_transport(TransportConfig())
