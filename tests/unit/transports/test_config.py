"""Tests for transport configuration."""

from __future__ import annotations

import pytest

from pymodmap.transports.config import TransportConfig, TransportType


class TestTransportType:
    """Tests for TransportType enum."""

    def test_values(self) -> None:
        assert TransportType.MODBUS_TCP.value == "modbus_tcp"
        assert TransportType.MODBUS_SERIAL.value == "modbus_serial"
        assert TransportType.MEMORY.value == "memory"

    def test_string_comparison(self) -> None:
        assert TransportType("modbus_tcp") is TransportType.MODBUS_TCP


class TestTransportConfig:
    """Tests for TransportConfig validation and serialization."""

    def test_defaults(self) -> None:
        config = TransportConfig(host="192.168.1.100")

        assert config.transport_type == TransportType.MODBUS_TCP
        assert config.port == 502
        assert config.unit_id == 1
        assert config.timeout == 10.0
        config.validate()

    def test_tcp_requires_host(self) -> None:
        with pytest.raises(ValueError, match="host required"):
            TransportConfig().validate()

    def test_serial_requires_port(self) -> None:
        config = TransportConfig(transport_type=TransportType.MODBUS_SERIAL)

        with pytest.raises(ValueError, match="serial_port required"):
            config.validate()

    @pytest.mark.parametrize(
        ("changes", "message"),
        [
            ({"parity": "X"}, "parity must be one of"),
            ({"bytesize": 6}, "bytesize must be 7 or 8"),
            ({"stopbits": 3}, "stopbits must be 1 or 2"),
            ({"baudrate": 0}, "baudrate must be positive"),
            ({"unit_id": 248}, "unit_id must be between 0 and 247"),
            ({"timeout": 0}, "timeout must be positive"),
            ({"retries": -1}, "retries must not be negative"),
        ],
    )
    def test_serial_validation(self, changes: dict, message: str) -> None:
        config = TransportConfig(
            transport_type=TransportType.MODBUS_SERIAL,
            serial_port="/dev/ttyUSB0",
            **changes,
        )

        with pytest.raises(ValueError, match=message):
            config.validate()

    def test_port_range(self) -> None:
        with pytest.raises(ValueError, match="port must be between"):
            TransportConfig(host="h", port=0).validate()

    def test_memory_needs_nothing(self) -> None:
        TransportConfig(transport_type=TransportType.MEMORY).validate()

    def test_round_trip(self) -> None:
        """Test to_dict/from_dict preserve every field."""
        config = TransportConfig(
            transport_type=TransportType.MODBUS_SERIAL,
            serial_port="/dev/ttyUSB0",
            baudrate=9600,
            parity="E",
            unit_id=5,
            timeout=3.0,
            name="boiler",
        )

        data = config.to_dict()

        assert data["transport_type"] == "modbus_serial"
        assert TransportConfig.from_dict(data) == config

    def test_from_partial_dict(self) -> None:
        """Test missing keys fall back to defaults and strings are coerced."""
        config = TransportConfig.from_dict({"host": "10.0.0.5", "port": "1502"})

        assert config.transport_type == TransportType.MODBUS_TCP
        assert config.host == "10.0.0.5"
        assert config.port == 1502
        assert config.retries == 3
