"""Transport configuration.

This module provides the TransportConfig dataclass for configuring
transport instances in a uniform way, supporting serialization to/from
dictionaries for application config files.

Example:
    # Create a Modbus TCP transport config
    config = TransportConfig(
        transport_type=TransportType.MODBUS_TCP,
        host="192.168.1.100",
        port=502,
    )
    config.validate()

    # Serialize to dict for storage
    data = config.to_dict()

    # Restore from dict
    restored = TransportConfig.from_dict(data)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

VALID_PARITIES = frozenset({"N", "E", "O"})


class TransportType(str, Enum):
    """Transport type enumeration.

    String enum for easy serialization and comparison.
    """

    # Modbus TCP (device server or RS485-to-Ethernet gateway)
    MODBUS_TCP = "modbus_tcp"

    # Modbus RTU over a serial port
    MODBUS_SERIAL = "modbus_serial"

    # In-memory register store (tests, simulation)
    MEMORY = "memory"


@dataclass
class TransportConfig:
    """Configuration for a single transport connection.

    Attributes:
        transport_type: Type of transport (MODBUS_TCP, MODBUS_SERIAL or MEMORY)
        host: IP address or hostname (MODBUS_TCP only)
        port: TCP port (default 502, MODBUS_TCP only)
        serial_port: Serial device path (MODBUS_SERIAL only)
        baudrate: Serial baud rate (default 19200)
        bytesize: Serial data bits (default 8)
        parity: Serial parity 'N', 'E' or 'O' (default 'N')
        stopbits: Serial stop bits (default 1)
        unit_id: Modbus unit ID (default 1)
        timeout: Connection and operation timeout in seconds (default 10.0)
        retries: Request retries passed to pymodbus (default 3)
        name: Device identifier used in log messages

    Example:
        tcp_config = TransportConfig(
            transport_type=TransportType.MODBUS_TCP,
            host="192.168.1.100",
        )

        serial_config = TransportConfig(
            transport_type=TransportType.MODBUS_SERIAL,
            serial_port="/dev/ttyUSB0",
            baudrate=9600,
        )
    """

    transport_type: TransportType = TransportType.MODBUS_TCP
    host: str = ""
    port: int = 502
    serial_port: str = ""
    baudrate: int = 19200
    bytesize: int = 8
    parity: str = "N"
    stopbits: int = 1
    unit_id: int = 1
    timeout: float = 10.0
    retries: int = 3
    name: str = ""

    def validate(self) -> None:
        """Validate configuration completeness.

        Checks that all required fields are present and valid for the
        specified transport type.

        Raises:
            ValueError: If configuration is invalid
        """
        if self.transport_type == TransportType.MODBUS_TCP:
            if not self.host:
                raise ValueError("host required for MODBUS_TCP transport")
            if not 1 <= self.port <= 65535:
                raise ValueError("port must be between 1 and 65535")

        if self.transport_type == TransportType.MODBUS_SERIAL:
            if not self.serial_port:
                raise ValueError("serial_port required for MODBUS_SERIAL transport")
            if self.baudrate <= 0:
                raise ValueError("baudrate must be positive")
            if self.parity not in VALID_PARITIES:
                raise ValueError("parity must be one of 'N', 'E', 'O'")
            if self.bytesize not in (7, 8):
                raise ValueError("bytesize must be 7 or 8")
            if self.stopbits not in (1, 2):
                raise ValueError("stopbits must be 1 or 2")

        if not 0 <= self.unit_id <= 247:
            raise ValueError("unit_id must be between 0 and 247")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.retries < 0:
            raise ValueError("retries must not be negative")

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary for serialization.

        Returns:
            Dictionary with all configuration values, suitable for
            JSON serialization.
        """
        return {
            "transport_type": self.transport_type.value,
            "host": self.host,
            "port": self.port,
            "serial_port": self.serial_port,
            "baudrate": self.baudrate,
            "bytesize": self.bytesize,
            "parity": self.parity,
            "stopbits": self.stopbits,
            "unit_id": self.unit_id,
            "timeout": self.timeout,
            "retries": self.retries,
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransportConfig:
        """Create configuration from dictionary.

        Args:
            data: Dictionary with configuration values (from to_dict() or
                a config file)

        Returns:
            TransportConfig instance with values from dictionary
        """
        transport_type = TransportType(data.get("transport_type", "modbus_tcp"))

        return cls(
            transport_type=transport_type,
            host=data.get("host", ""),
            port=int(data.get("port", 502)),
            serial_port=data.get("serial_port", ""),
            baudrate=int(data.get("baudrate", 19200)),
            bytesize=int(data.get("bytesize", 8)),
            parity=data.get("parity", "N"),
            stopbits=int(data.get("stopbits", 1)),
            unit_id=int(data.get("unit_id", 1)),
            timeout=float(data.get("timeout", 10.0)),
            retries=int(data.get("retries", 3)),
            name=data.get("name", ""),
        )


__all__ = [
    "TransportConfig",
    "TransportType",
]
