"""Transport layer for pymodmap.

This module provides word-oriented access to devices over Modbus TCP,
Modbus RTU or an in-memory register store.

Usage:
    from pymodmap.transports import create_modbus_transport

    transport = create_modbus_transport(host="192.168.1.100")
    async with transport:
        words = await transport.read_words(1000, 2)
"""

from __future__ import annotations

from .config import TransportConfig, TransportType
from .exceptions import (
    TransportConnectionError,
    TransportDeviceError,
    TransportError,
    TransportProtocolError,
    TransportReadError,
    TransportTimeoutError,
    TransportWriteError,
)
from .factory import create_modbus_transport, create_serial_transport, create_transport
from .memory import InMemoryTransport
from .modbus import ModbusTransport
from .modbus_serial import ModbusSerialTransport
from .protocol import BaseTransport

__all__ = [
    # Factory functions (recommended)
    "create_modbus_transport",
    "create_serial_transport",
    "create_transport",
    # Configuration
    "TransportConfig",
    "TransportType",
    # Protocol
    "BaseTransport",
    # Transport implementations
    "InMemoryTransport",
    "ModbusTransport",
    "ModbusSerialTransport",
    # Exceptions
    "TransportError",
    "TransportConnectionError",
    "TransportTimeoutError",
    "TransportReadError",
    "TransportWriteError",
    "TransportProtocolError",
    "TransportDeviceError",
]
