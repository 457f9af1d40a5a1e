"""Declarative Modbus register mapping for field devices.

Usage:
    Read a device into its snapshot:
        from pymodmap import ModbusDevice, ETAPU11_SCHEMA, create_modbus_transport

        transport = create_modbus_transport("192.168.1.100")
        boiler = ModbusDevice(ETAPU11_SCHEMA, transport)

        status = await boiler.read_block()
        print(status, boiler.snapshot["boiler_temperature"])

    Write a setting from its wire-format text:
        status = await boiler.write_one("hotwater_switchon_diff", "12.5")
        if status.is_bad:
            print(status.kind, status.detail)
"""

from __future__ import annotations

from .codec import check_range, decode, encode, parse, prepare_write
from .device import ModbusDevice
from .exceptions import (
    EncodingError,
    ModmapError,
    PropertyAccessError,
    PropertyNotFoundError,
    PropertyNotReadableError,
    PropertyNotWritableError,
    SchemaError,
    ValueOutOfRangeError,
)
from .registers import (
    ETAPU11_SCHEMA,
    SYMO823M_SCHEMA,
    AccessMode,
    Block,
    PropertyDescriptor,
    RegisterSchema,
    SemanticType,
    TimeUnit,
)
from .snapshot import DeviceSnapshot
from .status import GOOD, UNCERTAIN, DataStatus, ErrorKind
from .transports import (
    BaseTransport,
    InMemoryTransport,
    TransportConfig,
    TransportError,
    TransportType,
    create_modbus_transport,
    create_serial_transport,
    create_transport,
)

__version__ = "0.1.0"
__all__ = [
    # Engine
    "ModbusDevice",
    "DeviceSnapshot",
    "DataStatus",
    "ErrorKind",
    "GOOD",
    "UNCERTAIN",
    # Schemas
    "AccessMode",
    "Block",
    "PropertyDescriptor",
    "RegisterSchema",
    "SemanticType",
    "TimeUnit",
    "ETAPU11_SCHEMA",
    "SYMO823M_SCHEMA",
    # Codec
    "check_range",
    "decode",
    "encode",
    "parse",
    "prepare_write",
    # Transports
    "BaseTransport",
    "InMemoryTransport",
    "TransportConfig",
    "TransportType",
    "create_modbus_transport",
    "create_serial_transport",
    "create_transport",
    # Exceptions
    "ModmapError",
    "SchemaError",
    "PropertyAccessError",
    "PropertyNotFoundError",
    "PropertyNotReadableError",
    "PropertyNotWritableError",
    "EncodingError",
    "ValueOutOfRangeError",
    "TransportError",
]
