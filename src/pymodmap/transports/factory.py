"""Factory functions for creating transport instances.

Example:
    # Modbus TCP
    transport = create_modbus_transport(host="192.168.1.100")

    # Modbus RTU
    transport = create_serial_transport(port="/dev/ttyUSB0", baudrate=9600)

    # From a stored configuration
    transport = create_transport(TransportConfig.from_dict(data))
"""

from __future__ import annotations

from .config import TransportConfig, TransportType
from .memory import InMemoryTransport
from .modbus import ModbusTransport
from .modbus_serial import ModbusSerialTransport
from .protocol import BaseTransport


def create_modbus_transport(
    host: str,
    *,
    port: int = 502,
    unit_id: int = 1,
    timeout: float = 10.0,
    name: str = "",
) -> ModbusTransport:
    """Create a Modbus TCP transport.

    Args:
        host: Device IP address or hostname
        port: Modbus TCP port (default: 502)
        unit_id: Modbus unit/slave ID (default: 1)
        timeout: Operation timeout in seconds (default: 10.0)
        name: Device identifier used in log messages

    Returns:
        ModbusTransport instance ready for use

    Example:
        transport = create_modbus_transport("192.168.1.100")
        device = ModbusDevice(ETAPU11_SCHEMA, transport)
        status = await device.read_block()
    """
    return ModbusTransport(
        host=host,
        port=port,
        unit_id=unit_id,
        name=name,
        timeout=timeout,
    )


def create_serial_transport(
    port: str,
    *,
    baudrate: int = 19200,
    parity: str = "N",
    unit_id: int = 1,
    timeout: float = 10.0,
    name: str = "",
) -> ModbusSerialTransport:
    """Create a Modbus RTU serial transport.

    Args:
        port: Serial port path (e.g. /dev/ttyUSB0)
        baudrate: Serial baud rate (default: 19200)
        parity: Parity 'N', 'E' or 'O' (default: 'N')
        unit_id: Modbus unit/slave ID (default: 1)
        timeout: Operation timeout in seconds (default: 10.0)
        name: Device identifier used in log messages

    Returns:
        ModbusSerialTransport instance ready for use
    """
    return ModbusSerialTransport(
        port=port,
        baudrate=baudrate,
        parity=parity,
        unit_id=unit_id,
        name=name,
        timeout=timeout,
    )


def create_transport(config: TransportConfig) -> BaseTransport:
    """Create a transport from a configuration.

    Args:
        config: Validated or unvalidated transport configuration

    Returns:
        Transport instance matching ``config.transport_type``

    Raises:
        ValueError: If the configuration is invalid
    """
    config.validate()

    if config.transport_type == TransportType.MODBUS_TCP:
        return ModbusTransport(
            host=config.host,
            port=config.port,
            unit_id=config.unit_id,
            name=config.name,
            timeout=config.timeout,
            pymodbus_retries=config.retries,
        )
    if config.transport_type == TransportType.MODBUS_SERIAL:
        return ModbusSerialTransport(
            port=config.serial_port,
            baudrate=config.baudrate,
            bytesize=config.bytesize,
            parity=config.parity,
            stopbits=config.stopbits,
            unit_id=config.unit_id,
            name=config.name,
            timeout=config.timeout,
            pymodbus_retries=config.retries,
        )
    if config.transport_type == TransportType.MEMORY:
        return InMemoryTransport(name=config.name or "memory")

    raise ValueError(f"Unsupported transport type: {config.transport_type}")


__all__ = [
    "create_modbus_transport",
    "create_serial_transport",
    "create_transport",
]
