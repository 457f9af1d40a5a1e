"""Modbus RTU serial transport implementation.

This module provides the ModbusSerialTransport class for communication
with devices over USB-to-RS485 serial adapters using Modbus RTU.

IMPORTANT: Single-Client Limitation
------------------------------------
Serial ports support only ONE concurrent connection.
Ensure only ONE process opens each serial port at a time.

Example:
    transport = ModbusSerialTransport(port="/dev/ttyUSB0", baudrate=19200)
    async with transport:
        words = await transport.read_words(1000, 2)
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ._modbus_base import BaseModbusTransport
from .exceptions import TransportConnectionError

if TYPE_CHECKING:
    from pymodbus.client import AsyncModbusSerialClient

_LOGGER = logging.getLogger(__name__)


class ModbusSerialTransport(BaseModbusTransport):
    """Modbus RTU serial transport.

    Note:
        Requires the `pyserial` package (``pip install pymodmap[serial]``).
    """

    transport_type: str = "modbus_serial"

    def __init__(
        self,
        port: str,
        baudrate: int = 19200,
        bytesize: int = 8,
        parity: str = "N",
        stopbits: int = 1,
        unit_id: int = 1,
        name: str = "",
        timeout: float = 10.0,
        pymodbus_retries: int = 3,
    ) -> None:
        """Initialize Modbus serial transport.

        Args:
            port: Serial port path (e.g., /dev/ttyUSB0, COM3)
            baudrate: Serial baud rate (default 19200)
            bytesize: Data bits per byte (default 8)
            parity: Parity setting - 'N' (none), 'E' (even), 'O' (odd)
            stopbits: Number of stop bits (default 1)
            unit_id: Modbus unit/slave ID (default 1)
            name: Device identifier used in log messages (default port)
            timeout: Connection and operation timeout in seconds
            pymodbus_retries: Number of retries passed to pymodbus client
                (default 3)
        """
        super().__init__(
            name or port,
            unit_id=unit_id,
            timeout=timeout,
            pymodbus_retries=pymodbus_retries,
        )
        self._port = port
        self._baudrate = baudrate
        self._bytesize = bytesize
        self._parity = parity
        self._stopbits = stopbits
        # Narrow type for serial client
        self._client: AsyncModbusSerialClient | None = None

    @property
    def port(self) -> str:
        """Get the serial port path."""
        return self._port

    @property
    def baudrate(self) -> int:
        """Get the serial baud rate."""
        return self._baudrate

    async def connect(self) -> None:
        """Establish Modbus RTU serial connection.

        Raises:
            TransportConnectionError: If connection fails
        """
        try:
            from pymodbus.client import AsyncModbusSerialClient

            self._client = AsyncModbusSerialClient(
                port=self._port,
                baudrate=self._baudrate,
                bytesize=self._bytesize,
                parity=self._parity,
                stopbits=self._stopbits,
                timeout=self._timeout,
                retries=self._pymodbus_retries,
            )

            connected = await self._client.connect()
            if not connected:
                raise TransportConnectionError(f"Failed to connect to serial port {self._port}")

            self._connected = True
            _LOGGER.info(
                "Modbus serial transport connected to %s @ %d baud (unit %s)",
                self._port,
                self._baudrate,
                self._unit_id,
            )

            # Brief delay to allow serial port to stabilize
            await asyncio.sleep(0.2)

        except PermissionError as err:
            _LOGGER.error(
                "Permission denied opening serial port %s: %s",
                self._port,
                err,
            )
            raise TransportConnectionError(
                f"Permission denied for {self._port}. "
                "On Linux, add user to 'dialout' group: "
                "sudo usermod -a -G dialout $USER"
            ) from err
        except (TimeoutError, OSError) as err:
            _LOGGER.error(
                "Failed to connect to serial port %s: %s",
                self._port,
                err,
            )
            raise TransportConnectionError(
                f"Failed to connect to serial port {self._port}: {err}"
            ) from err

    async def disconnect(self) -> None:
        """Close Modbus serial connection."""
        if self._client:
            self._client.close()
            self._client = None

        self._connected = False
        _LOGGER.debug("Modbus serial transport disconnected from %s", self._port)
