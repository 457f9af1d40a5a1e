"""Modbus TCP transport implementation.

This module provides the ModbusTransport class for communication with
devices that expose a Modbus TCP server (the ETA PU 11 boiler controller,
Fronius inverters) or sit behind an RS485-to-Ethernet gateway.

IMPORTANT: Single-Client Limitation
------------------------------------
Many embedded Modbus TCP servers accept only ONE concurrent connection.
Running several clients against the same device causes dropped connections
and intermittent timeouts.  The mapping engine opens one session per
operation and closes it again, so a single engine instance never holds the
connection longer than necessary.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ._modbus_base import BaseModbusTransport
from .exceptions import TransportConnectionError

if TYPE_CHECKING:
    from pymodbus.client import AsyncModbusTcpClient

_LOGGER = logging.getLogger(__name__)

__all__ = ["ModbusTransport"]


class ModbusTransport(BaseModbusTransport):
    """Modbus TCP transport.

    Example:
        transport = ModbusTransport(host="192.168.1.100", port=502)
        async with transport:
            words = await transport.read_words(1000, 2)
    """

    transport_type: str = "modbus_tcp"

    def __init__(
        self,
        host: str,
        port: int = 502,
        unit_id: int = 1,
        name: str = "",
        timeout: float = 10.0,
        pymodbus_retries: int = 3,
    ) -> None:
        """Initialize Modbus transport.

        Args:
            host: IP address or hostname of the Modbus TCP server
            port: TCP port (default 502 for Modbus)
            unit_id: Modbus unit/slave ID (default 1)
            name: Device identifier used in log messages (default host:port)
            timeout: Connection and operation timeout in seconds
            pymodbus_retries: Number of retries passed to pymodbus client
                (default 3)
        """
        super().__init__(
            name or f"{host}:{port}",
            unit_id=unit_id,
            timeout=timeout,
            pymodbus_retries=pymodbus_retries,
        )
        self._host = host
        self._port = port
        # Narrow type for TCP client
        self._client: AsyncModbusTcpClient | None = None

    @property
    def host(self) -> str:
        """Get the Modbus server host."""
        return self._host

    @property
    def port(self) -> int:
        """Get the Modbus server port."""
        return self._port

    async def connect(self) -> None:
        """Establish Modbus TCP connection.

        Raises:
            TransportConnectionError: If connection fails
        """
        try:
            from pymodbus.client import AsyncModbusTcpClient

            self._client = AsyncModbusTcpClient(
                host=self._host,
                port=self._port,
                timeout=self._timeout,
                retries=self._pymodbus_retries,
            )

            connected = await self._client.connect()
            if not connected:
                raise TransportConnectionError(
                    f"Failed to connect to Modbus server at {self._host}:{self._port}"
                )

            self._connected = True
            _LOGGER.info(
                "Modbus transport connected to %s:%s (unit %s)",
                self._host,
                self._port,
                self._unit_id,
            )

        except (TimeoutError, OSError) as err:
            _LOGGER.error(
                "Failed to connect to Modbus server at %s:%s: %s",
                self._host,
                self._port,
                err,
            )
            raise TransportConnectionError(
                f"Failed to connect to {self._host}:{self._port}: {err}"
            ) from err

    async def disconnect(self) -> None:
        """Close Modbus TCP connection."""
        if self._client:
            self._client.close()
            self._client = None

        self._connected = False
        _LOGGER.debug("Modbus transport disconnected from %s", self._name)
