"""Shared Modbus transport logic for TCP and Serial transports.

This module provides the BaseModbusTransport class containing the
pymodbus-backed holding register read/write and the mapping of pymodbus
failures onto the transport exception hierarchy.

Subclasses must implement:
- connect() / disconnect() - protocol-specific connection management

No application-level retries are performed; pymodbus' own request retries
are configurable through ``pymodbus_retries``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pymodbus.exceptions import ModbusException, ModbusIOException
from pymodbus.pdu import ExceptionResponse

from .exceptions import (
    TransportConnectionError,
    TransportDeviceError,
    TransportProtocolError,
    TransportReadError,
    TransportTimeoutError,
    TransportWriteError,
)
from .protocol import BaseTransport

_LOGGER = logging.getLogger(__name__)

# Modbus FC 03 / FC 16 limits
MAX_READ_COUNT = 125
MAX_WRITE_COUNT = 123

__all__ = ["BaseModbusTransport", "MAX_READ_COUNT", "MAX_WRITE_COUNT"]


class BaseModbusTransport(BaseTransport):
    """Base class for Modbus-based transports (TCP and Serial).

    Subclasses must set ``self._client`` to a pymodbus async client
    and implement ``connect()`` and ``disconnect()``.
    """

    def __init__(
        self,
        name: str = "",
        *,
        unit_id: int = 1,
        timeout: float = 10.0,
        pymodbus_retries: int = 3,
    ) -> None:
        """Initialize base Modbus transport.

        Args:
            name: Device identifier used in log messages
            unit_id: Modbus unit/slave ID (default 1)
            timeout: Connection and operation timeout in seconds
            pymodbus_retries: Number of retries passed to pymodbus client
                (default 3)
        """
        super().__init__(name)
        self._unit_id = unit_id
        self._timeout = timeout
        self._pymodbus_retries = pymodbus_retries
        self._client: Any = None
        self._lock = asyncio.Lock()

    @property
    def unit_id(self) -> int:
        """Get the Modbus unit/slave ID."""
        return self._unit_id

    @property
    def timeout(self) -> float:
        return self._timeout

    def _check_response(self, result: Any, action: str, address: int) -> None:
        """Raise the matching transport error for a failed response."""
        if isinstance(result, ExceptionResponse):
            code = getattr(result, "exception_code", None)
            _LOGGER.error(
                "Device %s rejected %s at %d (exception code %s)",
                self._name,
                action,
                address,
                code,
            )
            raise TransportDeviceError(
                f"Device rejected {action} at address {address}: {result}",
                exception_code=code,
            )
        if result.isError():
            raise TransportProtocolError(f"Modbus {action} error at address {address}: {result}")

    async def read_words(self, offset: int, count: int) -> list[int]:
        """Read holding registers (function code 0x03).

        Args:
            offset: Starting register address
            count: Number of registers to read (max 125 per Modbus FC 03)

        Returns:
            List of register values

        Raises:
            TransportReadError: On I/O failure
            TransportTimeoutError: If the operation times out
            TransportProtocolError: If the response is malformed
            TransportDeviceError: If the device returns an exception response
        """
        self._ensure_connected()

        if self._client is None:
            raise TransportConnectionError("Modbus client not initialized")
        if not 1 <= count <= MAX_READ_COUNT:
            raise ValueError(f"Register count {count} outside 1..{MAX_READ_COUNT}")

        async with self._lock:
            try:
                result = await self._client.read_holding_registers(
                    address=offset,
                    count=count,
                    device_id=self._unit_id,
                )
                self._check_response(result, "read", offset)

                registers = getattr(result, "registers", None)
                if registers is None or len(registers) != count:
                    raise TransportProtocolError(
                        f"Invalid Modbus response at address {offset}: "
                        f"expected {count} registers"
                    )

                _LOGGER.debug("Read %d registers at %d from %s", count, offset, self._name)
                return list(registers)

            except ModbusIOException as err:
                if "timeout" in str(err).lower():
                    _LOGGER.error("Timeout reading registers at %d", offset)
                    raise TransportTimeoutError(f"Timeout reading registers at {offset}") from err
                _LOGGER.error("Failed to read registers at %d: %s", offset, err)
                raise TransportReadError(f"Failed to read registers at {offset}: {err}") from err
            except ModbusException as err:
                _LOGGER.error("Modbus error reading registers at %d: %s", offset, err)
                raise TransportProtocolError(
                    f"Modbus error reading registers at {offset}: {err}"
                ) from err
            except TimeoutError as err:
                _LOGGER.error("Timeout reading registers at %d", offset)
                raise TransportTimeoutError(f"Timeout reading registers at {offset}") from err
            except OSError as err:
                _LOGGER.error("Failed to read registers at %d: %s", offset, err)
                raise TransportReadError(f"Failed to read registers at {offset}: {err}") from err

    async def write_words(self, offset: int, values: list[int]) -> None:
        """Write holding registers.

        A single value uses function code 0x06, several values 0x10.

        Args:
            offset: Starting register address
            values: List of values to write

        Raises:
            TransportWriteError: On I/O failure
            TransportTimeoutError: If the operation times out
            TransportDeviceError: If the device returns an exception response
        """
        self._ensure_connected()

        if self._client is None:
            raise TransportConnectionError("Modbus client not initialized")
        if not 1 <= len(values) <= MAX_WRITE_COUNT:
            raise ValueError(f"Register count {len(values)} outside 1..{MAX_WRITE_COUNT}")

        async with self._lock:
            try:
                if len(values) == 1:
                    result = await self._client.write_register(
                        address=offset,
                        value=values[0],
                        device_id=self._unit_id,
                    )
                else:
                    result = await self._client.write_registers(
                        address=offset,
                        values=values,
                        device_id=self._unit_id,
                    )
                self._check_response(result, "write", offset)
                _LOGGER.debug("Wrote %d registers at %d to %s", len(values), offset, self._name)

            except ModbusIOException as err:
                if "timeout" in str(err).lower():
                    _LOGGER.error("Timeout writing registers at %d", offset)
                    raise TransportTimeoutError(f"Timeout writing registers at {offset}") from err
                _LOGGER.error("Failed to write registers at %d: %s", offset, err)
                raise TransportWriteError(f"Failed to write registers at {offset}: {err}") from err
            except ModbusException as err:
                _LOGGER.error("Modbus error writing registers at %d: %s", offset, err)
                raise TransportProtocolError(
                    f"Modbus error writing registers at {offset}: {err}"
                ) from err
            except TimeoutError as err:
                _LOGGER.error("Timeout writing registers at %d", offset)
                raise TransportTimeoutError(f"Timeout writing registers at {offset}") from err
            except OSError as err:
                _LOGGER.error("Failed to write registers at %d: %s", offset, err)
                raise TransportWriteError(f"Failed to write registers at {offset}: {err}") from err
