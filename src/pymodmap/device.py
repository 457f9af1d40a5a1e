"""Mapping engine: schema-driven reads and writes against one device.

:class:`ModbusDevice` ties a :class:`~pymodmap.registers.schema.RegisterSchema`
to a :class:`~pymodmap.transports.protocol.BaseTransport` and keeps a
:class:`~pymodmap.snapshot.DeviceSnapshot` of the decoded values.

Every operation follows the same sequence:

    validate -> acquire guard -> connect -> read/write -> disconnect
             -> apply staged values to the snapshot -> release guard

The guard is one ``asyncio.Lock`` per device instance and covers every
operation that touches the transport, so single-property calls never
interleave with bulk reads.  Disconnect and guard release run on every exit
path, including cancellation.

Operations return a :class:`~pymodmap.status.DataStatus`; transport and codec
exceptions never escape.  Batch operations continue past a failed property
and report the last failure.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from . import codec
from .registers.schema import PropertyDescriptor, RegisterSchema
from .snapshot import DeviceSnapshot
from .status import GOOD, UNCERTAIN, DataStatus, ErrorKind, status_from_exception
from .transports.protocol import BaseTransport

_LOGGER = logging.getLogger(__name__)

# Work performed inside an open session; fills the staged values dict.
_SessionWork = Callable[[dict[str, Any]], Awaitable[DataStatus]]


class ModbusDevice:
    """Generic mapping engine for one Modbus device instance.

    Example:
        transport = create_modbus_transport("192.168.1.100")
        boiler = ModbusDevice(ETAPU11_SCHEMA, transport, name="boiler")

        status = await boiler.read_block()
        if status.is_good:
            print(boiler.snapshot["boiler_temperature"])

        status = await boiler.write_one("hotwater_switchon_diff", "15.0")
    """

    def __init__(
        self,
        schema: RegisterSchema,
        transport: BaseTransport,
        *,
        name: str = "",
    ) -> None:
        """Initialize the mapping engine.

        Args:
            schema: Register schema of the device type
            transport: Transport used for every operation
            name: Device identifier used in log messages
        """
        if schema is None or transport is None:
            raise TypeError("schema and transport are required")
        self._schema = schema
        self._transport = transport
        self._name = name or transport.name or schema.device
        self._snapshot = DeviceSnapshot(schema)
        self._guard = asyncio.Lock()
        self._last_status: DataStatus = UNCERTAIN

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def schema(self) -> RegisterSchema:
        return self._schema

    @property
    def transport(self) -> BaseTransport:
        return self._transport

    @property
    def snapshot(self) -> DeviceSnapshot:
        """Read-only view of the current values and status."""
        return self._snapshot

    @property
    def last_status(self) -> DataStatus:
        """Status of the most recent operation, including validation failures."""
        return self._last_status

    @property
    def is_initialized(self) -> bool:
        return self._snapshot.is_initialized

    @property
    def is_busy(self) -> bool:
        """True while an operation holds the guard."""
        return self._guard.locked()

    # ------------------------------------------------------------------
    # Session handling
    # ------------------------------------------------------------------

    def _reject(self, status: DataStatus) -> DataStatus:
        """Record a validation failure without touching the snapshot."""
        _LOGGER.debug("%s: rejected (%s)", self._name, status)
        self._last_status = status
        return status

    async def _disconnect(self) -> None:
        try:
            await self._transport.disconnect()
        except Exception as err:
            _LOGGER.warning("%s: disconnect failed: %s", self._name, err)

    async def _run(
        self,
        operation: str,
        work: _SessionWork,
        *,
        full_read: bool = False,
    ) -> DataStatus:
        """Run ``work`` inside the guard and a transport session.

        Values staged by ``work`` are applied to the snapshot together with
        the resulting status after the transport has been disconnected.
        """
        staged: dict[str, Any] = {}
        cancelled: asyncio.CancelledError | None = None

        async with self._guard:
            try:
                try:
                    await self._transport.connect()
                except Exception as err:
                    _LOGGER.error("%s: %s failed to connect: %s", self._name, operation, err)
                    status = DataStatus.bad(ErrorKind.NOT_CONNECTED, str(err))
                else:
                    status = await work(staged)
            except asyncio.CancelledError as err:
                _LOGGER.warning("%s: %s cancelled", self._name, operation)
                status = DataStatus.bad(ErrorKind.INTERNAL_ERROR, f"{operation} cancelled")
                cancelled = err
            except Exception as err:
                _LOGGER.error("%s: %s failed: %s", self._name, operation, err)
                status = status_from_exception(err)
            finally:
                await self._disconnect()

            self._last_status = status
            self._snapshot._apply(staged, status, initialized=full_read and status.is_good)

        if cancelled is not None:
            raise cancelled

        if status.is_bad:
            _LOGGER.warning("%s: %s finished with %s", self._name, operation, status)
        else:
            _LOGGER.debug("%s: %s OK (%d values)", self._name, operation, len(staged))
        return status

    async def _read_property(
        self, descriptor: PropertyDescriptor, staged: dict[str, Any]
    ) -> None:
        words = await self._transport.read_words(descriptor.offset, descriptor.length)
        staged[descriptor.name] = codec.decode(descriptor, words)
        _LOGGER.debug(
            "%s: read %s @%d/%d => %r",
            self._name,
            descriptor.name,
            descriptor.offset,
            descriptor.length,
            staged[descriptor.name],
        )

    def _readable(self, name: str) -> tuple[PropertyDescriptor | None, DataStatus]:
        descriptor = self._schema.get(name)
        if descriptor is None:
            return None, DataStatus.bad(ErrorKind.NOT_FOUND, f"Property '{name}' not found")
        if not descriptor.readable:
            return None, DataStatus.bad(
                ErrorKind.NOT_READABLE, f"Property '{name}' is not readable"
            )
        return descriptor, GOOD

    def _writable(self, name: str) -> tuple[PropertyDescriptor | None, DataStatus]:
        descriptor = self._schema.get(name)
        if descriptor is None:
            return None, DataStatus.bad(ErrorKind.NOT_FOUND, f"Property '{name}' not found")
        if not descriptor.writable:
            return None, DataStatus.bad(
                ErrorKind.NOT_WRITABLE, f"Property '{name}' is not writable"
            )
        return descriptor, GOOD

    # ------------------------------------------------------------------
    # Connection check
    # ------------------------------------------------------------------

    async def connect(self) -> bool:
        """Check that the device can be reached.

        Opens and closes a transport session.  The snapshot is not modified;
        on failure :attr:`last_status` records the error.

        Returns:
            True if the transport connected
        """
        async with self._guard:
            try:
                await self._transport.connect()
            except Exception as err:
                _LOGGER.error("%s: connection check failed: %s", self._name, err)
                self._last_status = DataStatus.bad(ErrorKind.INTERNAL_ERROR, str(err))
                return False
            finally:
                await self._disconnect()

        self._last_status = GOOD
        return True

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def read_one(self, name: str) -> DataStatus:
        """Read a single property into the snapshot."""
        descriptor, status = self._readable(name)
        if descriptor is None:
            return self._reject(status)

        async def work(staged: dict[str, Any]) -> DataStatus:
            await self._read_property(descriptor, staged)
            return GOOD

        return await self._run(f"read '{name}'", work)

    async def read_many(self, names: Iterable[str]) -> DataStatus:
        """Read several properties in one transport session.

        A failing property does not stop the batch; the returned status is
        the last failure observed, or good when every property was read.
        """
        return await self._read_names(list(names), "read_many")

    async def read_all(self) -> DataStatus:
        """Read every readable property, one transaction per property."""
        names = [d.name for d in self._schema.readable]
        return await self._read_names(names, "read_all", full_read=True)

    async def read_category(self, category: str) -> DataStatus:
        """Read every readable property of one category (e.g. "boiler")."""
        names = [d.name for d in self._schema.by_category(category) if d.readable]
        if not names:
            return self._reject(
                DataStatus.bad(ErrorKind.NOT_FOUND, f"Category '{category}' not found")
            )
        return await self._read_names(names, f"read_category '{category}'")

    async def _read_names(
        self,
        names: list[str],
        operation: str,
        *,
        full_read: bool = False,
    ) -> DataStatus:
        async def work(staged: dict[str, Any]) -> DataStatus:
            status = GOOD
            for name in names:
                descriptor, check = self._readable(name)
                if descriptor is None:
                    _LOGGER.warning("%s: %s", self._name, check.detail)
                    status = check
                    continue
                try:
                    await self._read_property(descriptor, staged)
                except Exception as err:
                    _LOGGER.warning("%s: reading '%s' failed: %s", self._name, name, err)
                    status = status_from_exception(err)
            return status

        return await self._run(operation, work, full_read=full_read)

    async def read_block(self) -> DataStatus:
        """Read every block in one transaction each and decode all members.

        A failing block is recorded and the remaining blocks are still read.
        Block-less properties keep their previous values, so the snapshot only
        counts as initialized when every readable property belongs to a block.
        """
        if not self._schema.blocks:
            return self._reject(
                DataStatus.bad(ErrorKind.NOT_FOUND, f"{self._schema.device} declares no blocks")
            )

        async def work(staged: dict[str, Any]) -> DataStatus:
            status = GOOD
            for block in self._schema.blocks:
                try:
                    words = await self._transport.read_words(block.offset, block.length)
                except Exception as err:
                    _LOGGER.warning(
                        "%s: reading block '%s' failed: %s", self._name, block.block_id, err
                    )
                    status = status_from_exception(err)
                    continue

                for descriptor in self._schema.properties_in_block(block.block_id):
                    if not descriptor.readable:
                        continue
                    try:
                        staged[descriptor.name] = codec.decode(
                            descriptor, block.slice(words, descriptor)
                        )
                    except Exception as err:
                        _LOGGER.warning(
                            "%s: decoding '%s' failed: %s", self._name, descriptor.name, err
                        )
                        status = status_from_exception(err)
            return status

        covers_all = all(d.block_id is not None for d in self._schema if d.readable)
        return await self._run("read_block", work, full_read=covers_all)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def write_one(self, name: str, raw_value: str) -> DataStatus:
        """Parse a wire-format value and write it to one property.

        Args:
            name: Property name
            raw_value: Value as text, e.g. "21.5", "On", "06:30"

        Returns:
            Status of the write; the snapshot holds the new value on success
        """
        descriptor, status = self._writable(name)
        if descriptor is None:
            return self._reject(status)

        try:
            _, words = codec.prepare_write(descriptor, raw_value)
            # The device holds the quantized value, not the parsed text.
            value = codec.decode(descriptor, words)
        except Exception as err:
            return self._reject(status_from_exception(err))

        async def work(staged: dict[str, Any]) -> DataStatus:
            await self._transport.write_words(descriptor.offset, words)
            staged[name] = value
            _LOGGER.debug("%s: wrote %s => %r", self._name, name, value)
            return GOOD

        return await self._run(f"write '{name}'", work)

    async def write_many(self, values: Mapping[str, str]) -> DataStatus:
        """Write several properties in one transport session.

        Unknown, read-only or unparsable entries are recorded as failures and
        skipped; the remaining entries are still written.  The returned status
        is the last failure observed.
        """
        return await self._write_items(list(values.items()), "write_many")

    async def write_all(self, values: Mapping[str, str]) -> DataStatus:
        """Write every writable property present in ``values``.

        Entries are written in schema order; keys unknown to the schema are
        reported after the known ones.
        """
        ordered = [(d.name, values[d.name]) for d in self._schema if d.name in values]
        ordered.extend((k, v) for k, v in values.items() if k not in self._schema)
        return await self._write_items(ordered, "write_all")

    async def _write_items(self, items: list[tuple[str, str]], operation: str) -> DataStatus:
        async def work(staged: dict[str, Any]) -> DataStatus:
            status = GOOD
            for name, raw_value in items:
                descriptor, check = self._writable(name)
                if descriptor is None:
                    _LOGGER.warning("%s: %s", self._name, check.detail)
                    status = check
                    continue
                try:
                    _, words = codec.prepare_write(descriptor, raw_value)
                    value = codec.decode(descriptor, words)
                    await self._transport.write_words(descriptor.offset, words)
                except Exception as err:
                    _LOGGER.warning("%s: writing '%s' failed: %s", self._name, name, err)
                    status = status_from_exception(err)
                    continue
                staged[name] = value
            return status

        return await self._run(operation, work)

    def __repr__(self) -> str:
        return f"ModbusDevice(name={self._name!r}, schema={self._schema.device!r})"


__all__ = ["ModbusDevice"]
