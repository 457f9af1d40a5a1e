"""Live projection of a device's property values."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from datetime import datetime, timezone
from typing import Any

from .exceptions import PropertyNotFoundError
from .registers.schema import RegisterSchema
from .status import UNCERTAIN, DataStatus


class DeviceSnapshot:
    """Current decoded value of every property plus the last operation status.

    The snapshot starts with every value set to None and an uncertain status.
    Only :class:`~pymodmap.device.ModbusDevice` mutates it, inside its
    guard; consumers get a read-only view.

    Example:
        snapshot = device.snapshot
        if snapshot.status.is_good:
            print(snapshot["boiler_temperature"])
    """

    def __init__(self, schema: RegisterSchema) -> None:
        self._schema = schema
        self._values: dict[str, Any] = dict.fromkeys(schema.names)
        self._status: DataStatus = UNCERTAIN
        self._version = 0
        self._timestamp: datetime | None = None
        self._initialized = False

    @property
    def status(self) -> DataStatus:
        return self._status

    @property
    def version(self) -> int:
        """Incremented on every update."""
        return self._version

    @property
    def timestamp(self) -> datetime | None:
        """UTC time of the last update, None before the first one."""
        return self._timestamp

    @property
    def is_initialized(self) -> bool:
        """True once a full read has succeeded.

        read_all always counts; read_block counts only when every readable
        property belongs to a block.
        """
        return self._initialized

    def __getitem__(self, name: str) -> Any:
        try:
            return self._values[name]
        except KeyError:
            raise PropertyNotFoundError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def as_dict(self, names: Iterable[str] | None = None) -> dict[str, Any]:
        """Copy of the values, optionally restricted to ``names``."""
        if names is None:
            return dict(self._values)
        return {name: self._values[name] for name in names if name in self._values}

    def _apply(
        self,
        values: Mapping[str, Any],
        status: DataStatus,
        *,
        initialized: bool = False,
    ) -> None:
        """Replace values and status in one step (engine only)."""
        self._values.update(values)
        self._status = status
        self._version += 1
        self._timestamp = datetime.now(timezone.utc)
        if initialized:
            self._initialized = True

    def __repr__(self) -> str:
        return (
            f"DeviceSnapshot(device={self._schema.device!r}, status={self._status}, "
            f"version={self._version})"
        )
