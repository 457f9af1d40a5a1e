#!/usr/bin/env python3
"""Read a device through the block path and print its snapshot.

Environment (.env in the repository root is loaded):
    MODBUS_IP       device or gateway address
    MODBUS_PORT     TCP port (default 502)
    MODBUS_UNIT_ID  unit ID (default 1)
    MODMAP_DEVICE   "etapu11" or "symo823m" (default etapu11)
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from pathlib import Path

logging.getLogger("pymodbus").setLevel(logging.ERROR)

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent.parent / ".env")


async def main() -> int:
    """Read every block and print the decoded values."""
    from pymodmap import ETAPU11_SCHEMA, SYMO823M_SCHEMA, ModbusDevice, create_modbus_transport

    schemas = {"etapu11": ETAPU11_SCHEMA, "symo823m": SYMO823M_SCHEMA}

    host = os.getenv("MODBUS_IP", "192.168.1.100")
    port = int(os.getenv("MODBUS_PORT", "502"))
    unit_id = int(os.getenv("MODBUS_UNIT_ID", "1"))
    device_key = os.getenv("MODMAP_DEVICE", "etapu11").lower()

    schema = schemas.get(device_key)
    if schema is None:
        print(f"Unknown device '{device_key}', expected one of {sorted(schemas)}")
        return 2

    print(f"Reading {schema.device}")
    print(f"Target: {host}:{port} (unit {unit_id})")
    print("=" * 60)

    transport = create_modbus_transport(host, port=port, unit_id=unit_id, timeout=5.0)
    device = ModbusDevice(schema, transport)

    if not await device.connect():
        print(f"Connect failed: {device.last_status}")
        return 1

    status = await device.read_block()

    for category in schema.categories:
        print(f"\n--- {category.upper()} ---")
        for descriptor in schema.by_category(category):
            if not descriptor.readable:
                continue
            value = device.snapshot[descriptor.name]
            unit = f" {descriptor.unit}" if descriptor.unit else ""
            print(f"{descriptor.name:<40} {value}{unit}")

    print("\n--- STATUS ---")
    print(f"{status} (0x{status.code:08X})")
    return 0 if status.is_good else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
