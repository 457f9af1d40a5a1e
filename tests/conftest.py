"""Pytest configuration and fixtures for pymodmap tests."""

from __future__ import annotations

from enum import IntEnum

import pytest

from pymodmap.device import ModbusDevice
from pymodmap.registers.schema import (
    DIV_10,
    AccessMode,
    Block,
    PropertyDescriptor,
    RegisterSchema,
    SemanticType,
)
from pymodmap.transports.memory import InMemoryTransport


class Mode(IntEnum):
    """Operating mode used by the demo schema."""

    OFF = 0
    HEAT = 1
    COOL = 2


MAIN_BLOCK = Block("main", 100, 14)


def build_demo_schema() -> RegisterSchema:
    """Small schema covering every access mode and most semantic types.

    Layout (register: property):
        100-101 Temperature  FLOAT64 /10, read-only
        102-103 Setpoint     FLOAT64 /10, read-write, 5.0..35.0
        104     Mode         ENUM_ORDINAL, read-write
        105-106 Counter      UINT32, read-only
        107     Secret       UINT16, write-only
        108-111 Label        FIXED_STRING, read-only
        112     Offset       INT16, read-write
        200     Remote       INT16, read-only, outside any block
    """
    return RegisterSchema(
        "demo",
        properties=(
            PropertyDescriptor(
                name="Temperature",
                semantic_type=SemanticType.FLOAT64,
                offset=100,
                length=2,
                scale=DIV_10,
                block_id="main",
                category="climate",
                unit="°C",
            ),
            PropertyDescriptor(
                name="Setpoint",
                semantic_type=SemanticType.FLOAT64,
                offset=102,
                length=2,
                scale=DIV_10,
                access=AccessMode.READ_WRITE,
                block_id="main",
                category="climate",
                unit="°C",
                minimum=50,
                maximum=350,
            ),
            PropertyDescriptor(
                name="Mode",
                semantic_type=SemanticType.ENUM_ORDINAL,
                offset=104,
                length=1,
                access=AccessMode.READ_WRITE,
                block_id="main",
                category="climate",
                enum=Mode,
            ),
            PropertyDescriptor(
                name="Counter",
                semantic_type=SemanticType.UINT32,
                offset=105,
                length=2,
                block_id="main",
            ),
            PropertyDescriptor(
                name="Secret",
                semantic_type=SemanticType.UINT16,
                offset=107,
                length=1,
                access=AccessMode.WRITE_ONLY,
                block_id="main",
            ),
            PropertyDescriptor(
                name="Label",
                semantic_type=SemanticType.FIXED_STRING,
                offset=108,
                length=4,
                block_id="main",
            ),
            PropertyDescriptor(
                name="Offset",
                semantic_type=SemanticType.INT16,
                offset=112,
                length=1,
                access=AccessMode.READ_WRITE,
                block_id="main",
            ),
            PropertyDescriptor(
                name="Remote",
                semantic_type=SemanticType.INT16,
                offset=200,
                length=1,
            ),
        ),
        blocks=(MAIN_BLOCK,),
    )


def load_demo_registers(transport: InMemoryTransport) -> None:
    """Fill the demo registers with a known device state."""
    transport.set_words(100, [0, 215])  # Temperature 21.5
    transport.set_words(102, [0, 200])  # Setpoint 20.0
    transport.set_words(104, [1])  # Mode HEAT
    transport.set_words(105, [0x0001, 0x0002])  # Counter 65538
    transport.set_words(108, [0x4B49, 0x5443, 0x4845, 0x4E00])  # "KITCHEN"
    transport.set_words(112, [0xFFFE])  # Offset -2
    transport.set_words(200, [0xFF9C])  # Remote -100


@pytest.fixture
def demo_schema() -> RegisterSchema:
    """Demo register schema."""
    return build_demo_schema()


@pytest.fixture
def memory_transport() -> InMemoryTransport:
    """In-memory transport preloaded with the demo device state."""
    transport = InMemoryTransport(name="demo")
    load_demo_registers(transport)
    return transport


@pytest.fixture
def device(demo_schema: RegisterSchema, memory_transport: InMemoryTransport) -> ModbusDevice:
    """Mapping engine over the demo schema and in-memory transport."""
    return ModbusDevice(demo_schema, memory_transport, name="demo")
