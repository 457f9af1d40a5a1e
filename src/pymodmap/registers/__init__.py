"""Register schemas for supported devices.

This package holds the schema building blocks and one module per device:

- schema: PropertyDescriptor, Block, RegisterSchema and the type enums
- etapu11: ETA PU 11 pellet boiler (holding registers 1000-1169)
- symo823m: Fronius SYMO 8.2-3-M inverter (SunSpec float model)
"""

from pymodmap.registers.etapu11 import ETAPU11_SCHEMA
from pymodmap.registers.schema import (
    DIV_10,
    DIV_100,
    DIV_1000,
    NONE,
    AccessMode,
    Block,
    PropertyDescriptor,
    RegisterSchema,
    SemanticType,
    TimeUnit,
)
from pymodmap.registers.symo823m import SYMO823M_SCHEMA

__all__ = [
    "AccessMode",
    "Block",
    "DIV_10",
    "DIV_100",
    "DIV_1000",
    "ETAPU11_SCHEMA",
    "NONE",
    "PropertyDescriptor",
    "RegisterSchema",
    "SYMO823M_SCHEMA",
    "SemanticType",
    "TimeUnit",
]
