"""Fronius SYMO 8.2-3-M register map (SunSpec float model).

Covers the SunSpec models the integration uses:

    common    40004-40068  model 1 identification strings
    inverter  40071-40130  model 113 (three phase inverter, float32)
    controls  40239-40262  model 123 (immediate controls)
    site      499-512      Fronius site totals (uint32 / 64-bit counters)

SunSpec strings are NUL-padded ASCII, two characters per register.  Float
values are IEEE-754 single precision, high word first.  Unimplemented
16-bit values read as 0xFFFF (unsigned) or 0x8000 (signed).
"""

from __future__ import annotations

from enum import IntEnum

from pymodmap.registers.schema import (
    AccessMode,
    Block,
    PropertyDescriptor,
    RegisterSchema,
    SemanticType,
)

RO = AccessMode.READ_ONLY
RW = AccessMode.READ_WRITE

UINT16_NOT_IMPLEMENTED = 0xFFFF
INT16_NOT_IMPLEMENTED = 0x8000

COMMON_BLOCK = Block("common", 40004, 65)
INVERTER_BLOCK = Block("inverter", 40071, 60)
CONTROLS_BLOCK = Block("controls", 40239, 24)
SITE_BLOCK = Block("site", 499, 14)


class OperatingStates(IntEnum):
    """SunSpec inverter operating state (with Fronius extension)."""

    UNKNOWN = 0
    OFF = 1
    SLEEPING = 2
    STARTING = 3
    MPPT = 4
    THROTTLED = 5
    SHUTTING_DOWN = 6
    FAULT = 7
    STANDBY = 8
    NO_BUSINIT = 9
    NO_COMM_INV = 10
    SN_OVERCURRENT = 11
    BOOTLOADER = 12
    AFCI = 13


class ConnectionStates(IntEnum):
    DISCONNECT = 0
    CONNECT = 1


def _string(name: str, offset: int, length: int, description: str = "") -> PropertyDescriptor:
    return PropertyDescriptor(
        name=name,
        semantic_type=SemanticType.FIXED_STRING,
        offset=offset,
        length=length,
        block_id=COMMON_BLOCK.block_id,
        category="common",
        description=description,
    )


def _float(name: str, offset: int, unit: str) -> PropertyDescriptor:
    return PropertyDescriptor(
        name=name,
        semantic_type=SemanticType.FLOAT32,
        offset=offset,
        length=2,
        block_id=INVERTER_BLOCK.block_id,
        category="inverter",
        unit=unit,
    )


def _control(
    name: str,
    offset: int,
    *,
    signed: bool = False,
    access: AccessMode = RW,
    unit: str = "",
    minimum: int | None = None,
    maximum: int | None = None,
) -> PropertyDescriptor:
    return PropertyDescriptor(
        name=name,
        semantic_type=SemanticType.INT16 if signed else SemanticType.UINT16,
        offset=offset,
        length=1,
        access=access,
        block_id=CONTROLS_BLOCK.block_id,
        category="controls",
        unit=unit,
        minimum=minimum,
        maximum=maximum,
        invalid=INT16_NOT_IMPLEMENTED if signed else UINT16_NOT_IMPLEMENTED,
    )


SYMO823M_PROPERTIES: tuple[PropertyDescriptor, ...] = (
    # =========================================================================
    # COMMON MODEL (1)
    # =========================================================================
    _string("manufacturer", 40004, 16, "Well known value registered with SunSpec"),
    _string("model", 40020, 16, "Manufacturer specific value"),
    _string("options", 40036, 8, "Manufacturer specific value"),
    _string("version", 40044, 8, "Manufacturer specific value"),
    _string("serial_number", 40052, 16, "Manufacturer specific value"),
    PropertyDescriptor(
        name="device_address",
        semantic_type=SemanticType.UINT16,
        offset=40068,
        length=1,
        block_id=COMMON_BLOCK.block_id,
        category="common",
        description="Modbus device address",
    ),
    # =========================================================================
    # INVERTER MODEL (113, float)
    # =========================================================================
    _float("total_current_ac", 40071, "A"),
    _float("current_l1", 40073, "A"),
    _float("current_l2", 40075, "A"),
    _float("current_l3", 40077, "A"),
    _float("voltage_l1_l2", 40079, "V"),
    _float("voltage_l2_l3", 40081, "V"),
    _float("voltage_l3_l1", 40083, "V"),
    _float("voltage_l1_n", 40085, "V"),
    _float("voltage_l2_n", 40087, "V"),
    _float("voltage_l3_n", 40089, "V"),
    _float("power_ac", 40091, "W"),
    _float("frequency", 40093, "Hz"),
    _float("apparent_power", 40095, "VA"),
    _float("reactive_power", 40097, "var"),
    _float("power_factor", 40099, "%"),
    _float("lifetime_energy", 40101, "Wh"),
    _float("current_dc", 40103, "A"),
    _float("voltage_dc", 40105, "V"),
    _float("power_dc", 40107, "W"),
    _float("cabinet_temperature", 40109, "°C"),
    _float("heatsink_temperature", 40111, "°C"),
    _float("transformer_temperature", 40113, "°C"),
    _float("other_temperature", 40115, "°C"),
    PropertyDescriptor(
        name="operating_state",
        semantic_type=SemanticType.ENUM_ORDINAL,
        offset=40117,
        length=1,
        block_id=INVERTER_BLOCK.block_id,
        category="inverter",
        enum=OperatingStates,
    ),
    PropertyDescriptor(
        name="vendor_state",
        semantic_type=SemanticType.UINT16,
        offset=40118,
        length=1,
        block_id=INVERTER_BLOCK.block_id,
        category="inverter",
    ),
    PropertyDescriptor(
        name="events",
        semantic_type=SemanticType.UINT32,
        offset=40119,
        length=2,
        block_id=INVERTER_BLOCK.block_id,
        category="inverter",
        description="SunSpec event flags (Evt1)",
    ),
    # =========================================================================
    # IMMEDIATE CONTROLS MODEL (123)
    # =========================================================================
    _control("conn_win_tms", 40239, unit="s"),
    _control("conn_rvrt_tms", 40240, unit="s"),
    PropertyDescriptor(
        name="conn",
        semantic_type=SemanticType.ENUM_ORDINAL,
        offset=40241,
        length=1,
        access=RW,
        block_id=CONTROLS_BLOCK.block_id,
        category="controls",
        enum=ConnectionStates,
        minimum=ConnectionStates.DISCONNECT,
        maximum=ConnectionStates.CONNECT,
    ),
    _control("w_max_lim_pct", 40242, unit="%", minimum=0, maximum=10000),
    _control("w_max_lim_pct_win_tms", 40243, unit="s"),
    _control("w_max_lim_pct_rvrt_tms", 40244, unit="s"),
    _control("w_max_lim_pct_rmp_tms", 40245, unit="s", access=RO),
    _control("w_max_lim_ena", 40246, minimum=0, maximum=1),
    _control("out_pf_set", 40247, signed=True),
    _control("out_pf_set_win_tms", 40248, unit="s"),
    _control("out_pf_set_rvrt_tms", 40249, unit="s"),
    _control("out_pf_set_rmp_tms", 40250, unit="s", access=RO),
    _control("out_pf_set_ena", 40251, minimum=0, maximum=1),
    _control("var_w_max_pct", 40252, signed=True, access=RO, unit="%"),
    _control("var_max_pct", 40253, signed=True, unit="%"),
    _control("var_aval_pct", 40254, signed=True, access=RO, unit="%"),
    _control("var_pct_win_tms", 40255, unit="s"),
    _control("var_pct_rvrt_tms", 40256, unit="s", access=RO),
    _control("var_pct_rmp_tms", 40257, unit="s"),
    _control("var_pct_mod", 40258, access=RO),
    _control("var_pct_ena", 40259, minimum=0, maximum=1),
    _control("w_max_lim_pct_sf", 40260, signed=True, access=RO),
    _control("out_pf_set_sf", 40261, signed=True, access=RO),
    _control("var_pct_sf", 40262, signed=True, access=RO),
    # =========================================================================
    # FRONIUS SITE REGISTERS
    # =========================================================================
    PropertyDescriptor(
        name="site_power",
        semantic_type=SemanticType.UINT32,
        offset=499,
        length=2,
        block_id=SITE_BLOCK.block_id,
        category="site",
        unit="W",
    ),
    PropertyDescriptor(
        name="site_energy_day",
        semantic_type=SemanticType.FLOAT64,
        offset=501,
        length=4,
        block_id=SITE_BLOCK.block_id,
        category="site",
        unit="Wh",
    ),
    PropertyDescriptor(
        name="site_energy_year",
        semantic_type=SemanticType.FLOAT64,
        offset=505,
        length=4,
        block_id=SITE_BLOCK.block_id,
        category="site",
        unit="Wh",
    ),
    PropertyDescriptor(
        name="site_energy_total",
        semantic_type=SemanticType.FLOAT64,
        offset=509,
        length=4,
        block_id=SITE_BLOCK.block_id,
        category="site",
        unit="Wh",
    ),
)

SYMO823M_SCHEMA = RegisterSchema(
    "SYMO 8.2-3-M",
    properties=SYMO823M_PROPERTIES,
    blocks=(SITE_BLOCK, COMMON_BLOCK, INVERTER_BLOCK, CONTROLS_BLOCK),
)


__all__ = [
    "COMMON_BLOCK",
    "CONTROLS_BLOCK",
    "ConnectionStates",
    "INT16_NOT_IMPLEMENTED",
    "INVERTER_BLOCK",
    "OperatingStates",
    "SITE_BLOCK",
    "SYMO823M_PROPERTIES",
    "SYMO823M_SCHEMA",
    "UINT16_NOT_IMPLEMENTED",
]
