"""ETA PU 11 pellet boiler register map.

All values are 32-bit holding register pairs (high word first) in the range
1000-1169.  The controller reports scaled integers: the ETA "scale" is a
divisor, so a temperature with scale 10 is read as ``raw / 10``.  A raw value
of ``0x7FFFFFFF`` means "not available" and decodes to NaN.

Two blocks cover the whole map:

    block1  1000-1093  boiler and hot water (47 values)
    block2  1094-1169  heating circuit, storage and system (38 values)

Minimum/maximum bounds are given in raw units as documented for the
controller and are enforced on write.  State values are ordinals in the
controller's global text table; the enums below list the known ones.
"""

from __future__ import annotations

from enum import IntEnum
from fractions import Fraction

from pymodmap.registers.schema import (
    DIV_10,
    DIV_100,
    NONE,
    AccessMode,
    Block,
    PropertyDescriptor,
    RegisterSchema,
    SemanticType,
    TimeUnit,
)

INVALID_VALUE = 0x7FFFFFFF

BLOCK1 = Block("block1", 1000, 94)
BLOCK2 = Block("block2", 1094, 76)

RO = AccessMode.READ_ONLY
RW = AccessMode.READ_WRITE

# Categories
BOILER = "boiler"
HOTWATER = "hotwater"
HEATING = "heating"
STORAGE = "storage"
SYSTEM = "system"


# =============================================================================
# STATE ENUMS
# =============================================================================


class DemandValues(IntEnum):
    OFF = 1020
    ON = 1021


class DemandValuesEx(IntEnum):
    STOP = 1023
    FWD = 1024
    BACK = 1025


class VacuumStates(IntEnum):
    OFF = 1040
    ON = 1041
    LOCKED = 1042
    FAULTY_FUSE = 1043
    NO_TERMINAL_ASSIGNED = 1044
    NO_ANSWER_FROM_CAN_NODE = 1045


class FirebedStates(IntEnum):
    HIGH = 1100
    OK = 1101
    LOCKED = 1102
    FAULTY_FUSE = 1103
    NO_TERMINAL_ASSIGNED = 1104
    NO_ANSWER_FROM_CAN_NODE = 1105


class ScrewStates(IntEnum):
    OFF1 = 1220
    STOP1 = 1221
    FWD = 1222
    STOP2 = 1223
    RETURN_FWD = 1224
    BACK = 1225
    RETURN_BACK = 1226
    CURRENT_DRAW_TOO_HIGH = 1227
    DRIVE_PROTECTION = 1228
    MIN_CURRENT1 = 1229
    MIN_CURRENT2 = 1230
    OFF2 = 1231
    RESID_CURR = 1232
    STOP_LOCKED = 1233
    STOP_FAULTY_FUSE = 1234
    NO_TERMINAL_ASSIGNED = 1235
    NO_ANSWER_FROM_CAN_NODE = 1236


class FlowMixValveStates(IntEnum):
    OFF = 1240
    OPEN1 = 1241
    OPEN2 = 1242
    CLOSE1 = 1243
    CLOSED = 1244
    STOP = 1245
    OPEN3 = 1246
    CLOSE2 = 1247
    LOCKED = 1248
    FAULTY_FUSE = 1249
    NO_TERMINAL_ASSIGNED = 1250
    NO_ANSWER_FROM_CAN_NODE = 1251


class StartValues(IntEnum):
    NO = 1800
    YES = 1801


class OnOffStates(IntEnum):
    OFF = 1802
    ON = 1803


class BoilerStates(IntEnum):
    SWITCHED_OFF = 2000
    FLAP_OPEN = 2001
    FILL_UP_PELLET_BIN = 2002
    FILLING_STOPPED_FOR_IGNITION = 2003
    WARM_START = 2004
    IGNITING = 2005
    HEATING1 = 2006
    EMBER_BURNOUT = 2007
    EMBER_BURNOUT_DUE_TO_DE_ASHING = 2008
    EMBER_BURNOUT_SWITCHED_OFF = 2009
    EMBER_BURNOUT_ASH_BOX_MISSING = 2010
    FILLING_STOPPED_FOR_DE_ASHING = 2011
    READY = 2012
    ASHBOX_MISSING = 2013
    DE_ASH = 2014
    MALFUNCTION_DURING_ASH_REMOVAL = 2015
    MALFUNCTION1 = 2016
    EMBER_BURNOUT_DUE_TO_MALFUNCTION = 2017
    EMBER_BURNOUT_DUE_TO_EXTERNAL_LOCKING = 2018
    LOCKED = 2019
    CALIBRATING_LAMBDA_PROBE = 2020
    HEATING2 = 2021
    PREHEAT = 2022
    EMPTYING_STOKER = 2023
    FILL = 2024
    INSULATOR_DOOR_OPEN1 = 2025
    IGNITION = 2026
    WAIT_FOR_DELAY_TIME = 2027
    INSULATOR_DOOR_OPEN2 = 2028
    OVERTEMPERATURE = 2029
    TWIN_OPERATION = 2030
    MALFUNCTION2 = 2031
    PREPARATION = 2032
    EMPTYING_STOKER1 = 2033
    EMPTYING_STOKER2 = 2034
    EMPTYING_STOKER3 = 2035
    EMPTYING_STOKER4 = 2036
    HEATING_PREPARING_TO_MEASURE = 2037
    HEATING_PARTIAL_LOAD_MEASUREMENT = 2038
    HEATING_FULL_LOAD_MEASUREMENT = 2039


class ConveyingSystemStates(IntEnum):
    POWER_SUPPLY_ERROR = 2057
    SELF_CHECK = 2058
    READY = 2059
    OFF = 2060
    START_VACUUM_MOTOR = 2061
    VACUUM_MOTOR_RUNNING = 2062
    CONVEY = 2063
    EMPTY_HOSES = 2064
    SUCTION_TIME_EXCEEDED = 2065
    NOT_ENOUGH_PELLETS_CONV = 2066
    DELAY_DUE_TO_ERROR = 2067
    DISCHARGE_SCREW_ERROR = 2068
    SELF_CHECK_ERROR = 2069


class FlowControlStates(IntEnum):
    CLOSED_START = 2070
    OFF = 2071
    HEATING = 2072
    CTRL = 2073
    DELAY = 2074
    MALFUNCTION = 2075
    FROST_PROTECTION = 2076
    OPEN1 = 2077
    OPEN2 = 2078
    OPEN3 = 2079


class DiverterValveStates(IntEnum):
    UNDEFINED = 2090
    STOP = 2091
    HOTWATER = 2092
    HEATING = 2093
    LOCKED = 2094
    FAULTY_FUSE = 2095
    NO_TERMINAL_ASSIGNED = 2096
    NO_ANSWER_FROM_CAN_NODE = 2097


class AshRemovalStates(IntEnum):
    GRATE_OPEN = 2100
    CLOSE = 2101
    READY1 = 2102
    DE_ASH = 2103
    STOP1 = 2104
    READY2 = 2105
    SHORT_BACK1 = 2106
    SHORT_FWD1 = 2107
    WAITING_SHORT_BACKWARD = 2108
    WAITING_SHORT_FORWARD = 2109
    STOP_ASH_BOX = 2110
    BACK = 2111
    EMERGENCY_TILTING = 2112
    SHORT_BACK2 = 2113
    CLOSE1 = 2114
    SHORT_FWD2 = 2115
    SHORT_MOVE_ERROR = 2116
    ERROR = 2117
    READY = 2118
    OPEN = 2119
    STOP2 = 2120
    CLOSE2 = 2121
    CLOSED = 2122
    ERROR_OPENING = 2123
    ERROR_CLOSING = 2124
    COLD_START = 2125


class HeatingCircuitStates(IntEnum):
    OFF = 2200
    DAY_ON = 2201
    NIGHT_ON = 2202
    HOLIDAY_ON = 2203
    UNDEFINED = 2204
    ENABLE_OFF = 2205
    DAY_TGT_OFF = 2206
    NIGHT_TGT_OFF = 2207
    HDAY_TGT_OFF = 2208
    ROOM_DAY_OFF = 2209
    ROOM_NIGHT_OFF = 2210
    HDAY_ROOM_OFF = 2211
    DAY_HEAT_LIM_OFF = 2212
    NIGHT_HEAT_LIM_OFF = 2213
    HDAY_HEAT_LIM_OFF = 2214
    SUMMER_OFF = 2215
    HW_OFF = 2216
    ROOM_FREEZE_PROT_ON = 2217
    FLOW_FREEZE_PROT_ON1 = 2218
    RESID_HEAT_ON = 2219
    HEAT_DISS_ON = 2220
    SCREED_ON = 2221
    SENSOR_ERROR_ON = 2222
    FLOW_FREEZE_PROT_ON2 = 2223
    SOLAR_HEAT_DISS = 2224
    LOCKED_OFF = 2225


class HWTankStates(IntEnum):
    OFF = 2260
    DEMAND1 = 2261
    DEMAND2 = 2262
    CHRG = 2263
    EXTRA_CHARGE1 = 2264
    RESID_HEAT = 2265
    CHARGED = 2266
    HEAT_DISSIPATION = 2267
    FREEZE_PROT = 2268
    SENSOR_ERROR = 2269
    TIMER_OFF = 2270
    LOADING_WITH_PRODUCER = 2271
    EXTRA_CHARGE2 = 2272
    SOLAR_PRIORITY = 2273
    WORKING = 2274
    SOLAR_HEAT_DISS = 2275


class HWRunningStates(IntEnum):
    DAY1 = 2301
    NIGHT1 = 2302
    DAY2 = 2303
    NIGHT2 = 2304
    OFF = 2305
    HOLIDAY = 2306
    SCREED = 2307


class HopperStates(IntEnum):
    NOT_FULL = 3640
    DEMAND = 3641
    FILL_UP = 3642
    CONVEYOR_DELAY = 3643
    VACUUM_MOTOR_DELAY = 3644
    FULL = 3645
    STANDBY_DELAY = 3646
    BOILER_STANDBY = 3647
    CONVEYOR_STANDBY = 3648
    CONVEYOR_ERROR = 3649
    ERROR_FILL_TIME_MAX = 3650


# =============================================================================
# PROPERTY FACTORIES
# =============================================================================


def _block_for(offset: int) -> str:
    return BLOCK1.block_id if offset < BLOCK2.offset else BLOCK2.block_id


def _value(
    name: str,
    offset: int,
    category: str,
    *,
    scale: Fraction = NONE,
    unit: str = "",
    access: AccessMode = RO,
    signed: bool = False,
    minimum: int | None = None,
    maximum: int | None = None,
    description: str = "",
) -> PropertyDescriptor:
    """Scaled 32-bit measurement or setting."""
    return PropertyDescriptor(
        name=name,
        semantic_type=SemanticType.FLOAT64,
        offset=offset,
        length=2,
        scale=scale,
        access=access,
        block_id=_block_for(offset),
        category=category,
        unit=unit,
        description=description,
        signed=signed,
        minimum=minimum,
        maximum=maximum,
        invalid=INVALID_VALUE,
    )


def _state(
    name: str,
    offset: int,
    category: str,
    enum: type[IntEnum],
    *,
    access: AccessMode = RO,
    minimum: int | None = None,
    maximum: int | None = None,
    description: str = "",
) -> PropertyDescriptor:
    """Text-table ordinal (state or button)."""
    return PropertyDescriptor(
        name=name,
        semantic_type=SemanticType.ENUM_ORDINAL,
        offset=offset,
        length=2,
        access=access,
        block_id=_block_for(offset),
        category=category,
        enum=enum,
        description=description,
        minimum=minimum,
        maximum=maximum,
        invalid=INVALID_VALUE,
    )


def _button(name: str, offset: int, category: str, description: str = "") -> PropertyDescriptor:
    """Writable on/off switch."""
    return _state(
        name,
        offset,
        category,
        OnOffStates,
        access=RW,
        minimum=OnOffStates.OFF,
        maximum=OnOffStates.ON,
        description=description,
    )


def _duration(
    name: str,
    offset: int,
    category: str,
    time_unit: TimeUnit,
    *,
    access: AccessMode = RO,
    minimum: int | None = None,
    maximum: int | None = None,
    description: str = "",
) -> PropertyDescriptor:
    return PropertyDescriptor(
        name=name,
        semantic_type=SemanticType.DURATION,
        offset=offset,
        length=2,
        access=access,
        block_id=_block_for(offset),
        category=category,
        time_unit=time_unit,
        description=description,
        minimum=minimum,
        maximum=maximum,
        invalid=INVALID_VALUE,
    )


def _timestamp(name: str, offset: int, category: str, description: str = "") -> PropertyDescriptor:
    return PropertyDescriptor(
        name=name,
        semantic_type=SemanticType.TIMESTAMP,
        offset=offset,
        length=2,
        access=RW,
        block_id=_block_for(offset),
        category=category,
        description=description,
        invalid=INVALID_VALUE,
    )


# =============================================================================
# ETA PU 11 PROPERTIES (holding registers 1000-1169, 2 words each)
# =============================================================================

ETAPU11_PROPERTIES: tuple[PropertyDescriptor, ...] = (
    # =========================================================================
    # BOILER (block1)
    # =========================================================================
    _duration("full_load_hours", 1000, BOILER, TimeUnit.SECONDS),
    _value("total_consumed", 1002, BOILER, scale=DIV_10, unit="kg"),
    _state("boiler_state", 1004, BOILER, BoilerStates),
    _value("boiler_pressure", 1006, BOILER, scale=DIV_100, unit="bar"),
    _value("boiler_temperature", 1008, BOILER, scale=DIV_10, unit="°C"),
    _value("boiler_target", 1010, BOILER, scale=DIV_10, unit="°C"),
    _value("boiler_bottom", 1012, BOILER, scale=DIV_10, unit="°C"),
    _state("flow_control_state", 1014, BOILER, FlowControlStates),
    _state("diverter_valve_state", 1016, BOILER, DiverterValveStates),
    _state("diverter_valve_demand", 1018, BOILER, DemandValues),
    _value("demanded_output", 1020, BOILER, scale=DIV_10, unit="kW"),
    _value("flow_mix_valve_target", 1022, BOILER, scale=DIV_10, unit="°C"),
    _state("flow_mix_valve_state", 1024, BOILER, FlowMixValveStates),
    _value("flow_mix_valve_curr_temp", 1026, BOILER, scale=DIV_10, unit="°C"),
    _value("flow_mix_valve_position", 1028, BOILER, scale=DIV_10, unit="%"),
    _value("boiler_pump_output", 1030, BOILER, scale=DIV_10, unit="%"),
    _state("boiler_pump_demand", 1032, BOILER, DemandValues),
    _value("flue_gas_temperature", 1034, BOILER, scale=DIV_10, unit="°C"),
    _value("draught_fan_speed", 1036, BOILER, unit="rpm"),
    _value("residual_o2", 1038, BOILER, scale=DIV_100, unit="%"),
    _state("stoker_screw_demand", 1040, BOILER, DemandValuesEx),
    _value("stoker_screw_clock_rate", 1042, BOILER, scale=DIV_10, unit="%"),
    _state("stoker_screw_state", 1044, BOILER, ScrewStates),
    _value("stoker_screw_motor_curr", 1046, BOILER, unit="mA"),
    _state("ash_removal_state", 1048, BOILER, AshRemovalStates),
    _duration(
        "ash_removal_start_idle_time",
        1050,
        BOILER,
        TimeUnit.MINUTES,
        access=RW,
        minimum=0,
        maximum=1439,
        description="Time of day the idle de-ashing starts",
    ),
    _duration(
        "ash_removal_duration_idle_time",
        1052,
        BOILER,
        TimeUnit.SECONDS,
        access=RW,
        minimum=0,
        maximum=43200,
    ),
    _value("consumption_since_de_ash", 1054, BOILER, scale=DIV_10, unit="kg"),
    _value("consumption_since_ash_box_emptied", 1056, BOILER, scale=DIV_10, unit="kg"),
    _value(
        "empty_ash_box_after",
        1058,
        BOILER,
        scale=DIV_10,
        unit="kg",
        access=RW,
        minimum=0,
        maximum=50000,
    ),
    _value("consumption_since_maintenance", 1060, BOILER, scale=DIV_10, unit="kg"),
    _state("hopper_state", 1062, BOILER, HopperStates),
    _state(
        "hopper_fill_up_pellet_bin",
        1064,
        BOILER,
        StartValues,
        access=RW,
        minimum=StartValues.NO,
        maximum=StartValues.YES,
    ),
    _value("hopper_pellet_bin_contents", 1066, BOILER, unit="%", access=RW),
    _duration(
        "hopper_fill_up_time",
        1068,
        BOILER,
        TimeUnit.MINUTES,
        access=RW,
        minimum=0,
        maximum=1439,
        description="Time of day the pellet bin is filled",
    ),
    _state("hopper_vacuum_state", 1070, BOILER, VacuumStates),
    _state("hopper_vacuum_demand", 1072, BOILER, DemandValues),
    _button("on_off_button", 1074, BOILER, "Boiler on/off"),
    _button("de_ash_button", 1076, BOILER, "Start de-ashing"),
    # =========================================================================
    # HOT WATER (block1)
    # =========================================================================
    _state("hotwater_tank_state", 1078, HOTWATER, HWTankStates),
    _state("charging_times_state", 1080, HOTWATER, OnOffStates),
    _state("charging_times_switch_status", 1082, HOTWATER, OnOffStates),
    _value("charging_times_temperature", 1084, HOTWATER, scale=DIV_10, unit="°C"),
    _value(
        "hotwater_switchon_diff",
        1086,
        HOTWATER,
        scale=DIV_10,
        unit="°C",
        access=RW,
        minimum=0,
        maximum=300,
    ),
    _value("hotwater_target", 1088, HOTWATER, scale=DIV_10, unit="°C"),
    _value("hotwater_temperature", 1090, HOTWATER, scale=DIV_10, unit="°C"),
    _button("charge_button", 1092, HOTWATER, "Charge hot water tank once"),
    # =========================================================================
    # HEATING CIRCUIT (block2)
    # =========================================================================
    _value("room_sensor", 1094, HEATING, scale=DIV_10, unit="°C", signed=True),
    _state("heating_circuit_state", 1096, HEATING, HeatingCircuitStates),
    _state("running_state", 1098, HEATING, HWRunningStates),
    _state("heating_times", 1100, HEATING, OnOffStates),
    _state("heating_switch_status", 1102, HEATING, OnOffStates),
    _value("heating_temperature", 1104, HEATING, scale=DIV_10, unit="°C", access=RW),
    _value("room_temperature", 1106, HEATING, scale=DIV_10, unit="°C", signed=True),
    _value("room_target", 1108, HEATING, scale=DIV_10, unit="°C"),
    _value("flow", 1110, HEATING, scale=DIV_10, unit="°C"),
    _value("heating_curve", 1112, HEATING, scale=DIV_10, unit="°C"),
    _value(
        "flow_at_minus10",
        1114,
        HEATING,
        scale=DIV_10,
        unit="°C",
        access=RW,
        minimum=0,
        maximum=1000,
    ),
    _value(
        "flow_at_plus10",
        1116,
        HEATING,
        scale=DIV_10,
        unit="°C",
        access=RW,
        minimum=0,
        maximum=1000,
    ),
    _value(
        "flow_set_back",
        1118,
        HEATING,
        scale=DIV_10,
        unit="°C",
        access=RW,
        minimum=0,
        maximum=500,
    ),
    _value(
        "outside_temperature_delayed", 1120, HEATING, scale=DIV_10, unit="°C", signed=True
    ),
    _value(
        "day_heating_threshold",
        1122,
        HEATING,
        scale=DIV_10,
        unit="°C",
        access=RW,
        signed=True,
        minimum=-500,
        maximum=500,
    ),
    _value(
        "night_heating_threshold",
        1124,
        HEATING,
        scale=DIV_10,
        unit="°C",
        access=RW,
        signed=True,
        minimum=-500,
        maximum=500,
    ),
    _button("heating_day_button", 1126, HEATING),
    _button("heating_auto_button", 1128, HEATING),
    _button("heating_night_button", 1130, HEATING),
    _button("heating_on_off_button", 1132, HEATING),
    _button("heating_home_button", 1134, HEATING),
    _button("heating_away_button", 1136, HEATING),
    _timestamp("heating_holiday_start", 1138, HEATING),
    _timestamp("heating_holiday_end", 1140, HEATING),
    # =========================================================================
    # STORAGE (block2)
    # =========================================================================
    _state("discharge_screw_demand", 1142, STORAGE, DemandValuesEx),
    _value("discharge_screw_clock_rate", 1144, STORAGE, scale=DIV_10, unit="%"),
    _state("discharge_screw_state", 1146, STORAGE, ScrewStates),
    _value("discharge_screw_motor_curr", 1148, STORAGE, unit="mA"),
    _state("conveying_system", 1150, STORAGE, ConveyingSystemStates),
    _value(
        "stock",
        1152,
        STORAGE,
        scale=DIV_10,
        unit="kg",
        access=RW,
        signed=True,
        minimum=-1000000,
        maximum=1000000,
    ),
    _value(
        "stock_warning_limit",
        1154,
        STORAGE,
        scale=DIV_10,
        unit="kg",
        access=RW,
        minimum=0,
        maximum=1000000,
    ),
    # =========================================================================
    # SYSTEM (block2)
    # =========================================================================
    _value(
        "outside_temperature", 1156, SYSTEM, scale=DIV_10, unit="°C", access=RW, signed=True
    ),
    # Remaining boiler values live in block2
    _state("firebed_state", 1158, BOILER, FirebedStates),
    _state("supply_demand", 1160, BOILER, DemandValuesEx),
    _state("ignition_demand", 1162, BOILER, DemandValues),
    _value("flow_mix_valve_temperature", 1164, BOILER, scale=DIV_10, unit="°C"),
    _value("air_valve_set_position", 1166, BOILER, scale=DIV_10, unit="%"),
    _value("air_valve_curr_position", 1168, BOILER, scale=DIV_10, unit="%"),
)

ETAPU11_SCHEMA = RegisterSchema(
    "ETA PU 11",
    properties=ETAPU11_PROPERTIES,
    blocks=(BLOCK1, BLOCK2),
)

# Lookup indexes (built once at import time)
BY_NAME: dict[str, PropertyDescriptor] = {d.name: d for d in ETAPU11_PROPERTIES}
BY_ADDRESS: dict[int, PropertyDescriptor] = {d.offset: d for d in ETAPU11_PROPERTIES}


__all__ = [
    "AshRemovalStates",
    "BLOCK1",
    "BLOCK2",
    "BY_ADDRESS",
    "BY_NAME",
    "BoilerStates",
    "ConveyingSystemStates",
    "DemandValues",
    "DemandValuesEx",
    "DiverterValveStates",
    "ETAPU11_PROPERTIES",
    "ETAPU11_SCHEMA",
    "FirebedStates",
    "FlowControlStates",
    "FlowMixValveStates",
    "HWRunningStates",
    "HWTankStates",
    "HeatingCircuitStates",
    "HopperStates",
    "INVALID_VALUE",
    "OnOffStates",
    "ScrewStates",
    "StartValues",
    "VacuumStates",
]
