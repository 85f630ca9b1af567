"""Record types returned by the IBC boiler web API.

Each dataclass mirrors one JSON object answered by ``cgi-bin/bc2-cgi``.
Field metadata carries the JSON key; keys are matched exactly first and then
case-insensitively, missing keys keep the zero default and unknown keys are
ignored.

Temperatures reported by the API are degrees Celsius multiplied by 4.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Type, TypeVar

from core.exceptions import BoilerResponseError
from health.fault_decoder import (
    CALLING_SHIFT,
    CIRCULATING_SHIFT,
    SERVICING_SHIFT,
    classify,
    extract_loads,
)

T = TypeVar("T")


class RequestType(enum.IntEnum):
    MASTER_BOILER_DATA = 2
    BOILER_STATUS_DATA = 3
    BOILER_RUN_PROFILE_DATA = 5
    BOILER_LOG_DATA = 6
    BOILER_ERROR_LOG_DATA = 7
    BOILER_DATA = 11
    BOILER_STANDARD_DATA = 13
    BOILER_SETBACK_DATA = 14
    BOILER_ADV_SETTINGS_DATA = 15
    BOILER_LOAD_SETTINGS_DATA = 16
    BOILER_MULTI_SETTING_DATA = 17
    BOILER_CLEANING_SETTING_DATA = 18
    BOILER_EXT_DETAIL_DATA = 19
    BOILER_FACTORY_DATA = 20
    BOILER_FACTORY_SETTINGS_DATA = 21
    SITE_LOG_DATA = 23
    CLOCK_DATA = 24
    LOAD_PAIRING_DATA = 25
    BOILER_CAPTURE_DATA = 26
    BOILER_TEMP_SENSOR_DATA = 27
    BOILER_RESTORE = 29
    ALERT_DATA = 31
    LOAD_STATUS_DATA = 32
    BOILER_SITE_DATA = 34
    BOILER_VERSIONS = 35
    NETWORK_BOILER_DATA = 38
    ADVANCED_OPTIONS_DATA = 42
    BOILER_SIM_DATA = 44
    SLAVE_MACADDRS_DATA = 49
    PROG_SETBACK_DATA = 50
    INTERNET_UPDATE_DATA = 51
    PASSWORD_DATA = 99


class BoilerState(enum.IntEnum):
    STANDBY = 0
    PURGING = 1
    IGNITING = 2
    HEATING = 3
    CIRCULATING = 4
    ERROR = 5
    INITIALIZING = 6


# States that do not warrant an alert
NORMAL_STATES = frozenset({
    BoilerState.STANDBY,
    BoilerState.IGNITING,
    BoilerState.HEATING,
    BoilerState.CIRCULATING,
    BoilerState.INITIALIZING,
})

LOAD_TYPE_NAMES = (
    "Off",
    "DHW",
    "Reset Heating",
    "Set Point",
    "External Control",
    "Manual Control",
    "Zone Of",
)


def load_type_name(load_type: int) -> str:
    if load_type < 0 or load_type >= len(LOAD_TYPE_NAMES):
        return "Unknown"
    return LOAD_TYPE_NAMES[load_type]


def temp_as_c(temp: int) -> float:
    """Convert an API temperature (Celsius * 4) to Celsius."""
    return temp / 4


def temp_as_f(temp: int) -> int:
    """Convert an API temperature (Celsius * 4) to whole degrees Fahrenheit.

    Integer arithmetic truncates toward zero at each step, matching the
    values shown on the boiler's own display.
    """
    t = int(temp * 9 / 5) + 4 * 32
    return int(t / 4)


# ---------------------------------------------------------------------------
# JSON mapping
# ---------------------------------------------------------------------------

def _key(name: str, default: Any = 0) -> Any:
    return field(default=default, metadata={"json": name})


def _coerce(value: Any, default: Any) -> Any:
    if isinstance(default, bool):
        return bool(value)
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    return str(value)


def from_payload(cls: Type[T], payload: Any) -> T:
    """Build a record dataclass from a decoded JSON object."""
    if not isinstance(payload, dict):
        raise BoilerResponseError(
            f"{cls.__name__}: expected a JSON object, got {type(payload).__name__}"
        )
    folded = {str(k).lower(): v for k, v in payload.items()}

    kwargs: Dict[str, Any] = {}
    for f in fields(cls):
        key = f.metadata.get("json", f.name)
        value = payload[key] if key in payload else folded.get(key.lower())
        if value is None:
            continue
        try:
            kwargs[f.name] = _coerce(value, f.default)
        except (TypeError, ValueError) as exc:
            raise BoilerResponseError(
                f"{cls.__name__}.{f.name}: bad value {value!r} for {key}"
            ) from exc
    return cls(**kwargs)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass
class BoilerStatusData:
    status: int = _key("status")
    mbh: int = _key("mbh")
    supply_temp: int = _key("supplyT")
    return_temp: int = _key("returnT")
    secondary_temp: int = _key("secondaryT")
    dhw_temp: int = _key("dhwT")
    psig: int = _key("psig")
    warning: int = _key("warning")


@dataclass
class BoilerLogData:
    power_on_hrs: int = _key("PowerOnHrs")
    burner_on_hrs: int = _key("BurnerOnHrs")
    load1_on_time: int = _key("Load1OnTime")
    load2_on_time: int = _key("Load2OnTime")
    load3_on_time: int = _key("Load3OnTime")
    load4_on_time: int = _key("Load4OnTime")
    remote_on_time: int = _key("RemoteOnTime")
    starts: int = _key("Starts")
    trials: int = _key("Trials")
    errors: int = _key("Errors")
    warnings: int = _key("Warnings")
    log_entries: int = _key("LogEntries")
    cycles: int = _key("Cycles")
    bias_count: int = _key("BiasCount")


@dataclass
class BoilerErrorLogEntry:
    """A single entry of the boiler's error log."""
    time: str = _key("Time", "")
    date: str = _key("Date", "")
    min_err: int = _key("MinErr")
    maj_err: int = _key("MajErr")
    sys_err: int = _key("SysErr")
    heat_out: int = _key("HeatOut")
    fan_rpm: int = _key("FanRPM")
    inlet_temp: int = _key("InletTemp")
    outlet_temp: int = _key("OutletTemp")
    board_temp: int = _key("BoardTemp")
    diff_pressure: int = _key("DiffPressure")
    inlet_t_rate: int = _key("InletTRate")
    outlet_t_rate: int = _key("OutletTRate")
    inlet_pressure: int = _key("InletPressure")
    outlet_pressure: int = _key("OutletPressure")
    flame_sense: int = _key("FlameSense")
    sim_flame: int = _key("SIM_Flame")
    sim_status: int = _key("SIM_Status")
    fan_duty_cycle: int = _key("FanDutyCycle")
    bv_gauge: int = _key("BV_Gauge")

    @property
    def fault_description(self) -> str:
        return classify(self.min_err, self.maj_err, self.sys_err)


@dataclass
class BoilerData:
    status: int = _key("status")
    master: int = _key("master")
    net_master: int = _key("net_master")
    warnings: int = _key("warnings")
    imperial: int = _key("imperial")
    on_time: int = _key("ontime")
    boiler_id: int = _key("boiler_id")
    dim_time: int = _key("dim_time")
    configured: int = _key("configured")
    model_num: int = _key("model_num")
    design_temp: int = _key("designT")
    model: str = _key("model", "")
    firmware_version: str = _key("fwversion", "")
    firmware_date: str = _key("fwdate", "")
    sicc_module: bool = _key("sicc_module", False)

    @property
    def is_alerting_state(self) -> bool:
        return self.status not in NORMAL_STATES


@dataclass
class BoilerStandardData:
    load1_type: int = _key("Load1Type")
    load2_type: int = _key("Load2Type")
    load3_type: int = _key("Load3Type")
    load4_type: int = _key("Load4Type")
    load1_emitter: int = _key("Load1Emitter")
    load2_emitter: int = _key("Load2Emitter")
    load3_emitter: int = _key("Load3Emitter")
    load4_emitter: int = _key("Load4Emitter")
    sb1_enable: bool = _key("SB1Enable", False)
    sb2_enable: bool = _key("SB2Enable", False)
    sb3_enable: bool = _key("SB3Enable", False)
    sb4_enable: bool = _key("SB4Enable", False)
    occupied: int = _key("Occupied")
    imperial: int = _key("Imperial")

    def load_types(self) -> List[int]:
        """Load types for loads 1-4, in load order."""
        return [self.load1_type, self.load2_type, self.load3_type, self.load4_type]

    def load_type_name(self, load_type: int) -> str:
        return load_type_name(load_type)


@dataclass
class BoilerExtDetailData:
    boiler_id: int = _key("BoilerID")
    status: str = _key("Status", "")
    warnings: str = _key("Warnings", "")
    errors: str = _key("Errors", "")
    mbh: int = _key("MBH")
    supply_temp: int = _key("SupplyT")
    return_temp: int = _key("ReturnT")
    target_temp: int = _key("TargetT")
    stack_temp: int = _key("StackT")
    air_temp: int = _key("AirT")
    indoor_temp: int = _key("IndoorT")
    outdoor_temp: int = _key("OutdoorT")
    secondary_temp: int = _key("SecondaryT")
    tank_temp: int = _key("TankT")
    inlet_pressure: float = _key("InletPressure", 0.0)
    outlet_pressure: float = _key("OutletPressure", 0.0)
    delta_pressure: float = _key("DeltaPressure", 0.0)
    servicing: int = _key("Servicing")
    cycles: int = _key("Cycles")
    major_error: int = _key("MajorError")
    minor_error: int = _key("MinorError")
    system_error: int = _key("SystemError")
    warn_flags: int = _key("WarnFlags")
    pumps: int = _key("Pumps")
    op_status: int = _key("OpStatus")

    # TODO: decode Remote (0xFFFF) and Summer Off (0xF000) servicing values
    def servicing_load_numbers(self) -> List[int]:
        """Load numbers the boiler is currently servicing."""
        return extract_loads(self.servicing, SERVICING_SHIFT)

    def circulating_load_numbers(self) -> List[int]:
        """Load numbers the boiler is currently circulating."""
        return extract_loads(self.servicing, CIRCULATING_SHIFT)

    def calling_load_numbers(self) -> List[int]:
        """Load numbers calling for heat but not being serviced."""
        return extract_loads(self.servicing, CALLING_SHIFT)

    @property
    def fault_description(self) -> str:
        return classify(self.minor_error, self.major_error, self.system_error)


@dataclass
class BoilerFactoryData:
    inlet_p: int = _key("InletP")
    outlet_p: int = _key("OutletP")
    delta_p: int = _key("DeltaP")
    flow_rate: int = _key("FlowRate")
    fan_speed: int = _key("FanSpeed")
    fan_duty: int = _key("FanDuty")
    fan_target: int = _key("FanTarget")
    required_p: int = _key("RequiredP")
    fan_p: int = _key("FanP")
    offset_p: int = _key("OffsetP")
    vent_factor: int = _key("VentFactor")
    var_duty: int = _key("VarDuty")
    responding: int = _key("Responding")
    firing: int = _key("Firing")
    available: int = _key("Available")
    f_current: int = _key("F_Current")
    heat_out: int = _key("HeatOut")
    fan_heat_out: int = _key("FanHeatOut")
    inlet_temp: int = _key("InletT")
    outlet_temp: int = _key("OutletT")
    stack_temp: int = _key("StackT")
    rpm_limit: int = _key("RPMLimit")
    sicc_flame: int = _key("SICC_Flame")


@dataclass
class LoadStatusData:
    load: int = _key("Load")
    type: int = _key("Type")
    heat_out: int = _key("HeatOut")
    supply_temp: int = _key("SupplyT")
    return_temp: int = _key("ReturnT")
    boiler_max: int = _key("BoilerMax")
    boiler_diff: int = _key("BoilerDiff")
    cycles: int = _key("Cycles")
    priority: int = _key("Priority")
    temperature1: int = _key("Temperature1")
    temperature2: int = _key("Temperature2")
    temperature3: int = _key("Temperature3")
    temperature4: int = _key("Temperature4")
    temperature5: int = _key("Temperature5")
    temperature6: int = _key("Temperature6")

    @property
    def load_type_name(self) -> str:
        return load_type_name(self.type)
