"""Fault code registries for IBC boilers and for the monitor itself.

The boiler reports faults as three bitfields (minor, major and system error
words).  Each bitfield is interpreted against an ordered table of
``BitLabel`` entries; table order is significant because a later matching
entry overrides an earlier one (see ``health.fault_decoder.resolve``).

The tables describe G3 boilers.  Bit meanings follow the vendor's error-code
list as exposed by the boiler's own web UI.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class BitLabel:
    mask: int
    label: str


BitLabelTable = Tuple[BitLabel, ...]

UNKNOWN_FAULT = "Unknown"

# ---------------------------------------------------------------------------
# Bits moved between the minor and major words before table lookup
# ---------------------------------------------------------------------------

SOFT_WATER_HIGH_LIMIT = 0x10    # minor word, promoted to a hard fault
SOFT_VENT_HIGH_LIMIT = 0x20     # minor word, promoted to a hard fault
HARD_TEMP_PROBE = 0x04          # major word, demoted to a soft fault

# Promotion values carried into the major branch.  Observed soft bit 0x10
# is carried as 0x20 and vice versa.
PROMOTED_VENT_HIGH_LIMIT = 0x10
PROMOTED_WATER_HIGH_LIMIT = 0x20

# Hard-table masks whose label is replaced after lookup
HARD_VENT_HIGH_PRESSURE = 0x20
HARD_TEMPERATURE_PROBE = 0x04

VENT_HIGH_PRESSURE = "Vent High Pressure"
TEMPERATURE_PROBE_ERROR = "Temperature Probe Error"
VENT_HIGH_LIMIT = "Vent High Limit"
WATER_HIGH_LIMIT = "Water High Limit"
TEMP_PROBE_ERROR = "Temp. Probe Error"

# ---------------------------------------------------------------------------
# Bit tables
# ---------------------------------------------------------------------------

SYSTEM_ERRORS: BitLabelTable = (
    BitLabel(0x01, "CANbus"),
    BitLabel(0x02, "CGI Task"),
    BitLabel(0x04, "I2C Bus 0"),
    BitLabel(0x08, "I2C Bus 1"),
    BitLabel(0x10, "BACnet Task"),
    BitLabel(0x20, "GPIO Expander"),
    BitLabel(0x40, "LCD Module/Bus"),
    BitLabel(0x80, "FRAM Module"),
)

HARD_ERRORS: BitLabelTable = (
    BitLabel(0x01, "Ignition Trials Exceeded"),
    BitLabel(0x10, "Roll Out Switch"),
    BitLabel(0x20, "Low Water Cutoff"),
    BitLabel(0x02, "Module High Current"),
    BitLabel(0x04, "Sec/Indoor Sensor"),
    BitLabel(0x08, "Low Water Cutoff"),
)

SOFT_ERRORS_1: BitLabelTable = (
    BitLabel(0x0001, "Flame Sig/Vent Blocked"),
    BitLabel(0x0004, "Low RPM/Air Flow"),
    BitLabel(0x0008, "No/Low Water Flow"),
    BitLabel(0x0010, "Water High Limit"),
    BitLabel(0x0020, "Vent High Limit"),
    BitLabel(0x0040, "Interlock 1 Open"),
    BitLabel(0x0080, "Interlock 2 Open"),
)

SOFT_ERRORS_2: BitLabelTable = (
    BitLabel(0x0100, "Inlet Pressure Sensor"),
    BitLabel(0x0200, "Fan Pressure"),
    BitLabel(0x0400, "No/Low Water Flow"),
    BitLabel(0x0800, "Low Module Current"),
    BitLabel(0x2000, "See Error Log/SIM"),
    BitLabel(0x4000, "Low Water Pressure"),
    BitLabel(0x8000, "Max deltaT Exceeded"),
    BitLabel(0x1000, "Reversed Flow"),
)


# ---------------------------------------------------------------------------
# Monitor alert conditions
# ---------------------------------------------------------------------------

class AlertLevel(enum.Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class AlertCode:
    code: str
    level: AlertLevel
    description: str
    notify: bool = True


ALERT_CODES = {
    "A001": AlertCode("A001", AlertLevel.CRITICAL, "Boiler in alerting state"),
    "A002": AlertCode("A002", AlertLevel.WARNING, "Boiler reports warnings"),
    "A003": AlertCode("A003", AlertLevel.ERROR, "Boiler unreachable", notify=False),
}


def get_alert(code: str) -> AlertCode:
    """Look up a registered alert code; raises KeyError for any other code."""
    return ALERT_CODES[code]
