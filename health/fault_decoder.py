"""Boiler fault and load bitfield decoding.

``classify`` collapses the minor, major and system error words of a boiler
record into the single fault description shown to an operator.  Evaluation
is staged: reassign bits between the minor and major words, resolve each
word against its bit table, then apply label overrides.  Category
precedence is system > hard (major) > soft (minor) > none.

All functions here are pure; the tables they read are module constants.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from health.fault_codes import (
    HARD_ERRORS,
    HARD_TEMP_PROBE,
    HARD_TEMPERATURE_PROBE,
    HARD_VENT_HIGH_PRESSURE,
    PROMOTED_VENT_HIGH_LIMIT,
    PROMOTED_WATER_HIGH_LIMIT,
    SOFT_ERRORS_1,
    SOFT_ERRORS_2,
    SOFT_VENT_HIGH_LIMIT,
    SOFT_WATER_HIGH_LIMIT,
    SYSTEM_ERRORS,
    TEMP_PROBE_ERROR,
    TEMPERATURE_PROBE_ERROR,
    UNKNOWN_FAULT,
    VENT_HIGH_LIMIT,
    VENT_HIGH_PRESSURE,
    WATER_HIGH_LIMIT,
    BitLabel,
    BitLabelTable,
)

SERVICING_SHIFT = 0
CIRCULATING_SHIFT = 4
CALLING_SHIFT = 8

_MAX_LOADS = 4


@dataclass(frozen=True)
class ReassignedErrors:
    """Minor/major words after cross-category bit reassignment."""
    minor: int
    major: int
    promoted: int = 0
    demoted: int = 0


def resolve(word: int, table: BitLabelTable) -> Optional[BitLabel]:
    """Return the last entry of *table* whose mask intersects *word*.

    Every matching entry replaces the previous match, so when several bits
    are set the entry listed latest in the table wins.  Returns ``None`` if
    no entry matches.
    """
    match = None
    for entry in table:
        if word & entry.mask:
            match = entry
    return match


def reassign(minor_err: int, major_err: int) -> ReassignedErrors:
    """Move the soft high-limit bits to the hard category and the hard
    temperature-probe bit to the soft category, clearing the raw bits."""
    promoted = 0
    demoted = 0
    if minor_err & SOFT_WATER_HIGH_LIMIT:
        promoted |= PROMOTED_WATER_HIGH_LIMIT
    if minor_err & SOFT_VENT_HIGH_LIMIT:
        promoted |= PROMOTED_VENT_HIGH_LIMIT
    if major_err & HARD_TEMP_PROBE:
        demoted = HARD_TEMP_PROBE

    return ReassignedErrors(
        minor=minor_err & ~(SOFT_WATER_HIGH_LIMIT | SOFT_VENT_HIGH_LIMIT),
        major=major_err & ~HARD_TEMP_PROBE,
        promoted=promoted,
        demoted=demoted,
    )


def _classify_hard(errors: ReassignedErrors) -> str:
    label = UNKNOWN_FAULT
    match = resolve(errors.major, HARD_ERRORS)
    if match is not None:
        label = match.label
        if match.mask & HARD_VENT_HIGH_PRESSURE:
            label = VENT_HIGH_PRESSURE
        elif match.mask & HARD_TEMPERATURE_PROBE:
            label = TEMPERATURE_PROBE_ERROR

    if errors.promoted & PROMOTED_VENT_HIGH_LIMIT:
        label = VENT_HIGH_LIMIT
    if errors.promoted & PROMOTED_WATER_HIGH_LIMIT:
        label = WATER_HIGH_LIMIT
    return label


def _classify_soft(errors: ReassignedErrors) -> str:
    label = UNKNOWN_FAULT
    match = resolve(errors.minor, SOFT_ERRORS_1)
    if match is not None:
        label = match.label

    if errors.demoted:
        label = TEMP_PROBE_ERROR

    # Part 2 overrides the demotion label too; consumers rely on this string.
    match = resolve(errors.minor, SOFT_ERRORS_2)
    if match is not None:
        label = match.label
    return label


def classify(minor_err: int, major_err: int, system_err: int) -> str:
    """Return the description of the dominant fault, or ``"Unknown"``."""
    if system_err != 0:
        match = resolve(system_err, SYSTEM_ERRORS)
        return match.label if match is not None else UNKNOWN_FAULT

    errors = reassign(minor_err, major_err)

    if errors.major != 0 or errors.promoted:
        return _classify_hard(errors)

    if errors.minor != 0 or errors.demoted:
        return _classify_soft(errors)

    return UNKNOWN_FAULT


def extract_loads(status: int, shift: int) -> List[int]:
    """Return the load numbers (1-4) flagged in the nibble at *shift*."""
    nibble = (status >> shift) & 0xF
    return [n for n in range(1, _MAX_LOADS + 1) if nibble & (1 << (n - 1))]
