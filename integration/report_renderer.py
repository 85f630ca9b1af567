"""Report rendering – console text and HTML email bodies.

Templates are plain ``str.format`` strings.  HTML output escapes every
value taken from the boiler.
"""

from __future__ import annotations

import html
from typing import Any, Dict, Iterable, List

from core.records import (
    BoilerData,
    BoilerExtDetailData,
    LoadStatusData,
    temp_as_f,
)
from storage.cycle_log import WeeklySummary

STATUS_CONSOLE = """\
Boiler Model:  {model}
Firmware:      {firmware_version} {firmware_date}
Boiler Status: {status}
Errors:        {errors}
Warnings:      {warnings}
Fault:         {fault}
Supply Temp:   {supply_f}F
Return Temp:   {return_f}F
DWH Tank Temp: {tank_f}F
Cycles:        {cycles}
Servicing:     {servicing}
Calling:       {calling}
Circulating:   {circulating}

"""

LOAD_CONSOLE = """\
Load Number: {load_num}
Load Type: {load_type}
Heat Output: {heat_out} MBtu
Load Cycles: {cycles}

"""

STATUS_HTML = """\
<div>
<h1>Boiler Status</h1>
Boiler Model:  {model}<br/>
Firmware:      {firmware_version} {firmware_date}<br/>
Boiler Status: {status}<br/>
Boiler Status: {state_code}<br/>
Errors:        {errors}<br/>
Warnings:      {warnings}<br/>
Fault:         {fault}<br/>
Supply Temp:   {supply_f}F<br/>
Return Temp:   {return_f}F<br/>
DWH Tank Temp: {tank_f}F<br/>
Cycles:        {cycles}<br/>
Servicing:     {servicing}<br/>
Calling:       {calling}<br/>
Circulating:   {circulating}<br/>
</div>"""

LOAD_HTML = """\
<div>
<h2>Load {load_num} Status</h2>
Load Type: {load_type}<br/>
Heat Output: {heat_out} MBtu<br/>
Load Cycles: {cycles}<br/>
</div>"""

WEEKLY_DAY_HTML = """\
<div>
<h3>{0}</h3>
Total Cycles: {1}<br/>
Load 1: {2}<br/>
Load 2: {3}<br/>
Load 3: {4}<br/>
Load 4: {5}<br/>
</div>
"""

WEEKLY_TABLE_HTML = """\
<div>
<h2>Weekly Comparison:</h2>
<table>
<tr><th>Week</th><th>Total</th><th>Load 1</th><th>Load 2</th><th>Load 3</th><th>Load 4</th></tr>
<tr><td>This Week</td>{current}</tr>
<tr><td>Last Week</td>{last}</tr>
<tr><td>Delta</td>{delta}</tr>
</table>
</div>
"""


def _join(numbers: Iterable[int]) -> str:
    return ",".join(str(n) for n in numbers)


def _status_values(boiler: BoilerData, detail: BoilerExtDetailData) -> Dict[str, Any]:
    return {
        "model": boiler.model,
        "firmware_version": boiler.firmware_version,
        "firmware_date": boiler.firmware_date,
        "status": detail.status,
        "state_code": boiler.status,
        "errors": detail.errors,
        "warnings": detail.warnings,
        "fault": detail.fault_description,
        "supply_f": temp_as_f(detail.supply_temp),
        "return_f": temp_as_f(detail.return_temp),
        "tank_f": temp_as_f(detail.tank_temp),
        "cycles": detail.cycles,
        "servicing": _join(detail.servicing_load_numbers()),
        "calling": _join(detail.calling_load_numbers()),
        "circulating": _join(detail.circulating_load_numbers()),
    }


def _load_values(load: LoadStatusData) -> Dict[str, Any]:
    return {
        "load_num": load.load + 1,
        "load_type": load.load_type_name,
        "heat_out": load.heat_out,
        "cycles": load.cycles,
    }


def _escaped(values: Dict[str, Any]) -> Dict[str, str]:
    return {k: html.escape(str(v)) for k, v in values.items()}


def render_status_text(
    boiler: BoilerData, detail: BoilerExtDetailData, loads: List[LoadStatusData]
) -> str:
    """Console status report followed by one block per load."""
    parts = [STATUS_CONSOLE.format(**_status_values(boiler, detail))]
    parts.extend(LOAD_CONSOLE.format(**_load_values(load)) for load in loads)
    return "".join(parts)


def render_status_html(
    boiler: BoilerData, detail: BoilerExtDetailData, loads: List[LoadStatusData]
) -> str:
    """HTML alert body with the status report and one block per load."""
    parts = ["<body>", STATUS_HTML.format(**_escaped(_status_values(boiler, detail)))]
    parts.extend(LOAD_HTML.format(**_escaped(_load_values(load))) for load in loads)
    parts.append("</body>")
    return "".join(parts)


def render_weekly_summary_html(summary: WeeklySummary) -> str:
    """HTML body of the weekly cycle summary email."""
    def cells(values: Iterable[int]) -> str:
        return "".join(f"<td>{v}</td>" for v in values)

    parts = ["<body>"]
    for day in summary.days:
        padded = [html.escape(str(v)) for v in day] + [""] * (6 - len(day))
        parts.append(WEEKLY_DAY_HTML.format(*padded[:6]))
    parts.append(WEEKLY_TABLE_HTML.format(
        current=cells(summary.current),
        last=cells(summary.last),
        delta=cells(summary.delta),
    ))
    parts.append("</body>")
    return "".join(parts)
