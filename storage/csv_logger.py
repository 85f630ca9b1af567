"""CSV logger – appends one row of extended boiler detail per poll."""

from __future__ import annotations

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import IO, List, Optional

from core.exceptions import StorageError
from core.records import BoilerExtDetailData

logger = logging.getLogger(__name__)

HEADER = [
    "time",
    "status",
    "errors",
    "warnings",
    "servicing",
    "airTemp",
    "cycles",
    "indoorTemp",
    "mbh",
    "opStatus",
    "outdoorTemp",
    "pumps",
    "returnTemp",
    "secondaryTemp",
    "servicingRaw",
    "stackTemp",
    "supplyTemp",
    "tankTemp",
    "targetTemp",
    "deltaPressure",
    "inletPressure",
    "outletPressure",
    "fault",
]


def detail_row(detail: BoilerExtDetailData, ts: datetime) -> List[str]:
    """Format one CSV row from an extended detail record."""
    return [
        ts.isoformat(timespec="seconds"),
        detail.status,
        detail.errors,
        detail.warnings,
        ",".join(str(n) for n in detail.servicing_load_numbers()),
        str(detail.air_temp),
        str(detail.cycles),
        str(detail.indoor_temp),
        str(detail.mbh),
        str(detail.op_status),
        str(detail.outdoor_temp),
        str(detail.pumps),
        str(detail.return_temp),
        str(detail.secondary_temp),
        str(detail.servicing),
        str(detail.stack_temp),
        str(detail.supply_temp),
        str(detail.tank_temp),
        str(detail.target_temp),
        f"{detail.delta_pressure:.2f}",
        f"{detail.inlet_pressure:.2f}",
        f"{detail.outlet_pressure:.2f}",
        detail.fault_description,
    ]


class CsvLogger:
    """Append-only CSV writer for extended boiler detail.

    Parameters
    ----------
    path : str | Path
        Destination CSV file.  A header row is written when the file is
        new or empty.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._fh: Optional[IO[str]] = None
        self._writer = None

    @property
    def path(self) -> Path:
        return self._path

    def open(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = open(self._path, "a", newline="", encoding="utf-8")
            self._writer = csv.writer(self._fh)
            if self._fh.tell() == 0:
                self._writer.writerow(HEADER)
                self._fh.flush()
        except OSError as exc:
            raise StorageError(f"Cannot open {self._path}: {exc}") from exc
        logger.info("CSV log opened: %s", self._path)

    def close(self) -> None:
        if self._fh is not None:
            self._fh.flush()
            self._fh.close()
            self._fh = None
            self._writer = None

    def __enter__(self) -> "CsvLogger":
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def write(self, detail: BoilerExtDetailData, ts: Optional[datetime] = None) -> None:
        """Append one row and flush it to disk."""
        if self._writer is None:
            raise StorageError("CSV log is not open")
        ts = ts or datetime.now().astimezone()
        try:
            self._writer.writerow(detail_row(detail, ts))
            self._fh.flush()
        except OSError as exc:
            raise StorageError(f"Cannot write {self._path}: {exc}") from exc
