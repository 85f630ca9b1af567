"""Daily cycle log – one CSV row of burner and load cycle counts per day.

The monitor appends a row shortly before midnight and, once a week, builds
a summary comparing the last seven rows with the seven before them.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Sequence

import pandas as pd

from core.exceptions import StorageError

logger = logging.getLogger(__name__)

HEADER = ["Date", "Total", "Load 1", "Load 2", "Load 3", "Load 4"]
COUNT_COLUMNS = HEADER[1:]
LOAD_COUNT = 4
DAYS_PER_WEEK = 7


@dataclass
class WeeklySummary:
    """Cycle totals for the current and previous week.

    ``days`` holds the raw rows of the current week; each totals list is
    ordered Total, Load 1 .. Load 4.
    """
    days: List[List[str]] = field(default_factory=list)
    current: List[int] = field(default_factory=lambda: [0] * len(COUNT_COLUMNS))
    last: List[int] = field(default_factory=lambda: [0] * len(COUNT_COLUMNS))

    @property
    def delta(self) -> List[int]:
        return [c - p for c, p in zip(self.current, self.last)]


class CycleLog:
    """Reads and appends the daily cycle CSV.

    Parameters
    ----------
    path : str | Path
        Location of the daily cycle CSV.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def touch(self) -> None:
        """Create the file if needed and update its modification time."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.touch(exist_ok=True)
            os.utime(self._path, None)
        except OSError as exc:
            raise StorageError(f"Cannot touch {self._path}: {exc}") from exc

    def append(self, day: date, total_cycles: int, load_cycles: Sequence[int]) -> str:
        """Append a row for *day*; missing load counts are written as 0."""
        loads = list(load_cycles)[:LOAD_COUNT]
        loads += [0] * (LOAD_COUNT - len(loads))
        row = ",".join([day.strftime("%Y-%m-%d"), str(total_cycles)] + [str(n) for n in loads])

        try:
            with open(self._path, "a", encoding="utf-8") as fh:
                if fh.tell() == 0:
                    fh.write(",".join(HEADER) + "\n")
                fh.write(row + "\n")
        except OSError as exc:
            raise StorageError(f"Cannot append to {self._path}: {exc}") from exc

        logger.info("Daily cycles recorded: %s", row)
        return row

    def weekly_summary(self) -> WeeklySummary:
        """Summarise the last seven rows against the seven before them."""
        try:
            df = pd.read_csv(self._path, dtype={"Date": str})
        except pd.errors.EmptyDataError:
            return WeeklySummary()
        except (OSError, pd.errors.ParserError) as exc:
            raise StorageError(f"Cannot read {self._path}: {exc}") from exc

        df = df[df["Date"] != "Date"]
        counts = (
            df[COUNT_COLUMNS]
            .apply(pd.to_numeric, errors="coerce")
            .fillna(0)
            .astype(int)
        )

        this_week = df.tail(DAYS_PER_WEEK)
        summary = WeeklySummary(
            days=this_week.astype(str).values.tolist(),
            current=counts.tail(DAYS_PER_WEEK).sum().tolist(),
        )
        if len(counts) >= 2 * DAYS_PER_WEEK:
            previous = counts.iloc[-2 * DAYS_PER_WEEK:-DAYS_PER_WEEK]
            summary.last = previous.sum().tolist()
        return summary
