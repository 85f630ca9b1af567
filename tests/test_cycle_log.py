"""Unit tests for storage.cycle_log module."""

import sys
from datetime import date, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from core.exceptions import StorageError
from storage.cycle_log import HEADER, CycleLog, WeeklySummary


def _fill(log, days, start=date(2019, 1, 1)):
    for i in range(days):
        # day i: total 100+i, load 1 10+i, load 2 1
        log.append(start + timedelta(days=i), 100 + i, [10 + i, 1])


class TestAppend:
    def test_header_and_row(self, tmp_path):
        log = CycleLog(tmp_path / "daily.csv")
        row = log.append(date(2019, 1, 5), 1234, [700, 300])
        assert row == "2019-01-05,1234,700,300,0,0"
        lines = log.path.read_text().splitlines()
        assert lines == [",".join(HEADER), row]

    def test_header_after_touch(self, tmp_path):
        log = CycleLog(tmp_path / "daily.csv")
        log.touch()
        log.append(date(2019, 1, 5), 1, [])
        assert log.path.read_text().splitlines()[0] == ",".join(HEADER)

    def test_extra_loads_truncated(self, tmp_path):
        log = CycleLog(tmp_path / "daily.csv")
        assert log.append(date(2019, 1, 5), 9, [1, 2, 3, 4, 5]) == "2019-01-05,9,1,2,3,4"

    def test_touch_creates_directory(self, tmp_path):
        log = CycleLog(tmp_path / "sub" / "daily.csv")
        log.touch()
        assert log.path.exists()


class TestWeeklySummary:
    def test_empty_file(self, tmp_path):
        log = CycleLog(tmp_path / "daily.csv")
        log.touch()
        summary = log.weekly_summary()
        assert summary.days == []
        assert summary.current == [0, 0, 0, 0, 0]

    def test_missing_file(self, tmp_path):
        with pytest.raises(StorageError):
            CycleLog(tmp_path / "missing.csv").weekly_summary()

    def test_partial_week(self, tmp_path):
        log = CycleLog(tmp_path / "daily.csv")
        _fill(log, 3)
        summary = log.weekly_summary()
        assert len(summary.days) == 3
        assert summary.current == [303, 33, 3, 0, 0]
        assert summary.last == [0, 0, 0, 0, 0]

    def test_two_weeks(self, tmp_path):
        log = CycleLog(tmp_path / "daily.csv")
        _fill(log, 16)
        summary = log.weekly_summary()

        # current: days 9..15, last: days 2..8
        assert summary.current == [sum(100 + i for i in range(9, 16)),
                                   sum(10 + i for i in range(9, 16)), 7, 0, 0]
        assert summary.last == [sum(100 + i for i in range(2, 9)),
                                sum(10 + i for i in range(2, 9)), 7, 0, 0]
        assert summary.delta == [49, 49, 0, 0, 0]
        assert summary.days[0][0] == "2019-01-10"
        assert summary.days[-1][0] == "2019-01-16"

    def test_repeated_header_rows_ignored(self, tmp_path):
        path = tmp_path / "daily.csv"
        path.write_text(
            ",".join(HEADER) + "\n"
            + "2019-01-01,5,1,0,0,0\n"
            + ",".join(HEADER) + "\n"
            + "2019-01-02,7,2,0,0,0\n"
        )
        summary = CycleLog(path).weekly_summary()
        assert len(summary.days) == 2
        assert summary.current == [12, 3, 0, 0, 0]


class TestWeeklySummaryDelta:
    def test_delta(self):
        summary = WeeklySummary(current=[10, 5, 0, 0, 0], last=[4, 6, 0, 0, 0])
        assert summary.delta == [6, -1, 0, 0, 0]
