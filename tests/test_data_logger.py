"""Unit tests for pipeline.data_logger module."""

import csv
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import httpx

from pipeline.data_logger import DataLoggerLoop
from storage.csv_logger import HEADER, CsvLogger

TS = datetime(2019, 1, 2, 10, 30, 0)


def _rows(path):
    with open(path, newline="", encoding="utf-8") as fh:
        return list(csv.reader(fh))


class TestDataLoggerLoop:
    def test_run_once(self, tmp_path, fake_boiler):
        path = tmp_path / "boiler.csv"
        with fake_boiler.client() as client, CsvLogger(path) as log:
            loop = DataLoggerLoop(client, log, interval_s=60)
            assert loop.run_once(TS)
        rows = _rows(path)
        assert rows[0] == HEADER
        assert rows[1][0] == "2019-01-02T10:30:00"
        assert rows[1][-1] == "Fan Pressure"
        assert loop.stats == {"rows": 1, "errors": 0}

    def test_fetch_failure_skips_tick(self, tmp_path, fake_boiler):
        fake_boiler.fail_with = httpx.ConnectError("down")
        path = tmp_path / "boiler.csv"
        with fake_boiler.client() as client, CsvLogger(path) as log:
            loop = DataLoggerLoop(client, log, interval_s=60)
            assert not loop.run_once(TS)
        assert _rows(path) == [HEADER]
        assert loop.stats["errors"] == 1

    def test_storage_failure_skips_tick(self, tmp_path, fake_boiler):
        with fake_boiler.client() as client:
            loop = DataLoggerLoop(client, CsvLogger(tmp_path / "boiler.csv"), interval_s=60)
            # logger never opened
            assert not loop.run_once(TS)
        assert loop.stats["errors"] == 1

    def test_run_writes_first_row_and_closes(self, tmp_path, fake_boiler):
        path = tmp_path / "boiler.csv"
        with fake_boiler.client() as client:
            loop = DataLoggerLoop(client, CsvLogger(path), interval_s=3600)
            loop.stop()
            loop.run()
        assert len(_rows(path)) == 2
        assert loop.stats["rows"] == 1
