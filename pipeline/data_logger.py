"""Data logger loop – polls extended boiler detail into a CSV file."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Optional

from core.boiler_client import BoilerClient
from core.exceptions import BoilerConnectionError, BoilerResponseError, StorageError
from storage.csv_logger import CsvLogger

logger = logging.getLogger(__name__)


class DataLoggerLoop:
    """Writes one CSV row immediately and then one per interval.

    Parameters
    ----------
    client : BoilerClient
    csv_logger : CsvLogger
    interval_s : float
        Seconds between rows.
    """

    def __init__(self, client: BoilerClient, csv_logger: CsvLogger, interval_s: float):
        self._client = client
        self._csv = csv_logger
        self._interval = interval_s
        self._stop = threading.Event()
        self._stats = {"rows": 0, "errors": 0}

    @property
    def stats(self):
        return dict(self._stats)

    def run_once(self, now: Optional[datetime] = None) -> bool:
        """Fetch one record and append it; returns False when the tick is skipped."""
        try:
            detail = self._client.get_boiler_ext_detail_data()
        except (BoilerConnectionError, BoilerResponseError) as exc:
            self._stats["errors"] += 1
            logger.warning("Skipping log row: %s", exc)
            return False

        try:
            self._csv.write(detail, now)
        except StorageError as exc:
            self._stats["errors"] += 1
            logger.error("CSV write failed: %s", exc)
            return False

        self._stats["rows"] += 1
        logger.debug("Logged row (fault=%s)", detail.fault_description)
        return True

    def run(self) -> None:
        """Block until ``stop`` is called; the CSV file is closed on exit."""
        self._csv.open()
        logger.info("Data logger started (interval=%.0fs, file=%s)", self._interval, self._csv.path)
        try:
            self.run_once()
            while not self._stop.wait(self._interval):
                self.run_once()
        finally:
            self._csv.close()
            logger.info("Data logger stopped (%d rows)", self._stats["rows"])

    def stop(self) -> None:
        self._stop.set()
