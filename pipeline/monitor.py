"""Boiler monitor – alert emails, daily cycle log and weekly summary.

Each tick the monitor records the day's cycle counts (once, shortly before
midnight), re-evaluates the boiler's alert conditions and emails a status
report while an alert is active, at most once per mute window.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from core.boiler_client import BoilerClient
from core.exceptions import (
    BoilerConnectionError,
    BoilerResponseError,
    NotificationError,
    StorageError,
)
from core.records import BoilerState
from health.alert_reporter import AlertReporter
from integration.email_notifier import EmailNotifier
from integration.report_renderer import render_status_html, render_weekly_summary_html
from storage.cycle_log import CycleLog

logger = logging.getLogger(__name__)

_FETCH_ERRORS = (BoilerConnectionError, BoilerResponseError)

ALERT_SUBJECT = "Boiler Alert"
WEEKLY_SUBJECT = "Weekly Boiler Summary"


class BoilerMonitor:
    """Periodic boiler monitor.

    Parameters
    ----------
    monitor_cfg : dict
        The full content of ``monitor.yaml`` (after CLI overrides).
    client : BoilerClient
    cycle_log : CycleLog
    notifier : EmailNotifier
    reporter : AlertReporter, optional
    """

    def __init__(
        self,
        monitor_cfg: Dict[str, Any],
        client: BoilerClient,
        cycle_log: CycleLog,
        notifier: EmailNotifier,
        reporter: Optional[AlertReporter] = None,
    ):
        self._client = client
        self._cycle_log = cycle_log
        self._notifier = notifier
        self._reporter = reporter or AlertReporter()

        self._interval = float(monitor_cfg.get("check_interval_min", 5)) * 60
        self._ignore_warnings = bool(monitor_cfg.get("ignore_warnings", False))
        self._email_on_start = bool(monitor_cfg.get("email_on_start", False))
        self._mute = timedelta(minutes=float(monitor_cfg.get("mute_minutes", 60)))

        daily = monitor_cfg.get("daily_record", {})
        self._record_hour = daily.get("hour", 23)
        self._record_minute = daily.get("minute", 50)
        self._weekly_weekday = daily.get("weekly_summary_weekday", 5)

        self._last_date_recorded = None
        self._last_email_sent: Optional[datetime] = None
        self._stop = threading.Event()

    @property
    def reporter(self) -> AlertReporter:
        return self._reporter

    @property
    def last_email_sent(self) -> Optional[datetime]:
        return self._last_email_sent

    # -- lifecycle -----------------------------------------------------------

    def startup(self, now: Optional[datetime] = None) -> None:
        """First pass: record cycles, then email status or check for alerts."""
        now = now or datetime.now()
        self._cycle_log.touch()
        self.record_daily_cycles(now)
        if self._email_on_start:
            self.email_status(now)
        else:
            self.check_errors(now)

    def tick(self, now: Optional[datetime] = None) -> None:
        now = now or datetime.now()
        self.record_daily_cycles(now)
        self.check_errors(now)

    def run(self) -> None:
        """Block until ``stop`` is called."""
        self.startup()
        logger.info("Monitoring (interval=%.0fs)...", self._interval)
        while not self._stop.wait(self._interval):
            try:
                self.tick()
            except Exception as exc:
                logger.error("Monitor tick error: %s", exc, exc_info=True)
        logger.info("Monitor stopped")

    def stop(self) -> None:
        self._stop.set()

    # -- daily cycles --------------------------------------------------------

    def record_daily_cycles(self, now: datetime) -> bool:
        """Append today's cycle counts once, after the daily record time.

        Returns True when a row was written.  On the weekly summary day the
        summary email follows the row.
        """
        record_at = now.replace(
            hour=self._record_hour, minute=self._record_minute, second=0, microsecond=0
        )
        if not (now > record_at and now.date() != self._last_date_recorded):
            return False

        self._last_date_recorded = now.date()
        send_weekly = now.weekday() == self._weekly_weekday

        try:
            detail = self._client.get_boiler_ext_detail_data()
            loads = self._client.get_load_status_data()
        except _FETCH_ERRORS as exc:
            logger.error("Daily cycle record skipped: %s", exc)
            return False

        try:
            self._cycle_log.append(now.date(), detail.cycles, [load.cycles for load in loads])
        except StorageError as exc:
            logger.error("Daily cycle record failed: %s", exc)
            return False

        if send_weekly:
            self.send_weekly_summary(now)
        return True

    def send_weekly_summary(self, now: Optional[datetime] = None) -> bool:
        try:
            summary = self._cycle_log.weekly_summary()
        except StorageError as exc:
            logger.error("Weekly summary skipped: %s", exc)
            return False
        return self._email(WEEKLY_SUBJECT, render_weekly_summary_html(summary), now)

    # -- alerts --------------------------------------------------------------

    def check_errors(self, now: Optional[datetime] = None) -> bool:
        """Re-evaluate alert conditions; returns True when an alert email was sent."""
        now = now or datetime.now()
        try:
            boiler = self._client.get_boiler_data()
        except _FETCH_ERRORS as exc:
            self._reporter.raise_alert("A003", str(exc))
            return False
        self._reporter.resolve_alert("A003")

        if boiler.is_alerting_state:
            self._reporter.raise_alert("A001", f"Boiler state: {_state_name(boiler.status)}")
        else:
            self._reporter.resolve_alert("A001")

        if boiler.warnings > 0 and not self._ignore_warnings:
            self._reporter.raise_alert("A002", f"Boiler warnings: {boiler.warnings}")
        else:
            self._reporter.resolve_alert("A002")

        if not self._reporter.needs_notification:
            return False
        if self._last_email_sent is not None and now <= self._last_email_sent + self._mute:
            logger.debug("Alert email muted until %s", self._last_email_sent + self._mute)
            return False
        return self.email_status(now)

    def email_status(self, now: Optional[datetime] = None) -> bool:
        """Email the current status report; returns True when it was sent."""
        try:
            boiler = self._client.get_boiler_data()
            detail = self._client.get_boiler_ext_detail_data()
            loads = self._client.get_load_status_data()
        except _FETCH_ERRORS as exc:
            logger.error("Error retrieving data: %s", exc)
            return False
        return self._email(ALERT_SUBJECT, render_status_html(boiler, detail, loads), now)

    def _email(self, subject: str, body: str, now: Optional[datetime]) -> bool:
        try:
            self._notifier.send(subject, body)
        except NotificationError as exc:
            logger.error("%s", exc)
            return False
        self._last_email_sent = now or datetime.now()
        return True


def _state_name(status: int) -> str:
    try:
        return BoilerState(status).name.title()
    except ValueError:
        return f"unknown ({status})"
