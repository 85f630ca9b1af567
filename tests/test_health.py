"""Unit tests for health subsystem."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from health.alert_reporter import AlertReporter
from health.fault_codes import ALERT_CODES, AlertLevel, get_alert


class TestAlertCodes:
    def test_known_code(self):
        ac = get_alert("A001")
        assert ac.code == "A001"
        assert ac.level == AlertLevel.CRITICAL
        assert ac.notify

    def test_unreachable_does_not_notify(self):
        assert not get_alert("A003").notify

    def test_registry_keys_match_codes(self):
        assert all(code == ac.code for code, ac in ALERT_CODES.items())


class TestAlertReporter:
    def test_raise_and_resolve(self):
        reporter = AlertReporter()
        event = reporter.raise_alert("A001", "Boiler state: Error")
        assert "A001" in reporter.active_alerts
        assert reporter.needs_notification

        reporter.resolve_alert("A001")
        assert "A001" not in reporter.active_alerts
        assert not reporter.needs_notification
        assert event.resolved

    def test_duplicate_raise_refreshes(self):
        reporter = AlertReporter()
        first = reporter.raise_alert("A002", "Boiler warnings: 1")
        second = reporter.raise_alert("A002", "Boiler warnings: 2")
        assert first is second
        assert len(reporter.active_alerts) == 1
        assert reporter.active_alerts["A002"].message == "Boiler warnings: 2"

    def test_default_message(self):
        event = AlertReporter().raise_alert("A003")
        assert event.message == "Boiler unreachable"

    def test_non_notifying_alert(self):
        reporter = AlertReporter()
        reporter.raise_alert("A003", "timeout")
        assert not reporter.needs_notification

    def test_mixed_alerts_notify(self):
        reporter = AlertReporter()
        reporter.raise_alert("A003", "timeout")
        reporter.raise_alert("A002")
        assert reporter.needs_notification

    def test_resolve_inactive_is_noop(self):
        reporter = AlertReporter()
        reporter.resolve_alert("A001")
        assert reporter.active_alerts == {}

    def test_raise_logs_at_alert_level(self, caplog):
        reporter = AlertReporter()
        with caplog.at_level("INFO", logger="health.alert_reporter"):
            reporter.raise_alert("A001", "Boiler state: Error")
            reporter.resolve_alert("A001")
        levels = [r.levelname for r in caplog.records]
        assert levels == ["CRITICAL", "INFO"]
