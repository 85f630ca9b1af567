"""Alert reporter – tracks the boiler alert conditions seen by the monitor.

Keeps the set of active alerts and logs each one when it is raised and
when it is resolved.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict

from health.fault_codes import AlertCode, AlertLevel, get_alert

logger = logging.getLogger(__name__)


@dataclass
class AlertEvent:
    alert: AlertCode
    message: str
    timestamp: float = field(default_factory=time.time)
    resolved: bool = False


class AlertReporter:
    """Collects and manages active alert events."""

    def __init__(self):
        self._active: Dict[str, AlertEvent] = {}

    def raise_alert(self, code: str, message: str = "") -> AlertEvent:
        """Raise or refresh an alert.

        If the same code is already active its message and timestamp are
        updated and nothing is logged.
        """
        ac = get_alert(code)
        msg = message or ac.description

        if code in self._active:
            event = self._active[code]
            event.message = msg
            event.timestamp = time.time()
            return event

        event = AlertEvent(alert=ac, message=msg)
        logger.log(
            _level_to_int(ac.level),
            "ALERT RAISED [%s] %s: %s", code, ac.level.value, msg,
        )
        self._active[code] = event
        return event

    def resolve_alert(self, code: str) -> None:
        """Mark an alert as resolved and remove it from the active set."""
        if code in self._active:
            self._active[code].resolved = True
            logger.info("ALERT RESOLVED [%s]", code)
            del self._active[code]

    @property
    def active_alerts(self) -> Dict[str, AlertEvent]:
        return dict(self._active)

    @property
    def needs_notification(self) -> bool:
        """True while any active alert asks for an operator notification."""
        return any(e.alert.notify for e in self._active.values())


def _level_to_int(level: AlertLevel) -> int:
    return {
        AlertLevel.INFO: logging.INFO,
        AlertLevel.WARNING: logging.WARNING,
        AlertLevel.ERROR: logging.ERROR,
        AlertLevel.CRITICAL: logging.CRITICAL,
    }.get(level, logging.ERROR)
