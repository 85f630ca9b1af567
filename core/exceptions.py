"""Custom exception classes for ibc_monitor.

Each exception type maps to a distinct failure domain so that the polling
tools can log and skip a tick, or report an alert, accurately.
"""


class IbcMonitorError(Exception):
    """Base exception for all ibc_monitor errors."""


class BoilerConnectionError(IbcMonitorError):
    """Raised when the boiler's web API cannot be reached."""


class BoilerResponseError(IbcMonitorError):
    """Raised when the boiler answers with an error status or a malformed payload."""


class NotificationError(IbcMonitorError):
    """Raised when an alert or summary email cannot be delivered."""


class StorageError(IbcMonitorError):
    """Raised when a CSV log file cannot be opened, written or read."""


class ConfigError(IbcMonitorError):
    """Raised when required configuration is missing or malformed."""
