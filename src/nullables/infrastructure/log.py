"""Structured application log with a null form.

``Log`` is the logging collaborator handed to request handlers. Each call
records one ``LogRecord`` (alert level, message and free-form fields). The
live form forwards records to the standard ``logging`` module under the
``nullables`` logger; the null form writes nothing. Both forms feed
``track_output()`` so tests can assert exactly what was logged.

Examples:
    >>> log = Log.create_null()
    >>> output = log.track_output()
    >>> log.monitor("form parse error", details="'text' form field not found")
    >>> output.data[0].alert
    <Alert.MONITOR: 'monitor'>
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from nullables.infrastructure.output_tracker import OutputListener, OutputTracker

LOGGER_NAME = "nullables"


class Alert(str, Enum):
    """Severity of a log record.

    Attributes:
        DEBUG: Developer diagnostics.
        INFO: Normal operation.
        MONITOR: Unexpected but handled; watch for trends.
        ACTION: Someone needs to act, but not urgently.
        EMERGENCY: Service is degraded; act immediately.
    """

    DEBUG = "debug"
    INFO = "info"
    MONITOR = "monitor"
    ACTION = "action"
    EMERGENCY = "emergency"


_LOGGING_LEVELS: dict[Alert, int] = {
    Alert.DEBUG: logging.DEBUG,
    Alert.INFO: logging.INFO,
    Alert.MONITOR: logging.WARNING,
    Alert.ACTION: logging.ERROR,
    Alert.EMERGENCY: logging.CRITICAL,
}


@dataclass(frozen=True, slots=True)
class LogRecord:
    """One logged event.

    Attributes:
        alert: Severity level.
        message: Short description of the event.
        fields: Additional structured data. Exceptions are stored as strings.

    Examples:
        >>> LogRecord(Alert.INFO, "started", {"port": 5000})
        LogRecord(alert=<Alert.INFO: 'info'>, message='started', fields={'port': 5000})
    """

    alert: Alert
    message: str
    fields: dict[str, Any] = field(default_factory=dict)

    def render(self) -> str:
        """Render the record as a single line of text."""
        if not self.fields:
            return self.message
        return f"{self.message} {json.dumps(self.fields, default=str, sort_keys=True)}"


class Log:
    """Application log.

    Use ``Log.create()`` in production and ``Log.create_null()`` in tests.

    Args:
        logger: Destination logger, or None to discard output.
    """

    def __init__(self, logger: logging.Logger | None) -> None:
        """Initialize Log.

        Args:
            logger: Destination logger, or None to discard output.
        """
        self._logger = logger
        self._listener: OutputListener[LogRecord] = OutputListener()

    @classmethod
    def create(cls, logger: logging.Logger | None = None) -> Log:
        """Create a log writing to the standard ``logging`` module.

        Args:
            logger: Destination logger (default: the ``nullables`` logger).

        Returns:
            Live Log instance.
        """
        return cls(logger or logging.getLogger(LOGGER_NAME))

    @classmethod
    def create_null(cls) -> Log:
        """Create a log that records output for tracking but writes nothing.

        Returns:
            Null Log instance.
        """
        return cls(None)

    def track_output(self) -> OutputTracker[LogRecord]:
        """Track every record logged from now on."""
        return self._listener.track_output()

    def debug(self, message: str, **fields: Any) -> None:
        """Log a developer diagnostic."""
        self._write(Alert.DEBUG, message, fields)

    def info(self, message: str, **fields: Any) -> None:
        """Log normal operation."""
        self._write(Alert.INFO, message, fields)

    def monitor(self, message: str, **fields: Any) -> None:
        """Log a handled but unexpected event."""
        self._write(Alert.MONITOR, message, fields)

    def action(self, message: str, **fields: Any) -> None:
        """Log something a person needs to fix soon."""
        self._write(Alert.ACTION, message, fields)

    def emergency(self, message: str, **fields: Any) -> None:
        """Log a degradation that needs immediate attention."""
        self._write(Alert.EMERGENCY, message, fields)

    def _write(self, alert: Alert, message: str, fields: dict[str, Any]) -> None:
        record = LogRecord(alert, message, {key: _render_value(value) for key, value in fields.items()})
        self._listener.emit(record)
        if self._logger is not None:
            self._logger.log(_LOGGING_LEVELS[alert], "%s", record.render(), extra={"alert": alert.value})


def _render_value(value: Any) -> Any:
    if isinstance(value, BaseException):
        return str(value)
    return value


__all__ = [
    "LOGGER_NAME",
    "Alert",
    "Log",
    "LogRecord",
]
