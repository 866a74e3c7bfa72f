"""Nullable infrastructure wrappers.

Every wrapper has a live form (``create()``) that performs real I/O and a
null form (``create_null()``) that simulates the same behavior without it.
Tests build the code under test from null forms and observe it through the
``track_*()`` methods instead of using mocks.

Examples:
    >>> from nullables.infrastructure import Clock, Log, Rot13Client
    >>> clock = Clock.create_null()
    >>> log = Log.create_null()
    >>> client = Rot13Client.create_null()
"""

from nullables.infrastructure.clock import Clock, TimerHandle, TimerState
from nullables.infrastructure.log import Alert, Log, LogRecord
from nullables.infrastructure.output_tracker import OutputListener, OutputTracker
from nullables.infrastructure.rot13_client import (
    DEFAULT_NULL_RESPONSE,
    NullRot13Response,
    Rot13Client,
    Rot13Request,
    TransformHandle,
)

__all__ = [
    "DEFAULT_NULL_RESPONSE",
    "Alert",
    "Clock",
    "Log",
    "LogRecord",
    "NullRot13Response",
    "OutputListener",
    "OutputTracker",
    "Rot13Client",
    "Rot13Request",
    "TimerHandle",
    "TimerState",
    "TransformHandle",
]
