"""Specialized exceptions raised by the nullables package.

Exception hierarchy::

    NullablesError (base for all package errors)
        InvalidArgumentError (infrastructure misuse, also ValueError)
        ConfigurationError (invalid config or command-line values, also ValueError)
        Rot13ClientError (ROT-13 service call failed)
        HttpServerError (HTTP server or request misuse)

Only ``InvalidArgumentError`` is meant to propagate out of application code:
it signals a programming error, not a runtime condition.
"""

from __future__ import annotations

from typing import Any


class NullablesError(Exception):
    """Base exception for all nullables errors.

    All package-specific exceptions inherit from this class,
    allowing for easy catching of any nullables error.
    """


class InvalidArgumentError(NullablesError, ValueError):
    """An infrastructure primitive was called with an invalid argument.

    Raised for programmer errors such as a negative timer delay or a
    null-only operation invoked on a live instance. Never caught by
    the package itself.

    Examples:
        >>> raise InvalidArgumentError("delay_ms must not be negative, got -1")
        Traceback (most recent call last):
        ...
        nullables.exceptions.InvalidArgumentError: delay_ms must not be negative, got -1
    """


class ConfigurationError(NullablesError, ValueError):
    """Configuration file or command-line values are invalid."""


class Rot13ClientError(NullablesError):
    """Raised when a call to the ROT-13 service fails.

    Attributes:
        message: Human-readable error message.
        details: Additional error context (port, status, body).

    Examples:
        >>> raise Rot13ClientError("Unexpected status from ROT-13 service", port=5001, status=500)
        Traceback (most recent call last):
        ...
        nullables.exceptions.Rot13ClientError: Unexpected status from ROT-13 service
    """

    def __init__(
        self,
        message: str,
        *,
        port: int | None = None,
        status: int | None = None,
        body: str | None = None,
    ) -> None:
        """Initialize Rot13ClientError.

        Args:
            message: Human-readable error message.
            port: Port of the ROT-13 service that was called.
            status: HTTP status returned by the service (if any).
            body: Response body returned by the service (if any).
        """
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = {
            key: value
            for key, value in (("port", port), ("status", status), ("body", body))
            if value is not None
        }


class HttpServerError(NullablesError):
    """HTTP server or request was used incorrectly.

    Raised when starting a server twice, stopping a server that is not
    running, or reading a request body more than once.
    """


__all__ = [
    "ConfigurationError",
    "HttpServerError",
    "InvalidArgumentError",
    "NullablesError",
    "Rot13ClientError",
]
