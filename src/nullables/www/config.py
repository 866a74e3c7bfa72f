"""Per-request configuration for the www site."""

from __future__ import annotations

from dataclasses import dataclass

from nullables.infrastructure.log import Log


@dataclass(frozen=True, slots=True)
class WwwConfig:
    """Values handed to www controllers with every request.

    Attributes:
        rot13_service_port: Port of the ROT-13 service.
        log: Application log.

    Examples:
        >>> config = WwwConfig.create_null(rot13_service_port=999)
        >>> config.rot13_service_port
        999
    """

    rot13_service_port: int
    log: Log

    @classmethod
    def create(cls, log: Log, rot13_service_port: int) -> WwwConfig:
        """Create the configuration used by a running www server."""
        return cls(rot13_service_port=rot13_service_port, log=log)

    @classmethod
    def create_null(cls, *, rot13_service_port: int = 42, log: Log | None = None) -> WwwConfig:
        """Create a configuration for tests, with a null log by default."""
        return cls(rot13_service_port=rot13_service_port, log=log or Log.create_null())


__all__ = [
    "WwwConfig",
]
