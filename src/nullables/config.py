"""Configuration loading for the nullables servers.

Settings are read from a YAML file (``nullables.conf.yml`` in the working
directory by default). String values may reference environment variables:

- ``${VAR}`` - required variable, raises ConfigurationError if not set
- ``${VAR:-default}`` - optional variable with default value

Example file::

    host: localhost
    log_level: INFO
    www:
      port: ${WWW_PORT:-5010}
    rot13:
      port: 5011
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from nullables.exceptions import ConfigurationError

log = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "nullables.conf.yml"

_ENV_VAR_PATTERN = re.compile(r"\$\{([a-zA-Z_][a-zA-Z0-9_]*)(?::-([^}]*))?\}")
_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
_MAX_PORT = 65535


def _expand_env_vars(value: str, source: str) -> str:
    """Expand environment variables in a string value.

    Args:
        value: String potentially containing ${VAR} patterns.
        source: Source file for error messages.

    Returns:
        String with environment variables expanded.

    Raises:
        ConfigurationError: If a required variable is not set.

    Examples:
        >>> os.environ["NULLABLES_TEST_HOST"] = "example.com"
        >>> _expand_env_vars("${NULLABLES_TEST_HOST}", "test")
        'example.com'
        >>> _expand_env_vars("${NULLABLES_MISSING:-5000}", "test")
        '5000'
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default_value = match.group(2)

        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value
        if default_value is not None:
            return default_value
        raise ConfigurationError(f"Environment variable '{var_name}' is not set (required by {source})")

    return _ENV_VAR_PATTERN.sub(replacer, value)


def _expand_env_vars_recursive(data: Any, source: str) -> Any:
    """Apply ``_expand_env_vars`` to every string in nested dicts and lists."""
    if isinstance(data, dict):
        return {k: _expand_env_vars_recursive(v, source) for k, v in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars_recursive(item, source) for item in data]
    if isinstance(data, str):
        return _expand_env_vars(data, source)
    return data


def parse_port(value: Any, name: str) -> int:
    """Convert a configured or command-line value to a port number.

    Args:
        value: Raw value (int or numeric string).
        name: Human-readable name used in the error message.

    Returns:
        Port number.

    Raises:
        ConfigurationError: If the value is not a number or out of range.

    Examples:
        >>> parse_port("5001", "www server port")
        5001
        >>> parse_port("xxx", "www server port")
        Traceback (most recent call last):
        ...
        nullables.exceptions.ConfigurationError: www server port is not a number
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} is not a number")
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} is not a number") from None
    if not 0 <= port <= _MAX_PORT:
        raise ConfigurationError(f"{name} must be between 0 and {_MAX_PORT}, got {port}")
    return port


@dataclass(frozen=True, slots=True)
class NullablesConfig:
    """Server settings.

    Attributes:
        host: Interface the servers bind to; also where the www site finds
            the ROT-13 service.
        www_port: Default port for the www site (None: must be given on the
            command line).
        rot13_port: Default port for the ROT-13 service.
        log_level: Standard logging level name.

    Examples:
        >>> NullablesConfig(log_level="VERBOSE")
        Traceback (most recent call last):
        ...
        nullables.exceptions.ConfigurationError: Invalid log_level 'VERBOSE'. Allowed: ['CRITICAL', 'DEBUG', 'ERROR', 'INFO', 'WARNING']
    """

    host: str = "localhost"
    www_port: int | None = None
    rot13_port: int | None = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Validate settings."""
        if not self.host:
            raise ConfigurationError("host must not be empty")
        if self.log_level not in _LOG_LEVELS:
            raise ConfigurationError(f"Invalid log_level {self.log_level!r}. Allowed: {sorted(_LOG_LEVELS)}")


def load_config(path: str | Path | None = None) -> NullablesConfig:
    """Load server settings from YAML.

    Args:
        path: Config file. If None, ``nullables.conf.yml`` in the working
            directory is used when present, otherwise defaults apply.

    Returns:
        Validated NullablesConfig.

    Raises:
        ConfigurationError: If an explicit file is missing, or the file is
            not valid YAML or contains invalid values.
    """
    if path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_FILE
        if not config_path.is_file():
            log.debug("No %s found, using defaults", DEFAULT_CONFIG_FILE)
            return NullablesConfig()
    else:
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping, got {type(raw).__name__}")

    data = _expand_env_vars_recursive(raw, str(config_path))
    log.debug("Loaded config from %s", config_path)
    return _parse_config(data, str(config_path))


def _parse_config(data: dict[str, Any], source: str) -> NullablesConfig:
    """Build a NullablesConfig from expanded YAML data."""
    www = _section(data, "www", source)
    rot13 = _section(data, "rot13", source)

    www_port = www.get("port")
    rot13_port = rot13.get("port")
    return NullablesConfig(
        host=str(data.get("host", "localhost")),
        www_port=None if www_port is None else parse_port(www_port, "www server port"),
        rot13_port=None if rot13_port is None else parse_port(rot13_port, "ROT-13 server port"),
        log_level=str(data.get("log_level", "INFO")).upper(),
    )


def _section(data: dict[str, Any], name: str, source: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"{source}: '{name}' must be a mapping")
    return section


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "NullablesConfig",
    "load_config",
    "parse_port",
]
