"""Shared helpers for CLI commands."""

from __future__ import annotations

import logging
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler

console = Console()
err_console = Console(stderr=True)

CLI_LOGGER_NAME = "nullables.cli"


def exit_error(message: str, code: int = 1) -> NoReturn:
    """Print an error message to stderr and exit.

    Args:
        message: Error message (Rich markup is not interpreted).
        code: Process exit code.

    Raises:
        typer.Exit: Always.
    """
    err_console.print(f"[red]Error:[/] {_escape(message)}")
    raise typer.Exit(code=code)


def configure_logging(level: str) -> None:
    """Send ``nullables`` log output to the console through Rich.

    Args:
        level: Standard logging level name.
    """
    package_logger = logging.getLogger("nullables")
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
    handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)


def get_cli_logger() -> logging.Logger:
    """Return the logger used by CLI commands."""
    return logging.getLogger(CLI_LOGGER_NAME)


def _escape(text: str) -> str:
    return text.replace("[", r"\[")


__all__ = [
    "CLI_LOGGER_NAME",
    "configure_logging",
    "console",
    "err_console",
    "exit_error",
    "get_cli_logger",
]
