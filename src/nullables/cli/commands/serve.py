"""Start the www site and the ROT-13 service."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from nullables.all_servers import AllServers
from nullables.cli.common import configure_logging, console, exit_error, get_cli_logger
from nullables.config import load_config
from nullables.exceptions import ConfigurationError, HttpServerError

USAGE = "Usage: nullables serve [WWW_PORT] [ROT13_PORT] (or set www.port and rot13.port in the config file)"


async def _wait_for_shutdown_async() -> None:
    """Block until the process is interrupted."""
    await asyncio.Event().wait()


async def _serve_async(servers: AllServers, www_port: str | int, rot13_port: str | int) -> None:
    try:
        await servers.start_async(www_port, rot13_port)
        console.print(
            f"[green]www site[/] listening on port {servers.www_server.port}, "
            f"[green]ROT-13 service[/] on port {servers.rot13_server.port}"
        )
        await _wait_for_shutdown_async()
    finally:
        await servers.stop_async()


def serve(
    www_port: str | None = typer.Argument(None, help="Port for the www site."),
    rot13_port: str | None = typer.Argument(None, help="Port for the ROT-13 service."),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file (default: nullables.conf.yml if present).",
    ),
) -> None:
    """Start the www site and the ROT-13 service."""
    try:
        settings = load_config(config_file)
    except ConfigurationError as exc:
        exit_error(str(exc))

    configure_logging(settings.log_level)
    www = www_port if www_port is not None else settings.www_port
    rot13 = rot13_port if rot13_port is not None else settings.rot13_port
    if www is None or rot13 is None:
        exit_error(USAGE)

    servers = AllServers.create(host=settings.host)
    get_cli_logger().debug("Serving on %s", settings.host)
    try:
        asyncio.run(_serve_async(servers, www, rot13))
    except (ConfigurationError, HttpServerError) as exc:
        exit_error(str(exc))
    except KeyboardInterrupt:
        console.print("Stopped.")


__all__ = [
    "USAGE",
    "serve",
]
