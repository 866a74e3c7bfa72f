"""Call a running ROT-13 service once."""

from __future__ import annotations

import asyncio

import typer

from nullables.cli.common import console, exit_error
from nullables.config import parse_port
from nullables.exceptions import ConfigurationError, Rot13ClientError
from nullables.infrastructure.clock import Clock
from nullables.infrastructure.rot13_client import Rot13Client

DEFAULT_TIMEOUT_MS = 5000


async def transform_text_async(
    rot13_client: Rot13Client,
    clock: Clock,
    port: int,
    text: str,
    timeout_ms: float = DEFAULT_TIMEOUT_MS,
) -> str | None:
    """Transform text, giving up after ``timeout_ms``.

    Args:
        rot13_client: Client for the ROT-13 service.
        clock: Clock enforcing the timeout.
        port: Port of the ROT-13 service.
        text: Text to transform.
        timeout_ms: Timeout in milliseconds.

    Returns:
        Transformed text, or None if the service timed out (the request is
        cancelled).

    Raises:
        Rot13ClientError: If the service call fails.
    """
    handle = rot13_client.transform(port, text)

    def on_timeout() -> None:
        handle.cancel()

    return await clock.timeout_async(timeout_ms, handle.result, on_timeout)


def transform(
    text: str = typer.Argument(..., help="Text to transform."),
    port: str = typer.Option(..., "--port", "-p", help="Port of the ROT-13 service."),
    host: str = typer.Option("localhost", "--host", help="Host of the ROT-13 service."),
    timeout_ms: int = typer.Option(DEFAULT_TIMEOUT_MS, "--timeout-ms", min=0, help="Timeout in milliseconds."),
) -> None:
    """Transform TEXT with a running ROT-13 service."""
    try:
        rot13_port = parse_port(port, "ROT-13 server port")
    except ConfigurationError as exc:
        exit_error(str(exc))

    rot13_client = Rot13Client.create(host=host)
    try:
        output = asyncio.run(transform_text_async(rot13_client, Clock.create(), rot13_port, text, timeout_ms))
    except Rot13ClientError as exc:
        exit_error(f"ROT-13 service error: {exc}")

    if output is None:
        exit_error(f"ROT-13 service timed out after {timeout_ms}ms")
    console.print(output, markup=False, highlight=False, soft_wrap=True)


__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "transform",
    "transform_text_async",
]
