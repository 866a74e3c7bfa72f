"""Typer application for the ``nullables`` command."""

from __future__ import annotations

import typer

from nullables import __version__
from nullables.cli.commands.serve import serve
from nullables.cli.commands.transform import transform

app = typer.Typer(
    name="nullables",
    help="ROT-13 www site and service built on nullable infrastructure.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"nullables {__version__}")
        raise typer.Exit()


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """ROT-13 www site and service built on nullable infrastructure."""


app.command()(serve)
app.command()(transform)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
