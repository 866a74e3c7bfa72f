"""Command-line interface for the nullables servers."""

from nullables.cli.app import app, main

__all__ = [
    "app",
    "main",
]
