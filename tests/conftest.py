"""Shared pytest fixtures for the nullables test suite."""

from __future__ import annotations

# Disable Rich colors and force wide terminal BEFORE any imports
# Rich checks these at import time
import os

os.environ["NO_COLOR"] = "1"
os.environ["TERM"] = "dumb"
os.environ["FORCE_COLOR"] = "0"
os.environ["COLUMNS"] = "200"  # Prevent text wrapping in CLI output

import pytest

from nullables.infrastructure import Clock, Log

# pylint: disable=redefined-outer-name


@pytest.fixture
def clock() -> Clock:
    """Provide a null clock starting at logical time 0."""
    return Clock.create_null()


@pytest.fixture
def log() -> Log:
    """Provide a null log."""
    return Log.create_null()
