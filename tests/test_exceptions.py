"""Tests for nullables.exceptions module."""

from __future__ import annotations

import pytest

from nullables.exceptions import (
    ConfigurationError,
    HttpServerError,
    InvalidArgumentError,
    NullablesError,
    Rot13ClientError,
)


class TestExceptionHierarchy:
    """Tests for the exception hierarchy."""

    @pytest.mark.parametrize(
        "error_class",
        [InvalidArgumentError, ConfigurationError, Rot13ClientError, HttpServerError],
    )
    def test_all_derive_from_base(self, error_class: type[Exception]) -> None:
        """Every package error is a NullablesError."""
        assert issubclass(error_class, NullablesError)

    @pytest.mark.parametrize("error_class", [InvalidArgumentError, ConfigurationError])
    def test_value_errors(self, error_class: type[Exception]) -> None:
        """Argument and configuration errors are also ValueErrors."""
        assert issubclass(error_class, ValueError)


class TestRot13ClientError:
    """Tests for Rot13ClientError."""

    def test_message(self) -> None:
        """The message is kept and used as string form."""
        error = Rot13ClientError("boom")

        assert error.message == "boom"
        assert str(error) == "boom"
        assert error.details == {}

    def test_details_skip_missing_values(self) -> None:
        """Only provided context ends up in details."""
        error = Rot13ClientError("Unexpected status from ROT-13 service", port=5011, status=500)

        assert error.details == {"port": 5011, "status": 500}

    def test_all_details(self) -> None:
        """Port, status and body are all recorded."""
        error = Rot13ClientError("Unexpected body", port=1, status=200, body="{}")

        assert error.details == {"port": 1, "status": 200, "body": "{}"}
