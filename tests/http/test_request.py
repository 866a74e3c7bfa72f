"""Tests for nullables.http.request module."""

from __future__ import annotations

import pytest

from nullables.exceptions import HttpServerError
from nullables.http.request import HttpRequest


class TestNullHttpRequest:
    """Tests for requests built with create_null()."""

    def test_defaults(self) -> None:
        """A default null request is GET / without headers."""
        request = HttpRequest.create_null()
        assert request.method == "GET"
        assert request.path == "/"
        assert request.headers == {}

    def test_method_is_upper_cased(self) -> None:
        """Methods are normalized to upper case."""
        assert HttpRequest.create_null(method="post").method == "POST"

    def test_header_names_are_lower_cased(self) -> None:
        """Header names are normalized to lower case."""
        request = HttpRequest.create_null(headers={"Content-Type": "application/json"})
        assert request.headers == {"content-type": "application/json"}

    def test_headers_are_a_copy(self) -> None:
        """Changing the returned headers does not change the request."""
        request = HttpRequest.create_null(headers={"X-Test": "1"})
        request.headers["x-test"] = "2"
        assert request.headers["x-test"] == "1"

    @pytest.mark.asyncio
    async def test_read_body(self) -> None:
        """The body is returned as text."""
        request = HttpRequest.create_null(body="text=h%C3%A9llo")
        assert await request.read_body_async() == "text=h%C3%A9llo"

    @pytest.mark.asyncio
    async def test_body_can_only_be_read_once(self) -> None:
        """A second read fails."""
        request = HttpRequest.create_null(body="hello")
        await request.read_body_async()

        with pytest.raises(HttpServerError, match="already been read"):
            await request.read_body_async()

    def test_repr(self) -> None:
        """String representation shows method and path."""
        assert repr(HttpRequest.create_null(method="post", path="/x")) == "HttpRequest(POST /x)"


class TestContentType:
    """Tests for has_content_type()."""

    @pytest.mark.parametrize(
        "header",
        [
            "application/json",
            "application/json;charset=utf-8",
            "Application/JSON; charset=utf-8",
        ],
    )
    def test_matches_media_type(self, header: str) -> None:
        """Parameters and case are ignored."""
        request = HttpRequest.create_null(headers={"content-type": header})
        assert request.has_content_type("application/json")

    def test_missing_header(self) -> None:
        """A request without content-type matches nothing."""
        assert not HttpRequest.create_null().has_content_type("application/json")

    def test_other_media_type(self) -> None:
        """A different media type does not match."""
        request = HttpRequest.create_null(headers={"content-type": "text/plain"})
        assert not request.has_content_type("application/json")
