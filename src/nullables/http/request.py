"""Incoming HTTP request wrapper."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING

from nullables.exceptions import HttpServerError

if TYPE_CHECKING:
    from fastapi import Request


class HttpRequest:
    """HTTP request as seen by routers and controllers.

    ``HttpRequest.create()`` wraps a live FastAPI request;
    ``HttpRequest.create_null()`` builds one from plain values for tests.
    Header names are lower-cased. The body can be read once.

    Args:
        method: HTTP method, upper-cased.
        path: URL path without query string.
        headers: Request headers.
        read_body: Coroutine function returning the raw body.
    """

    def __init__(
        self,
        method: str,
        path: str,
        headers: Mapping[str, str],
        read_body: Callable[[], Awaitable[bytes]],
    ) -> None:
        """Initialize HttpRequest.

        Args:
            method: HTTP method.
            path: URL path without query string.
            headers: Request headers.
            read_body: Coroutine function returning the raw body.
        """
        self._method = method.upper()
        self._path = path
        self._headers = {name.lower(): value for name, value in headers.items()}
        self._read_body = read_body
        self._body_read = False

    @classmethod
    def create(cls, request: Request) -> HttpRequest:
        """Wrap a live FastAPI (Starlette) request.

        Args:
            request: Incoming request.

        Returns:
            HttpRequest reading from the live request.
        """
        return cls(request.method, request.url.path, dict(request.headers), request.body)

    @classmethod
    def create_null(
        cls,
        *,
        body: str = "",
        method: str = "GET",
        path: str = "/",
        headers: Mapping[str, str] | None = None,
    ) -> HttpRequest:
        """Create a request from plain values.

        Args:
            body: Request body.
            method: HTTP method.
            path: URL path.
            headers: Request headers.

        Returns:
            Null HttpRequest instance.

        Examples:
            >>> request = HttpRequest.create_null(method="post", body="text=hello")
            >>> request.method
            'POST'
        """
        encoded = body.encode("utf-8")

        async def read_body() -> bytes:
            return encoded

        return cls(method, path, headers or {}, read_body)

    @property
    def method(self) -> str:
        """Return the upper-cased HTTP method."""
        return self._method

    @property
    def path(self) -> str:
        """Return the URL path."""
        return self._path

    @property
    def headers(self) -> dict[str, str]:
        """Return a copy of the headers, keyed by lower-cased name."""
        return dict(self._headers)

    def has_content_type(self, expected: str) -> bool:
        """Check the media type of the request, ignoring parameters such as charset.

        Args:
            expected: Media type, e.g. ``application/json``.

        Returns:
            True if the content-type header names ``expected``.
        """
        content_type = self._headers.get("content-type")
        if content_type is None:
            return False
        media_type = content_type.split(";", 1)[0].strip().lower()
        return media_type == expected.lower()

    async def read_body_async(self) -> str:
        """Read the request body as UTF-8 text.

        Returns:
            Request body.

        Raises:
            HttpServerError: If the body was already read.
        """
        if self._body_read:
            raise HttpServerError("Can't read request body because it's already been read")
        self._body_read = True
        raw = await self._read_body()
        return raw.decode("utf-8", errors="replace")

    def __repr__(self) -> str:
        """Return string representation."""
        return f"HttpRequest({self._method} {self._path})"


__all__ = [
    "HttpRequest",
]
