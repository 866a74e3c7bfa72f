"""Outgoing HTTP response value."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """HTTP response produced by routers and controllers.

    Attributes:
        status: HTTP status code.
        headers: Response headers.
        body: Response body.

    Examples:
        >>> response = HttpResponse.create_json_response(status=200, body={"transformed": "uryyb"})
        >>> response.body
        '{"transformed": "uryyb"}'
        >>> response.headers["content-type"]
        'application/json;charset=utf-8'
    """

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""

    @classmethod
    def create_plain_text_response(cls, *, status: int, body: str) -> HttpResponse:
        """Create a ``text/plain`` response."""
        return cls(status, {"content-type": "text/plain;charset=utf-8"}, body)

    @classmethod
    def create_json_response(cls, *, status: int, body: Any) -> HttpResponse:
        """Create an ``application/json`` response from a JSON-serializable value."""
        return cls(status, {"content-type": "application/json;charset=utf-8"}, json.dumps(body))

    @classmethod
    def create_html_response(cls, *, status: int = 200, body: str) -> HttpResponse:
        """Create a ``text/html`` response."""
        return cls(status, {"content-type": "text/html;charset=utf-8"}, body)


__all__ = [
    "HttpResponse",
]
