"""Request routing for the ROT-13 service.

The service exposes a single endpoint::

    POST /rot13/transform
    Content-Type: application/json

    {"text": "hello"}  ->  200 {"transformed": "uryyb"}

Every failure is answered with a JSON body of the form ``{"error": "..."}``.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from nullables.http.response import HttpResponse
from nullables.infrastructure.rot13_client import TRANSFORM_ENDPOINT
from nullables.rot13_service import logic

if TYPE_CHECKING:
    from nullables.http.request import HttpRequest
    from nullables.infrastructure.log import Log


class Rot13Router:
    """Route requests to the ROT-13 transformation.

    Args:
        log: Log receiving malformed-request events.
    """

    def __init__(self, log: Log) -> None:
        """Initialize Rot13Router.

        Args:
            log: Log receiving malformed-request events.
        """
        self._log = log

    async def route_async(self, request: HttpRequest) -> HttpResponse:
        """Handle one request.

        Args:
            request: Incoming request.

        Returns:
            JSON response.
        """
        if request.path != TRANSFORM_ENDPOINT:
            return _error_response(404, "not found")
        if request.method != "POST":
            return _error_response(405, "method not allowed")
        return await self._transform_async(request)

    async def _transform_async(self, request: HttpRequest) -> HttpResponse:
        if not request.has_content_type("application/json"):
            return self._bad_request("invalid content-type header", request.headers.get("content-type"))

        body = await request.read_body_async()
        try:
            data: Any = json.loads(body)
        except ValueError as exc:
            return self._bad_request(f"JSON parse error: {exc}", body)

        text = data.get("text") if isinstance(data, dict) else None
        if not isinstance(text, str):
            return self._bad_request("invalid request body", body)

        return HttpResponse.create_json_response(status=200, body={"transformed": logic.transform(text)})

    def _bad_request(self, error: str, received: str | None) -> HttpResponse:
        self._log.monitor("invalid ROT-13 request", details=error, received=received)
        return _error_response(400, error)


def _error_response(status: int, error: str) -> HttpResponse:
    return HttpResponse.create_json_response(status=status, body={"error": error})


__all__ = [
    "Rot13Router",
]
