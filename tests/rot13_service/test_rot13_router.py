"""Tests for nullables.rot13_service.router module."""

from __future__ import annotations

import json

import pytest

from nullables.http.request import HttpRequest
from nullables.http.response import HttpResponse
from nullables.infrastructure.log import Alert, Log
from nullables.rot13_service.router import Rot13Router

JSON_HEADERS = {"content-type": "application/json"}


def transform_request(
    body: str = '{"text": "hello"}',
    *,
    method: str = "POST",
    path: str = "/rot13/transform",
    headers: dict[str, str] | None = None,
) -> HttpRequest:
    """Build a request for the transform endpoint."""
    return HttpRequest.create_null(
        body=body,
        method=method,
        path=path,
        headers=JSON_HEADERS if headers is None else headers,
    )


def error_response(status: int, error: str) -> HttpResponse:
    """Build the expected JSON error response."""
    return HttpResponse.create_json_response(status=status, body={"error": error})


class TestRot13Router:
    """Tests for routing and transformation."""

    @pytest.mark.asyncio
    async def test_transforms_text(self, log: Log) -> None:
        """A valid request is answered with the transformed text."""
        response = await Rot13Router(log).route_async(transform_request('{"text": "Hello"}'))

        assert response == HttpResponse.create_json_response(status=200, body={"transformed": "Uryyb"})

    @pytest.mark.asyncio
    async def test_content_type_parameters_accepted(self, log: Log) -> None:
        """A charset parameter on the content type is fine."""
        request = transform_request(headers={"content-type": "application/json;charset=utf-8"})

        response = await Rot13Router(log).route_async(request)

        assert response.status == 200

    @pytest.mark.asyncio
    async def test_extra_fields_ignored(self, log: Log) -> None:
        """Unknown fields in the body are ignored."""
        response = await Rot13Router(log).route_async(transform_request('{"text": "a", "other": 1}'))

        assert json.loads(response.body) == {"transformed": "n"}

    @pytest.mark.asyncio
    async def test_unknown_path(self, log: Log) -> None:
        """Unknown paths are 404."""
        response = await Rot13Router(log).route_async(transform_request(path="/no-such-url"))

        assert response == error_response(404, "not found")

    @pytest.mark.asyncio
    async def test_wrong_method(self, log: Log) -> None:
        """Methods other than POST are 405."""
        response = await Rot13Router(log).route_async(transform_request(method="GET"))

        assert response == error_response(405, "method not allowed")

    @pytest.mark.asyncio
    async def test_missing_content_type(self, log: Log) -> None:
        """A request without JSON content type is rejected and logged."""
        output = log.track_output()

        response = await Rot13Router(log).route_async(transform_request(headers={}))

        assert response == error_response(400, "invalid content-type header")
        assert output.data[0].alert is Alert.MONITOR
        assert output.data[0].message == "invalid ROT-13 request"
        assert output.data[0].fields == {"details": "invalid content-type header", "received": None}

    @pytest.mark.asyncio
    async def test_malformed_json(self, log: Log) -> None:
        """A body that is not JSON is rejected with the parse error."""
        output = log.track_output()

        response = await Rot13Router(log).route_async(transform_request("{not json"))

        assert response.status == 400
        assert json.loads(response.body)["error"].startswith("JSON parse error: ")
        assert output.data[0].fields["received"] == "{not json"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", ['{"wrong": "field"}', '{"text": 42}', '["hello"]', "null"])
    async def test_invalid_body(self, log: Log, body: str) -> None:
        """JSON without a string 'text' field is rejected."""
        output = log.track_output()

        response = await Rot13Router(log).route_async(transform_request(body))

        assert response == error_response(400, "invalid request body")
        assert output.data[0].fields == {"details": "invalid request body", "received": body}

    @pytest.mark.asyncio
    async def test_valid_request_logs_nothing(self, log: Log) -> None:
        """Successful transformations are not logged."""
        output = log.track_output()

        await Rot13Router(log).route_async(transform_request())

        assert output.data == []
