"""Tests for nullables.infrastructure.rot13_client module."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from nullables.exceptions import InvalidArgumentError, Rot13ClientError
from nullables.infrastructure.clock import Clock
from nullables.infrastructure.rot13_client import (
    DEFAULT_NULL_RESPONSE,
    TRANSFORM_ENDPOINT,
    NullRot13Response,
    Rot13Client,
    Rot13Request,
)


class TestNullRot13Response:
    """Tests for configured null outcomes."""

    def test_defaults_to_success(self) -> None:
        """An empty outcome is a default success."""
        outcome = NullRot13Response()
        assert outcome.response is None
        assert outcome.error is None
        assert outcome.hang is False

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"response": "a", "error": "b"},
            {"response": "a", "hang": True},
            {"error": "b", "hang": True},
        ],
    )
    def test_rejects_multiple_outcomes(self, kwargs: dict[str, object]) -> None:
        """Only one outcome can be configured."""
        with pytest.raises(InvalidArgumentError, match="only one of"):
            NullRot13Response(**kwargs)  # type: ignore[arg-type]


class TestNullRot13Client:
    """Tests for the null client."""

    @pytest.mark.asyncio
    async def test_default_response(self) -> None:
        """An unconfigured null client returns the default text."""
        client = Rot13Client.create_null()

        assert await client.transform_async(123, "text") == DEFAULT_NULL_RESPONSE

    @pytest.mark.asyncio
    async def test_responses_used_in_order(self) -> None:
        """The Nth call uses the Nth configured outcome."""
        client = Rot13Client.create_null([
            NullRot13Response(response="first"),
            NullRot13Response(response="second"),
        ])

        assert await client.transform_async(1, "a") == "first"
        assert await client.transform_async(1, "b") == "second"
        assert await client.transform_async(1, "c") == DEFAULT_NULL_RESPONSE

    @pytest.mark.asyncio
    async def test_success_is_settled_immediately(self) -> None:
        """A configured success is available without yielding."""
        client = Rot13Client.create_null([NullRot13Response(response="done")])

        handle = client.transform(1, "text")

        assert handle.result.done()
        assert handle.result.result() == "done"

    @pytest.mark.asyncio
    async def test_error(self) -> None:
        """A configured error fails with Rot13ClientError."""
        client = Rot13Client.create_null([NullRot13Response(error="my error")])

        with pytest.raises(Rot13ClientError, match="my error") as exc_info:
            await client.transform_async(9999, "text")

        assert exc_info.value.details == {"port": 9999}

    @pytest.mark.asyncio
    async def test_hang_never_settles(self) -> None:
        """A hanging call stays pending, even after cancel."""
        client = Rot13Client.create_null([NullRot13Response(hang=True)])

        handle = client.transform(1, "text")
        handle.cancel()
        await asyncio.sleep(0)

        assert not handle.result.done()

    @pytest.mark.asyncio
    async def test_hang_loses_race_against_clock(self, clock: Clock) -> None:
        """A hanging call times out on a null clock."""
        client = Rot13Client.create_null([NullRot13Response(hang=True)])
        handle = client.transform(1, "text")

        race = asyncio.create_task(clock.timeout_async(5000, handle.result, lambda: "timeout"))
        await clock.advance_null_timers_async()

        assert await race == "timeout"


class TestTrackRequests:
    """Tests for request tracking."""

    @pytest.mark.asyncio
    async def test_tracks_port_and_text(self) -> None:
        """Each call is recorded with its exact arguments."""
        client = Rot13Client.create_null()
        requests = client.track_requests()

        await client.transform_async(9999, "my text")

        assert requests.data == [Rot13Request(9999, "my text")]

    @pytest.mark.asyncio
    async def test_tracks_cancellation(self) -> None:
        """Cancelling adds a second record flagged as cancelled."""
        client = Rot13Client.create_null([NullRot13Response(hang=True)])
        requests = client.track_requests()

        handle = client.transform(9999, "my text")
        handle.cancel()

        assert requests.data == [
            Rot13Request(9999, "my text"),
            Rot13Request(9999, "my text", cancelled=True),
        ]

    @pytest.mark.asyncio
    async def test_tracks_failed_calls(self) -> None:
        """Failed calls are recorded too."""
        client = Rot13Client.create_null([NullRot13Response(error="boom")])
        requests = client.track_requests()

        with pytest.raises(Rot13ClientError):
            await client.transform_async(1, "text")

        assert requests.data == [Rot13Request(1, "text")]


def _client_for(handler) -> Rot13Client:
    return Rot13Client.create(host="rot13.test", transport=httpx.MockTransport(handler))


class TestLiveRot13Client:
    """Tests for the live client over a mock HTTP transport."""

    @pytest.mark.asyncio
    async def test_sends_json_request(self) -> None:
        """The client posts the text as JSON to the transform endpoint."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"transformed": "uryyb"})

        result = await _client_for(handler).transform_async(5011, "hello")

        assert result == "uryyb"
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == f"http://rot13.test:5011{TRANSFORM_ENDPOINT}"
        assert request.headers["content-type"] == "application/json"
        assert json.loads(request.content) == {"text": "hello"}

    @pytest.mark.asyncio
    async def test_unexpected_status(self) -> None:
        """Non-200 responses raise Rot13ClientError with details."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="oops")

        with pytest.raises(Rot13ClientError, match="Unexpected status") as exc_info:
            await _client_for(handler).transform_async(5011, "hello")

        assert exc_info.value.details == {"port": 5011, "status": 500, "body": "oops"}

    @pytest.mark.asyncio
    async def test_unparseable_body(self) -> None:
        """A body that is not JSON raises Rot13ClientError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="not json")

        with pytest.raises(Rot13ClientError, match="Unparseable body"):
            await _client_for(handler).transform_async(5011, "hello")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{"wrong": "field"}, {"transformed": 42}, ["uryyb"]])
    async def test_unexpected_body(self, body: object) -> None:
        """JSON without a string 'transformed' field raises Rot13ClientError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=body)

        with pytest.raises(Rot13ClientError, match="Unexpected body"):
            await _client_for(handler).transform_async(5011, "hello")

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        """Transport failures raise Rot13ClientError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(Rot13ClientError, match="Unable to reach") as exc_info:
            await _client_for(handler).transform_async(5011, "hello")

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_cancel_aborts_request(self) -> None:
        """Cancelling a live request cancels its task."""
        release = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            await release.wait()
            return httpx.Response(200, json={"transformed": "late"})

        client = _client_for(handler)
        requests = client.track_requests()
        handle = client.transform(5011, "hello")
        await asyncio.sleep(0)

        handle.cancel()

        with pytest.raises(asyncio.CancelledError):
            await handle.result
        assert requests.data[-1] == Rot13Request(5011, "hello", cancelled=True)
