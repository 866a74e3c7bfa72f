"""Tests for nullables.rot13_service.server module."""

from __future__ import annotations

import pytest

from nullables.http.request import HttpRequest
from nullables.http.response import HttpResponse
from nullables.infrastructure.log import Log
from nullables.infrastructure.rot13_client import Rot13Client
from nullables.rot13_service.server import Rot13Server


class TestRot13Server:
    """Tests for the ROT-13 server."""

    @pytest.mark.asyncio
    async def test_start_and_stop(self, log: Log) -> None:
        """The server exposes its lifecycle."""
        server = Rot13Server.create_null()

        await server.start_async(5011, log)
        assert server.is_started
        assert server.port == 5011

        await server.stop_async()
        assert not server.is_started
        assert server.port is None

    @pytest.mark.asyncio
    async def test_routes_requests(self, log: Log) -> None:
        """Requests are answered by the ROT-13 router."""
        server = Rot13Server.create_null()
        await server.start_async(5011, log)

        response = await server.http_server.simulate_request_async(
            HttpRequest.create_null(
                method="POST",
                path="/rot13/transform",
                headers={"content-type": "application/json"},
                body='{"text": "hello"}',
            )
        )

        assert response == HttpResponse.create_json_response(status=200, body={"transformed": "uryyb"})


class TestRot13ServerOverHttp:
    """Tests for the live server together with the live client."""

    @pytest.mark.asyncio
    async def test_client_round_trip(self, unused_tcp_port: int) -> None:
        """The live client gets an answer from the live server."""
        server = Rot13Server.create(host="127.0.0.1")
        await server.start_async(unused_tcp_port, Log.create_null())
        try:
            client = Rot13Client.create(host="127.0.0.1")
            assert await client.transform_async(unused_tcp_port, "hello") == "uryyb"
        finally:
            await server.stop_async()
