"""Tests for nullables.www.router module."""

from __future__ import annotations

import pytest

from nullables.http.request import HttpRequest
from nullables.infrastructure.rot13_client import NullRot13Response, Rot13Client, Rot13Request
from nullables.www.config import WwwConfig
from nullables.www.home_page import view
from nullables.www.home_page.controller import HomePageController
from nullables.www.router import WwwRouter
from nullables.www.view import error_page


def create_router(rot13_client: Rot13Client | None = None, port: int = 42) -> WwwRouter:
    """Build a router over null infrastructure."""
    controller = HomePageController.create_null(rot13_client=rot13_client)
    return WwwRouter(controller, WwwConfig.create_null(rot13_service_port=port))


class TestWwwRouter:
    """Tests for www request dispatch."""

    @pytest.mark.asyncio
    async def test_get_home_page(self) -> None:
        """GET / renders the home page."""
        response = await create_router().route_async(HttpRequest.create_null(method="GET", path="/"))

        assert response == view.home_page()

    @pytest.mark.asyncio
    async def test_post_home_page(self) -> None:
        """POST / goes to the controller with the configured port."""
        rot13_client = Rot13Client.create_null([NullRot13Response(response="uryyb")])
        requests = rot13_client.track_requests()

        response = await create_router(rot13_client, port=5011).route_async(
            HttpRequest.create_null(method="POST", path="/", body="text=hello")
        )

        assert response == view.home_page("uryyb")
        assert requests.data == [Rot13Request(5011, "hello")]

    @pytest.mark.asyncio
    async def test_unknown_path(self) -> None:
        """Unknown paths render a 404 page."""
        response = await create_router().route_async(HttpRequest.create_null(path="/no-such-page"))

        assert response == error_page(404, "not found")

    @pytest.mark.asyncio
    async def test_unsupported_method(self) -> None:
        """Other methods on / render a 405 page."""
        response = await create_router().route_async(HttpRequest.create_null(method="DELETE", path="/"))

        assert response == error_page(405, "method not allowed")
