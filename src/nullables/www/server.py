"""Server for the www site."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nullables.http.server import HttpServer
from nullables.www.config import WwwConfig
from nullables.www.home_page.controller import HomePageController
from nullables.www.router import WwwRouter

if TYPE_CHECKING:
    from nullables.infrastructure.clock import Clock
    from nullables.infrastructure.log import Log
    from nullables.infrastructure.rot13_client import Rot13Client


class WwwServer:
    """Serves the www site.

    Args:
        http_server: Underlying HTTP server.
        home_page_controller: Controller for ``/``.
    """

    def __init__(self, http_server: HttpServer, home_page_controller: HomePageController) -> None:
        """Initialize WwwServer.

        Args:
            http_server: Underlying HTTP server.
            home_page_controller: Controller for ``/``.
        """
        self._http_server = http_server
        self._home_page_controller = home_page_controller

    @classmethod
    def create(cls, *, host: str = "localhost") -> WwwServer:
        """Create a server with live infrastructure.

        Args:
            host: Interface to bind, also used to reach the ROT-13 service.
        """
        return cls(HttpServer.create(host=host), HomePageController.create(rot13_host=host))

    @classmethod
    def create_null(
        cls,
        *,
        rot13_client: Rot13Client | None = None,
        clock: Clock | None = None,
    ) -> WwwServer:
        """Create a server with null infrastructure.

        Args:
            rot13_client: Client to use (default: null client).
            clock: Clock to use (default: null clock).
        """
        controller = HomePageController.create_null(rot13_client=rot13_client, clock=clock)
        return cls(HttpServer.create_null(), controller)

    @property
    def http_server(self) -> HttpServer:
        """Return the underlying HTTP server."""
        return self._http_server

    @property
    def is_started(self) -> bool:
        """Return True while the server is running."""
        return self._http_server.is_started

    @property
    def port(self) -> int | None:
        """Return the port the server is running on, or None when stopped."""
        return self._http_server.port

    async def start_async(self, port: int, rot13_service_port: int, log: Log) -> None:
        """Start serving the site.

        Args:
            port: Port to listen on.
            rot13_service_port: Port of the ROT-13 service.
            log: Application log.
        """
        config = WwwConfig.create(log, rot13_service_port)
        router = WwwRouter(self._home_page_controller, config)
        await self._http_server.start_async(port, log, router.route_async)

    async def stop_async(self) -> None:
        """Stop serving."""
        await self._http_server.stop_async()


__all__ = [
    "WwwServer",
]
