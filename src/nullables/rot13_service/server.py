"""ROT-13 service server."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nullables.http.server import HttpServer
from nullables.rot13_service.router import Rot13Router

if TYPE_CHECKING:
    from nullables.infrastructure.log import Log


class Rot13Server:
    """Serves the ROT-13 API.

    Args:
        http_server: Underlying HTTP server.
    """

    def __init__(self, http_server: HttpServer) -> None:
        """Initialize Rot13Server.

        Args:
            http_server: Underlying HTTP server.
        """
        self._http_server = http_server

    @classmethod
    def create(cls, *, host: str = "localhost") -> Rot13Server:
        """Create a server listening on a real socket."""
        return cls(HttpServer.create(host=host))

    @classmethod
    def create_null(cls) -> Rot13Server:
        """Create a server that opens no socket."""
        return cls(HttpServer.create_null())

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

    async def start_async(self, port: int, log: Log) -> None:
        """Start serving the ROT-13 API.

        Args:
            port: Port to listen on.
            log: Application log.
        """
        router = Rot13Router(log)
        await self._http_server.start_async(port, log, router.route_async)

    async def stop_async(self) -> None:
        """Stop serving."""
        await self._http_server.stop_async()


__all__ = [
    "Rot13Server",
]
