"""Start the www site and the ROT-13 service together."""

from __future__ import annotations

import logging
from typing import Any

from nullables.config import parse_port
from nullables.infrastructure.log import Log
from nullables.rot13_service.server import Rot13Server
from nullables.www.server import WwwServer

logger = logging.getLogger(__name__)


class AllServers:
    """Owns both servers of the system.

    Args:
        www_server: Server for the www site.
        rot13_server: Server for the ROT-13 service.
        log: Application log shared by both servers.

    Examples:
        >>> servers = AllServers(WwwServer.create_null(), Rot13Server.create_null(), Log.create_null())
        >>> await servers.start_async("5001", "5002")  # doctest: +SKIP
    """

    def __init__(self, www_server: WwwServer, rot13_server: Rot13Server, log: Log) -> None:
        """Initialize AllServers.

        Args:
            www_server: Server for the www site.
            rot13_server: Server for the ROT-13 service.
            log: Application log shared by both servers.
        """
        self._www_server = www_server
        self._rot13_server = rot13_server
        self._log = log

    @classmethod
    def create(cls, *, host: str = "localhost") -> AllServers:
        """Create both servers with live infrastructure."""
        return cls(WwwServer.create(host=host), Rot13Server.create(host=host), Log.create())

    @property
    def www_server(self) -> WwwServer:
        """Return the www server."""
        return self._www_server

    @property
    def rot13_server(self) -> Rot13Server:
        """Return the ROT-13 server."""
        return self._rot13_server

    async def start_async(self, www_port: Any, rot13_port: Any) -> None:
        """Validate the ports and start both servers.

        Args:
            www_port: Port for the www site (int or numeric string).
            rot13_port: Port for the ROT-13 service (int or numeric string).

        Raises:
            ConfigurationError: If a port is not a valid number.
        """
        www = parse_port(www_port, "www server port")
        rot13 = parse_port(rot13_port, "ROT-13 server port")

        logger.debug("Starting servers (www=%d, rot13=%d)", www, rot13)
        await self._rot13_server.start_async(rot13, self._log)
        await self._www_server.start_async(www, rot13, self._log)

    async def stop_async(self) -> None:
        """Stop whichever servers are running."""
        if self._www_server.is_started:
            await self._www_server.stop_async()
        if self._rot13_server.is_started:
            await self._rot13_server.stop_async()


__all__ = [
    "AllServers",
]
