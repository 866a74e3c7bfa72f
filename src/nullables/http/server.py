"""HTTP server wrapper.

``HttpServer.create()`` serves a FastAPI application with uvicorn.
``HttpServer.create_null()`` opens no socket; tests push requests through
``simulate_request_async()`` instead. Both forms route every request to the
same handler and turn handler exceptions into a logged 500 response.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Protocol

import uvicorn
from fastapi import FastAPI, Request, Response

from nullables.exceptions import HttpServerError
from nullables.http.request import HttpRequest
from nullables.http.response import HttpResponse

if TYPE_CHECKING:
    from nullables.infrastructure.log import Log

logger = logging.getLogger(__name__)

RequestHandler = Callable[[HttpRequest], Awaitable[HttpResponse]]

_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# Polling interval while waiting for uvicorn to bind its socket (seconds)
_STARTUP_POLL_INTERVAL = 0.01


def build_app(handler: RequestHandler) -> FastAPI:
    """Build a FastAPI application forwarding every request to ``handler``.

    Args:
        handler: Coroutine function mapping an HttpRequest to an HttpResponse.

    Returns:
        FastAPI application with a single catch-all route.
    """
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)

    async def endpoint(request: Request) -> Response:
        response = await handler(HttpRequest.create(request))
        return Response(content=response.body, status_code=response.status, headers=response.headers)

    app.add_api_route("/{path:path}", endpoint, methods=_ALL_METHODS, include_in_schema=False)
    return app


class _Listener(Protocol):
    """Strategy owning the listening socket behind an ``HttpServer``."""

    async def start_async(self, host: str, port: int, app: FastAPI) -> None: ...

    async def stop_async(self) -> None: ...


class _UvicornListener:
    """Serves the application on a real socket."""

    def __init__(self) -> None:
        self._server: uvicorn.Server | None = None
        self._task: asyncio.Task[None] | None = None

    async def start_async(self, host: str, port: int, app: FastAPI) -> None:
        config = uvicorn.Config(app, host=host, port=port, log_level="warning", lifespan="off")
        self._server = uvicorn.Server(config)
        self._task = asyncio.create_task(self._server.serve())
        while not self._server.started:
            if self._task.done():
                # uvicorn exits instead of raising when it cannot bind
                self._task.result()
                raise HttpServerError(f"HTTP server failed to start on port {port}")
            await asyncio.sleep(_STARTUP_POLL_INTERVAL)

    async def stop_async(self) -> None:
        if self._server is None or self._task is None:
            return
        self._server.should_exit = True
        await self._task
        self._server = None
        self._task = None


class _NullListener:
    """Opens no socket."""

    async def start_async(self, host: str, port: int, app: FastAPI) -> None:
        pass

    async def stop_async(self) -> None:
        pass


class HttpServer:
    """HTTP server forwarding requests to a handler coroutine.

    Use ``HttpServer.create()`` in production and ``HttpServer.create_null()``
    in tests.

    Args:
        listener: Socket strategy, selected by the factory methods.
        host: Interface to bind.
    """

    def __init__(self, listener: _Listener, host: str) -> None:
        """Initialize HttpServer.

        Args:
            listener: Socket strategy, selected by the factory methods.
            host: Interface to bind.
        """
        self._listener = listener
        self._host = host
        self._port: int | None = None
        self._log: Log | None = None
        self._handler: RequestHandler | None = None

    @classmethod
    def create(cls, *, host: str = "localhost") -> HttpServer:
        """Create a server listening on a real socket.

        Args:
            host: Interface to bind.

        Returns:
            Live HttpServer instance.
        """
        return cls(_UvicornListener(), host)

    @classmethod
    def create_null(cls) -> HttpServer:
        """Create a server that opens no socket.

        Returns:
            Null HttpServer instance.
        """
        return cls(_NullListener(), "localhost")

    @property
    def is_started(self) -> bool:
        """Return True while the server is running."""
        return self._handler is not None

    @property
    def port(self) -> int | None:
        """Return the port the server is running on, or None when stopped."""
        return self._port

    async def start_async(self, port: int, log: Log, handler: RequestHandler) -> None:
        """Start serving requests.

        Args:
            port: Port to listen on.
            log: Log receiving server events and handler failures.
            handler: Coroutine function mapping an HttpRequest to an HttpResponse.

        Raises:
            HttpServerError: If the server is already started or cannot bind.
        """
        if self.is_started:
            raise HttpServerError("Can't start server because it's already running")

        await self._listener.start_async(self._host, port, build_app(self._handle_async))
        self._port = port
        self._log = log
        self._handler = handler
        log.info("server started", port=port)

    async def stop_async(self) -> None:
        """Stop serving requests.

        Raises:
            HttpServerError: If the server is not running.
        """
        if not self.is_started:
            raise HttpServerError("Can't stop server because it isn't running")

        await self._listener.stop_async()
        if self._log is not None:
            self._log.info("server stopped", port=self._port)
        self._handler = None
        self._port = None

    async def simulate_request_async(self, request: HttpRequest | None = None) -> HttpResponse:
        """Route a request as if it had arrived over the network.

        Args:
            request: Request to route (default: ``GET /`` with empty body).

        Returns:
            Response produced by the handler.

        Raises:
            HttpServerError: If the server is not running.
        """
        if not self.is_started:
            raise HttpServerError("Can't simulate request because server isn't running")
        return await self._handle_async(request or HttpRequest.create_null())

    async def _handle_async(self, request: HttpRequest) -> HttpResponse:
        if self._handler is None:
            return HttpResponse.create_plain_text_response(status=503, body="Service Unavailable")
        try:
            return await self._handler(request)
        except Exception as exc:
            logger.debug("Request handler failed for %r", request, exc_info=True)
            if self._log is not None:
                self._log.emergency(
                    "HTTP request handler threw exception",
                    method=request.method,
                    path=request.path,
                    error=exc,
                )
            return HttpResponse.create_plain_text_response(
                status=500,
                body="Internal Server Error: request handler threw exception",
            )


__all__ = [
    "HttpServer",
    "RequestHandler",
    "build_app",
]
