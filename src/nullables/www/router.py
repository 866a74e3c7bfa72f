"""Request routing for the www site."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nullables.www.home_page.controller import HomePageController
from nullables.www.view import error_page

if TYPE_CHECKING:
    from nullables.http.request import HttpRequest
    from nullables.http.response import HttpResponse
    from nullables.www.config import WwwConfig


class WwwRouter:
    """Dispatch www requests to controllers.

    Args:
        home_page_controller: Controller for ``/``.
        config: Configuration passed to controllers with every request.
    """

    def __init__(self, home_page_controller: HomePageController, config: WwwConfig) -> None:
        """Initialize WwwRouter.

        Args:
            home_page_controller: Controller for ``/``.
            config: Configuration passed to controllers with every request.
        """
        self._home_page_controller = home_page_controller
        self._config = config

    async def route_async(self, request: HttpRequest) -> HttpResponse:
        """Handle one request.

        Args:
            request: Incoming request.

        Returns:
            Controller response, or an HTML error page for unknown routes.
        """
        if request.path != "/":
            return error_page(404, "not found")
        if request.method == "GET":
            return await self._home_page_controller.get_async(request, self._config)
        if request.method == "POST":
            return await self._home_page_controller.post_async(request, self._config)
        return error_page(405, "method not allowed")


__all__ = [
    "WwwRouter",
]
