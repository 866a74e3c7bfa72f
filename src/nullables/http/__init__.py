"""HTTP plumbing shared by the www site and the ROT-13 service.

Provides nullable wrappers for the incoming request and the server, plus
an immutable response value.
"""

from nullables.http.request import HttpRequest
from nullables.http.response import HttpResponse
from nullables.http.server import HttpServer, RequestHandler, build_app

__all__ = [
    "HttpRequest",
    "HttpResponse",
    "HttpServer",
    "RequestHandler",
    "build_app",
]
