"""ROT-13 transformation service.

A small JSON API consumed by the www site through ``Rot13Client``.
"""

from nullables.rot13_service.logic import transform
from nullables.rot13_service.router import Rot13Router
from nullables.rot13_service.server import Rot13Server

__all__ = [
    "Rot13Router",
    "Rot13Server",
    "transform",
]
