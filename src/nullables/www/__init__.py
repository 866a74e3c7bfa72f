"""The www site: an HTML front end for the ROT-13 service."""

from nullables.www.config import WwwConfig
from nullables.www.home_page.controller import HomePageController
from nullables.www.router import WwwRouter
from nullables.www.server import WwwServer

__all__ = [
    "HomePageController",
    "WwwConfig",
    "WwwRouter",
    "WwwServer",
]
