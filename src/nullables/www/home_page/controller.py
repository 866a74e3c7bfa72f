"""Endpoints for ``/`` (home page).

``POST /`` reads the ``text`` form field, asks the ROT-13 service to
transform it and renders the result. The service call is given
``TIMEOUT_IN_MS`` to answer; after that the request is cancelled and a
fallback text is rendered instead. Every failure is logged and turned into
a normal page, never into an HTTP error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import parse_qs

from nullables.infrastructure.clock import Clock
from nullables.infrastructure.rot13_client import Rot13Client
from nullables.www.home_page import view

if TYPE_CHECKING:
    from collections.abc import Callable

    from nullables.http.request import HttpRequest
    from nullables.http.response import HttpResponse
    from nullables.infrastructure.log import Log
    from nullables.www.config import WwwConfig

INPUT_FIELD_NAME = "text"
TIMEOUT_IN_MS = 5000
TIMEOUT_TEXT = "ROT-13 service timed out"
FAILURE_TEXT = "ROT-13 service failed"


@dataclass(frozen=True, slots=True)
class ParsedInput:
    """Form body parsed successfully.

    Attributes:
        text: Value of the ``text`` form field.
    """

    text: str


@dataclass(frozen=True, slots=True)
class InputError:
    """Form body did not contain exactly one ``text`` field.

    Attributes:
        reason: Human-readable description of the problem.
    """

    reason: str


@dataclass(frozen=True, slots=True)
class TransformOutput:
    """Text to render: the service's answer or the timeout fallback."""

    text: str


@dataclass(frozen=True, slots=True)
class TransformFailure:
    """The ROT-13 service call failed."""

    error: Exception


class HomePageController:
    """Home page controller.

    Args:
        rot13_client: Client for the ROT-13 service.
        clock: Clock enforcing the service timeout.
    """

    def __init__(self, rot13_client: Rot13Client, clock: Clock) -> None:
        """Initialize HomePageController.

        Args:
            rot13_client: Client for the ROT-13 service.
            clock: Clock enforcing the service timeout.
        """
        self._rot13_client = rot13_client
        self._clock = clock

    @classmethod
    def create(cls, *, rot13_host: str = "localhost") -> HomePageController:
        """Create a controller using live infrastructure.

        Args:
            rot13_host: Host running the ROT-13 service.
        """
        return cls(Rot13Client.create(host=rot13_host), Clock.create())

    @classmethod
    def create_null(
        cls,
        *,
        rot13_client: Rot13Client | None = None,
        clock: Clock | None = None,
    ) -> HomePageController:
        """Create a controller using null infrastructure.

        Args:
            rot13_client: Client to use (default: null client).
            clock: Clock to use (default: null clock).
        """
        return cls(rot13_client or Rot13Client.create_null(), clock or Clock.create_null())

    async def get_async(self, request: HttpRequest, config: WwwConfig) -> HttpResponse:
        """Render the empty home page."""
        return view.home_page()

    async def post_async(self, request: HttpRequest, config: WwwConfig) -> HttpResponse:
        """Transform the submitted text and render the result.

        A malformed form is treated like a GET. A failed or slow ROT-13
        service renders a fallback text.

        Args:
            request: Incoming request with a URL-encoded form body.
            config: Request configuration (service port and log).

        Returns:
            Home page response (always status 200).
        """
        body = await request.read_body_async()
        parsed = parse_body(body, config.log)
        if isinstance(parsed, InputError):
            return view.home_page()

        outcome = await self._transform_async(config, parsed.text)
        if isinstance(outcome, TransformFailure):
            return view.home_page(FAILURE_TEXT)
        return view.home_page(outcome.text)

    async def _transform_async(self, config: WwwConfig, text: str) -> TransformOutput | TransformFailure:
        handle = self._rot13_client.transform(config.rot13_service_port, text)
        try:
            output = await self._clock.timeout_async(
                TIMEOUT_IN_MS,
                handle.result,
                lambda: _timeout(config.log, handle.cancel),
            )
        except Exception as exc:
            config.log.emergency("ROT-13 service error in POST /", error=exc)
            return TransformFailure(exc)
        return TransformOutput(output)


def parse_body(body: str, log: Log) -> ParsedInput | InputError:
    """Extract the ``text`` field from a URL-encoded form body.

    Problems are logged at monitor level.

    Args:
        body: Raw request body.
        log: Log receiving parse problems.

    Returns:
        ParsedInput on success, InputError if the field is missing or repeated.

    Examples:
        >>> from nullables.infrastructure.log import Log
        >>> parse_body("text=hello%20world", Log.create_null())
        ParsedInput(text='hello world')
        >>> parse_body("", Log.create_null())
        InputError(reason="'text' form field not found")
    """
    fields = parse_qs(body, keep_blank_values=True).get(INPUT_FIELD_NAME, [])
    if len(fields) == 1:
        return ParsedInput(fields[0])

    if not fields:
        reason = f"'{INPUT_FIELD_NAME}' form field not found"
    else:
        reason = f"multiple '{INPUT_FIELD_NAME}' form fields found"
    log.monitor("form parse error in POST /", details=reason, body=body)
    return InputError(reason)


def _timeout(log: Log, cancel: Callable[[], None]) -> str:
    log.emergency("ROT-13 service timed out in POST /", timeout_in_ms=TIMEOUT_IN_MS)
    cancel()
    return TIMEOUT_TEXT


__all__ = [
    "FAILURE_TEXT",
    "INPUT_FIELD_NAME",
    "TIMEOUT_IN_MS",
    "TIMEOUT_TEXT",
    "HomePageController",
    "InputError",
    "ParsedInput",
    "TransformFailure",
    "TransformOutput",
    "parse_body",
]
