"""Client for the ROT-13 service.

``Rot13Client.transform()`` starts one request and returns a
``TransformHandle`` right away: ``handle.result`` is a future for the
transformed text and ``handle.cancel()`` abandons the request. Callers
typically race ``handle.result`` against ``Clock.timeout_async()``.

The live form (``Rot13Client.create()``) talks HTTP via httpx. The null form
(``Rot13Client.create_null()``) answers from a queue of configured
responses, one per call, so tests can script successes, errors and hangs.

Examples:
    >>> client = Rot13Client.create_null([
    ...     NullRot13Response(response="uryyb"),
    ...     NullRot13Response(error="service down"),
    ...     NullRot13Response(hang=True),
    ... ])
    >>> requests = client.track_requests()
    >>> handle = client.transform(5001, "hello")  # doctest: +SKIP
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from nullables.exceptions import InvalidArgumentError, Rot13ClientError
from nullables.infrastructure.output_tracker import OutputListener, OutputTracker

logger = logging.getLogger(__name__)

TRANSFORM_ENDPOINT = "/rot13/transform"
DEFAULT_NULL_RESPONSE = "Null Rot13Client response"


@dataclass(frozen=True, slots=True)
class Rot13Request:
    """A request made through ``Rot13Client``, as seen by ``track_requests()``.

    Attributes:
        port: Port of the ROT-13 service, exactly as passed.
        text: Text to transform, exactly as passed.
        cancelled: True for the record emitted when the request is cancelled.
    """

    port: int
    text: str
    cancelled: bool = False


@dataclass(frozen=True, slots=True)
class NullRot13Response:
    """Configured outcome of one call to a null ``Rot13Client``.

    Set at most one attribute. With none set, the call succeeds with
    ``DEFAULT_NULL_RESPONSE``.

    Attributes:
        response: Transformed text to return.
        error: Error message; the call fails with ``Rot13ClientError``.
        hang: If True, the call never completes.

    Examples:
        >>> NullRot13Response(response="ok", hang=True)
        Traceback (most recent call last):
        ...
        nullables.exceptions.InvalidArgumentError: NullRot13Response accepts only one of response, error, hang
    """

    response: str | None = None
    error: str | None = None
    hang: bool = False

    def __post_init__(self) -> None:
        """Reject ambiguous outcomes."""
        configured = sum((self.response is not None, self.error is not None, self.hang))
        if configured > 1:
            raise InvalidArgumentError("NullRot13Response accepts only one of response, error, hang")


@dataclass(frozen=True, slots=True)
class TransformHandle:
    """In-flight ROT-13 request.

    Attributes:
        result: Future resolving to the transformed text.
        cancel: Abandon the request. Fire-and-forget; does not settle ``result``
            in the null form.
    """

    result: asyncio.Future[str]
    cancel: Callable[[], None]


class _Transformer(Protocol):
    """Strategy performing the request behind a ``Rot13Client``."""

    def start(self, port: int, text: str) -> tuple[asyncio.Future[str], Callable[[], None]]: ...


class _HttpTransformer:
    """Real HTTP calls to a ROT-13 service."""

    def __init__(self, host: str, transport: httpx.AsyncBaseTransport | None) -> None:
        self._host = host
        self._transport = transport

    def start(self, port: int, text: str) -> tuple[asyncio.Future[str], Callable[[], None]]:
        task = asyncio.get_running_loop().create_task(self._request_async(port, text))
        return task, task.cancel

    async def _request_async(self, port: int, text: str) -> str:
        url = f"http://{self._host}:{port}{TRANSFORM_ENDPOINT}"
        logger.debug("POST %s", url)
        try:
            # Request timing is owned by the caller's Clock
            async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
                response = await client.post(url, json={"text": text}, headers={"Accept": "application/json"})
        except httpx.HTTPError as exc:
            raise Rot13ClientError("Unable to reach ROT-13 service", port=port) from exc

        if response.status_code != httpx.codes.OK:
            raise Rot13ClientError(
                "Unexpected status from ROT-13 service",
                port=port,
                status=response.status_code,
                body=response.text,
            )

        try:
            data: Any = response.json()
        except ValueError as exc:
            raise Rot13ClientError(
                "Unparseable body from ROT-13 service",
                port=port,
                status=response.status_code,
                body=response.text,
            ) from exc

        transformed = data.get("transformed") if isinstance(data, dict) else None
        if not isinstance(transformed, str):
            raise Rot13ClientError(
                "Unexpected body from ROT-13 service",
                port=port,
                status=response.status_code,
                body=response.text,
            )
        return transformed


class _NullTransformer:
    """Answers requests from a fixed queue of configured outcomes."""

    def __init__(self, responses: Sequence[NullRot13Response]) -> None:
        self._responses = tuple(responses)
        self._calls = 0

    def start(self, port: int, text: str) -> tuple[asyncio.Future[str], Callable[[], None]]:
        outcome = self._next_outcome()
        future: asyncio.Future[str] = asyncio.get_running_loop().create_future()
        if outcome.error is not None:
            future.set_exception(Rot13ClientError(outcome.error, port=port))
        elif not outcome.hang:
            future.set_result(DEFAULT_NULL_RESPONSE if outcome.response is None else outcome.response)
        return future, _ignore_cancel

    def _next_outcome(self) -> NullRot13Response:
        index = self._calls
        self._calls += 1
        if index < len(self._responses):
            return self._responses[index]
        return NullRot13Response()


def _ignore_cancel() -> None:
    pass


class Rot13Client:
    """Client for the ROT-13 service.

    Use ``Rot13Client.create()`` in production and ``Rot13Client.create_null()``
    in tests.

    Args:
        transformer: Request strategy, selected by the factory methods.
    """

    def __init__(self, transformer: _Transformer) -> None:
        """Initialize Rot13Client.

        Args:
            transformer: Request strategy, selected by the factory methods.
        """
        self._transformer = transformer
        self._listener: OutputListener[Rot13Request] = OutputListener()

    @classmethod
    def create(
        cls,
        *,
        host: str = "localhost",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> Rot13Client:
        """Create a client making real HTTP requests.

        Args:
            host: Host running the ROT-13 service.
            transport: Optional httpx transport (e.g. ``httpx.MockTransport``).

        Returns:
            Live Rot13Client instance.
        """
        return cls(_HttpTransformer(host, transport))

    @classmethod
    def create_null(cls, responses: Sequence[NullRot13Response] | None = None) -> Rot13Client:
        """Create a client answering from configured responses.

        The Nth call uses the Nth response. Calls beyond the end of the
        sequence succeed with ``DEFAULT_NULL_RESPONSE``.

        Args:
            responses: Outcomes for successive calls.

        Returns:
            Null Rot13Client instance.
        """
        return cls(_NullTransformer(responses or ()))

    def track_requests(self) -> OutputTracker[Rot13Request]:
        """Track every request and cancellation made from now on."""
        return self._listener.track_output()

    def transform(self, port: int, text: str) -> TransformHandle:
        """Start a ROT-13 transformation without waiting for it.

        Must be called from a running event loop.

        Args:
            port: Port of the ROT-13 service.
            text: Text to transform.

        Returns:
            Handle with the pending result and a cancel function.
        """
        self._listener.emit(Rot13Request(port, text))
        result, abort = self._transformer.start(port, text)

        def cancel() -> None:
            self._listener.emit(Rot13Request(port, text, cancelled=True))
            logger.debug("ROT-13 request cancelled (port=%s)", port)
            abort()

        return TransformHandle(result, cancel)

    async def transform_async(self, port: int, text: str) -> str:
        """Transform text and wait for the result.

        Args:
            port: Port of the ROT-13 service.
            text: Text to transform.

        Returns:
            Transformed text.

        Raises:
            Rot13ClientError: If the service call fails.
        """
        return await self.transform(port, text).result


__all__ = [
    "DEFAULT_NULL_RESPONSE",
    "TRANSFORM_ENDPOINT",
    "NullRot13Response",
    "Rot13Client",
    "Rot13Request",
    "TransformHandle",
]
