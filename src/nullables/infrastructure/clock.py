"""System clock with a deterministic null form.

The ``Clock`` owns every timer used by the application. ``Clock.create()``
delegates to the running asyncio event loop and wall-clock time.
``Clock.create_null()`` keeps a logical time that only moves when a test
calls one of the ``advance_null_*`` methods, so timeouts can be exercised
without real waiting.

Timers fire in deadline order; timers sharing a deadline fire in the order
they were scheduled.

Examples:
    Race an operation against a timeout:

    >>> async def fetch(clock: Clock, operation: asyncio.Future[str]) -> str:
    ...     return await clock.timeout_async(5000, operation, lambda: "timed out")

    Drive the null clock from a test:

    >>> async def scenario() -> None:  # doctest: +SKIP
    ...     clock = Clock.create_null()
    ...     task = asyncio.create_task(fetch(clock, asyncio.get_running_loop().create_future()))
    ...     await clock.advance_null_timers_async()
    ...     assert await task == "timed out"
"""

from __future__ import annotations

import asyncio
import heapq
import inspect
import itertools
import logging
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, Protocol, TypeVar

from nullables.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

T = TypeVar("T")
TimerCallback = Callable[[], Any]

# Upper bound on event loop passes while settling, for tasks that never block
_NULL_SETTLE_LIMIT = 10_000


class TimerState(str, Enum):
    """Lifecycle of a timer.

    Attributes:
        PENDING: Scheduled and waiting for its deadline.
        FIRED: Callback has run.
        CANCELLED: Removed before its deadline; callback never runs.
    """

    PENDING = "pending"
    FIRED = "fired"
    CANCELLED = "cancelled"


class TimerHandle:
    """Opaque handle to a timer scheduled with ``Clock.set_timer()``.

    Handles order by (deadline, sequence), which is the firing order.
    """

    __slots__ = ("_clock", "_native", "callback", "deadline", "sequence", "state")

    def __init__(
        self,
        clock: Clock,
        deadline: float,
        sequence: int,
        callback: TimerCallback,
    ) -> None:
        """Initialize TimerHandle.

        Args:
            clock: Clock that owns the timer.
            deadline: Logical time (ms) at which the timer is due.
            sequence: Insertion sequence number, used as tie-break.
            callback: Function run when the timer fires.
        """
        self._clock = clock
        self._native: asyncio.TimerHandle | None = None
        self.deadline = deadline
        self.sequence = sequence
        self.callback = callback
        self.state = TimerState.PENDING

    @property
    def is_pending(self) -> bool:
        """Return True if the timer has neither fired nor been cancelled."""
        return self.state is TimerState.PENDING

    def cancel(self) -> None:
        """Cancel the timer. No-op if it already fired or was cancelled."""
        self._clock.cancel_timer(self)

    def __lt__(self, other: TimerHandle) -> bool:
        """Order timers by deadline, then by insertion sequence."""
        return (self.deadline, self.sequence) < (other.deadline, other.sequence)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"TimerHandle(deadline={self.deadline}, sequence={self.sequence}, state={self.state.value})"


class _TimerBackend(Protocol):
    """Strategy behind a ``Clock``: where time comes from and how timers wait."""

    def now(self) -> float: ...

    def schedule(self, timer: TimerHandle, delay_ms: float) -> None: ...

    def unschedule(self, timer: TimerHandle) -> None: ...


class _LiveTimers:
    """Wall-clock time and event loop timers."""

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._callback_tasks: set[asyncio.Future[Any]] = set()

    def now(self) -> float:
        return time.time() * 1000

    def schedule(self, timer: TimerHandle, delay_ms: float) -> None:
        loop = asyncio.get_running_loop()
        timer._native = loop.call_later(delay_ms / 1000, self._fire, timer)

    def unschedule(self, timer: TimerHandle) -> None:
        if timer._native is not None:
            timer._native.cancel()

    def _fire(self, timer: TimerHandle) -> None:
        result = self._clock._fire(timer)
        if inspect.isawaitable(result):
            # Keep a reference until the async callback completes
            task = asyncio.ensure_future(result)
            self._callback_tasks.add(task)
            task.add_done_callback(self._callback_tasks.discard)


class _NullTimers:
    """Logical time and a heap of pending timers."""

    def __init__(self, now: float) -> None:
        self.current = now
        self._queue: list[TimerHandle] = []
        self._cancelled = 0

    def now(self) -> float:
        return self.current

    def schedule(self, timer: TimerHandle, delay_ms: float) -> None:
        heapq.heappush(self._queue, timer)

    def unschedule(self, timer: TimerHandle) -> None:
        # Cancelled timers stay in the heap until popped or until they are the majority
        self._cancelled += 1
        if self._cancelled * 2 > len(self._queue):
            self._queue = [entry for entry in self._queue if entry.is_pending]
            heapq.heapify(self._queue)
            self._cancelled = 0

    @property
    def pending(self) -> int:
        return len(self._queue) - self._cancelled

    def pop_due(self, until: float | None = None) -> TimerHandle | None:
        """Pop the next pending timer with a deadline at or before ``until``."""
        while self._queue:
            timer = self._queue[0]
            if not timer.is_pending:
                heapq.heappop(self._queue)
                self._cancelled -= 1
                continue
            if until is not None and timer.deadline > until:
                return None
            return heapq.heappop(self._queue)
        return None


class Clock:
    """Time source and timer scheduler.

    Use ``Clock.create()`` in production and ``Clock.create_null()`` in tests.
    All times and delays are in milliseconds.

    Args:
        backend: Timer strategy, selected by the factory methods.
    """

    def __init__(self, backend: Callable[[Clock], _TimerBackend]) -> None:
        """Initialize Clock.

        Args:
            backend: Factory building the timer strategy for this clock.
        """
        self._sequence = itertools.count()
        self._backend = backend(self)

    @classmethod
    def create(cls) -> Clock:
        """Create a clock backed by wall-clock time and the asyncio event loop.

        Returns:
            Live Clock instance.
        """
        return cls(_LiveTimers)

    @classmethod
    def create_null(cls, *, now: float = 0) -> Clock:
        """Create a clock whose time only advances when told to.

        Args:
            now: Initial logical time in milliseconds.

        Returns:
            Null Clock instance.

        Examples:
            >>> clock = Clock.create_null(now=1000)
            >>> clock.now()
            1000
        """
        return cls(lambda _clock: _NullTimers(now))

    @property
    def is_null(self) -> bool:
        """Return True for a clock created with ``create_null()``."""
        return isinstance(self._backend, _NullTimers)

    @property
    def pending_timers(self) -> int:
        """Return the number of timers that have not fired or been cancelled (null clock only)."""
        return self._null_timers("pending_timers").pending

    def now(self) -> float:
        """Return the current time in milliseconds.

        Wall-clock milliseconds since the epoch for a live clock, logical
        milliseconds for a null clock.
        """
        return self._backend.now()

    def millis_until(self, target_ms: float) -> float:
        """Return the milliseconds from now until ``target_ms`` (negative if past)."""
        return target_ms - self.now()

    def set_timer(self, delay_ms: float, callback: TimerCallback) -> TimerHandle:
        """Schedule ``callback`` to run after ``delay_ms`` milliseconds.

        The callback may be a plain function or return an awaitable, which
        is run to completion.

        Args:
            delay_ms: Delay in milliseconds (must not be negative).
            callback: Function to run when the timer fires.

        Returns:
            Handle usable with ``cancel_timer()``.

        Raises:
            InvalidArgumentError: If ``delay_ms`` is negative.
        """
        _check_delay(delay_ms, "delay_ms")
        timer = TimerHandle(self, self.now() + delay_ms, next(self._sequence), callback)
        self._backend.schedule(timer, delay_ms)
        logger.debug("Timer scheduled: %r", timer)
        return timer

    def cancel_timer(self, timer: TimerHandle) -> None:
        """Cancel a pending timer. No-op if it already fired or was cancelled.

        Args:
            timer: Handle returned by ``set_timer()``.
        """
        if not timer.is_pending:
            return
        timer.state = TimerState.CANCELLED
        self._backend.unschedule(timer)
        logger.debug("Timer cancelled: %r", timer)

    async def wait_async(self, delay_ms: float) -> None:
        """Suspend the caller for ``delay_ms`` milliseconds of clock time.

        Args:
            delay_ms: Delay in milliseconds (must not be negative).

        Raises:
            InvalidArgumentError: If ``delay_ms`` is negative.
        """
        done: asyncio.Future[None] = asyncio.get_running_loop().create_future()

        def wake() -> None:
            if not done.done():
                done.set_result(None)

        timer = self.set_timer(delay_ms, wake)
        try:
            await done
        finally:
            self.cancel_timer(timer)

    async def timeout_async(
        self,
        timeout_ms: float,
        operation: Awaitable[T],
        on_timeout: Callable[[], T | Awaitable[T]],
    ) -> T:
        """Race ``operation`` against a timer of ``timeout_ms`` milliseconds.

        If the operation settles first, its value is returned (or its
        exception raised) and the timer is cancelled. If the timer fires
        first, ``on_timeout`` is called and its result (awaited if needed)
        is returned. The operation is never cancelled here; callers cancel
        it themselves, typically from ``on_timeout``.

        An operation that has already settled when the race starts wins,
        even against a zero timeout.

        Args:
            timeout_ms: Timeout in milliseconds (must not be negative).
            operation: Awaitable to race.
            on_timeout: Called when the timeout expires first.

        Returns:
            The operation's value, or the value produced by ``on_timeout``.

        Raises:
            InvalidArgumentError: If ``timeout_ms`` is negative.
        """
        _check_delay(timeout_ms, "timeout_ms")
        pending = asyncio.ensure_future(operation)
        if pending.done():
            return pending.result()

        expired: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        timers: list[TimerHandle] = []

        def expire() -> None:
            if not expired.done():
                expired.set_result(None)

        def deadline_reached() -> None:
            # Re-queue behind timers sharing this deadline so an operation
            # settling at exactly the deadline still wins
            timers.append(self.set_timer(0, expire))

        timers.append(self.set_timer(timeout_ms, deadline_reached))
        try:
            await asyncio.wait({pending, expired}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for timer in timers:
                self.cancel_timer(timer)

        if pending.done():
            return pending.result()

        logger.debug("Operation timed out after %sms", timeout_ms)
        result = on_timeout()
        if inspect.isawaitable(result):
            return await result
        return result

    async def advance_null_async(self, delay_ms: float) -> int:
        """Advance a null clock by ``delay_ms``, firing every timer that comes due.

        Timers fire in (deadline, insertion) order, including timers
        scheduled by earlier callbacks within the same window.

        Args:
            delay_ms: Milliseconds to advance (must not be negative).

        Returns:
            Number of timers fired.

        Raises:
            InvalidArgumentError: If the clock is live or ``delay_ms`` is negative.
        """
        timers = self._null_timers("advance_null_async")
        _check_delay(delay_ms, "delay_ms")
        target = timers.current + delay_ms
        fired = 0

        await _settle_async()
        while (timer := timers.pop_due(target)) is not None:
            timers.current = max(timers.current, timer.deadline)
            await self._run_async(timer)
            fired += 1
            await _settle_async()
        timers.current = target
        return fired

    async def advance_null_timers_async(self, *, limit: int | None = None) -> int:
        """Fire pending timers of a null clock until none remain.

        Logical time jumps to each timer's deadline in turn. Timers scheduled
        by callbacks are fired too.

        Args:
            limit: Maximum number of timers to fire (None for no limit).

        Returns:
            Number of timers fired.

        Raises:
            InvalidArgumentError: If the clock is live or ``limit`` is negative.
        """
        timers = self._null_timers("advance_null_timers_async")
        if limit is not None and limit < 0:
            raise InvalidArgumentError(f"limit must not be negative, got {limit}")
        fired = 0

        await _settle_async()
        while limit is None or fired < limit:
            timer = timers.pop_due()
            if timer is None:
                break
            timers.current = max(timers.current, timer.deadline)
            await self._run_async(timer)
            fired += 1
            await _settle_async()
        return fired

    async def advance_null_timers_to_next_async(self) -> bool:
        """Fire the next pending timer of a null clock.

        Returns:
            True if a timer fired, False if none was pending.

        Raises:
            InvalidArgumentError: If the clock is live.
        """
        self._null_timers("advance_null_timers_to_next_async")
        return await self.advance_null_timers_async(limit=1) == 1

    def _fire(self, timer: TimerHandle) -> Any:
        """Mark a timer fired and run its callback, returning the callback's result."""
        if not timer.is_pending:
            return None
        timer.state = TimerState.FIRED
        logger.debug("Timer fired: %r", timer)
        return timer.callback()

    async def _run_async(self, timer: TimerHandle) -> None:
        result = self._fire(timer)
        if inspect.isawaitable(result):
            await result

    def _null_timers(self, operation: str) -> _NullTimers:
        if not isinstance(self._backend, _NullTimers):
            raise InvalidArgumentError(f"{operation}() is only available on a null Clock")
        return self._backend

    def __repr__(self) -> str:
        """Return string representation."""
        mode = "null" if self.is_null else "live"
        return f"Clock({mode}, now={self.now()})"


def _check_delay(value: float, name: str) -> None:
    if value < 0:
        raise InvalidArgumentError(f"{name} must not be negative, got {value}")


async def _settle_async() -> None:
    """Let ready tasks run until every task is blocked on something else."""
    loop = asyncio.get_running_loop()
    for _ in range(_NULL_SETTLE_LIMIT):
        await asyncio.sleep(0)
        if not _has_ready_callbacks(loop):
            return
    logger.debug("Event loop still busy after %d passes", _NULL_SETTLE_LIMIT)


def _has_ready_callbacks(loop: asyncio.AbstractEventLoop) -> bool:
    # BaseEventLoop queues call_soon() callbacks, including task steps, in _ready
    return bool(getattr(loop, "_ready", ()))


__all__ = [
    "Clock",
    "TimerCallback",
    "TimerHandle",
    "TimerState",
]
