"""Output tracking for nullable infrastructure.

Infrastructure wrappers emit a record for every externally visible action
(a request sent, a log line written). Tests call ``track_*()`` on the wrapper
before exercising the code under test, then inspect the tracker's ``data``.

Examples:
    >>> listener: OutputListener[str] = OutputListener()
    >>> tracker = listener.track_output()
    >>> listener.emit("first")
    >>> listener.emit("second")
    >>> tracker.data
    ['first', 'second']
"""

from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")


class OutputTracker(Generic[T]):
    """Live view of the items emitted by an ``OutputListener``.

    The ``data`` list is shared with the listener: it keeps growing as new
    items are emitted until ``stop()`` is called.
    """

    def __init__(self, listener: OutputListener[T]) -> None:
        """Initialize OutputTracker.

        Args:
            listener: Listener this tracker is registered with.
        """
        self._listener = listener
        self._data: list[T] = []

    @property
    def data(self) -> list[T]:
        """Return the live list of tracked items."""
        return self._data

    def clear(self) -> list[T]:
        """Return the tracked items and empty the tracker.

        Returns:
            Items tracked since creation or the previous ``clear()``.
        """
        result = self._data.copy()
        self._data.clear()
        return result

    def stop(self) -> None:
        """Stop tracking. Already tracked items are kept."""
        self._listener._remove(self)

    def _add(self, item: T) -> None:
        self._data.append(item)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"OutputTracker({self._data!r})"


class OutputListener(Generic[T]):
    """Fan-out point for emitted items.

    Every tracker created by ``track_output()`` receives every item emitted
    afterwards, in emission order.
    """

    def __init__(self) -> None:
        """Initialize OutputListener with no trackers."""
        self._trackers: list[OutputTracker[T]] = []

    def track_output(self) -> OutputTracker[T]:
        """Create a tracker receiving all subsequently emitted items.

        Returns:
            New OutputTracker registered with this listener.
        """
        tracker: OutputTracker[T] = OutputTracker(self)
        self._trackers.append(tracker)
        return tracker

    def emit(self, item: T) -> None:
        """Send an item to every active tracker.

        Args:
            item: Item to record.
        """
        for tracker in self._trackers:
            tracker._add(item)

    def _remove(self, tracker: OutputTracker[T]) -> None:
        if tracker in self._trackers:
            self._trackers.remove(tracker)


__all__ = [
    "OutputListener",
    "OutputTracker",
]
