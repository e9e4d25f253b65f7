"""Bounded, serial-numbered event log with correlation indexing."""

from collections import deque
from dataclasses import replace
from typing import Callable, Protocol

from ..config import DEFAULT_EVENT_LOG_CAPACITY
from ..logging_config import get_logger
from ..models import IndexedIpcEvent, IpcEvent

logger = get_logger(__name__)


AppendListener = Callable[[IndexedIpcEvent], None]


class IEventLog(Protocol):
    """Append-only store of captured events."""

    def append(self, event: IpcEvent) -> IndexedIpcEvent:
        """Index and store an event, correlating it if it carries a token."""
        ...

    def get_all(self) -> list[IndexedIpcEvent]:
        """Current window, oldest first."""
        ...

    def clear(self) -> None:
        """Drop all events and pending correlations."""
        ...


class BoundedEventLog:
    """
    Append-only event log holding at most `capacity` events.

    Serial numbers start at 1 and keep counting across clear(). The pending
    correlation table is independent of the stored window, so an evicted
    request can still be linked from its late response.
    """

    def __init__(self, capacity: int = DEFAULT_EVENT_LOG_CAPACITY):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")

        self._capacity = capacity
        self._events: deque[IndexedIpcEvent] = deque()
        self._by_serial: dict[int, IndexedIpcEvent] = {}
        self._pending: dict[str, int] = {}  # token -> serial number
        self._next_serial = 1
        self._listeners: list[AppendListener] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def next_serial_number(self) -> int:
        return self._next_serial

    def __len__(self) -> int:
        return len(self._events)

    def append(self, event: IpcEvent) -> IndexedIpcEvent:
        """Index and store an event, correlating it if it carries a token."""
        indexed = IndexedIpcEvent.from_event(event, self._next_serial)
        self._next_serial += 1

        self._events.append(indexed)
        self._by_serial[indexed.serial_number] = indexed

        while len(self._events) > self._capacity:
            evicted = self._events.popleft()
            del self._by_serial[evicted.serial_number]

        if indexed.correlation_token:
            self.correlate(indexed.correlation_token, indexed.serial_number)

        self._notify(indexed)
        return indexed

    def correlate(self, token: str, serial_number: int) -> None:
        """Link serial_number with the pending event for token, or park it."""
        pending = self._pending.pop(token, None)
        if pending is None:
            self._pending[token] = serial_number
            return

        self._link(pending, serial_number)
        self._link(serial_number, pending)

    def _link(self, serial_number: int, linked: int) -> None:
        event = self._by_serial.get(serial_number)
        if event is not None and event.linked_serial_number is None:
            event.linked_serial_number = linked

    def get_all(self) -> list[IndexedIpcEvent]:
        """Current window, oldest first."""
        return [replace(event, args=list(event.args)) for event in self._events]

    def clear(self) -> None:
        """Drop all events and pending correlations; serial numbers continue."""
        self._events.clear()
        self._by_serial.clear()
        self._pending.clear()

    def subscribe(self, listener: AppendListener) -> None:
        """Call listener with every appended event."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: AppendListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, event: IndexedIpcEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error("Error in event log listener %s: %s", listener, e)
