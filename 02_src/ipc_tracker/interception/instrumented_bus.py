"""Coordinator bus decorator that observes registration primitives."""

import functools
import inspect
from typing import Any, Callable

from ..bus import ICoordinatorBus
from ..codec import unwrap
from ..logging_config import get_logger
from ..models import Direction
from ..tracker import ITracker
from .registry import ListenerRegistry

logger = get_logger(__name__)

Listener = Callable[..., Any]


class InstrumentedBus:
    """
    Same capability as the coordinator bus it wraps.

    Handlers are wrapped so they never see correlation envelopes. Removals
    that actually remove something are reported as coordinator-local events;
    registrations are not reported (the transport tap already sees the
    traffic that triggers them). Channels excluded by the tracker are passed
    straight through.
    """

    def __init__(
        self,
        bus: ICoordinatorBus,
        tracker: ITracker,
        registry: ListenerRegistry | None = None,
    ):
        self._bus = bus
        self._tracker = tracker
        self._registry = registry or ListenerRegistry()

    @property
    def wrapped_bus(self) -> ICoordinatorBus:
        return self._bus

    @property
    def registry(self) -> ListenerRegistry:
        return self._registry

    def __getattr__(self, name: str) -> Any:
        # Anything not intercepted behaves exactly like the real bus.
        return getattr(self._bus, name)

    # Listeners

    def _unwrapping(self, listener: Listener) -> Listener:
        @functools.wraps(listener)
        def tracked_listener(event: Any, *args: Any) -> Any:
            _, real_args = unwrap(args)
            return listener(event, *real_args)

        tracked_listener.listener = listener
        return tracked_listener

    def on(self, channel: str, listener: Listener) -> "InstrumentedBus":
        if self._tracker.is_excluded(channel):
            self._bus.on(channel, listener)
            return self

        wrapped = self._unwrapping(listener)
        self._registry.add_listener(channel, listener, wrapped)
        self._bus.on(channel, wrapped)
        return self

    def add_listener(self, channel: str, listener: Listener) -> "InstrumentedBus":
        return self.on(channel, listener)

    def once(self, channel: str, listener: Listener) -> "InstrumentedBus":
        """`on` plus a self-removal that is reported exactly once."""
        if self._tracker.is_excluded(channel):
            self._bus.once(channel, listener)
            return self

        @functools.wraps(listener)
        def once_listener(event: Any, *args: Any) -> Any:
            removed = self._detach(channel, listener, once_listener)
            try:
                _, real_args = unwrap(args)
                return listener(event, *real_args)
            finally:
                if removed:
                    self._tracker.track(Direction.COORDINATOR, channel, [], method="remove_listener")

        once_listener.listener = listener
        self._registry.add_listener(channel, listener, once_listener)
        self._bus.on(channel, once_listener)
        return self

    def off(self, channel: str, listener: Listener) -> "InstrumentedBus":
        return self._remove(channel, listener, "off")

    def remove_listener(self, channel: str, listener: Listener) -> "InstrumentedBus":
        return self._remove(channel, listener, "remove_listener")

    def _remove(self, channel: str, listener: Listener, method: str) -> "InstrumentedBus":
        if self._tracker.is_excluded(channel):
            self._bus.remove_listener(channel, listener)
            return self

        if self._detach(channel, listener):
            self._tracker.track(Direction.COORDINATOR, channel, [], method=method)
        return self

    def _detach(self, channel: str, listener: Listener, wrapped: Listener | None = None) -> bool:
        """Take the wrapper of listener off the bus; False if we never installed one."""
        installed = self._registry.pop_listener(channel, listener, wrapped)
        if installed is None:
            # Unknown to us: let the bus decide (a no-op for unknown handlers).
            self._bus.remove_listener(channel, listener)
            return False

        self._bus.remove_listener(channel, installed)
        return True

    def remove_all_listeners(self, channel: str | None = None) -> "InstrumentedBus":
        if channel is None:
            existed = bool(self._bus.event_names())
            self._registry.clear_listeners()
            self._bus.remove_all_listeners()
            if existed:
                self._tracker.track(Direction.COORDINATOR, "", [], method="remove_all_listeners")
            return self

        existed = self._bus.listener_count(channel) > 0
        self._registry.drop_channel(channel)
        self._bus.remove_all_listeners(channel)
        if existed:
            self._tracker.track(Direction.COORDINATOR, channel, [], method="remove_all_listeners")
        return self

    # Request handlers

    def handle(self, channel: str, handler: Listener) -> None:
        if self._tracker.is_excluded(channel):
            self._bus.handle(channel, handler)
            return

        @functools.wraps(handler)
        async def tracked_handler(event: Any, *args: Any) -> Any:
            _, real_args = unwrap(args)
            result = handler(event, *real_args)
            if inspect.isawaitable(result):
                result = await result
            return result

        self._bus.handle(channel, tracked_handler)
        self._registry.set_handler(channel, handler)

    def handle_once(self, channel: str, handler: Listener) -> None:
        """`handle` plus a self-removal that is reported exactly once."""
        if self._tracker.is_excluded(channel):
            self._bus.handle_once(channel, handler)
            return

        @functools.wraps(handler)
        async def once_handler(event: Any, *args: Any) -> Any:
            self.remove_handler(channel)
            _, real_args = unwrap(args)
            result = handler(event, *real_args)
            if inspect.isawaitable(result):
                result = await result
            return result

        self._bus.handle(channel, once_handler)
        self._registry.set_handler(channel, handler)

    def remove_handler(self, channel: str) -> None:
        known = self._registry.pop_handler(channel) is not None
        self._bus.remove_handler(channel)
        if known and not self._tracker.is_excluded(channel):
            self._tracker.track(Direction.COORDINATOR, channel, [], method="remove_handler")

    # Pass-through

    def emit(self, channel: str, *args: Any) -> bool:
        return self._bus.emit(channel, *args)

    def listener_count(self, channel: str) -> int:
        return self._bus.listener_count(channel)

    def event_names(self) -> list[str]:
        return self._bus.event_names()
