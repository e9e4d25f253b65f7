"""Front-end bus decorator: correlates round trips and reports incoming traffic."""

import functools
import time
from typing import Any, Callable, Iterable

from ..bus import IRequesterBus
from ..codec import new_token, unwrap, wrap
from ..constants import RELAY_CHANNELS
from ..logging_config import get_logger
from ..models import Direction, IpcEvent

logger = get_logger(__name__)

EventSink = Callable[[IpcEvent], None]
Listener = Callable[..., Any]


class InstrumentedRequesterBus:
    """
    Wraps the bus used by front-end code.

    invoke/send_sync arguments travel inside a correlation envelope; the
    reply is reported as a coordinator -> requester event carrying the same
    token and the round-trip time, so the log can link it to the request
    seen by the coordinator's transport tap.
    """

    def __init__(self, bus: IRequesterBus, sink: EventSink, excluded_channels: Iterable[str] = ()):
        self._bus = bus
        self._sink = sink
        self._excluded = frozenset(excluded_channels) | RELAY_CHANNELS
        self._listeners: dict[str, list[tuple[Listener, Listener]]] = {}

    def __getattr__(self, name: str) -> Any:
        return getattr(self._bus, name)

    def _report(self, event: IpcEvent) -> None:
        try:
            self._sink(event)
        except Exception as e:
            logger.warning("Failed to report IPC event on %r: %s", event.channel, e)

    # Outgoing

    def send(self, channel: str, *args: Any) -> None:
        self._bus.send(channel, *args)

    def send_sync(self, channel: str, *args: Any) -> Any:
        if channel in self._excluded:
            return self._bus.send_sync(channel, *args)

        token = new_token()
        started = time.perf_counter()
        result = self._bus.send_sync(channel, *wrap(args, token))
        self._report_response(channel, token, started, [result], "send_sync")
        return result

    async def invoke(self, channel: str, *args: Any) -> Any:
        if channel in self._excluded:
            return await self._bus.invoke(channel, *args)

        token = new_token()
        started = time.perf_counter()
        try:
            result = await self._bus.invoke(channel, *wrap(args, token))
        except Exception as e:
            self._report_response(channel, token, started, [str(e)], "invoke")
            raise

        self._report_response(channel, token, started, [result], "invoke")
        return result

    def _report_response(
        self,
        channel: str,
        token: str,
        started: float,
        args: list[Any],
        method: str,
    ) -> None:
        self._report(
            IpcEvent(
                direction=Direction.COORDINATOR_TO_REQUESTER,
                channel=channel,
                args=args,
                method=method,
                correlation_token=token,
                response_time_ms=(time.perf_counter() - started) * 1000,
            )
        )

    # Incoming

    def _reporting(self, channel: str, listener: Listener) -> Listener:
        @functools.wraps(listener)
        def tracked_listener(event: Any, *args: Any) -> Any:
            token, real_args = unwrap(args)
            self._report(
                IpcEvent(
                    direction=Direction.COORDINATOR_TO_REQUESTER,
                    channel=channel,
                    args=real_args,
                    correlation_token=token,
                )
            )
            return listener(event, *real_args)

        tracked_listener.listener = listener
        return tracked_listener

    def on(self, channel: str, listener: Listener) -> "InstrumentedRequesterBus":
        if channel in self._excluded:
            self._bus.on(channel, listener)
            return self

        wrapped = self._reporting(channel, listener)
        self._listeners.setdefault(channel, []).append((listener, wrapped))
        self._bus.on(channel, wrapped)
        return self

    def add_listener(self, channel: str, listener: Listener) -> "InstrumentedRequesterBus":
        return self.on(channel, listener)

    def once(self, channel: str, listener: Listener) -> "InstrumentedRequesterBus":
        if channel in self._excluded:
            self._bus.once(channel, listener)
            return self

        reporting = self._reporting(channel, listener)

        def once_listener(event: Any, *args: Any) -> Any:
            removed = self._detach(channel, listener, once_listener)
            try:
                return reporting(event, *args)
            finally:
                if removed:
                    self._report(IpcEvent(direction=Direction.REQUESTER, channel=channel, method="remove_listener"))

        once_listener.listener = listener
        self._listeners.setdefault(channel, []).append((listener, once_listener))
        self._bus.on(channel, once_listener)
        return self

    def off(self, channel: str, listener: Listener) -> "InstrumentedRequesterBus":
        return self._remove(channel, listener, "off")

    def remove_listener(self, channel: str, listener: Listener) -> "InstrumentedRequesterBus":
        return self._remove(channel, listener, "remove_listener")

    def _remove(self, channel: str, listener: Listener, method: str) -> "InstrumentedRequesterBus":
        if self._detach(channel, listener):
            self._report(IpcEvent(direction=Direction.REQUESTER, channel=channel, method=method))
        return self

    def _detach(self, channel: str, listener: Listener, wrapped: Listener | None = None) -> bool:
        installed = self._pop(channel, listener, wrapped)
        if installed is None:
            self._bus.remove_listener(channel, listener)
            return False

        self._bus.remove_listener(channel, installed)
        return True

    def _pop(self, channel: str, listener: Listener, wrapped: Listener | None) -> Listener | None:
        entries = self._listeners.get(channel, [])
        for i in range(len(entries) - 1, -1, -1):
            original, installed = entries[i]
            if wrapped is not None and installed is not wrapped:
                continue
            if original == listener:
                del entries[i]
                if not entries:
                    del self._listeners[channel]
                return installed
        return None

    def remove_all_listeners(self, channel: str | None = None) -> "InstrumentedRequesterBus":
        if channel is None:
            existed = bool(self._bus.event_names())
            self._listeners.clear()
            self._bus.remove_all_listeners()
            if existed:
                self._report(IpcEvent(direction=Direction.REQUESTER, channel="", method="remove_all_listeners"))
            return self

        existed = self._bus.listener_count(channel) > 0
        self._listeners.pop(channel, None)
        self._bus.remove_all_listeners(channel)
        if existed and channel not in self._excluded:
            self._report(IpcEvent(direction=Direction.REQUESTER, channel=channel, method="remove_all_listeners"))
        return self

    def listener_count(self, channel: str) -> int:
        return self._bus.listener_count(channel)
