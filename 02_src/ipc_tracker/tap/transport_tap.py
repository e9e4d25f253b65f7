"""Transport tap: observes inbound traffic through the context's internal signals."""

from typing import Any, Callable

from ..bus import (
    SIGNAL_INVOKE,
    SIGNAL_MESSAGE,
    SIGNAL_MESSAGE_SYNC,
    IContext,
    SenderKind,
    TransportEvent,
)
from ..logging_config import get_logger
from ..models import Direction
from ..tracker import ITracker

logger = get_logger(__name__)

_METHODS = {
    SIGNAL_MESSAGE: "send",
    SIGNAL_INVOKE: "invoke",
    SIGNAL_MESSAGE_SYNC: "send_sync",
}

_DIRECTIONS = {
    SenderKind.FRAME: Direction.REQUESTER_TO_COORDINATOR,
    SenderKind.WORKER: Direction.WORKER_TO_COORDINATOR,
}


class TransportTap:
    """
    Reports every message entering the coordinator from a context.

    This is the only source of inbound direction: it does not care which
    primitive (if any) the receiving handler was registered with. Traffic
    from the tracker's own privileged worker is ignored.
    """

    def __init__(self, context: IContext, tracker: ITracker, own_worker_scope: str):
        self._context = context
        self._tracker = tracker
        self._own_scope = own_worker_scope
        self._subscriptions: dict[str, Callable[..., None]] = {}

    @property
    def attached(self) -> bool:
        return bool(self._subscriptions)

    def attach(self) -> None:
        if self._subscriptions:
            return

        for signal, method in _METHODS.items():
            listener = self._make_listener(method)
            self._context.on(signal, listener)
            self._subscriptions[signal] = listener

        logger.debug("Transport tap attached to context %s", self._context.id)

    def detach(self) -> None:
        for signal, listener in self._subscriptions.items():
            self._context.remove_listener(signal, listener)
        self._subscriptions.clear()

    def _make_listener(self, method: str) -> Callable[..., None]:
        def on_signal(event: TransportEvent, channel: str, args: list[Any]) -> None:
            self._observe(event, channel, args, method)

        return on_signal

    def _observe(self, event: TransportEvent, channel: str, args: list[Any], method: str) -> None:
        try:
            kind = SenderKind(event.type)
        except ValueError:
            logger.debug("Ignoring transport message from unknown sender kind %r", event.type)
            return

        if kind == SenderKind.WORKER and event.sender_scope == self._own_scope:
            return

        self._tracker.track(_DIRECTIONS[kind], channel, list(args), method=method)
