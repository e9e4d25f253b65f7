"""Bookkeeping of original -> wrapped handlers installed on the bus."""

from typing import Any, Callable

Listener = Callable[..., Any]


class ListenerRegistry:
    """
    Maps (channel, original handler) to the wrapper installed on the bus.

    Listeners and request handlers live in separate namespaces: listeners are
    removed by reference, request handlers by channel only.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[tuple[Listener, Listener]]] = {}
        self._handlers: dict[str, Listener] = {}

    # Listeners

    def add_listener(self, channel: str, original: Listener, wrapped: Listener) -> None:
        self._listeners.setdefault(channel, []).append((original, wrapped))

    def pop_listener(
        self,
        channel: str,
        original: Listener,
        wrapped: Listener | None = None,
    ) -> Listener | None:
        """Forget the newest wrapper of original (or exactly `wrapped`) and return it."""
        entries = self._listeners.get(channel)
        if not entries:
            return None

        for i in range(len(entries) - 1, -1, -1):
            entry_original, entry_wrapped = entries[i]
            if wrapped is not None and entry_wrapped is not wrapped:
                continue
            if entry_original == original:
                del entries[i]
                if not entries:
                    del self._listeners[channel]
                return entry_wrapped
        return None

    def drop_channel(self, channel: str) -> None:
        self._listeners.pop(channel, None)

    def clear_listeners(self) -> None:
        self._listeners.clear()

    def listener_count(self, channel: str) -> int:
        return len(self._listeners.get(channel, []))

    def channels(self) -> list[str]:
        return list(self._listeners)

    # Request handlers

    def set_handler(self, channel: str, original: Listener) -> None:
        self._handlers[channel] = original

    def pop_handler(self, channel: str) -> Listener | None:
        return self._handlers.pop(channel, None)

    def has_handler(self, channel: str) -> bool:
        return channel in self._handlers
