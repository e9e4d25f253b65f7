"""Synchronous event emitter used by the in-memory bus."""

from typing import Any, Callable

Listener = Callable[..., Any]


class _OnceListener:
    """Removes itself from the emitter before calling the wrapped listener."""

    def __init__(self, emitter: "Emitter", event: str, listener: Listener):
        self._emitter = emitter
        self._event = event
        self.listener = listener

    def __call__(self, *args: Any) -> Any:
        self._emitter.remove_listener(self._event, self)
        return self.listener(*args)


class Emitter:
    """
    Named-event emitter with on/once/off semantics.

    Listeners run synchronously in registration order; an exception raised
    by a listener propagates to the caller of emit().
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def on(self, event: str, listener: Listener) -> "Emitter":
        self._listeners.setdefault(event, []).append(listener)
        return self

    def add_listener(self, event: str, listener: Listener) -> "Emitter":
        return self.on(event, listener)

    def once(self, event: str, listener: Listener) -> "Emitter":
        return self.on(event, _OnceListener(self, event, listener))

    def off(self, event: str, listener: Listener) -> "Emitter":
        """Remove the most recently added instance of listener."""
        listeners = self._listeners.get(event)
        if not listeners:
            return self

        for i in range(len(listeners) - 1, -1, -1):
            candidate = listeners[i]
            if candidate == listener or getattr(candidate, "listener", None) == listener:
                del listeners[i]
                break

        if not listeners:
            del self._listeners[event]
        return self

    def remove_listener(self, event: str, listener: Listener) -> "Emitter":
        return self.off(event, listener)

    def remove_all_listeners(self, event: str | None = None) -> "Emitter":
        if event is None:
            self._listeners.clear()
        else:
            self._listeners.pop(event, None)
        return self

    def emit(self, event: str, *args: Any) -> bool:
        """Call every listener for event; returns False if there were none."""
        listeners = self._listeners.get(event)
        if not listeners:
            return False

        for listener in list(listeners):
            listener(*args)
        return True

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def listeners(self, event: str) -> list[Listener]:
        return [getattr(l, "listener", l) for l in self._listeners.get(event, [])]

    def event_names(self) -> list[str]:
        return list(self._listeners)
