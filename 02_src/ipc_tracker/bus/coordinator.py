"""Coordinator-side bus: listeners plus request/response handlers."""

import inspect
from typing import Any, Callable

from .emitter import Emitter
from .errors import DuplicateHandlerError, NoHandlerError
from .messages import TransportEvent

Handler = Callable[..., Any]


class CoordinatorBus(Emitter):
    """In-memory bus owned by the coordinating process."""

    def __init__(self) -> None:
        super().__init__()
        self._handlers: dict[str, Handler] = {}

    def handle(self, channel: str, handler: Handler) -> None:
        if channel in self._handlers:
            raise DuplicateHandlerError(channel)
        self._handlers[channel] = handler

    def handle_once(self, channel: str, handler: Handler) -> None:
        def once_handler(event: TransportEvent, *args: Any) -> Any:
            self.remove_handler(channel)
            return handler(event, *args)

        self.handle(channel, once_handler)

    def remove_handler(self, channel: str) -> None:
        self._handlers.pop(channel, None)

    def has_handler(self, channel: str) -> bool:
        return channel in self._handlers

    async def invoke(self, channel: str, event: TransportEvent, args: list[Any]) -> Any:
        """Run the handler for channel and return its (awaited) result."""
        handler = self._handlers.get(channel)
        if handler is None:
            raise NoHandlerError(channel)

        result = handler(event, *args)
        if inspect.isawaitable(result):
            result = await result
        return result
