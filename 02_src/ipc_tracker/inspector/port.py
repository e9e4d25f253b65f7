"""Ports connecting inspection surfaces to the privileged worker."""

import asyncio
from typing import Any, Callable, Protocol

MessageCallback = Callable[[dict], None]
DisconnectCallback = Callable[[], None]


class PortClosedError(Exception):
    """Posting to a port that has been disconnected."""


class IPanelPort(Protocol):
    """Two-way message port between the privileged worker and a UI."""

    def post_message(self, message: dict) -> None:
        """Worker -> UI."""
        ...

    def on_message(self, callback: MessageCallback) -> None:
        """Register the worker's handler for UI -> worker messages."""
        ...

    def on_disconnect(self, callback: DisconnectCallback) -> None:
        ...


class PanelPort:
    """In-memory port; messages posted by the worker are collected in `received`."""

    def __init__(self) -> None:
        self.received: list[dict] = []
        self.connected = True
        self._message_callbacks: list[MessageCallback] = []
        self._disconnect_callbacks: list[DisconnectCallback] = []

    def post_message(self, message: dict) -> None:
        if not self.connected:
            raise PortClosedError("port is disconnected")
        self.received.append(message)

    def on_message(self, callback: MessageCallback) -> None:
        self._message_callbacks.append(callback)

    def on_disconnect(self, callback: DisconnectCallback) -> None:
        self._disconnect_callbacks.append(callback)

    def send(self, message: dict) -> None:
        """UI -> worker."""
        for callback in list(self._message_callbacks):
            callback(message)

    def disconnect(self) -> None:
        if not self.connected:
            return
        self.connected = False
        for callback in list(self._disconnect_callbacks):
            callback()


class QueuePanelPort(PanelPort):
    """Port whose worker -> UI messages are consumed from an asyncio queue."""

    def __init__(self) -> None:
        super().__init__()
        self.queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    def post_message(self, message: dict) -> None:
        if not self.connected:
            raise PortClosedError("port is disconnected")
        self.queue.put_nowait(message)
