"""Errors raised by the message bus."""


class BusError(Exception):
    """Base class for bus errors."""


class NoHandlerError(BusError):
    """An invoke arrived on a channel without a registered handler."""

    def __init__(self, channel: str):
        super().__init__(f"No handler registered for '{channel}'")
        self.channel = channel


class DuplicateHandlerError(BusError):
    """A second request handler was registered for the same channel."""

    def __init__(self, channel: str):
        super().__init__(f"Attempted to register a second handler for '{channel}'")
        self.channel = channel


class WorkerStartError(BusError):
    """A worker could not be started for a scope."""

    def __init__(self, scope: str, reason: str):
        super().__init__(f"Failed to start worker for scope '{scope}': {reason}")
        self.scope = scope
        self.reason = reason
