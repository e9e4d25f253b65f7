"""Event log module."""

from .event_log import AppendListener, BoundedEventLog, IEventLog

__all__ = ["AppendListener", "BoundedEventLog", "IEventLog"]
