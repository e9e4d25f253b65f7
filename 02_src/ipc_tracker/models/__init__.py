"""Core data models for IPC Tracker."""

from .events import Direction, IndexedIpcEvent, IpcEvent, WorkerDetails, now_ms

__all__ = [
    "Direction",
    "IpcEvent",
    "IndexedIpcEvent",
    "WorkerDetails",
    "now_ms",
]
