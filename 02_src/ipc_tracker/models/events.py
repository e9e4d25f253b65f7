"""Captured IPC event models."""

import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class Direction(str, Enum):
    """Which way an observed call travelled."""

    REQUESTER_TO_COORDINATOR = "requester-to-coordinator"
    COORDINATOR_TO_REQUESTER = "coordinator-to-requester"
    WORKER_TO_COORDINATOR = "worker-to-coordinator"
    COORDINATOR_TO_WORKER = "coordinator-to-worker"
    REQUESTER = "requester"  # requester-local
    COORDINATOR = "coordinator"  # coordinator-local


@dataclass(frozen=True)
class WorkerDetails:
    """Identity of the worker on the far end of coordinator<->worker traffic."""

    worker_scope: str
    worker_version_id: int


def now_ms() -> float:
    """Capture time in milliseconds since the epoch."""
    return time.time_ns() / 1_000_000


@dataclass
class IpcEvent:
    """One observed call or call-lifecycle action."""

    direction: Direction
    channel: str
    args: list[Any] = field(default_factory=list)
    timestamp: float = field(default_factory=now_ms)
    method: str | None = None
    correlation_token: str | None = None
    response_time_ms: float | None = None
    worker_details: WorkerDetails | None = None

    def to_dict(self) -> dict[str, Any]:
        """Wire form; None fields are left out."""
        data: dict[str, Any] = {
            "direction": self.direction.value,
            "channel": self.channel,
            "args": list(self.args),
            "timestamp": self.timestamp,
        }
        if self.method is not None:
            data["method"] = self.method
        if self.correlation_token is not None:
            data["correlation_token"] = self.correlation_token
        if self.response_time_ms is not None:
            data["response_time_ms"] = self.response_time_ms
        if self.worker_details is not None:
            data["worker_details"] = asdict(self.worker_details)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IpcEvent":
        details = data.get("worker_details")
        return cls(
            direction=Direction(data["direction"]),
            channel=data["channel"],
            args=list(data.get("args", [])),
            timestamp=data.get("timestamp", now_ms()),
            method=data.get("method"),
            correlation_token=data.get("correlation_token"),
            response_time_ms=data.get("response_time_ms"),
            worker_details=WorkerDetails(**details) if details else None,
        )


@dataclass
class IndexedIpcEvent(IpcEvent):
    """An IpcEvent stored in the event log."""

    serial_number: int = 0
    # Serial number of the correlated counterpart, set on both ends.
    linked_serial_number: int | None = None

    @classmethod
    def from_event(cls, event: IpcEvent, serial_number: int) -> "IndexedIpcEvent":
        return cls(
            direction=event.direction,
            channel=event.channel,
            args=list(event.args),
            timestamp=event.timestamp,
            method=event.method,
            correlation_token=event.correlation_token,
            response_time_ms=event.response_time_ms,
            worker_details=event.worker_details,
            serial_number=serial_number,
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["serial_number"] = self.serial_number
        if self.linked_serial_number is not None:
            data["linked_serial_number"] = self.linked_serial_number
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IndexedIpcEvent":
        indexed = cls.from_event(IpcEvent.from_dict(data), data["serial_number"])
        indexed.linked_serial_number = data.get("linked_serial_number")
        return indexed
