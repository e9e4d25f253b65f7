"""Data passed along with bus dispatches and lifecycle notifications."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable


class SenderKind(str, Enum):
    """Kind of context a transport message came from."""

    FRAME = "frame"
    WORKER = "worker"


class PreloadKind(str, Enum):
    FRAME = "frame"
    WORKER = "worker"


class RunningStatus(str, Enum):
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


@dataclass
class TransportEvent:
    """Metadata handed to listeners and to the internal transport signals."""

    type: SenderKind
    sender_id: int
    sender_scope: str | None = None
    reply_to: Callable[..., Any] | None = None
    return_value: Any = None

    def reply(self, channel: str, *args: Any) -> None:
        """Send a message back to the sender."""
        if self.reply_to is not None:
            self.reply_to(channel, *args)


@dataclass
class PreloadScript:
    """Code run inside every new context of the given kind."""

    id: str
    kind: PreloadKind
    entry: Callable[[Any], None]


@dataclass(frozen=True)
class Extension:
    id: str
    name: str
    path: str
    url: str


@dataclass(frozen=True)
class RunningWorkerInfo:
    version_id: int
    scope: str


@dataclass(frozen=True)
class RunningStatusDetails:
    version_id: int
    running_status: RunningStatus


@dataclass(frozen=True)
class RegistrationDetails:
    scope: str
