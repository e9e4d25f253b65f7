"""Message bus interfaces and in-memory reference implementation."""

from .context import (
    SIGNAL_INVOKE,
    SIGNAL_MESSAGE,
    SIGNAL_MESSAGE_SYNC,
    TRANSPORT_SIGNALS,
    Context,
)
from .coordinator import CoordinatorBus
from .emitter import Emitter
from .errors import BusError, DuplicateHandlerError, NoHandlerError, WorkerStartError
from .frame import Frame, RequesterBus
from .host import DEFAULT_CONTEXT_ID, Host
from .interfaces import (
    IContext,
    ICoordinatorBus,
    IHost,
    IRequesterBus,
    IWorker,
    IWorkerRegistry,
    IWorkerRuntime,
)
from .messages import (
    Extension,
    PreloadKind,
    PreloadScript,
    RegistrationDetails,
    RunningStatus,
    RunningStatusDetails,
    RunningWorkerInfo,
    SenderKind,
    TransportEvent,
)
from .worker import Worker, WorkerRegistry, WorkerRuntime

__all__ = [
    # Signals
    "SIGNAL_INVOKE",
    "SIGNAL_MESSAGE",
    "SIGNAL_MESSAGE_SYNC",
    "TRANSPORT_SIGNALS",
    "DEFAULT_CONTEXT_ID",
    # Interfaces
    "IContext",
    "ICoordinatorBus",
    "IHost",
    "IRequesterBus",
    "IWorker",
    "IWorkerRegistry",
    "IWorkerRuntime",
    # In-memory implementation
    "Context",
    "CoordinatorBus",
    "Emitter",
    "Frame",
    "Host",
    "RequesterBus",
    "Worker",
    "WorkerRegistry",
    "WorkerRuntime",
    # Messages
    "Extension",
    "PreloadKind",
    "PreloadScript",
    "RegistrationDetails",
    "RunningStatus",
    "RunningStatusDetails",
    "RunningWorkerInfo",
    "SenderKind",
    "TransportEvent",
    # Errors
    "BusError",
    "DuplicateHandlerError",
    "NoHandlerError",
    "WorkerStartError",
]
