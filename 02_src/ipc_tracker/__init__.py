"""IPC Tracker: captures, correlates and serves inter-process bus traffic."""

from .app import IIpcTracker, IpcTracker, ipc_tracker
from .codec import Correlated, Plain, decode, encode, new_token, unwrap, wrap
from .config import InstallOptions
from .event_log import BoundedEventLog, IEventLog
from .inspector import IPanelPort, InspectorService, PanelPort, QueuePanelPort
from .installer import ContextInstaller, InstallationState
from .interception import InstrumentedBus, ListenerRegistry
from .models import Direction, IndexedIpcEvent, IpcEvent, WorkerDetails
from .relay import ContextRelay, InspectorWorkerStarter, StarterState, WorkerSendPatcher
from .requester import InstrumentedRequesterBus
from .tap import TransportTap
from .tracker import ITracker, Tracker

__all__ = [
    # Entry point
    "IIpcTracker",
    "IpcTracker",
    "ipc_tracker",
    "InstallOptions",
    # Models
    "Direction",
    "IpcEvent",
    "IndexedIpcEvent",
    "WorkerDetails",
    # Codec
    "Correlated",
    "Plain",
    "decode",
    "encode",
    "new_token",
    "unwrap",
    "wrap",
    # Components
    "BoundedEventLog",
    "IEventLog",
    "ITracker",
    "Tracker",
    "InstrumentedBus",
    "ListenerRegistry",
    "TransportTap",
    "ContextRelay",
    "InspectorWorkerStarter",
    "StarterState",
    "WorkerSendPatcher",
    "InspectorService",
    "IPanelPort",
    "PanelPort",
    "QueuePanelPort",
    "InstrumentedRequesterBus",
    "ContextInstaller",
    "InstallationState",
]
