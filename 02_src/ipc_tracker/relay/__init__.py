"""Cross-context relay module."""

from .relay import ContextRelay
from .starter import InspectorWorkerStarter, StarterState
from .worker_patcher import WorkerSendPatcher

__all__ = [
    "ContextRelay",
    "InspectorWorkerStarter",
    "StarterState",
    "WorkerSendPatcher",
]
