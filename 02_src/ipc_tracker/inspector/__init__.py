"""Inspector (privileged worker) module."""

from .port import IPanelPort, PanelPort, PortClosedError, QueuePanelPort
from .service import InspectorService, bootstrap_inspector

__all__ = [
    "IPanelPort",
    "InspectorService",
    "PanelPort",
    "PortClosedError",
    "QueuePanelPort",
    "bootstrap_inspector",
]
