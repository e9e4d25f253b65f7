"""Frame preload entry for front-end contexts."""

from typing import Any, Iterable

from ..bus import IWorkerRegistry
from ..constants import MessageType
from ..logging_config import get_logger
from ..models import IpcEvent
from .instrumented_requester import EventSink, InstrumentedRequesterBus

logger = get_logger(__name__)


def privileged_worker_sink(workers: IWorkerRegistry, scope: str) -> EventSink:
    """Sink posting requester events straight to the privileged worker of scope."""

    def post(event: IpcEvent) -> None:
        for info in workers.get_all_running().values():
            if info.scope != scope:
                continue
            worker = workers.get_worker_from_version_id(info.version_id)
            if worker is not None:
                worker.post_message({"type": MessageType.ADD_IPC_EVENT, "event": event.to_dict()})
                return
        logger.debug("Privileged worker not running, dropping requester event on %r", event.channel)

    return post


def bootstrap_requester(frame: Any, sink: EventSink, excluded_channels: Iterable[str] = ()) -> InstrumentedRequesterBus:
    """Replace the frame's bus with an instrumented one."""
    instrumented = InstrumentedRequesterBus(frame.ipc, sink, excluded_channels)
    frame.ipc = instrumented
    return instrumented
