"""Privileged worker side: owns the canonical event log and serves it."""

from typing import Any

from ..bus import IWorkerRuntime
from ..config import DEFAULT_EVENT_LOG_CAPACITY
from ..constants import CLEAR_EVENTS, GET_IPC_EVENTS, IPC_EVENTS, RENDER_EVENT, MessageType
from ..event_log import BoundedEventLog
from ..logging_config import get_logger
from ..models import IndexedIpcEvent, IpcEvent
from .port import IPanelPort

logger = get_logger(__name__)


class InspectorService:
    """
    Runs inside the privileged worker.

    Coordinator protocol: render-event(event), get-ipc-events() answered by
    ipc-events(list), clear-events(). Requester contexts post
    {"type": "add-ipc-event"} messages. Inspection-surface ports may ask
    for all events, clear them or ping, and get every appended event pushed.
    """

    def __init__(self, runtime: IWorkerRuntime, capacity: int = DEFAULT_EVENT_LOG_CAPACITY):
        self._runtime = runtime
        self._log = BoundedEventLog(capacity)
        self._ports: list[IPanelPort] = []
        self._started = False
        self._log.subscribe(self._push)

    @property
    def log(self) -> BoundedEventLog:
        return self._log

    @property
    def port_count(self) -> int:
        return len(self._ports)

    def start(self) -> None:
        if self._started:
            return
        self._started = True

        self._runtime.on(RENDER_EVENT, self._on_render_event)
        self._runtime.on(GET_IPC_EVENTS, self._on_get_ipc_events)
        self._runtime.on(CLEAR_EVENTS, self._on_clear_events)
        self._runtime.on("message", self._on_message)
        self._runtime.on("connect", self.connect_panel)
        logger.info("Inspector service started in worker %s", self._runtime.scope)

    # Coordinator protocol

    def _on_render_event(self, payload: dict) -> None:
        self._append(payload)

    def _on_get_ipc_events(self, *_: Any) -> None:
        self._runtime.send_to_coordinator(IPC_EVENTS, self._serialized_events())

    def _on_clear_events(self, *_: Any) -> None:
        self._log.clear()

    # Requester protocol

    def _on_message(self, message: dict) -> None:
        if message.get("type") == MessageType.ADD_IPC_EVENT:
            self._append(message.get("event") or {})

    def _append(self, payload: dict) -> IndexedIpcEvent | None:
        try:
            event = IpcEvent.from_dict(payload)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Dropping malformed IPC event %r: %s", payload, e)
            return None
        return self._log.append(event)

    def _serialized_events(self) -> list[dict]:
        return [event.to_dict() for event in self._log.get_all()]

    # Inspection-surface protocol

    def connect_panel(self, port: IPanelPort) -> None:
        self._ports.append(port)
        port.on_message(lambda message: self._on_panel_message(port, message))
        port.on_disconnect(lambda: self._drop_port(port))
        logger.debug("Inspection panel connected (%s open)", len(self._ports))

    def _on_panel_message(self, port: IPanelPort, message: dict) -> None:
        message_type = message.get("type")
        if message_type == MessageType.PING:
            port.post_message({"type": MessageType.PONG})
        elif message_type == MessageType.GET_ALL_EVENTS:
            port.post_message({"type": MessageType.ALL_EVENTS, "events": self._serialized_events()})
        elif message_type == MessageType.CLEAR_EVENTS:
            self._log.clear()
        else:
            logger.debug("Ignoring unknown panel message type %r", message_type)

    def _drop_port(self, port: IPanelPort) -> None:
        if port in self._ports:
            self._ports.remove(port)

    def _push(self, event: IndexedIpcEvent) -> None:
        message = {"type": MessageType.RENDER_EVENT, "event": event.to_dict()}
        for port in list(self._ports):
            try:
                port.post_message(message)
            except Exception as e:
                logger.warning("Dropping inspection panel after failed push: %s", e)
                self._drop_port(port)


def bootstrap_inspector(
    runtime: IWorkerRuntime,
    scope: str,
    capacity: int = DEFAULT_EVENT_LOG_CAPACITY,
) -> InspectorService | None:
    """Worker preload entry: start the service only in the privileged worker."""
    if runtime.scope != scope:
        return None
    service = InspectorService(runtime, capacity)
    service.start()
    return service
