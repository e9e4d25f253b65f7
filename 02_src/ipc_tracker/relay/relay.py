"""Per-context relay between the coordinator and the privileged worker."""

import asyncio
from typing import Any, Callable, Iterable

from ..bus import IContext, IWorker
from ..config import DEFAULT_GET_EVENTS_TIMEOUT
from ..constants import CLEAR_EVENTS, GET_IPC_EVENTS, IPC_EVENTS
from ..logging_config import get_logger
from ..models import IndexedIpcEvent
from ..tap import TransportTap
from ..tracker import Tracker
from .starter import InspectorWorkerStarter, StarterState
from .worker_patcher import WorkerSendPatcher

logger = get_logger(__name__)


class ContextRelay:
    """
    Wires one context to its privileged worker.

    Until the worker is ready nothing is tapped; once it is, the tracker is
    pointed at it and the transport tap and worker-send patcher are attached.
    """

    def __init__(
        self,
        context: IContext,
        scope: str,
        excluded_channels: Iterable[str] = (),
        get_events_timeout: float | None = DEFAULT_GET_EVENTS_TIMEOUT,
    ):
        self._context = context
        self._scope = scope
        self._get_events_timeout = get_events_timeout

        self.tracker = Tracker(excluded_channels)
        self.starter = InspectorWorkerStarter(context.workers, scope)
        self.tap = TransportTap(context, self.tracker, scope)
        self.patcher = WorkerSendPatcher(context.workers, self.tracker, scope)

        self.starter.on_ready(self._on_worker_ready)

    @property
    def context(self) -> IContext:
        return self._context

    @property
    def scope(self) -> str:
        return self._scope

    @property
    def worker(self) -> IWorker | None:
        return self.starter.worker

    @property
    def ready(self) -> bool:
        return self.starter.state == StarterState.READY

    def on_ready(self, callback: Callable[["ContextRelay"], None]) -> None:
        self.starter.on_ready(lambda _worker: callback(self))

    async def start(self) -> None:
        await self.starter.start()

    def _on_worker_ready(self, worker: IWorker) -> None:
        self.tracker.retarget(worker)
        self.tap.attach()
        self.patcher.attach()
        logger.info("Tracking IPC in context %s", self._context.id)

    async def get_events(self) -> list[IndexedIpcEvent]:
        """Ask the privileged worker for its current window."""
        worker = self.worker
        if worker is None:
            logger.warning("Privileged worker is not ready yet, cannot get IPC events.")
            return []

        future: asyncio.Future = asyncio.get_running_loop().create_future()

        def on_ipc_events(_event: Any, payload: list[dict]) -> None:
            if not future.done():
                future.set_result(payload)

        worker.ipc.once(IPC_EVENTS, on_ipc_events)
        worker.send(GET_IPC_EVENTS)

        try:
            payload = await asyncio.wait_for(future, self._get_events_timeout)
        except asyncio.TimeoutError:
            worker.ipc.remove_listener(IPC_EVENTS, on_ipc_events)
            logger.warning("Timed out waiting for IPC events from the privileged worker.")
            return []

        return [IndexedIpcEvent.from_dict(item) for item in payload]

    def clear_events(self) -> None:
        worker = self.worker
        if worker is None:
            logger.warning("Privileged worker is not ready yet, cannot clear IPC events.")
            return
        worker.send(CLEAR_EVENTS)

    def connect_panel(self, port: Any) -> bool:
        worker = self.worker
        if worker is None:
            logger.warning("Privileged worker is not ready yet, cannot connect panel.")
            return False
        worker.connect(port)
        return True

    def close(self) -> None:
        self.starter.cancel()
        self.tap.detach()
        self.patcher.detach()
