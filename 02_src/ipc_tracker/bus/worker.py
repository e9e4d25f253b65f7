"""Isolated worker contexts and the per-context worker registry."""

from typing import TYPE_CHECKING, Any

from .coordinator import CoordinatorBus
from .emitter import Emitter
from .errors import WorkerStartError
from .messages import (
    PreloadKind,
    RegistrationDetails,
    RunningStatus,
    RunningStatusDetails,
    RunningWorkerInfo,
    SenderKind,
    TransportEvent,
)

if TYPE_CHECKING:
    from .context import Context


class WorkerRuntime(Emitter):
    """
    The worker's own side of the bus.

    Messages sent by the coordinator arrive as `emit(channel, *args)`.
    Messages posted by other contexts arrive as the "message" event, and
    inspection-surface ports as the "connect" event.
    """

    def __init__(self, worker: "Worker"):
        super().__init__()
        self._worker = worker

    @property
    def scope(self) -> str:
        return self._worker.scope

    @property
    def version_id(self) -> int:
        return self._worker.version_id

    def send_to_coordinator(self, channel: str, *args: Any) -> None:
        self._worker.context.deliver_message(self._worker.transport_event(), channel, list(args), self._worker.ipc)

    def send_sync_to_coordinator(self, channel: str, *args: Any) -> Any:
        return self._worker.context.deliver_sync(self._worker.transport_event(), channel, list(args), self._worker.ipc)

    async def invoke_coordinator(self, channel: str, *args: Any) -> Any:
        return await self._worker.context.deliver_invoke(self._worker.transport_event(), channel, list(args), self._worker.ipc)


class Worker:
    """Coordinator-side handle of a running worker."""

    def __init__(self, context: "Context", scope: str, version_id: int):
        self.context = context
        self.scope = scope
        self.version_id = version_id
        self.running_status = RunningStatus.STARTING
        self.task_count = 0
        # Worker -> coordinator messages land here.
        self.ipc = CoordinatorBus()
        self.runtime = WorkerRuntime(self)

    def send(self, channel: str, *args: Any) -> None:
        """Coordinator -> worker message."""
        self.runtime.emit(channel, *args)

    def post_message(self, message: dict) -> None:
        """Message from another context straight to the worker."""
        self.runtime.emit("message", message)

    def connect(self, port: Any) -> None:
        """Attach an inspection-surface port to the worker."""
        self.runtime.emit("connect", port)

    def start_task(self) -> None:
        """Keep the worker alive while it serves requests."""
        self.task_count += 1

    def transport_event(self) -> TransportEvent:
        return TransportEvent(
            type=SenderKind.WORKER,
            sender_id=self.version_id,
            sender_scope=self.scope,
            reply_to=self.send,
        )


class WorkerRegistry(Emitter):
    """
    Registered scopes and running workers of one context.

    Emits "registration-completed" (RegistrationDetails) and
    "running-status-changed" (RunningStatusDetails).
    """

    def __init__(self, context: "Context"):
        super().__init__()
        self._context = context
        self._registered: set[str] = set()
        self._pending: list[str] = []
        self._workers: dict[int, Worker] = {}
        self._next_version_id = 1
        # When set, scope registration waits for complete_pending_registrations().
        self.defer_registration = False

    def register_scope(self, scope: str) -> None:
        if scope in self._registered or scope in self._pending:
            return
        if self.defer_registration:
            self._pending.append(scope)
            return
        self._complete_registration(scope)

    def complete_pending_registrations(self) -> None:
        pending, self._pending = self._pending, []
        for scope in pending:
            self._complete_registration(scope)

    def _complete_registration(self, scope: str) -> None:
        self._registered.add(scope)
        self.emit("registration-completed", RegistrationDetails(scope=scope))

    def is_registered(self, scope: str) -> bool:
        return scope in self._registered

    def get_all_running(self) -> dict[int, RunningWorkerInfo]:
        return {
            version_id: RunningWorkerInfo(version_id=version_id, scope=worker.scope)
            for version_id, worker in self._workers.items()
            if worker.running_status in (RunningStatus.STARTING, RunningStatus.RUNNING)
        }

    def get_worker_from_version_id(self, version_id: int) -> Worker | None:
        return self._workers.get(version_id)

    def find_by_scope(self, scope: str) -> Worker | None:
        for worker in self._workers.values():
            if worker.scope == scope and worker.running_status == RunningStatus.RUNNING:
                return worker
        return None

    async def start_worker_for_scope(self, scope: str) -> Worker:
        existing = self.find_by_scope(scope)
        if existing is not None:
            return existing

        if scope not in self._registered:
            raise WorkerStartError(scope, "scope is not registered")

        worker = Worker(self._context, scope, self._next_version_id)
        self._next_version_id += 1
        self._workers[worker.version_id] = worker

        self._set_status(worker, RunningStatus.STARTING)
        self._context.run_preloads(PreloadKind.WORKER, worker.runtime)
        self._set_status(worker, RunningStatus.RUNNING)
        return worker

    def stop_worker(self, version_id: int) -> None:
        worker = self._workers.get(version_id)
        if worker is None:
            return
        self._set_status(worker, RunningStatus.STOPPED)
        del self._workers[version_id]

    def _set_status(self, worker: Worker, status: RunningStatus) -> None:
        worker.running_status = status
        self.emit(
            "running-status-changed",
            RunningStatusDetails(version_id=worker.version_id, running_status=status),
        )
