"""Reports coordinator -> worker messages by wrapping each worker's send."""

import functools
from typing import Any

from ..bus import IWorkerRegistry, RunningStatus, RunningStatusDetails
from ..logging_config import get_logger
from ..models import Direction, WorkerDetails
from ..tracker import ITracker

logger = get_logger(__name__)

_ACTIVE = (RunningStatus.STARTING, RunningStatus.RUNNING)


class WorkerSendPatcher:
    """
    Wraps `send` of every worker in a context except the privileged worker.

    Already-running workers are patched on attach(); new ones when the
    registry reports them starting or running. Each worker (by version id)
    is patched at most once; stopped workers are forgotten.
    """

    def __init__(self, workers: IWorkerRegistry, tracker: ITracker, own_worker_scope: str):
        self._workers = workers
        self._tracker = tracker
        self._own_scope = own_worker_scope
        self._patched: set[int] = set()
        self._attached = False

    @property
    def patched_version_ids(self) -> frozenset[int]:
        return frozenset(self._patched)

    def attach(self) -> None:
        if self._attached:
            return
        self._attached = True

        for version_id in list(self._workers.get_all_running()):
            self.patch(version_id)

        self._workers.on("running-status-changed", self._on_running_status_changed)

    def detach(self) -> None:
        if self._attached:
            self._workers.remove_listener("running-status-changed", self._on_running_status_changed)
            self._attached = False

    def _on_running_status_changed(self, details: RunningStatusDetails) -> None:
        try:
            status = RunningStatus(details.running_status)
        except ValueError:
            return
        if status in _ACTIVE:
            self.patch(details.version_id)
        elif status == RunningStatus.STOPPED:
            self._patched.discard(details.version_id)

    def patch(self, version_id: int) -> bool:
        """Wrap the worker's send; False if skipped."""
        if version_id in self._patched:
            return False

        worker = self._workers.get_worker_from_version_id(version_id)
        if worker is None or worker.scope == self._own_scope:
            return False

        self._patched.add(version_id)

        original_send = worker.send
        details = WorkerDetails(worker_scope=worker.scope, worker_version_id=worker.version_id)
        tracker = self._tracker

        @functools.wraps(original_send)
        def tracked_send(channel: str, *args: Any) -> Any:
            tracker.track(
                Direction.COORDINATOR_TO_WORKER,
                channel,
                list(args),
                method="send",
                worker_details=details,
            )
            return original_send(channel, *args)

        worker.send = tracked_send
        logger.debug("Tracking sends to worker %s (%s)", version_id, worker.scope)
        return True
