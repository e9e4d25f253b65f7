"""Starts the privileged worker, retrying once after its scope registers."""

import asyncio
from enum import Enum
from typing import Callable

from ..bus import IWorker, IWorkerRegistry, RegistrationDetails
from ..logging_config import get_logger

logger = get_logger(__name__)

ReadyCallback = Callable[[IWorker], None]


class StarterState(str, Enum):
    STARTING = "starting"
    READY = "ready"
    FAILED = "failed"


class InspectorWorkerStarter:
    """
    STARTING -> READY, with a single retry.

    Starting fails while the worker's scope is not registered yet. In that
    case one listener waits for "registration-completed" of that scope,
    removes itself as soon as it fires and retries exactly once. A second
    failure is final (FAILED).
    """

    def __init__(self, workers: IWorkerRegistry, scope: str):
        self._workers = workers
        self._scope = scope
        self._state = StarterState.STARTING
        self._worker: IWorker | None = None
        self._ready_callbacks: list[ReadyCallback] = []
        self._registration_listener: Callable[[RegistrationDetails], None] | None = None
        self._retry_task: asyncio.Task | None = None

    @property
    def state(self) -> StarterState:
        return self._state

    @property
    def worker(self) -> IWorker | None:
        return self._worker

    @property
    def waiting_for_registration(self) -> bool:
        return self._registration_listener is not None

    def on_ready(self, callback: ReadyCallback) -> None:
        if self._state == StarterState.READY and self._worker is not None:
            callback(self._worker)
            return
        self._ready_callbacks.append(callback)

    async def start(self) -> IWorker | None:
        """Try to start the worker; on failure arm the registration retry."""
        if self._state != StarterState.STARTING:
            return self._worker

        try:
            worker = await self._workers.start_worker_for_scope(self._scope)
        except Exception as e:
            logger.warning(
                "Failed to start privileged worker for %s (%s), retrying once it registers",
                self._scope,
                e,
            )
            self._wait_for_registration()
            return None

        self._mark_ready(worker)
        return worker

    async def wait(self) -> None:
        """Wait for a pending retry to finish."""
        if self._retry_task is not None:
            await asyncio.shield(self._retry_task)

    def cancel(self) -> None:
        """Drop the pending registration listener and retry."""
        self._unsubscribe()
        if self._retry_task is not None and not self._retry_task.done():
            self._retry_task.cancel()

    def _wait_for_registration(self) -> None:
        if self._registration_listener is not None:
            return

        def on_registration_completed(details: RegistrationDetails) -> None:
            if details.scope != self._scope:
                return
            self._unsubscribe()
            self._retry_task = asyncio.ensure_future(self._retry())

        self._registration_listener = on_registration_completed
        self._workers.on("registration-completed", on_registration_completed)

    def _unsubscribe(self) -> None:
        if self._registration_listener is not None:
            self._workers.remove_listener("registration-completed", self._registration_listener)
            self._registration_listener = None

    async def _retry(self) -> None:
        try:
            worker = await self._workers.start_worker_for_scope(self._scope)
        except Exception as e:
            self._state = StarterState.FAILED
            logger.error("Failed to start privileged worker for %s: %s", self._scope, e)
            return

        self._mark_ready(worker)
        logger.info("Privileged worker for %s started successfully", self._scope)

    def _mark_ready(self, worker: IWorker) -> None:
        worker.start_task()
        self._worker = worker
        self._state = StarterState.READY

        callbacks, self._ready_callbacks = self._ready_callbacks, []
        for callback in callbacks:
            try:
                callback(worker)
            except Exception as e:
                logger.error("Error in privileged worker ready callback: %s", e, exc_info=True)
