"""Tracker implementation: builds IpcEvents and relays them to the privileged worker."""

from typing import Any, Iterable, Protocol

from ..bus import IWorker
from ..codec import unwrap
from ..constants import RELAY_CHANNELS, RENDER_EVENT
from ..logging_config import get_logger
from ..models import Direction, IpcEvent, WorkerDetails

logger = get_logger(__name__)


class ITracker(Protocol):
    """Creating IpcEvents and forwarding them to the canonical log."""

    def track(
        self,
        direction: Direction,
        channel: str,
        args: list[Any],
        method: str | None = None,
        worker_details: WorkerDetails | None = None,
    ) -> None:
        """Create an IpcEvent and relay it."""
        ...

    def is_excluded(self, channel: str) -> bool:
        """Whether a channel is neither wrapped nor reported."""
        ...


class Tracker:
    """
    Relays captured events to one privileged worker.

    The tracker never keeps events: each one is sent on the render-event
    relay channel and forgotten.
    """

    def __init__(self, excluded_channels: Iterable[str] = (), target: IWorker | None = None):
        self._excluded = frozenset(excluded_channels)
        self._target = target

    @property
    def target(self) -> IWorker | None:
        return self._target

    @property
    def excluded_channels(self) -> frozenset[str]:
        return self._excluded

    def retarget(self, worker: IWorker | None) -> None:
        """Send subsequent events to worker."""
        self._target = worker

    def is_excluded(self, channel: str) -> bool:
        return channel in self._excluded or channel in RELAY_CHANNELS

    def track(
        self,
        direction: Direction,
        channel: str,
        args: list[Any],
        method: str | None = None,
        worker_details: WorkerDetails | None = None,
    ) -> None:
        """Create an IpcEvent and relay it."""
        if self.is_excluded(channel):
            return

        if self._target is None:
            logger.error("Privileged worker is not ready yet, cannot track IPC event on %r", channel)
            return

        token, real_args = unwrap(args)
        event = IpcEvent(
            direction=direction,
            channel=channel,
            args=real_args,
            method=method,
            correlation_token=token,
            worker_details=worker_details,
        )
        self._target.send(RENDER_EVENT, event.to_dict())
