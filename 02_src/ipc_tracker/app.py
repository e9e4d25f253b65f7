"""IpcTracker: install entry point and event queries."""

import asyncio
from dataclasses import replace
from typing import Any, Protocol

from .bus import IContext, IHost
from .config import InstallOptions
from .installer import ContextInstaller, InstallationState
from .interception import InstrumentedBus
from .logging_config import get_logger, set_package_log_level
from .models import IndexedIpcEvent
from .relay import ContextRelay
from .tracker import Tracker

logger = get_logger(__name__)


class IIpcTracker(Protocol):
    """Install and query."""

    async def install(self, host: IHost, options: InstallOptions | None = None) -> None:
        """Instrument the host once; idempotent."""
        ...

    async def get_events(self) -> list[IndexedIpcEvent]:
        """Current event window of the primary privileged worker."""
        ...

    def clear_events(self) -> None:
        """Reset the primary event log."""
        ...


class IpcTracker:
    """
    Process-wide tracker.

    install() wraps the host's coordinator bus exactly once and instruments
    the default context plus every context created afterwards. Coordinator-
    local events (removals) go to the primary relay: the default context's
    once it is ready, otherwise the first relay that became ready.
    """

    def __init__(self, state: InstallationState | None = None):
        self._state = state or InstallationState()
        self._options = InstallOptions()

        # Components (will be initialized in install())
        self._host: IHost | None = None
        self._tracker: Tracker | None = None
        self._bus: InstrumentedBus | None = None
        self._installer: ContextInstaller | None = None
        self._primary: ContextRelay | None = None
        self._pending: set[asyncio.Future] = set()

    @property
    def state(self) -> InstallationState:
        return self._state

    @property
    def installed(self) -> bool:
        return self._state.interception_installed

    @property
    def options(self) -> InstallOptions:
        return self._options

    async def install(self, host: IHost, options: InstallOptions | None = None) -> None:
        """Instrument the host once; repeated calls only reapply the log level."""
        if self._state.interception_installed:
            if options is not None:
                self.set_log_level(options.log_level)
            logger.debug("IPC tracker already installed")
            return

        self._state.interception_installed = True
        requested = options or InstallOptions()
        self._options = replace(requested, log_level=self._options.log_level)
        self.set_log_level(requested.log_level)
        self._host = host

        # 1. Coordinator bus interception (process-wide, once)
        self._tracker = Tracker(self._options.excluded_channels)
        self._bus = InstrumentedBus(host.bus, self._tracker)
        logger.info("Coordinator bus instrumented")

        # 2. Per-context installation
        self._installer = ContextInstaller(self._state, self._options, self._on_relay_ready)
        host.on("context-created", self._on_context_created)

        # 3. The default context will not be announced again if the host is already up
        if host.is_ready() and not self._state.is_installed(host.default_context.id):
            await self._installer.install_to_context(host.default_context)

    def _on_context_created(self, context: IContext) -> None:
        if self._installer is None:
            return
        task = asyncio.ensure_future(self._installer.install_to_context(context))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _on_relay_ready(self, relay: ContextRelay) -> None:
        if self._primary is None or (self._is_default(relay.context) and not self._is_default(self._primary.context)):
            self._primary = relay
            if self._tracker is not None:
                self._tracker.retarget(relay.worker)
            logger.info("Primary privileged worker is in context %s", relay.context.id)

    def _is_default(self, context: IContext) -> bool:
        host = self._host
        return host is not None and host.is_ready() and context is host.default_context

    async def drain(self) -> None:
        """Wait for background installs and pending worker start retries."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
        for relay in self.relays.values():
            await relay.starter.wait()

    @property
    def bus(self) -> InstrumentedBus:
        """Instrumented coordinator bus for application code."""
        if self._bus is None:
            raise RuntimeError("IpcTracker not installed")
        return self._bus

    @property
    def relays(self) -> dict[str, ContextRelay]:
        if self._installer is None:
            return {}
        return self._installer.relays

    @property
    def primary_relay(self) -> ContextRelay | None:
        return self._primary

    def set_log_level(self, level: str) -> None:
        """Minimum severity for tracker logs; invalid levels keep the previous one."""
        if set_package_log_level(level):
            self._options = replace(self._options, log_level=level)

    async def get_events(self) -> list[IndexedIpcEvent]:
        """
        Current event window of the primary privileged worker.

        Returns an empty list (and logs a warning) when called before
        install() or before the privileged worker is ready.
        """
        if not self.installed:
            logger.warning("You are trying to get IPC events before the IPC tracker is installed.")
            return []

        if self._primary is None:
            logger.warning("Privileged worker is not registered yet. Cannot get IPC events.")
            return []

        return await self._primary.get_events()

    def clear_events(self) -> None:
        if self._primary is None:
            logger.warning("Privileged worker is not registered yet. Cannot clear IPC events.")
            return
        self._primary.clear_events()

    def connect_panel(self, port: Any) -> bool:
        """Attach an inspection-surface port to the primary privileged worker."""
        if self._primary is None:
            logger.warning("Privileged worker is not registered yet. Cannot connect panel.")
            return False
        return self._primary.connect_panel(port)

    def status(self) -> dict[str, Any]:
        return {
            "installed": self.installed,
            "contexts": sorted(self._state.installed_contexts),
            "ready_contexts": sorted(cid for cid, relay in self.relays.items() if relay.ready),
            "primary_context": self._primary.context.id if self._primary else None,
        }


# Process-wide instance
ipc_tracker = IpcTracker()
