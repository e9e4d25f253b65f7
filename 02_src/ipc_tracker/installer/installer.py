"""Installs the tracker into isolated contexts, once per context."""

import functools
from typing import Callable, Protocol

from ..bus import IContext, PreloadKind, PreloadScript
from ..config import (
    FRAME_PRELOAD_ID,
    INSPECTOR_EXTENSION_PATH,
    WORKER_PRELOAD_ID,
    InstallOptions,
)
from ..inspector import bootstrap_inspector
from ..logging_config import get_logger
from ..relay import ContextRelay
from ..requester import bootstrap_requester, privileged_worker_sink
from .state import InstallationState

logger = get_logger(__name__)


class IContextInstaller(Protocol):
    """Per-context installation."""

    async def install_to_context(self, context: IContext) -> ContextRelay | None:
        """Instrument a context unless it already is."""
        ...


class ContextInstaller:
    """
    Loads the inspector into a context and starts its relay.

    Steps: load the inspector extension (registers the privileged worker's
    scope), register the worker and frame preloads, then start the relay.
    Every failure is logged and swallowed: the host keeps running with less
    observability.
    """

    def __init__(
        self,
        state: InstallationState,
        options: InstallOptions,
        on_relay_ready: Callable[[ContextRelay], None] | None = None,
    ):
        self._state = state
        self._options = options
        self._on_relay_ready = on_relay_ready
        self._relays: dict[str, ContextRelay] = {}

    @property
    def relays(self) -> dict[str, ContextRelay]:
        return dict(self._relays)

    async def install_to_context(self, context: IContext) -> ContextRelay | None:
        """Instrument a context unless it already is."""
        if self._state.is_installed(context.id):
            return self._relays.get(context.id)
        self._state.mark_installed(context.id)

        try:
            extension = await context.load_extension(INSPECTOR_EXTENSION_PATH, allow_file_access=True)
            scope = extension.url
            excluded = list(self._options.excluded_channels)

            context.register_preload_script(
                PreloadScript(
                    id=WORKER_PRELOAD_ID,
                    kind=PreloadKind.WORKER,
                    entry=functools.partial(
                        bootstrap_inspector,
                        scope=scope,
                        capacity=self._options.event_log_capacity,
                    ),
                )
            )
            context.register_preload_script(
                PreloadScript(
                    id=FRAME_PRELOAD_ID,
                    kind=PreloadKind.FRAME,
                    entry=functools.partial(
                        bootstrap_requester,
                        sink=privileged_worker_sink(context.workers, scope),
                        excluded_channels=excluded,
                    ),
                )
            )

            relay = ContextRelay(
                context,
                scope,
                excluded_channels=excluded,
                get_events_timeout=self._options.get_events_timeout,
            )
            self._relays[context.id] = relay
            if self._on_relay_ready is not None:
                relay.on_ready(self._on_relay_ready)

            await relay.start()
            logger.info("IPC tracker loaded into context %s", context.id)
            return relay

        except Exception as e:
            logger.error("Failed to install IPC tracker into context %s: %s", context.id, e, exc_info=True)
            return None
