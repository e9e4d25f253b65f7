"""Isolated contexts (sessions) and their internal transport signals."""

from pathlib import Path
from typing import Any

from .coordinator import CoordinatorBus
from .emitter import Emitter
from .frame import Frame
from .messages import Extension, PreloadKind, PreloadScript, TransportEvent
from .worker import WorkerRegistry

# Internal transport signals emitted before every dispatch.
SIGNAL_MESSAGE = "-ipc-message"
SIGNAL_INVOKE = "-ipc-invoke"
SIGNAL_MESSAGE_SYNC = "-ipc-message-sync"

TRANSPORT_SIGNALS = (SIGNAL_MESSAGE, SIGNAL_INVOKE, SIGNAL_MESSAGE_SYNC)


class Context(Emitter):
    """
    One isolated context: its frames, workers and preload scripts.

    Every message entering the coordinator is first announced on one of the
    internal transport signals as `(event, channel, args)` and then
    dispatched to the target bus.
    """

    def __init__(self, context_id: str, bus: CoordinatorBus):
        super().__init__()
        self.id = context_id
        self._bus = bus
        self.workers = WorkerRegistry(self)
        self.frames: list[Frame] = []
        self.extensions: dict[str, Extension] = {}
        self.extension_load_count = 0
        self._preloads: dict[str, PreloadScript] = {}
        self._next_frame_id = 1

    # Preloads / extensions

    def register_preload_script(self, script: PreloadScript) -> None:
        if script.id in self._preloads:
            raise ValueError(f"Preload script '{script.id}' is already registered")
        self._preloads[script.id] = script

    def get_preload_scripts(self) -> list[PreloadScript]:
        return list(self._preloads.values())

    def run_preloads(self, kind: PreloadKind, target: Any) -> None:
        for script in self._preloads.values():
            if script.kind == kind:
                script.entry(target)

    async def load_extension(self, path: str | Path, allow_file_access: bool = False) -> Extension:
        """Load an extension and register its worker scope."""
        self.extension_load_count += 1
        name = Path(path).name
        extension = Extension(
            id=f"{name}-{self.id}",
            name=name,
            path=str(path),
            url=f"ext://{name}/",
        )
        self.extensions[extension.id] = extension
        self.workers.register_scope(extension.url)
        return extension

    # Frames / workers

    def create_frame(self) -> Frame:
        frame = Frame(self, self._next_frame_id)
        self._next_frame_id += 1
        self.frames.append(frame)
        self.run_preloads(PreloadKind.FRAME, frame)
        return frame

    async def start_worker(self, scope: str):
        """Register scope (if needed) and start a worker for it."""
        self.workers.register_scope(scope)
        return await self.workers.start_worker_for_scope(scope)

    # Dispatch

    def deliver_message(
        self,
        event: TransportEvent,
        channel: str,
        args: list[Any],
        target: CoordinatorBus | None = None,
    ) -> None:
        self.emit(SIGNAL_MESSAGE, event, channel, list(args))
        (target or self._bus).emit(channel, event, *args)

    def deliver_sync(
        self,
        event: TransportEvent,
        channel: str,
        args: list[Any],
        target: CoordinatorBus | None = None,
    ) -> Any:
        self.emit(SIGNAL_MESSAGE_SYNC, event, channel, list(args))
        (target or self._bus).emit(channel, event, *args)
        return event.return_value

    async def deliver_invoke(
        self,
        event: TransportEvent,
        channel: str,
        args: list[Any],
        target: CoordinatorBus | None = None,
    ) -> Any:
        self.emit(SIGNAL_INVOKE, event, channel, list(args))
        return await (target or self._bus).invoke(channel, event, args)
