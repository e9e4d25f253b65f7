"""Capabilities the tracker needs from the message bus."""

from typing import Any, Callable, Protocol

from .messages import PreloadScript, RunningWorkerInfo


class ICoordinatorBus(Protocol):
    """Coordinator-side registration and dispatch API."""

    def on(self, channel: str, listener: Callable[..., Any]) -> Any: ...

    def add_listener(self, channel: str, listener: Callable[..., Any]) -> Any: ...

    def once(self, channel: str, listener: Callable[..., Any]) -> Any: ...

    def off(self, channel: str, listener: Callable[..., Any]) -> Any: ...

    def remove_listener(self, channel: str, listener: Callable[..., Any]) -> Any: ...

    def remove_all_listeners(self, channel: str | None = None) -> Any: ...

    def handle(self, channel: str, handler: Callable[..., Any]) -> None: ...

    def handle_once(self, channel: str, handler: Callable[..., Any]) -> None: ...

    def remove_handler(self, channel: str) -> None: ...

    def emit(self, channel: str, *args: Any) -> bool: ...

    def listener_count(self, channel: str) -> int: ...

    def event_names(self) -> list[str]: ...


class IRequesterBus(Protocol):
    """Bus API of a front-end context."""

    def send(self, channel: str, *args: Any) -> None: ...

    def send_sync(self, channel: str, *args: Any) -> Any: ...

    async def invoke(self, channel: str, *args: Any) -> Any: ...

    def on(self, channel: str, listener: Callable[..., Any]) -> Any: ...

    def once(self, channel: str, listener: Callable[..., Any]) -> Any: ...

    def remove_listener(self, channel: str, listener: Callable[..., Any]) -> Any: ...

    def remove_all_listeners(self, channel: str | None = None) -> Any: ...

    def listener_count(self, channel: str) -> int: ...

    def event_names(self) -> list[str]: ...


class IWorker(Protocol):
    """Coordinator-side handle of a worker."""

    scope: str
    version_id: int
    ipc: Any

    def send(self, channel: str, *args: Any) -> None: ...

    def post_message(self, message: dict) -> None: ...

    def connect(self, port: Any) -> None: ...

    def start_task(self) -> None: ...


class IWorkerRuntime(Protocol):
    """The worker's own side of the bus."""

    scope: str

    def on(self, channel: str, listener: Callable[..., Any]) -> Any: ...

    def send_to_coordinator(self, channel: str, *args: Any) -> None: ...


class IWorkerRegistry(Protocol):
    """Running workers of one context plus lifecycle notifications."""

    def get_all_running(self) -> dict[int, RunningWorkerInfo]: ...

    def get_worker_from_version_id(self, version_id: int) -> IWorker | None: ...

    async def start_worker_for_scope(self, scope: str) -> IWorker: ...

    def on(self, event: str, listener: Callable[..., Any]) -> Any: ...

    def remove_listener(self, event: str, listener: Callable[..., Any]) -> Any: ...


class IContext(Protocol):
    """An isolated context."""

    id: str
    workers: IWorkerRegistry

    def on(self, signal: str, listener: Callable[..., Any]) -> Any: ...

    def remove_listener(self, signal: str, listener: Callable[..., Any]) -> Any: ...

    def register_preload_script(self, script: PreloadScript) -> None: ...

    async def load_extension(self, path: Any, allow_file_access: bool = False) -> Any: ...


class IHost(Protocol):
    """The coordinating process."""

    bus: ICoordinatorBus

    def is_ready(self) -> bool: ...

    @property
    def default_context(self) -> IContext: ...

    def on(self, event: str, listener: Callable[..., Any]) -> Any: ...
