"""The coordinating process: owns the coordinator bus and all contexts."""

from .context import Context
from .coordinator import CoordinatorBus
from .emitter import Emitter

DEFAULT_CONTEXT_ID = "default"


class Host(Emitter):
    """
    Coordinating process.

    Emits "context-created" (Context) for the default context when the host
    becomes ready and for every partition context created afterwards.
    """

    def __init__(self) -> None:
        super().__init__()
        self.bus = CoordinatorBus()
        self._contexts: dict[str, Context] = {}
        self._ready = False

    def is_ready(self) -> bool:
        return self._ready

    def mark_ready(self) -> None:
        if self._ready:
            return
        self._ready = True
        self._create(DEFAULT_CONTEXT_ID)

    @property
    def default_context(self) -> Context:
        if not self._ready:
            raise RuntimeError("Host not ready")
        return self._contexts[DEFAULT_CONTEXT_ID]

    def context_for_partition(self, partition: str) -> Context:
        context_id = f"partition:{partition}"
        if context_id in self._contexts:
            return self._contexts[context_id]
        return self._create(context_id)

    @property
    def contexts(self) -> list[Context]:
        return list(self._contexts.values())

    def _create(self, context_id: str) -> Context:
        context = Context(context_id, self.bus)
        self._contexts[context_id] = context
        self.emit("context-created", context)
        return context
