"""Front-end (requester) contexts."""

from typing import TYPE_CHECKING, Any

from .emitter import Emitter
from .messages import SenderKind, TransportEvent

if TYPE_CHECKING:
    from .context import Context


class RequesterBus(Emitter):
    """Bus API available to code running in a front-end context."""

    def __init__(self, frame: "Frame"):
        super().__init__()
        self._frame = frame

    def send(self, channel: str, *args: Any) -> None:
        self._frame.context.deliver_message(self._frame.transport_event(), channel, list(args))

    def send_sync(self, channel: str, *args: Any) -> Any:
        return self._frame.context.deliver_sync(self._frame.transport_event(), channel, list(args))

    async def invoke(self, channel: str, *args: Any) -> Any:
        return await self._frame.context.deliver_invoke(self._frame.transport_event(), channel, list(args))


class Frame:
    """A front-end context. `ipc` is what page code uses and may be wrapped by preloads."""

    def __init__(self, context: "Context", frame_id: int):
        self.context = context
        self.id = frame_id
        self._bus = RequesterBus(self)
        self.ipc: Any = self._bus

    @property
    def raw_ipc(self) -> RequesterBus:
        return self._bus

    def send(self, channel: str, *args: Any) -> None:
        """Coordinator -> front-end message."""
        event = TransportEvent(type=SenderKind.FRAME, sender_id=0, reply_to=None)
        self._bus.emit(channel, event, *args)

    def transport_event(self) -> TransportEvent:
        return TransportEvent(type=SenderKind.FRAME, sender_id=self.id, reply_to=self.send)
