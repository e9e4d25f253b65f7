"""Channel names and message types shared by every context."""

# Coordinator <-> privileged worker relay channels.
RENDER_EVENT = "ipc-tracker-render-event"
GET_IPC_EVENTS = "ipc-tracker-get-ipc-events"
IPC_EVENTS = "ipc-tracker-ipc-events"
CLEAR_EVENTS = "ipc-tracker-clear-events"

RELAY_CHANNELS = frozenset({RENDER_EVENT, GET_IPC_EVENTS, IPC_EVENTS, CLEAR_EVENTS})


class MessageType:
    """Message types exchanged with inspection-surface ports."""

    PING = "ping"
    PONG = "pong"
    GET_ALL_EVENTS = "get-all-events"
    ALL_EVENTS = "all-events"
    CLEAR_EVENTS = "clear-events"
    RENDER_EVENT = "render-event"
    # Posted by requester contexts straight to the privileged worker.
    ADD_IPC_EVENT = "add-ipc-event"
