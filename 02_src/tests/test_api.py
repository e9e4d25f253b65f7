"""Tests for the FastAPI inspection surface."""

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from ipc_tracker.api import create_inspection_app, host_lifespan
from ipc_tracker.app import IpcTracker
from ipc_tracker.bus import Host
from ipc_tracker.config import InstallOptions
from ipc_tracker.installer import InstallationState


@pytest.fixture
def tracker():
    return IpcTracker(InstallationState())


@pytest.fixture
def client(tracker):
    """Client for an app whose lifespan installs the tracker and makes traffic."""
    host = Host()

    async def start():
        await tracker.install(host, InstallOptions(log_level="debug"))
        host.mark_ready()
        await tracker.drain()

        tracker.bus.handle("sum", lambda _event, a, b: a + b)
        frame = host.default_context.create_frame()
        frame.ipc.send("note", 1)
        await frame.ipc.invoke("sum", 1, 2)

    async def stop():
        for relay in tracker.relays.values():
            relay.close()

    app = create_inspection_app(tracker, lifespan=host_lifespan(start, stop))
    with TestClient(app) as client:
        yield client


class TestEventsRoutes:
    """Tests for /api/ipc-events."""

    def test_get_events(self, client):
        """Test the captured window is served oldest first."""
        response = client.get("/api/ipc-events")

        assert response.status_code == 200
        data = response.json()
        assert [e["channel"] for e in data] == ["note", "sum", "sum"]
        assert [e["serial_number"] for e in data] == [1, 2, 3]
        assert data[1]["linked_serial_number"] == 3
        assert data[2]["linked_serial_number"] == 2
        assert data[0]["linked_serial_number"] is None

    def test_filters(self, client):
        """Test channel, direction and limit filters."""
        by_channel = client.get("/api/ipc-events", params={"channel": "sum"}).json()
        by_direction = client.get("/api/ipc-events", params={"direction": "coordinator-to-requester"}).json()
        newest = client.get("/api/ipc-events", params={"limit": 1}).json()

        assert len(by_channel) == 2
        assert [e["args"] for e in by_direction] == [[3]]
        assert [e["serial_number"] for e in newest] == [3]

    def test_invalid_limit(self, client):
        """Test limit validation."""
        assert client.get("/api/ipc-events", params={"limit": 0}).status_code == 422

    def test_clear(self, client):
        """Test the clear endpoint resets the log."""
        response = client.post("/api/ipc-events/clear")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert client.get("/api/ipc-events").json() == []


class TestControlRoutes:
    """Tests for status and log level."""

    def test_status(self, client):
        """Test installation status."""
        data = client.get("/api/status").json()

        assert data == {
            "installed": True,
            "contexts": ["default"],
            "ready_contexts": ["default"],
            "primary_context": "default",
        }

    def test_set_log_level(self, client, tracker):
        """Test changing the log level."""
        response = client.post("/api/log-level", json={"level": "warn"})

        assert response.status_code == 200
        assert response.json() == {"level": "warn"}
        assert tracker.options.log_level == "warn"

    def test_invalid_log_level(self, client, tracker):
        """Test invalid levels are rejected."""
        response = client.post("/api/log-level", json={"level": "loud"})

        assert response.status_code == 400
        assert tracker.options.log_level == "debug"


class TestStream:
    """Tests for the WebSocket inspection port."""

    def test_ping(self, client):
        """Test ping/pong over the stream."""
        with client.websocket_connect("/api/ipc-events/stream") as websocket:
            websocket.send_json({"type": "ping"})

            assert websocket.receive_json() == {"type": "pong"}

    def test_get_all_events(self, client):
        """Test get-all-events over the stream."""
        with client.websocket_connect("/api/ipc-events/stream") as websocket:
            websocket.send_json({"type": "get-all-events"})

            message = websocket.receive_json()

        assert message["type"] == "all-events"
        assert [e["serial_number"] for e in message["events"]] == [1, 2, 3]

    def test_clear_over_stream(self, client):
        """Test clear-events over the stream."""
        with client.websocket_connect("/api/ipc-events/stream") as websocket:
            websocket.send_json({"type": "clear-events"})
            websocket.send_json({"type": "get-all-events"})

            assert websocket.receive_json() == {"type": "all-events", "events": []}


class TestNotInstalled:
    """Tests against a tracker that was never installed."""

    @pytest.fixture
    def bare_client(self, tracker):
        with TestClient(create_inspection_app(tracker)) as client:
            yield client

    def test_get_events_empty(self, bare_client):
        """Test the API answers with an empty window."""
        response = bare_client.get("/api/ipc-events")

        assert response.status_code == 200
        assert response.json() == []

    def test_status(self, bare_client):
        """Test status before install."""
        assert bare_client.get("/api/status").json()["installed"] is False

    def test_stream_refused(self, bare_client):
        """Test the stream closes when no privileged worker is available."""
        with pytest.raises(WebSocketDisconnect):
            with bare_client.websocket_connect("/api/ipc-events/stream") as websocket:
                websocket.receive_json()
