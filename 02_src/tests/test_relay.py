"""Tests for ContextRelay."""

import pytest

from ipc_tracker.bus import PreloadKind, PreloadScript
from ipc_tracker.inspector import PanelPort, bootstrap_inspector
from ipc_tracker.models import Direction, IpcEvent
from ipc_tracker.relay import ContextRelay

SCOPE = "ext://inspector/"


@pytest.fixture
def with_inspector(context):
    """Context whose privileged worker runs the inspector service."""
    context.workers.register_scope(SCOPE)
    context.register_preload_script(
        PreloadScript(id="inspector", kind=PreloadKind.WORKER, entry=lambda runtime: bootstrap_inspector(runtime, SCOPE))
    )
    return context


class TestContextRelay:
    """Tests for relay wiring."""

    @pytest.mark.asyncio
    async def test_ready_attaches_tap_and_patcher(self, with_inspector):
        """Test the tracker is retargeted and tapping starts once ready."""
        relay = ContextRelay(with_inspector, SCOPE)
        ready = []
        relay.on_ready(ready.append)

        await relay.start()

        assert relay.ready
        assert ready == [relay]
        assert relay.tracker.target is relay.worker
        assert relay.tap.attached
        relay.close()

    @pytest.mark.asyncio
    async def test_nothing_tapped_before_ready(self, context):
        """Test traffic before the worker is ready is not tapped."""
        relay = ContextRelay(context, SCOPE)
        await relay.start()

        context.create_frame().ipc.send("early")

        assert relay.ready is False
        assert relay.tap.attached is False
        relay.close()

    @pytest.mark.asyncio
    async def test_get_events_round_trip(self, with_inspector):
        """Test get_events returns what the privileged worker holds."""
        relay = ContextRelay(with_inspector, SCOPE)
        await relay.start()

        with_inspector.create_frame().ipc.send("note", 1)
        relay.tracker.track(Direction.COORDINATOR, "ch", [], method="off")

        events = await relay.get_events()

        assert [(e.serial_number, e.direction, e.channel) for e in events] == [
            (1, Direction.REQUESTER_TO_COORDINATOR, "note"),
            (2, Direction.COORDINATOR, "ch"),
        ]
        relay.close()

    @pytest.mark.asyncio
    async def test_clear_events(self, with_inspector):
        """Test clear_events resets the privileged worker's log."""
        relay = ContextRelay(with_inspector, SCOPE)
        await relay.start()
        relay.tracker.track(Direction.COORDINATOR, "ch", [])

        relay.clear_events()

        assert await relay.get_events() == []
        relay.close()

    @pytest.mark.asyncio
    async def test_get_events_before_ready(self, context, caplog):
        """Test get_events without a worker returns an empty list."""
        relay = ContextRelay(context, SCOPE)

        assert await relay.get_events() == []
        assert "not ready" in caplog.text

    @pytest.mark.asyncio
    async def test_get_events_timeout(self, context, caplog):
        """Test a silent privileged worker yields [] after the timeout."""
        context.workers.register_scope(SCOPE)
        relay = ContextRelay(context, SCOPE, get_events_timeout=0.05)
        await relay.start()

        assert await relay.get_events() == []
        assert "Timed out" in caplog.text
        assert relay.worker.ipc.listener_count("ipc-tracker-ipc-events") == 0
        relay.close()

    @pytest.mark.asyncio
    async def test_connect_panel(self, with_inspector):
        """Test a panel port reaches the privileged worker."""
        relay = ContextRelay(with_inspector, SCOPE)
        port = PanelPort()
        assert relay.connect_panel(port) is False

        await relay.start()
        assert relay.connect_panel(port) is True

        relay.worker.post_message({"type": "add-ipc-event", "event": IpcEvent(Direction.REQUESTER, "x").to_dict()})
        assert port.received[0]["type"] == "render-event"
        relay.close()
