"""Tests for TransportTap."""

import pytest

from ipc_tracker.codec import wrap
from ipc_tracker.constants import RENDER_EVENT
from ipc_tracker.models import Direction
from ipc_tracker.tap import TransportTap

OWN_SCOPE = "ext://inspector/"


@pytest.fixture
def tap(context, recorder):
    tap = TransportTap(context, recorder.tracker, OWN_SCOPE)
    tap.attach()
    yield tap
    tap.detach()


class TestTransportTapFrames:
    """Tests for requester -> coordinator traffic."""

    @pytest.mark.asyncio
    async def test_methods(self, tap, context, host, recorder):
        """Test send/invoke/send_sync are reported with their method."""
        host.bus.handle("sum", lambda _event, a, b: a + b)
        frame = context.create_frame()

        frame.ipc.send("note", 1)
        await frame.ipc.invoke("sum", 1, 2)
        frame.ipc.send_sync("sync", "x")

        assert [(e.direction, e.channel, e.method, e.args) for e in recorder.events] == [
            (Direction.REQUESTER_TO_COORDINATOR, "note", "send", [1]),
            (Direction.REQUESTER_TO_COORDINATOR, "sum", "invoke", [1, 2]),
            (Direction.REQUESTER_TO_COORDINATOR, "sync", "send_sync", ["x"]),
        ]

    def test_reported_without_handler(self, tap, context, recorder):
        """Test traffic is seen even when nothing listens on the channel."""
        context.create_frame().ipc.send("unheard", 1)

        assert [e.channel for e in recorder.events] == ["unheard"]

    def test_token_extracted(self, tap, context, recorder):
        """Test an enveloped message carries its token into the event."""
        context.create_frame().ipc.send("ch", *wrap([5], "tok"))

        event = recorder.events[0]
        assert event.correlation_token == "tok"
        assert event.args == [5]

    def test_relay_channels_ignored(self, tap, context, recorder):
        """Test relay channels are not reported."""
        context.create_frame().ipc.send(RENDER_EVENT, {})

        assert recorder.events == []


class TestTransportTapWorkers:
    """Tests for worker -> coordinator traffic."""

    @pytest.mark.asyncio
    async def test_worker_message(self, tap, context, recorder):
        """Test worker messages are reported as worker-to-coordinator."""
        worker = await context.start_worker("ext://other/")

        worker.runtime.send_to_coordinator("hb", 1)

        event = recorder.events[0]
        assert event.direction == Direction.WORKER_TO_COORDINATOR
        assert event.channel == "hb"
        assert event.method == "send"

    @pytest.mark.asyncio
    async def test_own_worker_ignored(self, tap, context, recorder):
        """Test the privileged worker's own traffic is never reported."""
        worker = await context.start_worker(OWN_SCOPE)

        worker.runtime.send_to_coordinator("hb", 1)

        assert recorder.events == []


class TestTransportTapLifecycle:
    """Tests for attach/detach."""

    def test_attach_idempotent(self, tap, context, recorder):
        """Test attaching twice does not duplicate events."""
        tap.attach()

        context.create_frame().ipc.send("ch")

        assert len(recorder.events) == 1

    def test_detach(self, tap, context, recorder):
        """Test a detached tap reports nothing."""
        tap.detach()

        context.create_frame().ipc.send("ch")

        assert tap.attached is False
        assert recorder.events == []
        assert context.listener_count("-ipc-message") == 0
