"""Tests for WorkerSendPatcher."""

import pytest

from ipc_tracker.models import Direction, WorkerDetails
from ipc_tracker.relay import WorkerSendPatcher

OWN_SCOPE = "ext://inspector/"


@pytest.fixture
def patcher(context, recorder):
    patcher = WorkerSendPatcher(context.workers, recorder.tracker, OWN_SCOPE)
    yield patcher
    patcher.detach()


class TestWorkerSendPatcher:
    """Tests for coordinator -> worker reporting."""

    @pytest.mark.asyncio
    async def test_running_workers_patched_on_attach(self, patcher, context, recorder):
        """Test already-running workers are wrapped on attach."""
        worker = await context.start_worker("ext://other/")
        received = []
        worker.runtime.on("cfg", received.append)

        patcher.attach()
        worker.send("cfg", {"a": 1})

        assert received == [{"a": 1}]
        event = recorder.events[0]
        assert event.direction == Direction.COORDINATOR_TO_WORKER
        assert event.channel == "cfg"
        assert event.method == "send"
        assert event.args == [{"a": 1}]
        assert event.worker_details == WorkerDetails(worker_scope="ext://other/", worker_version_id=worker.version_id)

    @pytest.mark.asyncio
    async def test_new_workers_patched(self, patcher, context, recorder):
        """Test workers started after attach are wrapped too."""
        patcher.attach()

        worker = await context.start_worker("ext://later/")
        worker.send("cfg")

        assert worker.version_id in patcher.patched_version_ids
        assert [e.channel for e in recorder.events] == ["cfg"]

    @pytest.mark.asyncio
    async def test_own_worker_never_reported(self, patcher, context, recorder):
        """Test sends to the privileged worker are not reported."""
        own = await context.start_worker(OWN_SCOPE)
        other = await context.start_worker("ext://other/")
        patcher.attach()

        own.send("custom", 1)
        other.send("custom", 2)

        assert [e.args for e in recorder.events] == [[2]]
        assert own.version_id not in patcher.patched_version_ids

    @pytest.mark.asyncio
    async def test_patched_once(self, patcher, context, recorder):
        """Test a worker is wrapped at most once."""
        worker = await context.start_worker("ext://other/")
        patcher.attach()

        assert patcher.patch(worker.version_id) is False
        worker.send("cfg")

        assert len(recorder.events) == 1

    def test_unknown_version(self, patcher):
        """Test patching an unknown worker is skipped."""
        assert patcher.patch(999) is False

    @pytest.mark.asyncio
    async def test_detach_stops_patching_new_workers(self, patcher, context, recorder):
        """Test detach unsubscribes from running-status changes."""
        patcher.attach()
        patcher.detach()

        worker = await context.start_worker("ext://late/")
        worker.send("cfg")

        assert recorder.events == []

    @pytest.mark.asyncio
    async def test_detach_removes_subscription(self, patcher, context):
        """Test detach leaves no running-status listener behind."""
        before = context.workers.listener_count("running-status-changed")

        patcher.attach()
        patcher.detach()

        assert context.workers.listener_count("running-status-changed") == before

    @pytest.mark.asyncio
    async def test_stopped_worker_forgotten(self, patcher, context):
        """Test a stopped worker's version id is dropped."""
        patcher.attach()
        worker = await context.start_worker("ext://short-lived/")
        assert worker.version_id in patcher.patched_version_ids

        context.workers.stop_worker(worker.version_id)

        assert worker.version_id not in patcher.patched_version_ids
