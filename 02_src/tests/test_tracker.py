"""Tests for Tracker."""

from ipc_tracker.codec import wrap
from ipc_tracker.constants import RENDER_EVENT
from ipc_tracker.models import Direction, WorkerDetails
from ipc_tracker.tracker import Tracker


class TestTrackerTrack:
    """Tests for Tracker.track() method."""

    def test_track_sends_render_event(self, recorder):
        """Test that track() relays the event's wire form."""
        recorder.tracker.track(Direction.REQUESTER_TO_COORDINATOR, "ch", [1, 2], method="send")

        channel, payload = recorder.target.payloads[0]
        assert channel == RENDER_EVENT
        assert payload["direction"] == "requester-to-coordinator"
        assert payload["channel"] == "ch"
        assert payload["args"] == [1, 2]
        assert payload["method"] == "send"
        assert "correlation_token" not in payload

    def test_track_extracts_token(self, recorder):
        """Test that enveloped args are unwrapped and the token kept."""
        recorder.tracker.track(Direction.REQUESTER_TO_COORDINATOR, "sum", wrap([1, 2], "tok"), method="invoke")

        event = recorder.events[0]
        assert event.correlation_token == "tok"
        assert event.args == [1, 2]

    def test_track_worker_details(self, recorder):
        """Test worker details are carried."""
        details = WorkerDetails(worker_scope="ext://w/", worker_version_id=2)

        recorder.tracker.track(Direction.COORDINATOR_TO_WORKER, "cfg", [], worker_details=details)

        assert recorder.events[0].worker_details == details

    def test_track_never_retains(self, recorder):
        """Test the tracker has no event storage of its own."""
        recorder.tracker.track(Direction.COORDINATOR, "ch", [])

        assert not hasattr(recorder.tracker, "events")
        assert len(recorder.events) == 1


class TestTrackerExclusion:
    """Tests for excluded channels."""

    def test_relay_channels_excluded(self, recorder):
        """Test that relay channels are never reported."""
        recorder.tracker.track(Direction.COORDINATOR_TO_WORKER, RENDER_EVENT, [{}])

        assert recorder.events == []
        assert recorder.tracker.is_excluded(RENDER_EVENT)

    def test_configured_channels_excluded(self, make_recorder):
        """Test user-excluded channels are dropped."""
        recorder = make_recorder(["noisy"])

        recorder.tracker.track(Direction.COORDINATOR, "noisy", [])
        recorder.tracker.track(Direction.COORDINATOR, "quiet", [])

        assert [e.channel for e in recorder.events] == ["quiet"]


class TestTrackerTarget:
    """Tests for targeting."""

    def test_no_target_drops(self, caplog):
        """Test that events without a privileged worker are logged and dropped."""
        tracker = Tracker()

        tracker.track(Direction.COORDINATOR, "ch", [])

        assert tracker.target is None
        assert "not ready" in caplog.text

    def test_retarget(self, recorder, make_recorder):
        """Test retarget switches the destination."""
        other = make_recorder().target
        recorder.tracker.retarget(other)
        recorder.tracker.track(Direction.COORDINATOR, "ch", [])

        assert recorder.events == []
        assert len(other.events) == 1
