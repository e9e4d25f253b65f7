"""Pytest configuration and fixtures."""

import logging
import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

INSPECTOR_SCOPE = "ext://inspector/"


class RecordingTarget:
    """Stands in for the privileged worker: keeps every relayed event."""

    def __init__(self):
        self.events = []
        self.payloads = []

    def send(self, channel, payload):
        from ipc_tracker.models import IpcEvent

        self.payloads.append((channel, payload))
        self.events.append(IpcEvent.from_dict(payload))


class Recorder:
    """Tracker wired to a RecordingTarget."""

    def __init__(self, excluded_channels=()):
        from ipc_tracker.tracker import Tracker

        self.target = RecordingTarget()
        self.tracker = Tracker(excluded_channels, target=self.target)

    @property
    def events(self):
        return self.target.events


@pytest.fixture(autouse=True)
def reset_package_log_level():
    """Undo log levels applied by install()/set_log_level()."""
    yield
    logging.getLogger("ipc_tracker").setLevel(logging.NOTSET)


@pytest.fixture
def recorder():
    """Tracker that records instead of relaying."""
    return Recorder()


@pytest.fixture
def make_recorder():
    """Factory for recorders with excluded channels."""
    return Recorder


@pytest.fixture
def host():
    """Create in-memory host (not ready yet)."""
    from ipc_tracker.bus import Host

    return Host()


@pytest.fixture
def context(host):
    """Default context of a ready host."""
    host.mark_ready()
    return host.default_context


@pytest.fixture
def state():
    """Create fresh installation state."""
    from ipc_tracker.installer import InstallationState

    return InstallationState()


@pytest.fixture
def ipc(state):
    """Create IpcTracker with its own installation state."""
    from ipc_tracker.app import IpcTracker

    return IpcTracker(state)


@pytest_asyncio.fixture
async def installed(host, ipc):
    """IpcTracker installed into a ready host with a started privileged worker."""
    from ipc_tracker.config import InstallOptions

    await ipc.install(host, InstallOptions(log_level="debug", get_events_timeout=1.0))
    host.mark_ready()
    await ipc.drain()
    yield ipc
    for relay in ipc.relays.values():
        relay.close()
