"""Project-level configuration and install options."""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

PACKAGE_ROOT = Path(__file__).resolve().parent
INSPECTOR_EXTENSION_PATH = PACKAGE_ROOT / "inspector"

DEFAULT_LOG_LEVEL = "info"
DEFAULT_EVENT_LOG_CAPACITY = 20_000
DEFAULT_GET_EVENTS_TIMEOUT = 5.0

WORKER_PRELOAD_ID = "ipc-tracker-worker-preload"
FRAME_PRELOAD_ID = "ipc-tracker-frame-preload"


def _split_channels(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class InstallOptions:
    """Options accepted by IpcTracker.install()."""

    log_level: str = DEFAULT_LOG_LEVEL
    # Channels that are neither envelope-wrapped nor reported.
    excluded_channels: list[str] = field(default_factory=list)
    event_log_capacity: int = DEFAULT_EVENT_LOG_CAPACITY
    get_events_timeout: float | None = DEFAULT_GET_EVENTS_TIMEOUT

    @classmethod
    def from_env(cls) -> "InstallOptions":
        """Build options from IPC_TRACKER_* environment variables."""
        options = cls()
        level = os.getenv("IPC_TRACKER_LOG_LEVEL")
        if level:
            options = replace(options, log_level=level)

        channels = _split_channels(os.getenv("IPC_TRACKER_EXCLUDED_CHANNELS"))
        if channels:
            options = replace(options, excluded_channels=channels)

        capacity = os.getenv("IPC_TRACKER_EVENT_LOG_CAPACITY")
        if capacity:
            options = replace(options, event_log_capacity=int(capacity))

        return options
