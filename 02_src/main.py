"""Main entry point for the IPC tracker demo."""

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from ipc_tracker import InstallOptions, ipc_tracker
from ipc_tracker.api import create_inspection_app, host_lifespan
from ipc_tracker.bus import Host
from ipc_tracker.logging_config import setup_logging
from sim import Sim


def main():
    """Run the application."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")

    options = InstallOptions.from_env()
    setup_logging()

    # Get configuration from environment
    api_host = os.getenv("API_HOST", "localhost")
    api_port = int(os.getenv("API_PORT", "8000"))
    api_url = f"http://{api_host}:{api_port}"

    host = Host()
    sim = Sim(host, ipc_tracker, api_url=api_url)

    async def start() -> None:
        await ipc_tracker.install(host, options)
        host.mark_ready()
        await ipc_tracker.drain()
        await sim.start()

    async def stop() -> None:
        await sim.stop()
        for relay in ipc_tracker.relays.values():
            relay.close()

    # Create FastAPI app
    app = create_inspection_app(ipc_tracker, lifespan=host_lifespan(start, stop))

    # Run with uvicorn
    uvicorn.run(
        app,
        host=api_host,
        port=api_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
