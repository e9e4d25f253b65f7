"""SIM implementation - scripted bus traffic for demos."""

import asyncio
import random
from typing import Any, Protocol

import httpx

from ipc_tracker.app import IpcTracker
from ipc_tracker.bus import Frame, Host, TransportEvent, Worker
from ipc_tracker.logging_config import get_logger

logger = get_logger(__name__)

DEMO_WORKER_SCOPE = "ext://demo-worker/"


class ISim(Protocol):
    """Generate bus traffic through an instrumented host."""

    async def start(self) -> None:
        """Start scripted scenario."""
        ...

    async def stop(self) -> None:
        """Stop scenario."""
        ...


class Sim:
    """
    SIM with a scripted scenario.

    Application handlers are registered on the tracker's instrumented bus;
    a front-end frame and a plain worker then exchange messages with them so
    every direction shows up in the event log.
    """

    def __init__(
        self,
        host: Host,
        tracker: IpcTracker,
        api_url: str | None = None,
        rounds: int = 3,
        delay: tuple[float, float] = (0.5, 1.5),
    ):
        self._host = host
        self._tracker = tracker
        self._api_url = api_url
        self._rounds = rounds
        self._delay = delay
        self._running = False
        self._task: asyncio.Task | None = None
        self._client: httpx.AsyncClient | None = None
        self._handlers_ready = False
        self._users: dict[str, dict[str, Any]] = {
            "user_001": {"name": "Alice"},
            "user_002": {"name": "Bob"},
            "user_003": {"name": "Charlie"},
        }

    async def start(self) -> None:
        """Start scripted scenario."""
        if self._running:
            return

        self._running = True
        if self._api_url:
            self._client = httpx.AsyncClient()

        # Start background task
        self._task = asyncio.create_task(self._run_scenario())

    async def stop(self) -> None:
        """Stop scenario."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        if self._client:
            await self._client.aclose()
            self._client = None

    def register_handlers(self) -> None:
        """Coordinator-side application code."""
        if self._handlers_ready:
            return
        self._handlers_ready = True
        bus = self._tracker.bus

        def on_ping(event: TransportEvent, counter: int) -> None:
            event.reply("pong", counter)

        def on_save(event: TransportEvent, user_id: str, fields: dict) -> None:
            self._users.setdefault(user_id, {}).update(fields)
            event.return_value = True

        def on_get_user(_event: TransportEvent, user_id: str) -> dict[str, Any]:
            return {"user_id": user_id, **self._users.get(user_id, {})}

        def on_hello(_event: TransportEvent) -> str:
            return "welcome"

        bus.on("ping", on_ping)
        bus.on("save-user", on_save)
        bus.handle("get-user", on_get_user)
        bus.handle_once("hello", on_hello)

    async def run_round(self, frame: Frame, worker: Worker, round_no: int) -> None:
        """One pass over every traffic shape."""
        frame.ipc.send("ping", round_no)
        for user_id in self._users:
            user = await frame.ipc.invoke("get-user", user_id)
            logger.info("SIM: get-user %s -> %s", user_id, user.get("name"))
        frame.ipc.send_sync("save-user", "user_001", {"last_round": round_no})

        worker.send("config", {"round": round_no})
        worker.runtime.send_to_coordinator("heartbeat", round_no)

    async def run_once(self) -> int:
        """Run the whole scenario without delays; returns rounds played."""
        frame, worker = await self._prepare()
        for round_no in range(self._rounds):
            await self.run_round(frame, worker, round_no)
        self._teardown()
        return self._rounds

    async def _prepare(self) -> tuple[Frame, Worker]:
        self.register_handlers()
        context = self._host.default_context
        frame = context.create_frame()
        worker = await context.start_worker(DEMO_WORKER_SCOPE)
        await frame.ipc.invoke("hello")
        return frame, worker

    def _teardown(self) -> None:
        bus = self._tracker.bus
        bus.remove_all_listeners("ping")
        bus.remove_all_listeners("save-user")
        bus.remove_handler("get-user")
        self._handlers_ready = False

    async def _run_scenario(self) -> None:
        """Run scripted scenario."""
        try:
            frame, worker = await self._prepare()

            for round_no in range(self._rounds):
                if not self._running:
                    break

                await self.run_round(frame, worker, round_no)
                await asyncio.sleep(random.uniform(*self._delay))

            self._teardown()
            await self._report()

        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("SIM scenario error: %s", e)

    async def _report(self) -> None:
        """Read the captured log back through the HTTP API."""
        if not self._client:
            return

        try:
            response = await self._client.get(f"{self._api_url}/api/ipc-events", timeout=10.0)

            if response.status_code == 200:
                logger.info("SIM: %d IPC events captured", len(response.json()))
            else:
                logger.error(
                    "SIM: Error reading IPC events: %s",
                    response.status_code,
                )

        except Exception as e:
            logger.error("SIM: Failed to read IPC events: %s", e)
