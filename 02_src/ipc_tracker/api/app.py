"""FastAPI application setup."""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..app import IpcTracker, ipc_tracker
from .routes import control, events

Lifespan = Callable[[FastAPI], Any]


def create_inspection_app(
    tracker: IpcTracker | None = None,
    lifespan: Lifespan | None = None,
) -> FastAPI:
    """Create and configure the inspection API for an installed tracker."""
    tracker = tracker or ipc_tracker

    fastapi_app = FastAPI(
        title="IPC Tracker API",
        description="Inspection surface for captured IPC events",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Enable CORS
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:5174"],  # Vite default
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    fastapi_app.include_router(events.create_events_router(tracker))
    fastapi_app.include_router(control.create_control_router(tracker))

    return fastapi_app


def host_lifespan(start: Callable[[], Any], stop: Callable[[], Any]) -> Lifespan:
    """Lifespan that runs awaitable start/stop hooks around the server."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Startup
        await start()
        yield
        # Shutdown
        await stop()

    return lifespan
