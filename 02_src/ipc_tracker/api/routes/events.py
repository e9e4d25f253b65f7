"""IPC event API routes."""

import asyncio
from typing import Any

from fastapi import APIRouter, HTTPException, Query, WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from ...app import IpcTracker
from ...inspector import QueuePanelPort
from ...logging_config import get_logger

logger = get_logger(__name__)


class WorkerDetailsResponse(BaseModel):
    """Response model for worker details."""

    worker_scope: str
    worker_version_id: int


class IpcEventResponse(BaseModel):
    """Response model for an indexed IPC event."""

    serial_number: int
    direction: str
    channel: str
    args: list[Any]
    timestamp: float
    method: str | None = None
    correlation_token: str | None = None
    response_time_ms: float | None = None
    worker_details: WorkerDetailsResponse | None = None
    linked_serial_number: int | None = None


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


def create_events_router(tracker: IpcTracker) -> APIRouter:
    """Create IPC events router."""
    router = APIRouter(prefix="/api", tags=["ipc-events"])

    @router.get("/ipc-events", response_model=list[IpcEventResponse])
    async def get_ipc_events(
        channel: str | None = Query(None, description="Filter by channel"),
        direction: str | None = Query(None, description="Filter by direction"),
        limit: int | None = Query(None, ge=1, le=100_000, description="Newest N events"),
    ) -> list[dict]:
        """Get the current event window, oldest first."""
        try:
            events = await tracker.get_events()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        if channel is not None:
            events = [e for e in events if e.channel == channel]
        if direction is not None:
            events = [e for e in events if e.direction.value == direction]
        if limit is not None:
            events = events[-limit:]

        return [e.to_dict() for e in events]

    @router.post("/ipc-events/clear", response_model=StatusResponse)
    async def clear_ipc_events() -> dict:
        """Reset the event log."""
        try:
            tracker.clear_events()
            return {"status": "ok"}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.websocket("/ipc-events/stream")
    async def stream_ipc_events(websocket: WebSocket) -> None:
        """Inspection-surface port: pushes render-event, accepts panel requests."""
        await websocket.accept()

        port = QueuePanelPort()
        if not tracker.connect_panel(port):
            await websocket.close(code=1013)
            return

        async def forward() -> None:
            while True:
                message = await port.queue.get()
                await websocket.send_json(message)

        sender = asyncio.create_task(forward())
        try:
            while True:
                message = await websocket.receive_json()
                if isinstance(message, dict):
                    port.send(message)
        except WebSocketDisconnect:
            logger.debug("Inspection stream disconnected")
        finally:
            sender.cancel()
            port.disconnect()

    return router
