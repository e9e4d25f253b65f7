"""Control API routes."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...app import IpcTracker
from ...logging_config import LOG_LEVELS


class TrackerStatusResponse(BaseModel):
    """Response model for tracker status."""

    installed: bool
    contexts: list[str]
    ready_contexts: list[str]
    primary_context: str | None = None


class LogLevelRequest(BaseModel):
    """Request model for changing the log level."""

    level: str


class LogLevelResponse(BaseModel):
    """Response model for the log level."""

    level: str


def create_control_router(tracker: IpcTracker) -> APIRouter:
    """Create control router."""
    router = APIRouter(prefix="/api", tags=["control"])

    @router.get("/status", response_model=TrackerStatusResponse)
    async def get_status() -> dict:
        """Installation status."""
        return tracker.status()

    @router.post("/log-level", response_model=LogLevelResponse)
    async def set_log_level(request: LogLevelRequest) -> dict:
        """Change the minimum log severity."""
        if request.level.lower() not in LOG_LEVELS:
            raise HTTPException(status_code=400, detail=f"Invalid log level: {request.level}")
        tracker.set_log_level(request.level)
        return {"level": tracker.options.log_level}

    return router
