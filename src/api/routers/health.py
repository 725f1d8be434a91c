"""Health check."""

from __future__ import annotations

import time

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter(prefix="/api/v1", tags=["health"])

_STARTED = time.monotonic()


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_sec: int
    pipeline_ready: bool


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    ready = getattr(request.app.state, "pipeline", None) is not None
    return HealthResponse(
        status="ok" if ready else "starting",
        version="0.1.0",
        uptime_sec=int(time.monotonic() - _STARTED),
        pipeline_ready=ready,
    )
