"""Health and readiness check routes."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/ready")
async def ready(request: Request) -> dict:
    """Lightweight readiness check — no external calls."""
    return {"status": "ok", "service": "sunsign-forecast", "commit": request.app.state.settings.git_sha}


@router.get("/health")
async def health(request: Request) -> dict:
    """Cache fill level and when the last warm pass finished."""
    state = request.app.state
    result = {
        "status": "ok",
        "service": "sunsign-forecast",
        "commit": state.settings.git_sha,
        "cache": state.pipeline.cache.stats(),
        "background_refreshes": len(state.pipeline.pending_refreshes),
        "last_warm": None,
    }

    scheduler = state.scheduler
    if scheduler.last_completed_at is not None:
        result["last_warm"] = datetime.fromtimestamp(scheduler.last_completed_at, tz=timezone.utc).isoformat()
    elif scheduler.running:
        result["status"] = "warming"

    return result
