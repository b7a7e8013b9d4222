"""
Sync trigger API routes.
"""

import asyncio
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from typing import Optional

from ..config import SyncMode
from ..db import TriggerType
from ..dependencies import get_db, get_settings, require_auth
from ..processor import run_sync

router = APIRouter(prefix="/api/sync", dependencies=[Depends(require_auth)])


class SyncRequest(BaseModel):
    mode: Optional[SyncMode] = None
    publish: Optional[bool] = None


class SyncResponse(BaseModel):
    message: str
    success: bool


def _is_running(request: Request) -> bool:
    task = getattr(request.app.state, "sync_task", None)
    return task is not None and not task.done()


@router.post("", response_model=SyncResponse, status_code=202)
async def trigger_sync(request: Request, body: Optional[SyncRequest] = None):
    """Start a sync run in the background."""
    if _is_running(request):
        raise HTTPException(status_code=409, detail="A sync is already running")
    
    settings = get_settings(request)
    db = get_db(request)
    body = body or SyncRequest()
    
    request.app.state.sync_task = asyncio.create_task(
        run_sync(
            settings,
            db,
            TriggerType.MANUAL,
            mode=body.mode,
            publish=body.publish,
        )
    )
    
    mode = body.mode or settings.sync_mode
    return SyncResponse(message=f"Sync started ({SyncMode(mode).value})", success=True)


@router.get("/status")
async def get_sync_status(request: Request):
    """Whether a run is in progress, and the most recent run."""
    db = get_db(request)
    latest = await db.get_latest_log()
    
    return {
        "running": _is_running(request),
        "latest": latest.model_dump(mode="json") if latest else None,
    }
