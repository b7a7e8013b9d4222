"""
Sync log API routes.
"""

from fastapi import APIRouter, Request, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse
from typing import Optional

from ..db import LogStatus, SyncLog
from ..dependencies import get_db, require_auth

router = APIRouter(prefix="/api/logs", dependencies=[Depends(require_auth)])

PAGE_SIZE = 25


@router.get("")
async def list_logs(
    request: Request,
    status: Optional[LogStatus] = Query(None),
    page: int = Query(1, ge=1)
):
    """List sync runs, newest first."""
    db = get_db(request)
    offset = (page - 1) * PAGE_SIZE
    
    logs = await db.get_logs(status=status, limit=PAGE_SIZE + 1, offset=offset)
    
    has_next = len(logs) > PAGE_SIZE
    logs = logs[:PAGE_SIZE]
    
    return {
        "logs": [log.model_dump(mode="json") for log in logs],
        "page": page,
        "has_prev": page > 1,
        "has_next": has_next,
    }


async def _get_log_or_404(request: Request, log_id: str) -> SyncLog:
    log = await get_db(request).get_log(log_id)
    if not log:
        raise HTTPException(status_code=404, detail="Log not found")
    return log


@router.get("/{log_id}")
async def view_log(request: Request, log_id: str):
    """View a single sync run."""
    log = await _get_log_or_404(request, log_id)
    return log.model_dump(mode="json")


def format_log(log: SyncLog) -> str:
    """Render a sync run as a plain text report."""
    lines = [
        "="*80,
        "RACKBEAT TO SHOPIFY SYNC",
        "="*80,
        "",
        f"Log ID:        {log.id}",
        f"Status:        {log.status.value.upper()}",
        f"Mode:          {log.mode}",
        f"Triggered By:  {log.triggered_by.value.capitalize()}",
        f"Started:       {log.started_at.strftime('%Y-%m-%d %H:%M:%S')}",
        f"Finished:      {log.finished_at.strftime('%Y-%m-%d %H:%M:%S') if log.finished_at else 'N/A'}",
    ]
    
    if log.duration_seconds is not None:
        lines.append(f"Duration:      {log.duration_seconds:.1f} seconds")
    
    lines.extend([
        "",
        "-"*80,
        "STATISTICS",
        "-"*80,
        "",
        f"Products Fetched:      {log.products_fetched}",
        f"Created:               {log.products_created}",
        f"Updated:               {log.products_updated}",
        f"Skipped:               {log.products_skipped}",
        f"Failed:                {log.products_failed}",
        f"Publish Warnings:      {log.publish_warnings}",
    ])
    
    if log.error_message:
        lines.extend([
            "",
            "-"*80,
            "ERROR DETAILS",
            "-"*80,
            "",
            f"Message: {log.error_message}",
        ])
        
        if log.error_details:
            lines.extend([
                "",
                "Stack Trace:",
                "-"*80,
                log.error_details,
            ])
    
    lines.append("")
    lines.append("="*80)
    
    return "\n".join(lines)


@router.get("/{log_id}/download", response_class=PlainTextResponse)
async def download_log(request: Request, log_id: str):
    """Download a sync run report as a text file."""
    log = await _get_log_or_404(request, log_id)
    filename = f"sync_log_{log.started_at.strftime('%Y%m%d_%H%M%S')}.txt"
    
    return PlainTextResponse(
        content=format_log(log),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
