"""
Runner for executing a sync run from settings.
"""

import logging
import traceback
from dataclasses import dataclass
from typing import Optional

from ..config import Settings, SyncMode
from ..db import SQLiteDatabase, SyncLog, LogStatus, TriggerType
from ..db.models import utcnow
from ..rackbeat import RackbeatClient
from ..shopify import ShopifyClient
from .sync import SyncError, SyncOrchestrator, SyncSummary

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Result of a sync run."""
    summary: Optional[SyncSummary]
    log: Optional[SyncLog]
    error: Optional[str]

    @property
    def success(self) -> bool:
        return self.error is None


def _log_stats(summary: Optional[SyncSummary]) -> dict:
    if summary is None:
        return {}
    return {
        "products_fetched": summary.fetched,
        "products_created": summary.created,
        "products_updated": summary.updated,
        "products_skipped": summary.skipped,
        "products_failed": summary.errors,
        "publish_warnings": summary.warnings,
    }


async def run_sync(
    settings: Settings,
    db: Optional[SQLiteDatabase] = None,
    triggered_by: TriggerType = TriggerType.MANUAL,
    mode: Optional[SyncMode] = None,
    publish: Optional[bool] = None,
    source: Optional[RackbeatClient] = None,
    destination: Optional[ShopifyClient] = None,
) -> SyncResult:
    """
    Run one sync with error handling. Never raises.

    Args:
        settings: Application settings
        db: Database for run history, None to skip recording
        triggered_by: What started the run
        mode: Overrides settings.sync_mode
        publish: Overrides settings.publish_to_channels
        source: Rackbeat client to use instead of building one
        destination: Shopify client to use instead of building one

    Returns:
        SyncResult with the summary, the stored log and any fatal error
    """
    mode = SyncMode(mode or settings.sync_mode)
    publish = settings.publish_to_channels if publish is None else publish

    owns_source = source is None
    owns_destination = destination is None
    source = source or RackbeatClient.from_settings(settings)
    destination = destination or ShopifyClient.from_settings(settings)

    log = None
    if db is not None:
        try:
            log = await db.create_log(triggered_by, mode.value)
            logger.info(f"Recording sync run (log: {log.id})")
        except Exception:
            logger.exception("Could not record sync run, continuing without history")

    summary = None
    error = None
    error_details = None

    try:
        orchestrator = SyncOrchestrator(source, destination, mode=mode, publish=publish)
        summary = await orchestrator.run()
    except SyncError as e:
        logger.error(f"Sync failed: {e}")
        error = str(e)
        error_details = traceback.format_exc()
    except Exception as e:
        logger.exception("Unexpected error during sync")
        error = f"Unexpected error: {e}"
        error_details = traceback.format_exc()
    finally:
        if owns_source:
            await source.close()
        if owns_destination:
            await destination.close()

    if db is not None and log is not None:
        try:
            log = await db.update_log(
                log.id,
                finished_at=utcnow(),
                status=LogStatus.SUCCESS if error is None else LogStatus.FAILED,
                error_message=error,
                error_details=error_details,
                **_log_stats(summary)
            )
        except Exception:
            logger.exception(f"Could not store the result of sync run {log.id}")

    return SyncResult(summary=summary, log=log, error=error)
