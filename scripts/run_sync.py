#!/usr/bin/env python3
"""
Run the Rackbeat to Shopify sync once.
Add to crontab: 0 1 * * * cd /path/to/app && /path/to/venv/bin/python scripts/run_sync.py

Always exits 0 and logs "Sync completed"; read the summary line or the
run history for failures.
"""

import argparse
import asyncio
import logging

from rackbeat_sync.config import SyncMode, load_settings
from rackbeat_sync.db import SQLiteDatabase, TriggerType
from rackbeat_sync.main import configure_logging
from rackbeat_sync.processor import run_sync

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sync Rackbeat products into Shopify")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in SyncMode],
        help="skip_existing (default) or overwrite_existing",
    )
    parser.add_argument(
        "--publish",
        action="store_true",
        default=None,
        help="Publish newly created products to all sales channels",
    )
    parser.add_argument(
        "--scheduled",
        action="store_true",
        help="Record the run as triggered by the scheduler",
    )
    parser.add_argument(
        "--no-history",
        action="store_true",
        help="Do not record the run in the database",
    )
    return parser.parse_args(argv)


async def main(argv=None):
    args = parse_args(argv)
    settings = load_settings()
    configure_logging(settings)
    
    logger.info("Starting Rackbeat to Shopify product sync")
    
    db = None
    try:
        if not args.no_history:
            try:
                db = SQLiteDatabase(settings.database_path)
                await db.initialize()
            except Exception:
                logger.exception("Run history unavailable, continuing without it")
                await db.close()
                db = None
        
        result = await run_sync(
            settings,
            db,
            TriggerType.SCHEDULER if args.scheduled else TriggerType.MANUAL,
            mode=SyncMode(args.mode) if args.mode else None,
            publish=args.publish,
        )
        
        if result.error:
            logger.error(f"Error during sync: {result.error}")
        
        for product in (result.summary.results if result.summary else []):
            if product.error:
                logger.error(f"  {product.number}: {product.error}")
            elif product.warning:
                logger.warning(f"  {product.number}: {product.warning}")
    except Exception:
        logger.exception("Unexpected error during sync")
    finally:
        if db:
            try:
                await db.close()
            except Exception:
                logger.exception("Failed to close run history")
        logger.info("Sync completed")


if __name__ == "__main__":
    asyncio.run(main())
