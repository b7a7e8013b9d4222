"""
Processor package for sync operations.
"""

from .rules import (
    ProductStatus,
    classify_write,
    exists_in_shopify,
    is_duplicate_rejection,
)
from .sync import SyncOrchestrator, SyncSummary, ProductResult, SyncError
from .runner import run_sync, SyncResult

__all__ = [
    "ProductStatus",
    "classify_write",
    "exists_in_shopify",
    "is_duplicate_rejection",
    "SyncOrchestrator",
    "SyncSummary",
    "ProductResult",
    "SyncError",
    "run_sync",
    "SyncResult",
]
