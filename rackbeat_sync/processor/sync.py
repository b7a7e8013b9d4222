"""
Sync processor: mirrors the Rackbeat catalog into Shopify in one pass.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..config import SyncMode
from ..errors import SyncClientError
from ..rackbeat import RackbeatClient, RackbeatProduct
from ..shopify import ShopifyClient, ShopifyProduct, WriteResult
from .rules import ProductStatus, classify_write, exists_in_shopify, is_duplicate_rejection

logger = logging.getLogger(__name__)


class SyncError(Exception):
    """Error that stops the whole sync run."""
    pass


@dataclass
class ProductResult:
    """Outcome for a single Rackbeat product."""
    number: Optional[str]
    status: ProductStatus
    destination_id: Optional[int] = None
    error: Optional[str] = None
    warning: Optional[str] = None


@dataclass
class SyncSummary:
    """Counters and per-product outcomes of a sync run."""
    fetched: int = 0
    results: List[ProductResult] = field(default_factory=list)

    def _count(self, status: ProductStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def created(self) -> int:
        return self._count(ProductStatus.CREATED)

    @property
    def updated(self) -> int:
        return self._count(ProductStatus.UPDATED)

    @property
    def skipped(self) -> int:
        return self._count(ProductStatus.SKIPPED)

    @property
    def errors(self) -> int:
        return self._count(ProductStatus.ERRORED)

    @property
    def warnings(self) -> int:
        return sum(1 for r in self.results if r.warning)

    def summary_line(self) -> str:
        line = (
            f"Sync summary: {self.created} created, {self.updated} updated, "
            f"{self.skipped} skipped, {self.errors} failed"
        )
        if self.warnings:
            line += f", {self.warnings} publish warnings"
        return line


class SyncOrchestrator:
    """
    Runs one reconciliation pass.

    Products are handled strictly one after another: search, decide, write.
    A failure on one product is logged and counted and the loop moves on;
    only a failure to fetch the Rackbeat catalog stops the run.
    """

    def __init__(
        self,
        source: RackbeatClient,
        destination: ShopifyClient,
        mode: SyncMode = SyncMode.SKIP_EXISTING,
        publish: bool = False,
    ):
        """
        Initialize orchestrator.

        Args:
            source: Rackbeat client
            destination: Shopify client
            mode: Skip products already in Shopify, or overwrite them
            publish: Publish newly created products to all sales channels
        """
        self.source = source
        self.destination = destination
        self.mode = SyncMode(mode)
        self.publish = publish

    async def run(self) -> SyncSummary:
        """
        Run the sync.

        Returns:
            SyncSummary with one result per fetched product

        Raises:
            SyncError: The Rackbeat catalog could not be fetched
        """
        logger.info(f"Starting Rackbeat to Shopify sync (mode: {self.mode.value})")

        try:
            products = await self.source.fetch_all()
        except Exception as e:
            logger.error(f"Failed to fetch products from Rackbeat: {e}")
            raise SyncError(f"Failed to fetch products from Rackbeat: {e}") from e

        summary = SyncSummary(fetched=len(products))
        total = len(products)

        for index, product in enumerate(products, start=1):
            logger.info(f"Processing {index}/{total}: {product.name}, number: {product.number}")
            result = await self.sync_product(product)
            summary.results.append(result)

        logger.info(summary.summary_line())
        return summary

    async def sync_product(self, product: RackbeatProduct) -> ProductResult:
        """Search, decide and write a single product. Never raises."""
        number = product.number
        if not number:
            logger.error(f"Skipping Rackbeat product {product.id}: no product number")
            return ProductResult(
                number=None, status=ProductStatus.ERRORED, error="Product has no number"
            )

        try:
            candidates = await self.destination.search_by_title(number)
        except SyncClientError as e:
            logger.error(f"Error searching for product {number}: {e}")
            return ProductResult(number=number, status=ProductStatus.ERRORED, error=str(e))
        except Exception as e:
            logger.exception(f"Unexpected error searching for product {number}")
            return ProductResult(
                number=number, status=ProductStatus.ERRORED, error=f"Unexpected error: {e}"
            )

        if self.mode == SyncMode.SKIP_EXISTING:
            return await self._create_if_absent(product, candidates)
        return await self._create_or_update(product, candidates)

    async def _create_if_absent(
        self,
        product: RackbeatProduct,
        candidates: Sequence[ShopifyProduct],
    ) -> ProductResult:
        number = product.number

        if exists_in_shopify(candidates, number):
            logger.info(f"Product {number} already exists in Shopify. Skipping...")
            return ProductResult(number=number, status=ProductStatus.SKIPPED)

        try:
            result = await self.destination.create_product(product, publish=self.publish)
        except Exception as e:
            if is_duplicate_rejection(e):
                logger.info(f"Product {number} appears to already exist (422). Skipping...")
                return ProductResult(number=number, status=ProductStatus.SKIPPED)
            return self._write_failed(number, e)

        return self._written(number, ProductStatus.CREATED, result)

    async def _create_or_update(
        self,
        product: RackbeatProduct,
        candidates: Sequence[ShopifyProduct],
    ) -> ProductResult:
        number = product.number

        try:
            result = await self.destination.create_or_update(
                product, candidates=candidates, publish=self.publish
            )
        except Exception as e:
            return self._write_failed(number, e)

        status = classify_write(result.product.id, candidates)
        return self._written(number, status, result)

    def _written(
        self,
        number: str,
        status: ProductStatus,
        result: WriteResult,
    ) -> ProductResult:
        logger.info(f"Product {number} {status.value} (Shopify ID: {result.product.id})")

        warning = None
        if result.has_warnings:
            warning = result.publication.describe()
            logger.warning(f"Product {number} was written but not fully published: {warning}")

        return ProductResult(
            number=number,
            status=status,
            destination_id=result.product.id,
            warning=warning,
        )

    def _write_failed(self, number: str, error: Exception) -> ProductResult:
        if isinstance(error, SyncClientError):
            logger.error(f"Error syncing product {number} to Shopify: {error}")
            message = str(error)
        else:
            logger.exception(f"Unexpected error syncing product {number}")
            message = f"Unexpected error: {error}"
        return ProductResult(number=number, status=ProductStatus.ERRORED, error=message)
