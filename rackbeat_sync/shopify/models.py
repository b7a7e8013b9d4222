"""
Pydantic models for Shopify REST Admin API entities.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_serializer

from ..pricing import Price, format_price


class ShopifyModel(BaseModel):
    """Base for Shopify entities. Unknown response fields are dropped."""
    model_config = ConfigDict(extra="ignore")


class ShopifyVariant(ShopifyModel):
    id: Optional[int] = None
    product_id: Optional[int] = None
    title: Optional[str] = None
    sku: Optional[str] = None
    barcode: Optional[str] = None
    inventory_management: Optional[str] = None
    price: Price = None
    compare_at_price: Price = None
    requires_shipping: Optional[bool] = None
    taxable: Optional[bool] = None
    option1: Optional[str] = None

    @field_serializer("price", "compare_at_price")
    def _serialize_price(self, value):
        # Shopify expects prices as "0.00" strings
        return format_price(value)


class ShopifyMetafield(ShopifyModel):
    id: Optional[int] = None
    namespace: Optional[str] = None
    key: Optional[str] = None
    value: Optional[str] = None
    type: Optional[str] = None


class ShopifyProduct(ShopifyModel):
    """A Shopify product. `id` is only present once Shopify has created it."""
    id: Optional[int] = None
    title: Optional[str] = None
    body_html: Optional[str] = None
    vendor: Optional[str] = None
    product_type: Optional[str] = None
    status: Optional[str] = None
    published: Optional[bool] = None
    tags: Optional[str] = None
    variants: List[ShopifyVariant] = []
    metafields: List[ShopifyMetafield] = []

    @property
    def tag_list(self) -> List[str]:
        if not self.tags:
            return []
        return [tag.strip() for tag in self.tags.split(",") if tag.strip()]


class SalesChannel(ShopifyModel):
    id: int
    name: Optional[str] = None


class ProductResponse(ShopifyModel):
    product: Optional[ShopifyProduct] = None


class ProductsResponse(ShopifyModel):
    products: Optional[List[ShopifyProduct]] = None


class SalesChannelsResponse(ShopifyModel):
    sales_channels: Optional[List[SalesChannel]] = None


@dataclass
class ChannelPublication:
    """Outcome of publishing one product to one sales channel."""
    channel: SalesChannel
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class PublicationReport:
    """Outcome of publishing a product to every sales channel."""
    product_id: int
    channels: List[ChannelPublication] = field(default_factory=list)
    listing_error: Optional[str] = None

    @property
    def published(self) -> List[SalesChannel]:
        return [c.channel for c in self.channels if c.success]

    @property
    def failed(self) -> List[ChannelPublication]:
        return [c for c in self.channels if not c.success]

    @property
    def complete(self) -> bool:
        return self.listing_error is None and not self.failed

    def describe(self) -> str:
        if self.listing_error:
            return f"could not list sales channels: {self.listing_error}"
        failed = ", ".join(
            f"{c.channel.name or c.channel.id} ({c.error})" for c in self.failed
        )
        return (
            f"published to {len(self.published)}/{len(self.channels)} channels"
            + (f"; failed: {failed}" if failed else "")
        )


@dataclass
class WriteResult:
    """
    Result of a product create or update.

    The write itself succeeded; `publication` holds the outcome of the
    best-effort publish step when one ran.
    """
    product: ShopifyProduct
    publication: Optional[PublicationReport] = None

    @property
    def has_warnings(self) -> bool:
        return self.publication is not None and not self.publication.complete
