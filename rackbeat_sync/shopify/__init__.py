"""
Shopify API module.
"""

from .client import ShopifyClient, find_exact_match
from .models import (
    ChannelPublication,
    PublicationReport,
    SalesChannel,
    ShopifyMetafield,
    ShopifyProduct,
    ShopifyVariant,
    WriteResult,
)
from .payload import build_product, build_tags, to_payload
from .rate_limit import AsyncRateLimiter

__all__ = [
    "ShopifyClient",
    "find_exact_match",
    "ShopifyProduct",
    "ShopifyVariant",
    "ShopifyMetafield",
    "SalesChannel",
    "ChannelPublication",
    "PublicationReport",
    "WriteResult",
    "build_product",
    "build_tags",
    "to_payload",
    "AsyncRateLimiter",
]
