"""
Business rules for deciding what happens to each Rackbeat product.
"""

from enum import Enum
from typing import Optional, Sequence

from ..errors import ApiError
from ..shopify import ShopifyProduct, find_exact_match


class ProductStatus(str, Enum):
    """Final state of one product within a sync run."""
    SKIPPED = "skipped"
    CREATED = "created"
    UPDATED = "updated"
    ERRORED = "errored"


def exists_in_shopify(candidates: Sequence[ShopifyProduct], number: str) -> bool:
    """
    Check whether a Rackbeat product is already in Shopify.
    
    Strict policy: a search result must have a title exactly equal to the
    product number. Tags are not consulted.
    
    Args:
        candidates: Results of searching Shopify by the product number
        number: Rackbeat product number
        
    Returns:
        True if an exact title match exists
    """
    return find_exact_match(candidates, number) is not None


def classify_write(
    written_id: Optional[int],
    candidates: Sequence[ShopifyProduct]
) -> ProductStatus:
    """
    Classify a create-or-update after the fact.
    
    The write was an update if Shopify returned one of the ids found by the
    search made before it, otherwise it created a new product.
    """
    known_ids = {c.id for c in candidates if c.id is not None}
    if written_id is not None and written_id in known_ids:
        return ProductStatus.UPDATED
    return ProductStatus.CREATED


def is_duplicate_rejection(error: Exception) -> bool:
    """
    Check whether a create failed because the product already exists.
    
    Shopify answers 422 when a uniqueness constraint is hit that the
    title search did not find.
    """
    return isinstance(error, ApiError) and error.is_unprocessable
