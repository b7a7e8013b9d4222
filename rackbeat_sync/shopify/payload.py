"""
Builds the Shopify product written for a Rackbeat product.
"""

from decimal import Decimal
from typing import Optional

from ..rackbeat.models import RackbeatProduct
from .models import ShopifyMetafield, ShopifyProduct, ShopifyVariant

PRODUCT_TYPE = "RackbeatProduct"
VENDOR = "Rackbeat"
PRODUCT_STATUS = "active"
MARKER_TAGS = ("configurator-component", "rackbeat-product")
DEFAULT_OPTION = "Default"
METAFIELD_TYPE = "single_line_text_field"


def build_tags(number: str) -> str:
    """Comma-joined tag string: the product number followed by the marker tags."""
    return ",".join((number,) + MARKER_TAGS)


def build_product(
    product: RackbeatProduct,
    product_id: Optional[int] = None,
) -> ShopifyProduct:
    """
    Build the full Shopify product for a Rackbeat product.
    
    The same shape is used for create and update; an update additionally
    carries the Shopify id.
    
    Args:
        product: Source product (must have a number)
        product_id: Existing Shopify product id, for updates
        
    Returns:
        ShopifyProduct ready to be serialized with to_payload()
    """
    number = product.number
    if not number:
        raise ValueError("Rackbeat product has no number")

    price = product.sales_price if product.sales_price is not None else Decimal("0")

    fields = dict(
        title=number,
        product_type=PRODUCT_TYPE,
        status=PRODUCT_STATUS,
        published=True,
        body_html=f"Rackbeat product reference: {number}",
        vendor=VENDOR,
        tags=build_tags(number),
        variants=[
            ShopifyVariant(
                sku=number,
                barcode=number,
                inventory_management=None,  # Don't track inventory
                price=price,
                compare_at_price=None,
                requires_shipping=True,
                taxable=True,
                option1=DEFAULT_OPTION,
            )
        ],
        metafields=[
            ShopifyMetafield(
                namespace="rackbeat",
                key="product_id",
                value=number,
                type=METAFIELD_TYPE,
            ),
            ShopifyMetafield(
                namespace="configurator",
                key="component_type",
                value="standard",
                type=METAFIELD_TYPE,
            ),
        ],
    )
    if product_id is not None:
        fields["id"] = product_id

    return ShopifyProduct(**fields)


def to_payload(product: ShopifyProduct) -> dict:
    """Serialize to the {"product": {...}} request body. Only set fields are sent."""
    return {"product": product.model_dump(mode="json", exclude_unset=True)}
