"""
Pydantic models for Rackbeat product data.

Rackbeat payloads are matched case-insensitively: "Sales_Price",
"salesPrice" and "sales_price" all land on the same field.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..pricing import Price, Quantity


def _normalize_key(key: str) -> str:
    return key.replace("_", "").replace("-", "").lower()


class RackbeatModel(BaseModel):
    """Base model with case-insensitive key matching. Instances are immutable."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _match_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        lookup = {}
        for name, field in cls.model_fields.items():
            target = field.alias or name
            lookup[_normalize_key(name)] = target
            lookup[_normalize_key(target)] = target

        matched = {}
        for key, value in data.items():
            if not isinstance(key, str):
                continue
            target = lookup.get(_normalize_key(key))
            # First spelling wins if the payload repeats a key in another case
            if target is not None and target not in matched:
                matched[target] = value
        return matched


class LocationNest(RackbeatModel):
    number: Optional[int] = None
    name: Optional[str] = None
    children_count: Optional[int] = None


class Location(RackbeatModel):
    """Stock location."""
    name: Optional[str] = None
    number: Optional[int] = None
    barcode: Optional[str] = None
    is_default: Optional[bool] = None
    parent_id: Optional[int] = None
    children_count: Optional[int] = None
    toplevel_parent_id: Optional[int] = None
    nesting_level: Optional[int] = None
    nest_list: Optional[List[LocationNest]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    self_url: Optional[str] = Field(default=None, alias="self")


class ProductGroup(RackbeatModel):
    """Product group with VAT settings."""
    number: Optional[int] = None
    name: Optional[str] = None
    vat_abroad: Quantity = None
    vat_eu: Quantity = None
    vat_domestic: Quantity = None
    vat_domestic_exempt: Quantity = None
    self_url: Optional[str] = Field(default=None, alias="self")


class Pictures(RackbeatModel):
    thumb: Optional[str] = None
    display: Optional[str] = None
    large: Optional[str] = None
    original: Optional[str] = None


class Physical(RackbeatModel):
    """Physical dimensions."""
    weight: Quantity = None
    weight_unit: Optional[str] = None
    height: Quantity = None
    width: Quantity = None
    depth: Quantity = None
    size_unit: Optional[str] = None


class SerialNumbers(RackbeatModel):
    is_active: Optional[bool] = None
    index: Optional[str] = None


class BatchControl(RackbeatModel):
    is_active: Optional[bool] = None


class RackbeatProduct(RackbeatModel):
    """
    A product as returned by Rackbeat.

    Only number, name and sales_price are written to Shopify; the rest is
    read so the snapshot is complete.
    """
    id: Optional[int] = None
    number: Optional[str] = None  # Join key, becomes the Shopify title/sku/barcode
    urlfriendly_number: Optional[str] = None
    type: Optional[str] = None
    barcode: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None

    # Pricing
    sales_price: Price = None
    recommended_sales_price: Price = None
    sales_profit: Price = None
    cost_price: Price = None
    recommended_cost_price: Price = None
    cost_addition_percentage: Quantity = None

    # Inventory
    min_order: Quantity = None
    min_sales: Quantity = None
    min_stock: Quantity = None
    stock_quantity: Quantity = None
    in_order_quantity: Quantity = None
    available_quantity: Quantity = None
    purchased_quantity: Quantity = None
    used_in_production_quantity: Quantity = None
    default_supplier_id: Optional[int] = None
    default_location: Optional[Location] = None

    picture_url: Optional[str] = None
    pictures: Optional[Pictures] = None

    # Flags
    is_barred: Optional[bool] = None
    is_convertable: Optional[bool] = None
    inventory_enabled: Optional[bool] = None
    should_assure_quality: Optional[bool] = None

    group_id: Optional[int] = None
    group: Optional[ProductGroup] = None
    physical: Optional[Physical] = None
    serial_numbers: Optional[SerialNumbers] = None
    batch_control: Optional[BatchControl] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    pdf_url: Optional[str] = None
    department_id: Optional[int] = None
    goods_code: Optional[str] = None
    country_code: Optional[str] = None
    self_url: Optional[str] = Field(default=None, alias="self")


class ProductsResponse(RackbeatModel):
    """Envelope of the products endpoint."""
    products: Optional[List[RackbeatProduct]] = None
