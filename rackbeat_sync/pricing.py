"""
Price parsing and formatting.

Shopify encodes variant prices as JSON strings, Rackbeat as numbers.
Both are read into Decimal and written back as two-decimal strings.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator

CENTS = Decimal("0.01")


def parse_price(value: Any) -> Optional[Decimal]:
    """
    Parse a price from either wire encoding.

    Args:
        value: Decimal, int, float, or string (e.g., "29.99")

    Returns:
        Decimal value, or None if missing or unparsable
    """
    if value is None:
        return None

    if isinstance(value, Decimal):
        return value

    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        return Decimal(str(value))

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            return Decimal(value)
        except InvalidOperation:
            return None

    return None


def format_price(value: Any) -> Optional[str]:
    """
    Format a price to the fixed two-decimal string Shopify expects.

    Args:
        value: Price in any encoding accepted by parse_price

    Returns:
        Formatted price (e.g., "49.99") or None
    """
    price = parse_price(value)
    if price is None or not price.is_finite():
        return None
    return str(price.quantize(CENTS, rounding=ROUND_HALF_UP))


def _validate_price(value: Any) -> Optional[Decimal]:
    # Missing or blank means no price; anything else must parse
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    price = parse_price(value)
    if price is None:
        raise ValueError(f"invalid price: {value!r}")
    return price


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Decimal field that accepts both JSON numbers and JSON strings
Price = Annotated[Optional[Decimal], BeforeValidator(_validate_price)]

# Non-price decimal (quantities, percentages, dimensions); blank means missing
Quantity = Annotated[Optional[Decimal], BeforeValidator(_blank_to_none)]
