"""
Rackbeat API module.
"""

from .client import RackbeatClient
from .models import (
    BatchControl,
    Location,
    LocationNest,
    Physical,
    Pictures,
    ProductGroup,
    ProductsResponse,
    RackbeatProduct,
    SerialNumbers,
)

__all__ = [
    "RackbeatClient",
    "RackbeatProduct",
    "ProductsResponse",
    "Location",
    "LocationNest",
    "ProductGroup",
    "Pictures",
    "Physical",
    "SerialNumbers",
    "BatchControl",
]
