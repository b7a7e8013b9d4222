"""
Rackbeat to Shopify catalog sync.
"""

__version__ = "1.0.0"
