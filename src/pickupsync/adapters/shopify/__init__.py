"""Public interface for the Shopify adapter."""

from __future__ import annotations

from .client import PICKUP_TRACKING_COMPANY, ShopifyClient
from .schema import OrderNode
from .translator import OrderNodeInput, parse_order_view

__all__ = [
    "PICKUP_TRACKING_COMPANY",
    "OrderNode",
    "OrderNodeInput",
    "ShopifyClient",
    "parse_order_view",
]
