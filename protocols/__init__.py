"""
Stockwatch Protocols.

Defines interfaces for external system integration.
"""

from stockwatch.protocols.product import (
    PRODUCT_DEFAULTS,
    AgingProduct,
    get_product_attr,
)

__all__ = [
    "PRODUCT_DEFAULTS",
    "AgingProduct",
    "get_product_attr",
]
