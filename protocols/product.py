"""
Aging Product Protocol — what Stockwatch reads from the catalog.

Stockwatch never owns products. Any Django model referenced by a
StockBatch works, as long as it exposes the attributes below. Missing
optional attributes fall back to PRODUCT_DEFAULTS.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol, runtime_checkable


# Defaults when product doesn't implement the optional attributes
PRODUCT_DEFAULTS = {
    'unit_price': Decimal('0'),
    'at_risk_threshold_days': None,
    'dead_threshold_days': None,
    'category': None,
}


@runtime_checkable
class AgingProduct(Protocol):
    """
    Protocol for products tracked by Stockwatch.

    Required:
        name: Display name used in alert titles and messages
        unit_price: Price per unit, used for locked-value figures

    Optional (on the product or on its ``category``):
        at_risk_threshold_days / dead_threshold_days: Override the
        company/deployment thresholds for this product. A partial
        override is combined with the company thresholds; when the
        result is not a valid pair (dead <= at risk) the override is
        ignored and logged as "stock.thresholds.invalid_override".
    """

    name: str
    unit_price: Decimal


def get_product_attr(product, attr: str, default=None):
    """Get product attribute with fallback to default."""
    value = getattr(product, attr, None)
    if value is not None:
        return value
    fallback = PRODUCT_DEFAULTS.get(attr)
    return fallback if fallback is not None else default
