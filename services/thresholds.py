"""
Threshold resolution — which (at risk, dead) days apply to a batch.

Most specific wins:
    1. product (or product.category) at_risk/dead_threshold_days
    2. AgingPolicy of the batch's company
    3. STOCKWATCH["AT_RISK_THRESHOLD_DAYS"] / ["DEAD_THRESHOLD_DAYS"]
"""

import logging

from stockwatch.aging import AgingThresholds
from stockwatch.conf import stockwatch_settings
from stockwatch.exceptions import AgingError
from stockwatch.models.policy import AgingPolicy
from stockwatch.protocols import get_product_attr

logger = logging.getLogger('stockwatch')


def default_thresholds() -> AgingThresholds:
    return AgingThresholds(
        at_risk_days=stockwatch_settings.AT_RISK_THRESHOLD_DAYS,
        dead_days=stockwatch_settings.DEAD_THRESHOLD_DAYS,
    )


def _product_override(product) -> tuple[int | None, int | None]:
    at_risk = get_product_attr(product, 'at_risk_threshold_days')
    dead = get_product_attr(product, 'dead_threshold_days')
    category = get_product_attr(product, 'category')
    if category is not None:
        if at_risk is None:
            at_risk = getattr(category, 'at_risk_threshold_days', None)
        if dead is None:
            dead = getattr(category, 'dead_threshold_days', None)
    return at_risk, dead


class ThresholdResolver:
    """
    Resolves thresholds for many batches, caching company policies.

    One resolver per reclassification run: policies are read once per
    company instead of once per batch.
    """

    def __init__(self):
        self._defaults = default_thresholds()
        self._companies: dict[str, AgingThresholds] = {}

    def for_company(self, company: str) -> AgingThresholds:
        if company not in self._companies:
            policy = AgingPolicy.objects.filter(company=company).first()
            if policy is None:
                self._companies[company] = self._defaults
            else:
                self._companies[company] = AgingThresholds(
                    at_risk_days=policy.at_risk_threshold_days,
                    dead_days=policy.dead_threshold_days,
                )
        return self._companies[company]

    def for_product(self, product, company: str) -> AgingThresholds:
        base = self.for_company(company)
        at_risk, dead = _product_override(product)
        if at_risk is None and dead is None:
            return base
        try:
            return AgingThresholds(
                at_risk_days=at_risk if at_risk is not None else base.at_risk_days,
                dead_days=dead if dead is not None else base.dead_days,
            )
        except AgingError:
            # Override doesn't fit the company thresholds: ignore it
            logger.error(
                "stock.thresholds.invalid_override",
                extra={
                    "product": str(product),
                    "company": company,
                    "at_risk_days": at_risk,
                    "dead_days": dead,
                },
            )
            return base

    def for_batch(self, batch) -> AgingThresholds:
        return self.for_product(batch.product, batch.company)


def thresholds_for(batch) -> AgingThresholds:
    """Thresholds for a single batch (no caching across calls)."""
    return ThresholdResolver().for_batch(batch)
