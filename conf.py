"""
Stockwatch configuration.

Usage in settings.py:
    STOCKWATCH = {
        "AT_RISK_THRESHOLD_DAYS": 60,
        "DEAD_THRESHOLD_DAYS": 90,
        "CRON_SECRET": "s3cr3t",
        "RECLASSIFY_CHUNK_SIZE": 500,
        "EXPIRY_WARNING_DAYS": 7,
    }
"""

import os
from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class StockwatchSettings:
    """Stockwatch configuration settings."""

    # Age (days) from which a batch is at risk
    AT_RISK_THRESHOLD_DAYS: int = 60

    # Age (days) from which a batch is dead inventory
    DEAD_THRESHOLD_DAYS: int = 90

    # Bearer secret for the aging trigger endpoint ("" = not configured)
    CRON_SECRET: str = ""

    # Iterator chunk size for the reclassification run
    RECLASSIFY_CHUNK_SIZE: int = 500

    # Look-ahead (days) for expiry warnings
    EXPIRY_WARNING_DAYS: int = 7


def get_stockwatch_settings() -> StockwatchSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "STOCKWATCH", {})
    values = {
        k: v for k, v in user_settings.items()
        if k in StockwatchSettings.__dataclass_fields__
    }
    values.setdefault("CRON_SECRET", os.environ.get("STOCKWATCH_CRON_SECRET", ""))
    return StockwatchSettings(**values)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_stockwatch_settings(), name)


stockwatch_settings = _LazySettings()
