"""
Stockwatch Models.

Core models for stock aging:
- Warehouse: Where batches are kept
- StockBatch: Unit of aging (one receipt of one product)
- EntryPhoto: Evidence captured on receipt
- StockMovement: Immutable ledger of quantity changes
- Alert: Outstanding notification per (batch, kind)
- AgingPolicy: Per-company thresholds
"""

from stockwatch.models.alert import Alert
from stockwatch.models.batch import EntryPhoto, StockBatch
from stockwatch.models.enums import (
    AlertKind,
    AlertSeverity,
    AlertStatus,
    HealthStatus,
    MovementType,
    TransferStatus,
)
from stockwatch.models.movement import StockMovement
from stockwatch.models.policy import AgingPolicy
from stockwatch.models.warehouse import Warehouse

__all__ = [
    'HealthStatus',
    'AlertKind',
    'AlertSeverity',
    'AlertStatus',
    'MovementType',
    'TransferStatus',
    'Warehouse',
    'StockBatch',
    'EntryPhoto',
    'StockMovement',
    'Alert',
    'AgingPolicy',
]
