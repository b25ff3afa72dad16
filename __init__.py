"""
Django Stockwatch — Stock aging and dead-inventory alerts.

Tracks every received batch, reclassifies it daily as healthy, at risk
or dead by age, and raises one outstanding alert per batch and kind.

Uso:
    from stockwatch import stock, StockError

    batch = stock.receive(40, notebook, central, user=user)
    stock.issue(5, batch, user=user)
    stock.reclassify()  # {'totalProcessed': 1, 'updated': 0, ...}
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'stock':
        from stockwatch.service import Stock
        return Stock
    elif name == 'StockError':
        from stockwatch.exceptions import StockError
        return StockError
    elif name == 'AlertError':
        from stockwatch.exceptions import AlertError
        return AlertError
    elif name == 'AgingError':
        from stockwatch.exceptions import AgingError
        return AgingError
    elif name == 'Warehouse':
        from stockwatch.models.warehouse import Warehouse
        return Warehouse
    elif name == 'StockBatch':
        from stockwatch.models.batch import StockBatch
        return StockBatch
    elif name == 'StockMovement':
        from stockwatch.models.movement import StockMovement
        return StockMovement
    elif name == 'Alert':
        from stockwatch.models.alert import Alert
        return Alert
    elif name == 'AgingPolicy':
        from stockwatch.models.policy import AgingPolicy
        return AgingPolicy
    elif name == 'HealthStatus':
        from stockwatch.models.enums import HealthStatus
        return HealthStatus
    elif name == 'AlertKind':
        from stockwatch.models.enums import AlertKind
        return AlertKind
    elif name == 'AlertStatus':
        from stockwatch.models.enums import AlertStatus
        return AlertStatus
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'stock',
    'StockError',
    'AlertError',
    'AgingError',
    'Warehouse',
    'StockBatch',
    'StockMovement',
    'Alert',
    'AgingPolicy',
    'HealthStatus',
    'AlertKind',
    'AlertStatus',
]

__version__ = '0.1.0'
