"""
Stock services — modular organization of stock operations.

Re-exports the public classes:
    from stockwatch.services import StockQueries, StockMovements
"""

from stockwatch.services.movements import StockMovements
from stockwatch.services.queries import StockQueries
from stockwatch.services.reclassify import ReclassificationResult

__all__ = [
    'StockQueries',
    'StockMovements',
    'ReclassificationResult',
]
