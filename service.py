"""
Stock Service — The single public interface for all stock operations.

Usage:
    from stockwatch import stock, StockError

    batch = stock.receive(40, notebook, central, user=user)
    stock.transfer(10, batch, filial, user=user)
    stock.reclassify()
    stock.aging_report('acme')
"""

from datetime import datetime

from stockwatch.models.alert import Alert
from stockwatch.services import alerts as alert_service
from stockwatch.services.movements import StockMovements
from stockwatch.services.queries import StockQueries
from stockwatch.services.reclassify import ReclassificationResult, pending_changes
from stockwatch.services.reclassify import reclassify as run_reclassification


class Stock(StockQueries, StockMovements):
    """
    Single interface for all stock operations.

    Parameter convention: (quantity, batch_or_product, where, ...)
    Follows natural language: "Issue 5 units from batch B-001"

    IMPORTANT: All state-changing methods use atomic transactions
    with appropriate locking. See each method's docstring.
    """

    # ══════════════════════════════════════════════════════════════
    # AGING
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def reclassify(cls, now: datetime | None = None) -> ReclassificationResult:
        """Recompute age/status of every batch and emit alerts on change."""
        return run_reclassification(now)

    @classmethod
    def pending_reclassification(cls, now: datetime | None = None) -> int:
        """Number of batches a reclassification at `now` would update."""
        return pending_changes(now)

    @classmethod
    def check_expiring(cls, now: datetime | None = None) -> list[Alert]:
        """Emit expiry warnings for batches close to expiry."""
        return alert_service.check_expiring(now)

    # ══════════════════════════════════════════════════════════════
    # ALERTS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def acknowledge(cls, alert: Alert, user=None) -> Alert:
        return alert_service.acknowledge(alert, user)

    @classmethod
    def dismiss(cls, alert: Alert, user=None) -> Alert:
        return alert_service.dismiss(alert, user)

    @classmethod
    def resolve(cls, alert: Alert, user=None, notes: str = '') -> Alert:
        return alert_service.resolve(alert, user, notes=notes)
