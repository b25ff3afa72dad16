"""
Stock queries — read-only operations.

All methods are classmethod on Stock and use no locking.
"""

from decimal import Decimal

from django.contrib.contenttypes.models import ContentType

from stockwatch.models.alert import Alert
from stockwatch.models.batch import StockBatch
from stockwatch.models.enums import HealthStatus
from stockwatch.models.movement import StockMovement
from stockwatch.models.warehouse import Warehouse
from stockwatch.protocols import get_product_attr


def recommendation_for(batch: StockBatch) -> str:
    """Suggested action for a batch, by status, age and locked value."""
    age = batch.age_in_days

    if batch.status == HealthStatus.DEAD:
        if age > 300:
            return "Liquidate @ 50% off - extremely aged inventory"
        if age > 200:
            return "Liquidate @ 40% off or promotional campaign"
        return "Clear stock - run clearance sale"

    if batch.status == HealthStatus.AT_RISK:
        if age > 120:
            return "Urgent: Run promotional campaign in next 15 days"
        if age > 90:
            return "Run promotional campaign in next 30 days"
        if batch.value > 100000:
            return "Consider transferring to high-demand location"
        return "Market to new client segments"

    return "Monitor regularly - currently healthy"


def _percentage(part: int, total: int) -> int:
    return round(part * 100 / total) if total else 0


class StockQueries:
    """Read-only stock query methods."""

    @classmethod
    def available(cls, product, warehouse: Warehouse | None = None) -> int:
        """Units available for a product (all batches, optionally one warehouse)."""
        qs = StockBatch.objects.for_product(product)
        if warehouse is not None:
            qs = qs.filter(warehouse=warehouse)
        return sum(qs.values_list('quantity_available', flat=True))

    @classmethod
    def list_batches(cls, company: str, product=None, warehouse: Warehouse | None = None,
                     status: str | None = None, include_empty: bool = False):
        """List batches with filters, oldest first (FIFO order)."""
        qs = StockBatch.objects.for_company(company)

        if product is not None:
            qs = qs.for_product(product)
        if warehouse is not None:
            qs = qs.filter(warehouse=warehouse)
        if status is not None:
            qs = qs.with_status(status)
        if not include_empty:
            qs = qs.in_stock()

        return qs.order_by('entry_date', 'pk')

    @classmethod
    def movements(cls, company: str, product=None, warehouse: Warehouse | None = None,
                  movement_type: str | None = None):
        """Ledger entries of a company, newest first."""
        qs = StockMovement.objects.filter(batch__company=company)
        if product is not None:
            ct = ContentType.objects.get_for_model(product)
            qs = qs.filter(batch__product_type=ct, batch__product_id=product.pk)
        if warehouse is not None:
            qs = qs.filter(batch__warehouse=warehouse)
        if movement_type is not None:
            qs = qs.filter(movement_type=movement_type)
        return qs.select_related('batch').order_by('-timestamp')

    @classmethod
    def alerts(cls, company: str, outstanding_only: bool = True):
        qs = Alert.objects.for_company(company)
        if outstanding_only:
            qs = qs.outstanding()
        return qs.select_related('batch', 'warehouse')

    @classmethod
    def aging_report(cls, company: str, warehouse: Warehouse | None = None,
                     status: str | None = None, category=None) -> dict:
        """
        Aging report for a company: batches with stock grouped by status.

        Args:
            company: Company identifier
            warehouse: Only this warehouse (None = all)
            status: Only this HealthStatus (None = all)
            category: Only products whose ``category`` is this object (None = all)

        Returns:
            {
                'summary': {'total_items', 'total_value',
                            'healthy'|'at_risk'|'dead': {'count', 'value', 'percentage'}},
                'batches': {'dead'|'at_risk'|'healthy': [row, ...]},
            }
            Each row: batch, product_name, warehouse, age_in_days,
            quantity, value, recommendation. Rows are ordered oldest first.
        """
        qs = (
            StockBatch.objects.for_company(company)
            .in_stock()
            .select_related('warehouse')
            .prefetch_related('product')
            .order_by('-age_in_days', 'pk')
        )
        if warehouse is not None:
            qs = qs.filter(warehouse=warehouse)
        if status is not None:
            qs = qs.with_status(status)

        groups: dict[str, list[dict]] = {s.value: [] for s in (
            HealthStatus.DEAD, HealthStatus.AT_RISK, HealthStatus.HEALTHY,
        )}
        for batch in qs:
            if category is not None and get_product_attr(batch.product, 'category') != category:
                continue
            groups[batch.status].append({
                'batch': batch,
                'product_name': get_product_attr(batch.product, 'name', str(batch.product)),
                'warehouse': batch.warehouse.name,
                'age_in_days': batch.age_in_days,
                'quantity': batch.quantity_available,
                'value': batch.value,
                'recommendation': recommendation_for(batch),
            })

        total_items = sum(len(rows) for rows in groups.values())
        summary = {'total_items': total_items, 'total_value': Decimal('0')}
        for key, rows in groups.items():
            value = sum((row['value'] for row in rows), Decimal('0'))
            summary[key] = {
                'count': len(rows),
                'value': value,
                'percentage': _percentage(len(rows), total_items),
            }
            summary['total_value'] += value

        return {'summary': summary, 'batches': groups}
