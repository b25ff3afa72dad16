"""
Reclassification run — recompute age/status of every batch, alert on change.

Usage:
    from stockwatch.services.reclassify import reclassify

    result = reclassify(now=timezone.now())
    result.as_dict()  # {'totalProcessed': 120, 'updated': 118, 'alertsGenerated': 3, 'failed': []}

Runs synchronously, one batch at a time, across all companies. Each batch
is an independent unit: a failure is logged, the batch is skipped and the
run continues. There is no cross-batch transaction.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from django.db import transaction
from django.utils import timezone

from stockwatch.aging import classify
from stockwatch.conf import stockwatch_settings
from stockwatch.models.batch import StockBatch
from stockwatch.services.alerts import maybe_emit
from stockwatch.services.thresholds import ThresholdResolver

logger = logging.getLogger('stockwatch')


@dataclass
class ReclassificationResult:
    """Aggregate counters of one run."""

    total_processed: int = 0
    updated: int = 0
    alerts_generated: int = 0
    failed: list[dict] = field(default_factory=list)

    def as_dict(self) -> dict:
        """Serialize to the trigger endpoint's JSON shape."""
        return {
            'totalProcessed': self.total_processed,
            'updated': self.updated,
            'alertsGenerated': self.alerts_generated,
            'failed': self.failed,
        }


def _apply(batch: StockBatch, age: int, status: str) -> bool:
    """
    Persist the new age/status if the stored values are still the ones we read.

    Returns False when another writer changed the batch in between
    (optimistic check on the old values), in which case nothing is written.
    """
    with transaction.atomic():
        rows = StockBatch.objects.filter(
            pk=batch.pk,
            age_in_days=batch.age_in_days,
            status=batch.status,
        ).update(age_in_days=age, status=status, updated_at=timezone.now())
    return rows == 1


def reclassify_batch(batch: StockBatch, now: datetime,
                     resolver: ThresholdResolver) -> tuple[bool, bool]:
    """
    Reclassify one batch.

    Returns:
        (updated, alert_generated)

    Raises whatever classification or persistence raises; the run
    catches it. Alert failures never raise (see alerts.emit).
    """
    thresholds = resolver.for_batch(batch)
    age, status = classify(batch.entry_date, now, thresholds)

    if age == batch.age_in_days and status == batch.status:
        return False, False

    if not _apply(batch, age, status):
        logger.info(
            "stock.reclassify.stale",
            extra={"batch_pk": batch.pk, "batch_id": batch.batch_id},
        )
        return False, False

    old_status = batch.status
    batch.age_in_days = age
    batch.status = status

    if status == old_status:
        return True, False

    alert = maybe_emit(batch, status, old_status, age_in_days=age)
    return True, alert is not None


def reclassify(now: datetime | None = None) -> ReclassificationResult:
    """
    Run the reclassification over every batch of every company.

    Args:
        now: Reference instant (None = timezone.now()). Pass it explicitly
             in tests and backfills.

    Returns:
        ReclassificationResult with totalProcessed/updated/alertsGenerated
        and the list of batches that failed.
    """
    now = now or timezone.now()
    resolver = ThresholdResolver()
    result = ReclassificationResult()

    batches = (
        StockBatch.objects.all()
        .select_related('warehouse')
        .prefetch_related('product')
        .order_by('pk')
    )

    logger.info("stock.reclassify.start", extra={"now": now.isoformat()})

    for batch in batches.iterator(chunk_size=stockwatch_settings.RECLASSIFY_CHUNK_SIZE):
        result.total_processed += 1
        try:
            updated, alerted = reclassify_batch(batch, now, resolver)
        except Exception as exc:
            logger.exception(
                "stock.reclassify.batch_failed",
                extra={"batch_pk": batch.pk, "batch_id": batch.batch_id},
            )
            result.failed.append({'batchId': batch.batch_id, 'error': str(exc)})
            continue

        if updated:
            result.updated += 1
        if alerted:
            result.alerts_generated += 1

    logger.info(
        "stock.reclassify.done",
        extra={
            "total_processed": result.total_processed,
            "updated": result.updated,
            "alerts_generated": result.alerts_generated,
            "failed": len(result.failed),
        },
    )
    return result


def pending_changes(now: datetime | None = None) -> int:
    """How many batches a run at `now` would update (dry run, no writes)."""
    now = now or timezone.now()
    resolver = ThresholdResolver()
    count = 0

    batches = StockBatch.objects.all().prefetch_related('product').order_by('pk')
    for batch in batches.iterator(chunk_size=stockwatch_settings.RECLASSIFY_CHUNK_SIZE):
        try:
            age, status = classify(batch.entry_date, now, resolver.for_batch(batch))
        except Exception:
            logger.exception(
                "stock.reclassify.batch_failed",
                extra={"batch_pk": batch.pk, "batch_id": batch.batch_id},
            )
            continue
        if age != batch.age_in_days or status != batch.status:
            count += 1
    return count
