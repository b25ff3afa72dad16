"""
Stock alerts — emit, deduplicate and move alerts through their lifecycle.

Usage:
    from stockwatch.services.alerts import maybe_emit, acknowledge

    # Called by the reclassification run on every status change
    alert = maybe_emit(batch, HealthStatus.DEAD, HealthStatus.AT_RISK, age_in_days=95)

    # Human actions
    acknowledge(alert, user)
    resolve(alert, user, notes='Liquidado com 40% de desconto')
"""

import logging
from datetime import datetime, timedelta

from django.db import IntegrityError, transaction
from django.utils import timezone

from stockwatch.aging import days_until
from stockwatch.conf import stockwatch_settings
from stockwatch.exceptions import AlertError
from stockwatch.models.alert import Alert
from stockwatch.models.batch import StockBatch
from stockwatch.models.enums import AlertKind, AlertSeverity, AlertStatus, HealthStatus
from stockwatch.protocols import get_product_attr
from stockwatch.signals import alert_emitted

logger = logging.getLogger('stockwatch')

# Status → (kind, severity). HEALTHY never emits.
STATUS_ALERTS = {
    HealthStatus.AT_RISK: (AlertKind.AGING, AlertSeverity.WARNING),
    HealthStatus.DEAD: (AlertKind.DEAD_INVENTORY, AlertSeverity.CRITICAL),
}

RECOMMENDATIONS = {
    AlertKind.DEAD_INVENTORY: (
        "Consider liquidation at 40-50% discount, bundle with fast-moving items, "
        "or donate for tax benefits."
    ),
    AlertKind.AGING: (
        "Promote with discounts, bundle with popular items, "
        "or move to high-traffic location."
    ),
    AlertKind.EXPIRY_WARNING: (
        "Prioritize this batch for the next dispatches (FEFO) "
        "or run a clearance sale before it expires."
    ),
}

# action → (allowed current statuses, target status)
TRANSITIONS = {
    'acknowledge': ([AlertStatus.OPEN], AlertStatus.ACKNOWLEDGED),
    'dismiss': ([AlertStatus.OPEN, AlertStatus.ACKNOWLEDGED], AlertStatus.DISMISSED),
    'resolve': (
        [AlertStatus.OPEN, AlertStatus.ACKNOWLEDGED, AlertStatus.DISMISSED],
        AlertStatus.RESOLVED,
    ),
}


def _product_name(batch: StockBatch) -> str:
    product = batch.product
    return get_product_attr(product, 'name', str(product))


def _format_value(value) -> str:
    return f"{value:,.2f}"


def _aging_texts(batch: StockBatch, kind: str, age: int) -> tuple[str, str]:
    """Title and message for an aging/dead alert."""
    name = _product_name(batch)
    warehouse = batch.warehouse.name
    quantity = batch.quantity_available

    if kind == AlertKind.DEAD_INVENTORY:
        return (
            f"Dead Stock Alert: {name}",
            f"{quantity} units have been idle for {age} days in {warehouse}. "
            f"Value locked: {_format_value(batch.value)}",
        )
    return (
        f"Aging Stock Alert: {name}",
        f"{quantity} units are aging ({age} days) in {warehouse}. "
        f"Take action before it becomes dead stock.",
    )


def emit(batch: StockBatch, kind: str, severity: str, title: str,
         message: str, metadata: dict | None = None) -> Alert | None:
    """
    Insert an OPEN alert unless one is already outstanding for (batch, kind).

    Returns:
        The new Alert, or None when suppressed or when persistence failed.

    Failures are logged and swallowed: one alert must never abort the
    caller's loop over many batches.
    """
    try:
        with transaction.atomic():
            duplicate = Alert.objects.filter(
                batch=batch,
                kind=kind,
                status__in=AlertStatus.outstanding(),
            ).exists()
            if duplicate:
                logger.debug(
                    "stock.alert.suppressed",
                    extra={"batch_id": batch.batch_id, "kind": kind},
                )
                return None

            alert = Alert.objects.create(
                company=batch.company,
                batch=batch,
                product_type_id=batch.product_type_id,
                product_id=batch.product_id,
                warehouse_id=batch.warehouse_id,
                kind=kind,
                severity=severity,
                title=title,
                message=message,
                recommendation=RECOMMENDATIONS.get(kind, ''),
                metadata=metadata or {},
            )
    except IntegrityError:
        # Another run inserted the same (batch, kind) after our check
        logger.info(
            "stock.alert.suppressed",
            extra={"batch_id": batch.batch_id, "kind": kind, "race": True},
        )
        return None
    except Exception:
        logger.exception(
            "stock.alert.failed",
            extra={"batch_pk": batch.pk, "batch_id": batch.batch_id, "kind": kind},
        )
        return None

    logger.warning(
        "stock.alert.emitted",
        extra={
            "alert_id": alert.pk,
            "company": alert.company,
            "batch_id": batch.batch_id,
            "kind": kind,
            "severity": severity,
        },
    )
    for receiver, response in alert_emitted.send_robust(sender=Alert, alert=alert):
        if isinstance(response, Exception):
            logger.error(
                "stock.alert.receiver_failed",
                extra={"alert_id": alert.pk, "receiver": repr(receiver), "error": str(response)},
            )
    return alert


def maybe_emit(batch: StockBatch, new_status: str, old_status: str,
               age_in_days: int | None = None) -> Alert | None:
    """
    Emit the alert matching a status transition, if any.

    No-op unless the status changed into AT_RISK or DEAD.
    AT_RISK → kind=aging/warning, DEAD → kind=dead_inventory/critical.
    """
    if new_status == old_status or new_status == HealthStatus.HEALTHY:
        return None

    kind, severity = STATUS_ALERTS[HealthStatus(new_status)]
    age = batch.age_in_days if age_in_days is None else age_in_days

    # The batch's age/status is already committed at this point
    try:
        title, message = _aging_texts(batch, kind, age)
        metadata = {
            'age_in_days': age,
            'quantity': batch.quantity_available,
            'value': str(batch.value),
            'previous_status': str(old_status),
        }
    except Exception:
        logger.exception(
            "stock.alert.failed",
            extra={"batch_pk": batch.pk, "batch_id": batch.batch_id, "kind": kind},
        )
        return None

    return emit(batch, kind, severity, title, message, metadata=metadata)


def check_expiring(now: datetime | None = None) -> list[Alert]:
    """
    Emit expiry warnings for batches with stock close to (or past) expiry.

    Look-ahead is STOCKWATCH["EXPIRY_WARNING_DAYS"]. Already-expired
    batches get severity=critical.

    Returns:
        List of alerts created by this call.
    """
    now = now or timezone.now()
    horizon = now.date() + timedelta(days=stockwatch_settings.EXPIRY_WARNING_DAYS)

    batches = (
        StockBatch.objects.in_stock()
        .expiring_before(horizon)
        .select_related('warehouse')
    )

    created = []
    for batch in batches:
        days_left = days_until(batch.expiry_date, now)
        name = _product_name(batch)
        if days_left < 0:
            severity = AlertSeverity.CRITICAL
            title = f"Expired Stock: {name}"
            message = (
                f"{batch.quantity_available} units in {batch.warehouse.name} "
                f"expired on {batch.expiry_date.isoformat()}."
            )
        else:
            severity = AlertSeverity.WARNING
            title = f"Expiry Warning: {name}"
            message = (
                f"{batch.quantity_available} units in {batch.warehouse.name} "
                f"expire in {days_left} days ({batch.expiry_date.isoformat()})."
            )
        alert = emit(
            batch, AlertKind.EXPIRY_WARNING, severity, title, message,
            metadata={
                'quantity': batch.quantity_available,
                'value': str(batch.value),
                'expiry_date': batch.expiry_date.isoformat(),
                'days_left': days_left,
            },
        )
        if alert is not None:
            created.append(alert)

    return created


# ══════════════════════════════════════════════════════════════
# LIFECYCLE
# ══════════════════════════════════════════════════════════════

def _transition(alert: Alert, action: str, user=None, **fields) -> Alert:
    allowed, target = TRANSITIONS[action]

    with transaction.atomic():
        locked = Alert.objects.select_for_update().get(pk=alert.pk)

        if locked.status not in allowed:
            raise AlertError(
                'INVALID_TRANSITION',
                alert_id=locked.pk,
                status=locked.status,
                action=action,
            )

        locked.status = target
        for name, value in fields.items():
            setattr(locked, name, value)
        locked.save(update_fields=['status', 'updated_at', *fields.keys()])

    logger.info(
        f"stock.alert.{action}",
        extra={
            "alert_id": locked.pk,
            "user": str(user) if user else None,
        },
    )
    return locked


def acknowledge(alert: Alert, user=None) -> Alert:
    """OPEN → ACKNOWLEDGED."""
    return _transition(
        alert, 'acknowledge', user,
        acknowledged_by=user, acknowledged_at=timezone.now(),
    )


def dismiss(alert: Alert, user=None) -> Alert:
    """OPEN/ACKNOWLEDGED → DISMISSED."""
    return _transition(
        alert, 'dismiss', user,
        dismissed_by=user, dismissed_at=timezone.now(),
    )


def resolve(alert: Alert, user=None, notes: str = '') -> Alert:
    """OPEN/ACKNOWLEDGED/DISMISSED → RESOLVED."""
    return _transition(
        alert, 'resolve', user,
        resolved_by=user, resolved_at=timezone.now(), resolved_notes=notes,
    )
