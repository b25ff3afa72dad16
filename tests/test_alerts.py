"""
Tests for alert emission, deduplication and lifecycle.
"""

from datetime import timedelta
from unittest import mock

import pytest
from django.db import DatabaseError

from stockwatch import stock, AlertError
from stockwatch.models import (
    Alert,
    AlertKind,
    AlertSeverity,
    AlertStatus,
    HealthStatus,
)
from stockwatch.services.alerts import check_expiring, maybe_emit
from stockwatch.signals import alert_emitted


pytestmark = pytest.mark.django_db


class TestMaybeEmit:
    """Tests for maybe_emit()."""

    def test_no_alert_without_transition(self, make_batch):
        """Same status on both sides emits nothing."""
        batch = make_batch(70, status=HealthStatus.AT_RISK, age=70)

        assert maybe_emit(batch, HealthStatus.AT_RISK, HealthStatus.AT_RISK) is None
        assert Alert.objects.count() == 0

    def test_no_alert_when_back_to_healthy(self, make_batch):
        """Transitions into HEALTHY never emit."""
        batch = make_batch(10, status=HealthStatus.AT_RISK)

        assert maybe_emit(batch, HealthStatus.HEALTHY, HealthStatus.AT_RISK) is None
        assert Alert.objects.count() == 0

    def test_at_risk_emits_aging_warning(self, make_batch):
        """HEALTHY → AT_RISK emits kind=aging, severity=warning."""
        batch = make_batch(65)

        alert = maybe_emit(batch, HealthStatus.AT_RISK, HealthStatus.HEALTHY, age_in_days=65)

        assert alert.kind == AlertKind.AGING
        assert alert.severity == AlertSeverity.WARNING
        assert alert.status == AlertStatus.OPEN
        assert alert.title == 'Aging Stock Alert: Notebook'
        assert alert.message == (
            '40 units are aging (65 days) in Central. '
            'Take action before it becomes dead stock.'
        )
        assert alert.recommendation.startswith('Promote with discounts')

    def test_dead_emits_critical_with_snapshot(self, make_batch):
        """AT_RISK → DEAD emits kind=dead_inventory, severity=critical."""
        batch = make_batch(95, status=HealthStatus.AT_RISK, age=94)

        alert = maybe_emit(batch, HealthStatus.DEAD, HealthStatus.AT_RISK, age_in_days=95)

        assert alert.kind == AlertKind.DEAD_INVENTORY
        assert alert.severity == AlertSeverity.CRITICAL
        assert alert.company == 'acme'
        assert alert.warehouse == batch.warehouse
        assert alert.product_id == batch.product_id
        assert 'idle for 95 days in Central' in alert.message
        assert 'Value locked: 20,000.00' in alert.message
        assert alert.metadata['age_in_days'] == 95
        assert alert.metadata['quantity'] == 40
        assert alert.metadata['value'] == '20000.00'

    def test_duplicate_suppressed_while_open(self, make_batch):
        """Second emission for the same (batch, kind) is suppressed."""
        batch = make_batch(95)

        first = maybe_emit(batch, HealthStatus.DEAD, HealthStatus.HEALTHY)
        second = maybe_emit(batch, HealthStatus.DEAD, HealthStatus.AT_RISK)

        assert first is not None
        assert second is None
        assert Alert.objects.filter(batch=batch, kind=AlertKind.DEAD_INVENTORY).count() == 1

    def test_duplicate_suppressed_while_acknowledged(self, make_batch, user):
        """ACKNOWLEDGED is still outstanding."""
        batch = make_batch(95)
        alert = maybe_emit(batch, HealthStatus.DEAD, HealthStatus.HEALTHY)
        stock.acknowledge(alert, user)

        assert maybe_emit(batch, HealthStatus.DEAD, HealthStatus.AT_RISK) is None

    @pytest.mark.parametrize('action', ['resolve', 'dismiss'])
    def test_new_alert_after_close(self, make_batch, user, action):
        """Once resolved or dismissed, the next transition emits again."""
        batch = make_batch(95)
        alert = maybe_emit(batch, HealthStatus.DEAD, HealthStatus.HEALTHY)
        getattr(stock, action)(alert, user)

        again = maybe_emit(batch, HealthStatus.DEAD, HealthStatus.AT_RISK)

        assert again is not None
        assert again.pk != alert.pk
        assert Alert.objects.filter(batch=batch).count() == 2

    def test_other_kind_not_blocked(self, make_batch):
        """An open aging alert doesn't block the dead_inventory alert."""
        batch = make_batch(95)

        maybe_emit(batch, HealthStatus.AT_RISK, HealthStatus.HEALTHY)
        dead = maybe_emit(batch, HealthStatus.DEAD, HealthStatus.AT_RISK)

        assert dead is not None
        assert Alert.objects.outstanding().filter(batch=batch).count() == 2

    def test_race_past_check_is_suppressed(self, make_batch):
        """If a concurrent insert slips past the check, the unique constraint wins."""
        batch = make_batch(95)
        first = maybe_emit(batch, HealthStatus.DEAD, HealthStatus.HEALTHY)

        with mock.patch('django.db.models.query.QuerySet.exists', return_value=False):
            second = maybe_emit(batch, HealthStatus.DEAD, HealthStatus.AT_RISK)

        assert first is not None
        assert second is None
        assert Alert.objects.outstanding().filter(batch=batch).count() == 1

    def test_persistence_failure_is_contained(self, make_batch):
        """A failing insert is logged and reported as 'no alert'."""
        batch = make_batch(95)

        with mock.patch(
            'stockwatch.services.alerts.Alert.objects.create',
            side_effect=DatabaseError('disk full'),
        ):
            assert maybe_emit(batch, HealthStatus.DEAD, HealthStatus.HEALTHY) is None

        assert Alert.objects.count() == 0

    def test_signal_sent_on_emission(self, make_batch):
        """alert_emitted fires once per persisted alert."""
        received = []

        def receiver(sender, alert, **kwargs):
            received.append(alert)

        alert_emitted.connect(receiver)
        try:
            batch = make_batch(95)
            alert = maybe_emit(batch, HealthStatus.DEAD, HealthStatus.HEALTHY)
            maybe_emit(batch, HealthStatus.DEAD, HealthStatus.HEALTHY)
        finally:
            alert_emitted.disconnect(receiver)

        assert received == [alert]

    def test_failing_receiver_does_not_break_emission(self, make_batch):
        """Receiver errors are logged, the alert is still returned."""
        def receiver(sender, alert, **kwargs):
            raise RuntimeError('smtp down')

        alert_emitted.connect(receiver)
        try:
            alert = maybe_emit(make_batch(95), HealthStatus.DEAD, HealthStatus.HEALTHY)
        finally:
            alert_emitted.disconnect(receiver)

        assert alert is not None


class TestAlertLifecycle:
    """Tests for acknowledge/dismiss/resolve."""

    @pytest.fixture
    def alert(self, make_batch):
        return maybe_emit(make_batch(95), HealthStatus.DEAD, HealthStatus.HEALTHY)

    def test_acknowledge(self, alert, user):
        """OPEN → ACKNOWLEDGED stamps actor and time."""
        alert = stock.acknowledge(alert, user)

        assert alert.status == AlertStatus.ACKNOWLEDGED
        assert alert.acknowledged_by == user
        assert alert.acknowledged_at is not None

    def test_resolve_with_notes(self, alert, user):
        """ACKNOWLEDGED → RESOLVED keeps the notes."""
        stock.acknowledge(alert, user)
        alert = stock.resolve(alert, user, notes='Liquidado')

        alert.refresh_from_db()
        assert alert.status == AlertStatus.RESOLVED
        assert alert.resolved_by == user
        assert alert.resolved_notes == 'Liquidado'

    def test_dismiss_then_resolve(self, alert, user):
        """DISMISSED alerts can still be resolved."""
        stock.dismiss(alert, user)
        alert = stock.resolve(alert, user)

        assert alert.status == AlertStatus.RESOLVED
        assert alert.dismissed_by == user

    def test_cannot_acknowledge_twice(self, alert, user):
        """ACKNOWLEDGED → ACKNOWLEDGED is invalid."""
        stock.acknowledge(alert, user)

        with pytest.raises(AlertError) as exc:
            stock.acknowledge(alert, user)

        assert exc.value.code == 'INVALID_TRANSITION'

    def test_resolved_is_final(self, alert, user):
        """Nothing leaves RESOLVED."""
        stock.resolve(alert, user)

        for action in ('acknowledge', 'dismiss', 'resolve'):
            with pytest.raises(AlertError):
                getattr(stock, action)(alert, user)


class TestCheckExpiring:
    """Tests for check_expiring()."""

    def test_warns_batches_inside_window(self, make_batch, now):
        """Batches expiring within EXPIRY_WARNING_DAYS get a warning."""
        soon = make_batch(5, expiry_date=now.date() + timedelta(days=3))
        make_batch(5, expiry_date=now.date() + timedelta(days=30))
        make_batch(5)

        alerts = check_expiring(now)

        assert [a.batch_id for a in alerts] == [soon.pk]
        assert alerts[0].kind == AlertKind.EXPIRY_WARNING
        assert alerts[0].severity == AlertSeverity.WARNING
        assert alerts[0].metadata['days_left'] == 3

    def test_expired_is_critical(self, make_batch, now):
        """Already expired batches get a critical alert."""
        make_batch(5, expiry_date=now.date() - timedelta(days=1))

        alerts = check_expiring(now)

        assert alerts[0].severity == AlertSeverity.CRITICAL
        assert alerts[0].title == 'Expired Stock: Notebook'

    def test_empty_batches_ignored(self, make_batch, now):
        """Exhausted batches don't warn."""
        make_batch(5, quantity=0, expiry_date=now.date())

        assert check_expiring(now) == []

    def test_deduplicated(self, make_batch, now):
        """Running twice keeps a single outstanding expiry alert."""
        make_batch(5, expiry_date=now.date() + timedelta(days=1))

        assert len(check_expiring(now)) == 1
        assert check_expiring(now) == []
