"""
Tests for stock movements (receive, issue, damage, adjust, transfer).
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from stockwatch import stock, StockError
from stockwatch.models import (
    HealthStatus,
    MovementType,
    StockBatch,
    StockMovement,
    TransferStatus,
    Warehouse,
)


pytestmark = pytest.mark.django_db


@pytest.fixture
def batch(product, warehouse, user):
    return stock.receive(40, product, warehouse, user=user, batch_id='B-TEST')


class TestReceive:
    """Tests for stock.receive()."""

    def test_creates_batch_and_movement(self, batch, warehouse, product):
        """Receiving creates a batch with an IN movement for the full quantity."""
        assert batch.company == 'acme'
        assert batch.warehouse == warehouse
        assert batch.product == product
        assert batch.quantity_received == 40
        assert batch.quantity_available == 40
        assert batch.status == HealthStatus.HEALTHY
        assert batch.age_in_days == 0

        move = batch.movements.get()
        assert move.movement_type == MovementType.IN
        assert move.delta == 40

    def test_backdated_entry_is_classified(self, product, warehouse):
        """Age and status are computed on receipt."""
        batch = stock.receive(
            10, product, warehouse,
            entry_date=timezone.now() - timedelta(days=75),
        )

        assert batch.age_in_days == 75
        assert batch.status == HealthStatus.AT_RISK

    def test_entry_photos(self, product, warehouse, user):
        """Photo URLs are stored on the batch and on the movement."""
        batch = stock.receive(
            5, product, warehouse, user=user,
            photos=['https://cdn.example.com/a.jpg', 'https://cdn.example.com/b.jpg'],
        )

        assert batch.entry_photos.count() == 2
        assert batch.movements.get().photos[0] == {
            'url': 'https://cdn.example.com/a.jpg', 'type': 'entry',
        }

    def test_generated_batch_id(self, product, warehouse):
        """Without batch_id, one is generated."""
        batch = stock.receive(5, product, warehouse)

        assert batch.batch_id.startswith('B-')

    @pytest.mark.parametrize('quantity', [0, -3])
    def test_invalid_quantity(self, product, warehouse, quantity):
        with pytest.raises(StockError) as exc:
            stock.receive(quantity, product, warehouse)

        assert exc.value.code == 'INVALID_QUANTITY'

    def test_future_entry_date(self, product, warehouse):
        with pytest.raises(StockError) as exc:
            stock.receive(5, product, warehouse, entry_date=timezone.now() + timedelta(days=1))

        assert exc.value.code == 'FUTURE_ENTRY_DATE'
        assert StockBatch.objects.count() == 0


class TestIssue:
    """Tests for stock.issue()."""

    def test_issue_reduces_available(self, batch, user):
        move = stock.issue(15, batch, user=user, customer_name='Loja X', order_reference='PO-7')

        batch.refresh_from_db()
        assert batch.quantity_available == 25
        assert batch.quantity_received == 40
        assert move.delta == -15
        assert move.reason == 'Venda para Loja X (PO-7)'
        assert move.metadata == {'customer_name': 'Loja X', 'order_reference': 'PO-7'}

    def test_insufficient_quantity(self, batch):
        """Cannot issue more than available."""
        with pytest.raises(StockError) as exc:
            stock.issue(41, batch)

        assert exc.value.code == 'INSUFFICIENT_QUANTITY'
        assert exc.value.available == 40
        assert exc.value.requested == 41

    def test_issue_all_empties_batch(self, batch):
        stock.issue(40, batch, reason='Venda total')

        batch.refresh_from_db()
        assert batch.quantity_available == 0
        assert not StockBatch.objects.in_stock().filter(pk=batch.pk).exists()


class TestDamage:
    """Tests for stock.record_damage()."""

    def test_damage_moves_units_to_damaged(self, batch, user):
        stock.record_damage(3, batch, reason='Avaria no transporte', user=user,
                            photo='https://cdn.example.com/d.jpg')

        batch.refresh_from_db()
        assert batch.quantity_available == 37
        assert batch.quantity_damaged == 3
        assert batch.movements.filter(movement_type=MovementType.DAMAGE).count() == 1

    def test_reason_required(self, batch):
        with pytest.raises(StockError) as exc:
            stock.record_damage(3, batch, reason='')

        assert exc.value.code == 'REASON_REQUIRED'


class TestAdjust:
    """Tests for stock.adjust()."""

    def test_adjust_down(self, batch):
        """Delta is computed from the current available quantity."""
        move = stock.adjust(batch, 35, reason='Contagem')

        batch.refresh_from_db()
        assert batch.quantity_available == 35
        assert move.delta == -5
        assert move.reason == 'Ajuste: Contagem'

    def test_adjust_no_change(self, batch):
        assert stock.adjust(batch, 40, reason='Contagem') is None

    def test_cannot_exceed_received(self, batch):
        with pytest.raises(StockError) as exc:
            stock.adjust(batch, 41, reason='Contagem')

        assert exc.value.code == 'INVALID_QUANTITY'


class TestTransfer:
    """Tests for stock.transfer()."""

    def test_transfer_in_transit(self, batch, other_warehouse, user):
        """Without entry photo the transfer stays in transit."""
        move = stock.transfer(
            10, batch, other_warehouse, user=user,
            vehicle_number='ABC-1234', driver_name='João',
        )

        batch.refresh_from_db()
        destination = StockBatch.objects.get(pk=move.destination_batch_id)
        assert batch.quantity_available == 30
        assert destination.warehouse == other_warehouse
        assert destination.batch_id == batch.batch_id
        assert destination.quantity_received == 10
        assert destination.quantity_available == 10
        assert move.transfer_status == TransferStatus.IN_TRANSIT
        assert move.transport_details['vehicle_number'] == 'ABC-1234'
        assert destination.movements.get().movement_type == MovementType.IN

    def test_destination_keeps_entry_date(self, product, warehouse, other_warehouse):
        """Transferred goods keep aging from their original receipt."""
        source = stock.receive(
            10, product, warehouse,
            entry_date=timezone.now() - timedelta(days=95),
        )

        move = stock.transfer(4, source, other_warehouse)

        destination = move.destination_batch
        assert destination.entry_date == source.entry_date
        assert destination.status == HealthStatus.DEAD

    def test_second_transfer_reuses_destination_batch(self, batch, other_warehouse):
        stock.transfer(10, batch, other_warehouse)
        stock.transfer(5, batch, other_warehouse)

        destination = StockBatch.objects.get(warehouse=other_warehouse)
        assert destination.quantity_received == 15
        assert destination.quantity_available == 15

    def test_complete_transfer(self, batch, other_warehouse, user):
        move = stock.transfer(10, batch, other_warehouse)

        move = stock.complete_transfer(move, user=user, entry_photo='https://cdn.example.com/e.jpg')

        assert move.transfer_status == TransferStatus.COMPLETED
        assert move.completed_by == user
        assert move.destination_batch.entry_photos.count() == 1

    def test_complete_twice_fails(self, batch, other_warehouse):
        move = stock.transfer(10, batch, other_warehouse, entry_photo='https://cdn.example.com/e.jpg')

        assert move.transfer_status == TransferStatus.COMPLETED
        with pytest.raises(StockError) as exc:
            stock.complete_transfer(move)

        assert exc.value.code == 'INVALID_TRANSFER'

    def test_same_warehouse(self, batch, warehouse):
        with pytest.raises(StockError) as exc:
            stock.transfer(5, batch, warehouse)

        assert exc.value.code == 'SAME_WAREHOUSE'

    def test_other_company(self, batch):
        foreign = Warehouse.objects.create(company='globex', code='central', name='Globex')

        with pytest.raises(StockError) as exc:
            stock.transfer(5, batch, foreign)

        assert exc.value.code == 'WAREHOUSE_MISMATCH'

    def test_capacity_exceeded(self, batch, other_warehouse):
        other_warehouse.capacity = 8
        other_warehouse.save()

        with pytest.raises(StockError) as exc:
            stock.transfer(10, batch, other_warehouse)

        assert exc.value.code == 'CAPACITY_EXCEEDED'
        assert exc.value.available == 8
        batch.refresh_from_db()
        assert batch.quantity_available == 40


class TestMovementImmutability:
    """StockMovement rows can't be changed or removed."""

    def test_cannot_resave(self, batch):
        move = batch.movements.get()
        move.reason = 'Outro motivo'

        with pytest.raises(ValueError):
            move.save()

    def test_cannot_delete(self, batch):
        with pytest.raises(ValueError):
            batch.movements.get().delete()

    def test_reason_required(self, batch):
        with pytest.raises(ValueError):
            StockMovement.objects.create(batch=batch, movement_type=MovementType.OUT, delta=-1, reason='')


class TestReceiveWithOverrides:
    """Product threshold overrides on receipt."""

    def test_invalid_override_uses_company_thresholds(self, product, warehouse):
        """A broken product override doesn't block receiving stock."""
        product.at_risk_threshold_days = 100
        product.save()

        batch = stock.receive(
            10, product, warehouse,
            entry_date=timezone.now() - timedelta(days=95),
        )

        assert batch.status == HealthStatus.DEAD
