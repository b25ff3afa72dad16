"""
Stock movements — state-changing operations (receive, issue, damage, adjust, transfer).

All methods use transaction.atomic() with appropriate locking.
"""

import logging
import uuid
from datetime import datetime

from django.contrib.contenttypes.models import ContentType
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from stockwatch.aging import classify
from stockwatch.exceptions import StockError
from stockwatch.models.batch import EntryPhoto, StockBatch
from stockwatch.models.enums import MovementType, TransferStatus
from stockwatch.models.movement import StockMovement
from stockwatch.models.warehouse import Warehouse
from stockwatch.services.thresholds import ThresholdResolver

logger = logging.getLogger('stockwatch')


def _new_batch_id() -> str:
    return f"B-{timezone.now():%Y%m%d}-{uuid.uuid4().hex[:8].upper()}"


def _photo(url: str | None, kind: str) -> list[dict]:
    return [{'url': url, 'type': kind}] if url else []


class StockMovements:
    """State-changing stock movement methods."""

    @classmethod
    def receive(cls, quantity: int, product, warehouse: Warehouse, user=None,
                entry_date: datetime | None = None, expiry_date=None,
                batch_id: str | None = None, photos=(),
                reason: str = 'Recebimento') -> StockBatch:
        """
        Stock entry.

        Creates a new StockBatch in the warehouse (company comes from the
        warehouse) and an IN movement with positive delta. Age and status
        are computed right away.

        Raises:
            StockError('INVALID_QUANTITY'): If quantity <= 0
            StockError('FUTURE_ENTRY_DATE'): If entry_date is in the future
        """
        if quantity <= 0:
            raise StockError('INVALID_QUANTITY', requested=quantity)

        now = timezone.now()
        entry = entry_date or now
        if entry > now:
            raise StockError('FUTURE_ENTRY_DATE', entry_date=entry.isoformat())

        thresholds = ThresholdResolver().for_product(product, warehouse.company)
        age, status = classify(entry, now, thresholds)

        with transaction.atomic():
            batch = StockBatch.objects.create(
                company=warehouse.company,
                batch_id=batch_id or _new_batch_id(),
                product_type=ContentType.objects.get_for_model(product),
                product_id=product.pk,
                warehouse=warehouse,
                quantity_received=quantity,
                quantity_available=0,
                entry_date=entry,
                expiry_date=expiry_date,
                age_in_days=age,
                status=status,
                created_by=user,
            )
            for url in photos:
                EntryPhoto.objects.create(batch=batch, url=url, uploaded_by=user)

            StockMovement.objects.create(
                batch=batch,
                movement_type=MovementType.IN,
                delta=quantity,
                reason=reason,
                photos=[{'url': url, 'type': 'entry'} for url in photos],
                timestamp=entry,
                performed_by=user,
            )

            batch.refresh_from_db()
            logger.info(
                "stock.receive",
                extra={
                    "product": str(product),
                    "qty": quantity,
                    "warehouse": warehouse.code,
                    "batch_id": batch.batch_id,
                    "status": batch.status,
                },
            )
            return batch

    @classmethod
    def _take(cls, quantity: int, batch: StockBatch) -> StockBatch:
        """Lock batch and check availability. Must run inside atomic()."""
        if quantity <= 0:
            raise StockError('INVALID_QUANTITY', requested=quantity)

        locked = StockBatch.objects.select_for_update().get(pk=batch.pk)
        if locked.quantity_available < quantity:
            raise StockError(
                'INSUFFICIENT_QUANTITY',
                available=locked.quantity_available,
                requested=quantity,
            )
        return locked

    @classmethod
    def issue(cls, quantity: int, batch: StockBatch, user=None,
              reason: str | None = None, customer_name: str | None = None,
              order_reference: str | None = None, photo: str | None = None,
              timestamp: datetime | None = None) -> StockMovement:
        """
        Stock exit (sale or dispatch).

        Raises:
            StockError('INSUFFICIENT_QUANTITY'): If quantity > batch.quantity_available
            StockError('INVALID_QUANTITY'): If quantity <= 0
        """
        if reason is None:
            ref = f" ({order_reference})" if order_reference else ""
            reason = f"Venda para {customer_name}{ref}" if customer_name else f"Saída{ref}"

        with transaction.atomic():
            locked = cls._take(quantity, batch)
            move = StockMovement.objects.create(
                batch=locked,
                movement_type=MovementType.OUT,
                delta=-quantity,
                reason=reason,
                photos=_photo(photo, 'exit'),
                metadata={
                    k: v for k, v in {
                        'customer_name': customer_name,
                        'order_reference': order_reference,
                    }.items() if v
                },
                timestamp=timestamp or timezone.now(),
                performed_by=user,
            )
            logger.info(
                "stock.issue",
                extra={"batch_id": locked.batch_id, "qty": quantity, "reason": reason},
            )
            return move

    @classmethod
    def record_damage(cls, quantity: int, batch: StockBatch, reason: str,
                      user=None, photo: str | None = None) -> StockMovement:
        """
        Damaged units leave the available quantity and count as damaged.

        Raises:
            StockError('REASON_REQUIRED'): If reason is empty
        """
        if not reason:
            raise StockError('REASON_REQUIRED')

        with transaction.atomic():
            locked = cls._take(quantity, batch)
            move = StockMovement.objects.create(
                batch=locked,
                movement_type=MovementType.DAMAGE,
                delta=-quantity,
                reason=reason,
                photos=_photo(photo, 'damage'),
                performed_by=user,
            )
            logger.info(
                "stock.damage",
                extra={"batch_id": locked.batch_id, "qty": quantity, "reason": reason},
            )
            return move

    @classmethod
    def adjust(cls, batch: StockBatch, new_quantity: int, reason: str,
               user=None) -> StockMovement | None:
        """
        Inventory adjustment.

        Calculates delta automatically: new_quantity - quantity_available.
        new_quantity must stay within [0, quantity_received].

        Raises:
            StockError('REASON_REQUIRED'): If reason is empty
            StockError('INVALID_QUANTITY'): If new_quantity is out of range
        """
        if not reason:
            raise StockError('REASON_REQUIRED')

        with transaction.atomic():
            locked = StockBatch.objects.select_for_update().get(pk=batch.pk)
            if new_quantity < 0 or new_quantity > locked.quantity_received:
                raise StockError(
                    'INVALID_QUANTITY',
                    requested=new_quantity,
                    received=locked.quantity_received,
                )

            delta = new_quantity - locked.quantity_available
            if delta == 0:
                return None

            move = StockMovement.objects.create(
                batch=locked,
                movement_type=MovementType.ADJUSTMENT,
                delta=delta,
                reason=f"Ajuste: {reason}",
                performed_by=user,
            )
            logger.info(
                "stock.adjust",
                extra={"batch_id": locked.batch_id, "delta": delta, "reason": reason},
            )
            return move

    @classmethod
    def transfer(cls, quantity: int, batch: StockBatch, to_warehouse: Warehouse,
                 user=None, reason: str = 'Transferência entre armazéns',
                 vehicle_number: str = '', driver_name: str = '',
                 driver_phone: str = '', expected_delivery: datetime | None = None,
                 exit_photo: str | None = None,
                 entry_photo: str | None = None) -> StockMovement:
        """
        Move units of a batch to another warehouse of the same company.

        The destination batch keeps the source batch_id, entry_date and
        expiry_date, so the goods keep aging from their original receipt.
        A TRANSFER movement is written on the source and an IN movement on
        the destination. The transfer is COMPLETED when an entry photo is
        given, IN_TRANSIT otherwise.

        Raises:
            StockError('SAME_WAREHOUSE'): If destination is the source warehouse
            StockError('WAREHOUSE_MISMATCH'): If destination belongs to another company
            StockError('CAPACITY_EXCEEDED'): If destination capacity would overflow
            StockError('INSUFFICIENT_QUANTITY'): If quantity > available
        """
        if to_warehouse.pk == batch.warehouse_id:
            raise StockError('SAME_WAREHOUSE', warehouse=to_warehouse.code)
        if to_warehouse.company != batch.company:
            raise StockError(
                'WAREHOUSE_MISMATCH',
                warehouse=to_warehouse.code,
                company=batch.company,
            )

        now = timezone.now()

        with transaction.atomic():
            source = cls._take(quantity, batch)
            destination_wh = Warehouse.objects.select_for_update().get(pk=to_warehouse.pk)

            if destination_wh.capacity is not None:
                free = destination_wh.capacity - destination_wh.occupancy()
                if quantity > free:
                    raise StockError(
                        'CAPACITY_EXCEEDED',
                        available=max(free, 0),
                        requested=quantity,
                    )

            destination, created = StockBatch.objects.select_for_update().get_or_create(
                warehouse=destination_wh,
                batch_id=source.batch_id,
                defaults={
                    'company': source.company,
                    'product_type_id': source.product_type_id,
                    'product_id': source.product_id,
                    'quantity_received': 0,
                    'quantity_available': 0,
                    'entry_date': source.entry_date,
                    'expiry_date': source.expiry_date,
                    'age_in_days': source.age_in_days,
                    'status': source.status,
                    'created_by': user,
                },
            )
            StockBatch.objects.filter(pk=destination.pk).update(
                quantity_received=F('quantity_received') + quantity,
            )
            if entry_photo:
                EntryPhoto.objects.create(batch=destination, url=entry_photo, uploaded_by=user)

            completed = bool(entry_photo)
            move = StockMovement.objects.create(
                batch=source,
                movement_type=MovementType.TRANSFER,
                delta=-quantity,
                reason=reason,
                photos=_photo(exit_photo, 'exit') + _photo(entry_photo, 'entry'),
                metadata={
                    'unit_price': str(source.unit_price),
                    'total_value': str(quantity * source.unit_price),
                },
                source_warehouse_id=source.warehouse_id,
                destination_warehouse=destination_wh,
                destination_batch=destination,
                transport_details={
                    'vehicle_number': vehicle_number,
                    'driver_name': driver_name,
                    'driver_phone': driver_phone,
                    'expected_delivery': expected_delivery.isoformat() if expected_delivery else None,
                },
                transfer_status=TransferStatus.COMPLETED if completed else TransferStatus.IN_TRANSIT,
                completed_at=now if completed else None,
                completed_by=user if completed else None,
                timestamp=now,
                performed_by=user,
            )
            StockMovement.objects.create(
                batch=destination,
                movement_type=MovementType.IN,
                delta=quantity,
                reason=f"Transferência de {source.warehouse.name}",
                photos=_photo(entry_photo, 'entry'),
                metadata={'transfer_id': move.pk},
                timestamp=now,
                performed_by=user,
            )
            logger.info(
                "stock.transfer",
                extra={
                    "batch_id": source.batch_id,
                    "qty": quantity,
                    "from": source.warehouse_id,
                    "to": destination_wh.pk,
                    "created_destination": created,
                },
            )
            return move

    @classmethod
    def complete_transfer(cls, movement: StockMovement, user=None,
                          entry_photo: str | None = None) -> StockMovement:
        """
        Mark an IN_TRANSIT transfer as COMPLETED.

        Raises:
            StockError('INVALID_TRANSFER'): If not an in-transit transfer
        """
        now = timezone.now()
        with transaction.atomic():
            rows = StockMovement.objects.filter(
                pk=movement.pk,
                movement_type=MovementType.TRANSFER,
                transfer_status=TransferStatus.IN_TRANSIT,
            ).update(
                transfer_status=TransferStatus.COMPLETED,
                completed_at=now,
                completed_by=user,
            )
            if rows != 1:
                raise StockError('INVALID_TRANSFER', movement_id=movement.pk)

            if entry_photo and movement.destination_batch_id:
                EntryPhoto.objects.create(
                    batch_id=movement.destination_batch_id,
                    url=entry_photo,
                    uploaded_by=user,
                )

        logger.info("stock.transfer.completed", extra={"movement_id": movement.pk})
        return StockMovement.objects.get(pk=movement.pk)
