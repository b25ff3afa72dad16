"""
StockMovement model — Immutable ledger of batch quantity changes.
"""

from django.conf import settings
from django.db import models, transaction
from django.db.models import F
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockwatch.models.enums import MovementType, TransferStatus


class StockMovement(models.Model):
    """
    Immutable record of a change to a batch's available quantity.

    Rules:
    - NEVER update() or delete() (transfer completion is the one exception,
      handled by the transfer service through a queryset update)
    - Corrections are new movements of type ADJUSTMENT
    - Updates StockBatch.quantity_available atomically on save()

    This is the ONLY model that changes batch quantity.
    """

    batch = models.ForeignKey(
        'stockwatch.StockBatch',
        on_delete=models.PROTECT,
        related_name='movements',
        verbose_name=_('Lote'),
    )
    movement_type = models.CharField(
        max_length=20,
        choices=MovementType.choices,
        verbose_name=_('Tipo'),
    )
    delta = models.IntegerField(
        verbose_name=_('Variação'),
        help_text=_('Positivo = entrada, Negativo = saída'),
    )
    reason = models.CharField(
        max_length=255,
        verbose_name=_('Motivo'),
        help_text=_('Obrigatório. Ex: "Venda para Cliente X", "Avaria no transporte"'),
    )
    photos = models.JSONField(
        default=list,
        blank=True,
        verbose_name=_('Fotos'),
        help_text=_('Lista de {"url": ..., "type": "entry|exit|damage"}'),
    )
    metadata = models.JSONField(default=dict, blank=True, verbose_name=_('Metadados'))

    # Transfer-only fields
    source_warehouse = models.ForeignKey(
        'stockwatch.Warehouse',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Armazém de Origem'),
    )
    destination_warehouse = models.ForeignKey(
        'stockwatch.Warehouse',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Armazém de Destino'),
    )
    destination_batch = models.ForeignKey(
        'stockwatch.StockBatch',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='inbound_transfers',
        verbose_name=_('Lote de Destino'),
    )
    transport_details = models.JSONField(
        default=dict,
        blank=True,
        verbose_name=_('Transporte'),
        help_text=_('vehicle_number, driver_name, driver_phone, expected_delivery'),
    )
    transfer_status = models.CharField(
        max_length=20,
        choices=TransferStatus.choices,
        blank=True,
        default='',
        verbose_name=_('Status da Transferência'),
    )
    completed_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Concluída em'))
    completed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Concluída por'),
    )

    timestamp = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Data/Hora'))
    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Usuário'),
    )

    class Meta:
        verbose_name = _('Movimento')
        verbose_name_plural = _('Movimentos')
        ordering = ['timestamp']
        indexes = [
            models.Index(fields=['batch', 'timestamp'], name='movement_batch_ts_idx'),
            models.Index(fields=['timestamp'], name='movement_ts_idx'),
        ]

    @property
    def quantity(self) -> int:
        return abs(self.delta)

    def save(self, *args, **kwargs):
        """Save movement and update the batch cache atomically."""
        if self.pk:
            raise ValueError(
                "Movimentos são imutáveis. "
                "Para corrigir, crie um novo movimento de ajuste."
            )

        if not self.reason:
            raise ValueError("Motivo é obrigatório")

        with transaction.atomic():
            super().save(*args, **kwargs)

            from stockwatch.models.batch import StockBatch

            changes = {
                'quantity_available': F('quantity_available') + self.delta,
                'updated_at': timezone.now(),
            }
            if self.movement_type == MovementType.DAMAGE:
                changes['quantity_damaged'] = F('quantity_damaged') - self.delta
            StockBatch.objects.filter(pk=self.batch_id).update(**changes)

    def delete(self, *args, **kwargs):
        """Prevent deletion — movements are immutable."""
        raise ValueError(
            "Movimentos são imutáveis. "
            "Para estornar, crie um novo movimento de ajuste."
        )

    def __str__(self) -> str:
        signal = '+' if self.delta > 0 else ''
        return f"{self.movement_type} {signal}{self.delta} | {self.reason}"
