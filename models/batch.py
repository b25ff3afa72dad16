"""
StockBatch model — one product received into one warehouse at one time.

The batch is the unit of aging: each one carries its own entry date,
and the daily reclassification run derives its age and health status.

Usage:
    batch = stock.receive(40, notebook, central, user=user)
    batch.age_in_days   # 0
    batch.status        # 'healthy'
"""

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockwatch.models.enums import HealthStatus


class StockBatchQuerySet(models.QuerySet):
    """Custom QuerySet for StockBatch with convenience filters."""

    def for_company(self, company: str):
        return self.filter(company=company)

    def in_stock(self):
        """Batches with remaining available quantity."""
        return self.filter(quantity_available__gt=0)

    def with_status(self, status):
        return self.filter(status=status)

    def expiring_before(self, date):
        """Batches expiring on or before the given date."""
        return self.filter(expiry_date__lte=date, expiry_date__isnull=False)

    def for_product(self, product):
        """Filter batches for a specific product."""
        ct = ContentType.objects.get_for_model(product)
        return self.filter(product_type=ct, product_id=product.pk)


class StockBatch(models.Model):
    """
    Batch of stock with its own aging clock.

    Rules:
    - quantity_available only changes through StockMovement
    - 0 <= quantity_available <= quantity_received
    - age_in_days/status are derived by the reclassification run, never edited
    - Exhausted batches are kept (quantity_available=0) for audit history
    """

    company = models.CharField(
        max_length=64,
        db_index=True,
        verbose_name=_('Empresa'),
    )

    # Batch identifier (shared by the source and destination of a transfer)
    batch_id = models.CharField(
        max_length=50,
        verbose_name=_('Código do Lote'),
    )

    # Product reference (generic — works with any product model)
    product_type = models.ForeignKey(
        ContentType,
        on_delete=models.PROTECT,
        verbose_name=_('Tipo de Produto'),
    )
    product_id = models.PositiveIntegerField(verbose_name=_('ID do Produto'))
    product = GenericForeignKey('product_type', 'product_id')

    warehouse = models.ForeignKey(
        'stockwatch.Warehouse',
        on_delete=models.PROTECT,
        related_name='batches',
        verbose_name=_('Armazém'),
    )

    # Quantities
    quantity_received = models.PositiveIntegerField(verbose_name=_('Quantidade Recebida'))
    quantity_available = models.PositiveIntegerField(verbose_name=_('Quantidade Disponível'))
    quantity_damaged = models.PositiveIntegerField(default=0, verbose_name=_('Quantidade Avariada'))

    # Dates
    entry_date = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        verbose_name=_('Data de Entrada'),
    )
    expiry_date = models.DateField(
        null=True,
        blank=True,
        db_index=True,
        verbose_name=_('Data de Validade'),
    )

    # Derived by the reclassification run
    age_in_days = models.PositiveIntegerField(default=0, verbose_name=_('Idade (dias)'))
    status = models.CharField(
        max_length=20,
        choices=HealthStatus.choices,
        default=HealthStatus.HEALTHY,
        db_index=True,
        verbose_name=_('Situação'),
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Criado por'),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_('Criado em'))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_('Atualizado em'))

    objects = StockBatchQuerySet.as_manager()

    class Meta:
        verbose_name = _('Lote')
        verbose_name_plural = _('Lotes')
        ordering = ['entry_date']
        constraints = [
            models.UniqueConstraint(
                fields=['warehouse', 'batch_id'],
                name='unique_batch_per_warehouse',
            ),
            models.CheckConstraint(
                condition=models.Q(quantity_available__lte=models.F('quantity_received')),
                name='batch_available_lte_received',
            ),
        ]
        indexes = [
            models.Index(fields=['product_type', 'product_id'], name='batch_product_idx'),
            models.Index(fields=['company', 'status'], name='batch_company_status_idx'),
        ]

    @property
    def unit_price(self):
        """Product unit price (0 when the product doesn't expose one)."""
        return getattr(self.product, 'unit_price', None) or 0

    @property
    def value(self):
        """Value currently locked in this batch."""
        return self.quantity_available * self.unit_price

    @property
    def is_expired(self) -> bool:
        if self.expiry_date is None:
            return False
        return timezone.localdate() > self.expiry_date

    def __str__(self) -> str:
        return f"Lote {self.batch_id} @ {self.warehouse_id}: {self.quantity_available}"


class EntryPhoto(models.Model):
    """Photographic evidence captured when the batch was received."""

    batch = models.ForeignKey(
        StockBatch,
        on_delete=models.CASCADE,
        related_name='entry_photos',
        verbose_name=_('Lote'),
    )
    url = models.URLField(max_length=500, verbose_name=_('URL'))
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Enviado por'),
    )
    timestamp = models.DateTimeField(default=timezone.now, verbose_name=_('Data/Hora'))

    class Meta:
        verbose_name = _('Foto de Entrada')
        verbose_name_plural = _('Fotos de Entrada')
        ordering = ['timestamp']

    def __str__(self) -> str:
        return self.url
