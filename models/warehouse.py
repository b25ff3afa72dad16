"""
Warehouse model — Where stock batches are kept.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class WarehouseQuerySet(models.QuerySet):

    def for_company(self, company: str):
        return self.filter(company=company)

    def active(self):
        return self.filter(is_active=True)


class Warehouse(models.Model):
    """
    A physical storage location owned by one company.

    Warehouses are stable entities, created during company setup.

    Examples:
        Warehouse.objects.create(company='acme', code='central', name='Central', capacity=1000)
    """

    company = models.CharField(
        max_length=64,
        db_index=True,
        verbose_name=_('Empresa'),
    )
    code = models.SlugField(
        max_length=50,
        verbose_name=_('Código'),
        help_text=_('Identificador único na empresa (ex: central, filial-sp)'),
    )
    name = models.CharField(
        max_length=100,
        verbose_name=_('Nome'),
    )
    address = models.CharField(
        max_length=255,
        blank=True,
        default='',
        verbose_name=_('Endereço'),
    )
    capacity = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_('Capacidade'),
        help_text=_('Unidades. Vazio = sem limite.'),
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name=_('Ativo'),
    )
    metadata = models.JSONField(
        default=dict,
        blank=True,
        verbose_name=_('Metadados'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = WarehouseQuerySet.as_manager()

    class Meta:
        verbose_name = _('Armazém')
        verbose_name_plural = _('Armazéns')
        ordering = ['company', 'code']
        constraints = [
            models.UniqueConstraint(
                fields=['company', 'code'],
                name='unique_warehouse_code_per_company',
            ),
        ]

    def occupancy(self) -> int:
        """Units currently available across all batches kept here."""
        from django.db.models import Sum
        from django.db.models.functions import Coalesce

        return self.batches.aggregate(
            t=Coalesce(Sum('quantity_available'), 0)
        )['t']

    def __str__(self) -> str:
        return self.name
