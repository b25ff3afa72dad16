"""
Alert model — one notification per (batch, kind) while outstanding.

LIFECYCLE:

    ┌──────┐  acknowledge()  ┌──────────────┐   resolve()   ┌──────────┐
    │ OPEN │ ──────────────► │ ACKNOWLEDGED │ ────────────► │ RESOLVED │
    └──────┘                 └──────────────┘               └──────────┘
       │  dismiss()                 │ dismiss()                  ▲
       ▼                            ▼                            │
    ┌─────────────────────────────────────┐      resolve()      │
    │              DISMISSED              │ ────────────────────┘
    └─────────────────────────────────────┘

At most one OPEN/ACKNOWLEDGED alert may exist for a given (batch, kind).
The emitter checks before inserting, and the partial unique constraint
below rejects the insert when two runs race past that check.

Alerts are never closed automatically, even if the batch later goes back
to healthy. Someone has to resolve or dismiss them.
"""

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models
from django.utils.translation import gettext_lazy as _

from stockwatch.models.enums import AlertKind, AlertSeverity, AlertStatus


class AlertQuerySet(models.QuerySet):

    def for_company(self, company: str):
        return self.filter(company=company)

    def outstanding(self):
        """Alerts still waiting for someone (open or acknowledged)."""
        return self.filter(status__in=AlertStatus.outstanding())


class Alert(models.Model):
    """Notification raised for a batch (dead, aging, expiring...)."""

    company = models.CharField(
        max_length=64,
        db_index=True,
        verbose_name=_('Empresa'),
    )
    batch = models.ForeignKey(
        'stockwatch.StockBatch',
        on_delete=models.PROTECT,
        related_name='alerts',
        verbose_name=_('Lote'),
    )

    # Snapshot of the batch's product/warehouse at emission
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
        related_name='alerts',
        verbose_name=_('Armazém'),
    )

    kind = models.CharField(
        max_length=20,
        choices=AlertKind.choices,
        verbose_name=_('Tipo'),
    )
    severity = models.CharField(
        max_length=10,
        choices=AlertSeverity.choices,
        verbose_name=_('Severidade'),
    )
    title = models.CharField(max_length=200, verbose_name=_('Título'))
    message = models.TextField(verbose_name=_('Mensagem'))
    recommendation = models.TextField(verbose_name=_('Recomendação'))

    status = models.CharField(
        max_length=20,
        choices=AlertStatus.choices,
        default=AlertStatus.OPEN,
        db_index=True,
        verbose_name=_('Status'),
    )

    # Lifecycle tracking
    acknowledged_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Reconhecido por'),
    )
    acknowledged_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Reconhecido em'))
    dismissed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Descartado por'),
    )
    dismissed_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Descartado em'))
    resolved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Resolvido por'),
    )
    resolved_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Resolvido em'))
    resolved_notes = models.TextField(blank=True, default='', verbose_name=_('Notas da resolução'))

    # Age, quantity, value... at emission time
    metadata = models.JSONField(default=dict, blank=True, verbose_name=_('Metadados'))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_('Criado em'))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_('Atualizado em'))

    objects = AlertQuerySet.as_manager()

    class Meta:
        verbose_name = _('Alerta')
        verbose_name_plural = _('Alertas')
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['batch', 'kind'],
                condition=models.Q(status__in=['open', 'acknowledged']),
                name='unique_outstanding_alert_per_batch_kind',
            ),
        ]
        indexes = [
            models.Index(fields=['company', 'status'], name='alert_company_status_idx'),
            models.Index(fields=['kind', 'severity'], name='alert_kind_severity_idx'),
            models.Index(fields=['-created_at'], name='alert_created_idx'),
        ]

    @property
    def is_outstanding(self) -> bool:
        return self.status in AlertStatus.outstanding()

    def __str__(self) -> str:
        return f"[{self.severity}] {self.title} ({self.status})"
