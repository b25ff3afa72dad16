"""
Enums for Stockwatch models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class HealthStatus(models.TextChoices):
    """
    Derived staleness of a batch, recomputed on every reclassification.

    Normal aging only moves forward (HEALTHY → AT_RISK → DEAD), but the
    status is never validated as a transition: a date correction may
    legitimately move it back.
    """
    HEALTHY = 'healthy', _('Saudável')
    AT_RISK = 'at_risk', _('Em risco')
    DEAD = 'dead', _('Parado')


class AlertKind(models.TextChoices):
    """Category of notification tied to a batch."""
    DEAD_INVENTORY = 'dead_inventory', _('Estoque parado')
    AGING = 'aging', _('Envelhecimento')
    LOW_STOCK = 'low_stock', _('Estoque baixo')
    EXPIRY_WARNING = 'expiry_warning', _('Validade próxima')


class AlertSeverity(models.TextChoices):
    CRITICAL = 'critical', _('Crítico')
    WARNING = 'warning', _('Atenção')
    INFO = 'info', _('Informativo')


class AlertStatus(models.TextChoices):
    """Alert lifecycle status."""
    OPEN = 'open', _('Aberto')                   # Created by the emitter
    ACKNOWLEDGED = 'acknowledged', _('Ciente')   # Someone is on it
    DISMISSED = 'dismissed', _('Descartado')     # Not worth acting on
    RESOLVED = 'resolved', _('Resolvido')        # Cause handled

    @classmethod
    def outstanding(cls) -> list[str]:
        """Statuses that block a new alert for the same (batch, kind)."""
        return [cls.OPEN, cls.ACKNOWLEDGED]


class MovementType(models.TextChoices):
    """Kind of ledger entry."""
    IN = 'in', _('Entrada')
    OUT = 'out', _('Saída')
    TRANSFER = 'transfer', _('Transferência')
    DAMAGE = 'damage', _('Avaria')
    ADJUSTMENT = 'adjustment', _('Ajuste')


class TransferStatus(models.TextChoices):
    IN_TRANSIT = 'in_transit', _('Em trânsito')
    COMPLETED = 'completed', _('Concluída')
