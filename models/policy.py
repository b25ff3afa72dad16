"""
AgingPolicy model — per-company aging thresholds.

Companies that don't have a policy use the STOCKWATCH defaults.
"""

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _


class AgingPolicy(models.Model):
    """Aging thresholds for every batch of one company."""

    company = models.CharField(
        max_length=64,
        unique=True,
        verbose_name=_('Empresa'),
    )
    at_risk_threshold_days = models.PositiveIntegerField(
        default=60,
        verbose_name=_('Em risco a partir de (dias)'),
    )
    dead_threshold_days = models.PositiveIntegerField(
        default=90,
        verbose_name=_('Parado a partir de (dias)'),
        help_text=_('Deve ser maior que o limite de risco'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Política de Envelhecimento')
        verbose_name_plural = _('Políticas de Envelhecimento')
        constraints = [
            models.CheckConstraint(
                condition=models.Q(dead_threshold_days__gt=models.F('at_risk_threshold_days')),
                name='policy_dead_gt_at_risk',
            ),
        ]

    def clean(self):
        if self.dead_threshold_days <= self.at_risk_threshold_days:
            raise ValidationError(
                _('O limite de estoque parado deve ser maior que o limite de risco.')
            )

    def __str__(self) -> str:
        return f"{self.company}: {self.at_risk_threshold_days}/{self.dead_threshold_days}"
