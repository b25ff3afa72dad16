"""Django app configuration for Stockwatch."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class StockwatchConfig(AppConfig):
    """Configuration for Stockwatch app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "stockwatch"
    verbose_name = _("Envelhecimento de Estoque")
