"""
Stockwatch Admin.

Provides views for production debugging:
- Warehouse: list + edit
- StockBatch: read-only (quantities, age, status)
- StockMovement: read-only audit trail
- Alert: read-only with acknowledge/resolve/dismiss actions
- AgingPolicy: per-company thresholds, editable
"""

import logging

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from stockwatch.exceptions import AlertError
from stockwatch.models import (
    AgingPolicy,
    Alert,
    AlertStatus,
    EntryPhoto,
    StockBatch,
    StockMovement,
    Warehouse,
)

logger = logging.getLogger(__name__)


class ReadOnlyAdminMixin:
    """Stock only changes via the Stock service."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# WAREHOUSE ADMIN
# =========================================================================

@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    """Warehouse admin — editable."""

    list_display = ['code', 'name', 'company', 'capacity', 'is_active']
    list_filter = ['company', 'is_active']
    search_fields = ['code', 'name']
    readonly_fields = ['created_at', 'updated_at']


# =========================================================================
# BATCH ADMIN (read-only)
# =========================================================================

class EntryPhotoInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = EntryPhoto
    extra = 0
    fields = ['url', 'uploaded_by', 'timestamp']
    readonly_fields = fields


@admin.register(StockBatch)
class StockBatchAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """StockBatch admin — read-only. Age and status come from reclassification."""

    list_display = ['batch_id', 'product_display', 'warehouse', 'company',
                    'quantity_available', 'age_in_days', 'status', 'expiry_date']
    list_filter = ['status', 'company', 'warehouse']
    search_fields = ['batch_id']
    readonly_fields = ['company', 'batch_id', 'product_type', 'product_id', 'warehouse',
                       'quantity_received', 'quantity_available', 'quantity_damaged',
                       'entry_date', 'expiry_date', 'age_in_days', 'status',
                       'created_by', 'created_at', 'updated_at']
    date_hierarchy = 'entry_date'
    ordering = ['-age_in_days']
    inlines = [EntryPhotoInline]

    @admin.display(description=_('Produto'))
    def product_display(self, obj):
        return str(obj.product) if obj.product else '?'


# =========================================================================
# MOVEMENT ADMIN (read-only audit trail)
# =========================================================================

@admin.register(StockMovement)
class StockMovementAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """StockMovement admin — read-only. Immutable audit trail."""

    list_display = ['timestamp', 'batch', 'movement_type', 'delta', 'reason',
                    'transfer_status', 'performed_by']
    list_filter = ['movement_type', 'transfer_status', 'timestamp']
    search_fields = ['reason', 'batch__batch_id']
    readonly_fields = ['batch', 'movement_type', 'delta', 'reason', 'photos', 'metadata',
                       'source_warehouse', 'destination_warehouse', 'destination_batch',
                       'transport_details', 'transfer_status', 'completed_at',
                       'completed_by', 'timestamp', 'performed_by']
    date_hierarchy = 'timestamp'


# =========================================================================
# ALERT ADMIN (read-only with lifecycle actions)
# =========================================================================

@admin.register(Alert)
class AlertAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Alert admin — read-only with acknowledge/resolve/dismiss actions."""

    list_display = ['created_at', 'title', 'kind', 'severity', 'status', 'company', 'warehouse']
    list_filter = ['status', 'kind', 'severity', 'company']
    search_fields = ['title', 'batch__batch_id']
    readonly_fields = ['company', 'batch', 'product_type', 'product_id', 'warehouse',
                       'kind', 'severity', 'title', 'message', 'recommendation', 'status',
                       'acknowledged_by', 'acknowledged_at', 'dismissed_by', 'dismissed_at',
                       'resolved_by', 'resolved_at', 'resolved_notes', 'metadata',
                       'created_at', 'updated_at']
    actions = ['acknowledge_alerts', 'resolve_alerts', 'dismiss_alerts']

    def _apply(self, request, queryset, action):
        from stockwatch import stock

        count = 0
        for alert in queryset:
            try:
                getattr(stock, action)(alert, request.user)
                count += 1
            except AlertError as exc:
                logger.warning("%s: alert %s skipped: %s", action, alert.pk, exc)
        return count

    @admin.action(description=_('Marcar como ciente'))
    def acknowledge_alerts(self, request, queryset):
        count = self._apply(request, queryset.filter(status=AlertStatus.OPEN), 'acknowledge')
        self.message_user(request, _('{count} alerta(s) reconhecido(s).').format(count=count))

    @admin.action(description=_('Resolver alertas selecionados'))
    def resolve_alerts(self, request, queryset):
        count = self._apply(request, queryset.exclude(status=AlertStatus.RESOLVED), 'resolve')
        self.message_user(request, _('{count} alerta(s) resolvido(s).').format(count=count))

    @admin.action(description=_('Descartar alertas selecionados'))
    def dismiss_alerts(self, request, queryset):
        count = self._apply(request, queryset.filter(status__in=AlertStatus.outstanding()), 'dismiss')
        self.message_user(request, _('{count} alerta(s) descartado(s).').format(count=count))


# =========================================================================
# AGING POLICY ADMIN
# =========================================================================

@admin.register(AgingPolicy)
class AgingPolicyAdmin(admin.ModelAdmin):
    """AgingPolicy admin — per-company thresholds."""

    list_display = ['company', 'at_risk_threshold_days', 'dead_threshold_days', 'updated_at']
    search_fields = ['company']
    readonly_fields = ['created_at', 'updated_at']
