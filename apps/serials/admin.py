# ==========================================
# apps/serials/admin.py
# ==========================================

from django.contrib import admin
from .models import SerialRecord, SerialStatus


@admin.register(SerialRecord)
class SerialRecordAdmin(admin.ModelAdmin):
    """Admin interface for registered serials, with status transitions."""

    list_display = [
        'serial_number',
        'installer',
        'installation_date',
        'status',
        'city',
        'customer_rating',
        'created_at',
    ]
    list_filter = ['status', 'city', 'installation_date']
    search_fields = ['serial_number', 'installer__email', 'installer__loyalty_card_id', 'customer_name']
    readonly_fields = ['created_at', 'updated_at']
    raw_id_fields = ['installer']
    date_hierarchy = 'installation_date'

    actions = ['mark_inactive', 'mark_active']

    @admin.action(description='Deactivate selected serials')
    def mark_inactive(self, request, queryset):
        count = queryset.update(status=SerialStatus.INACTIVE)
        self.message_user(request, f'Deactivated {count} serial(s).')

    @admin.action(description='Reactivate selected serials')
    def mark_active(self, request, queryset):
        count = queryset.update(status=SerialStatus.ACTIVE)
        self.message_user(request, f'Reactivated {count} serial(s).')
