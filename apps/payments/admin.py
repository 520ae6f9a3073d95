# ==========================================
# apps/payments/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from apps.payments.models import Payment, PaymentStatus


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Admin interface for payments."""

    list_display = [
        'installer',
        'payment_type',
        'milestone_number',
        'amount',
        'currency',
        'status_badge',
        'requested_at',
        'paid_at',
    ]
    list_filter = ['payment_type', 'status', 'payment_method', 'requested_at']
    search_fields = ['installer__email', 'installer__loyalty_card_id', 'transaction_id', 'description']
    readonly_fields = [
        'requested_at',
        'updated_at',
        'approved_by',
        'approved_at',
        'rejected_by',
        'rejected_at',
        'paid_by',
        'paid_at',
    ]
    date_hierarchy = 'requested_at'

    def status_badge(self, obj):
        colors = {
            PaymentStatus.PENDING: ('#E5C49A', '#2C1810'),
            PaymentStatus.APPROVED: ('#5E7F8E', 'white'),
            PaymentStatus.PAID: ('#6B8E5E', 'white'),
            PaymentStatus.REJECTED: ('#B85C5C', 'white'),
            PaymentStatus.CANCELLED: ('#ccc', '#666'),
        }
        bg, fg = colors.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'
