# ==========================================
# apps/promotions/admin.py
# ==========================================

from django.contrib import admin
from apps.promotions.models import Promotion, Participation


class ParticipationInline(admin.TabularInline):
    """Inline admin for promotion participants."""
    model = Participation
    extra = 0
    fields = [
        'installer',
        'status',
        'progress_current',
        'progress_target',
        'progress_percentage',
        'reward_status',
    ]
    readonly_fields = fields
    can_delete = False


@admin.register(Promotion)
class PromotionAdmin(admin.ModelAdmin):
    """Admin interface for promotions."""

    list_display = [
        'title',
        'type',
        'target_value',
        'reward_amount',
        'currency',
        'start_date',
        'end_date',
        'created_at',
    ]
    list_filter = ['type', 'target_period', 'new_installers_only', 'start_date']
    search_fields = ['title', 'description', 'reward_description']
    readonly_fields = ['created_by', 'created_at', 'updated_at']
    date_hierarchy = 'start_date'
    inlines = [ParticipationInline]

    def save_model(self, request, obj, form, change):
        if not change:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)


@admin.register(Participation)
class ParticipationAdmin(admin.ModelAdmin):
    """Admin interface for participations."""

    list_display = [
        'installer',
        'promotion',
        'status',
        'progress_current',
        'progress_target',
        'progress_percentage',
        'reward_status',
        'joined_at',
    ]
    list_filter = ['status', 'reward_status', 'promotion__type']
    search_fields = ['installer__email', 'installer__loyalty_card_id', 'promotion__title']
    readonly_fields = [
        'joined_at',
        'counting_start_date',
        'progress_current',
        'progress_target',
        'progress_percentage',
        'progress_valid_serials',
        'progress_rating',
        'progress_meets_quality',
        'completed_at',
        'version',
        'created_at',
        'updated_at',
    ]
