# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User, InstallerStatus


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for installers and administrators.

    Provides:
    - Installer listing with review status and loyalty card
    - Filtering by role and status
    - Bulk approve / suspend actions
    """

    list_display = [
        'email',
        'display_name',
        'loyalty_card_id',
        'city',
        'role',
        'status_badge',
        'created_at',
        'last_login',
    ]

    list_filter = [
        'role',
        'status',
        'is_active',
        'city',
        'created_at',
    ]

    search_fields = [
        'email',
        'display_name',
        'loyalty_card_id',
        'phone',
    ]

    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'display_name', 'phone', 'city', 'password')
        }),
        ('Program', {
            'fields': ('role', 'status', 'loyalty_card_id', 'average_rating'),
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'role', 'password1', 'password2'),
        }),
    )

    readonly_fields = [
        'loyalty_card_id',
        'created_at',
        'last_login',
    ]

    filter_horizontal = ['groups', 'user_permissions']

    def status_badge(self, obj):
        """Display review status as colored badge."""
        colors = {
            InstallerStatus.PENDING: ('#E5C49A', '#2C1810'),
            InstallerStatus.APPROVED: ('#6B8E5E', 'white'),
            InstallerStatus.SUSPENDED: ('#B85C5C', 'white'),
        }
        bg, fg = colors.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    actions = ['approve_installers', 'suspend_installers']

    @admin.action(description='Approve selected installers')
    def approve_installers(self, request, queryset):
        count = queryset.update(status=InstallerStatus.APPROVED)
        self.message_user(request, f'Approved {count} installer(s).')

    @admin.action(description='Suspend selected installers')
    def suspend_installers(self, request, queryset):
        """Suspend selected installers (excludes superusers for safety)."""
        safe_queryset = queryset.filter(is_superuser=False)
        count = safe_queryset.update(status=InstallerStatus.SUSPENDED)
        skipped = queryset.count() - count
        msg = f'Suspended {count} installer(s).'
        if skipped:
            msg += f' Skipped {skipped} superuser(s) for safety.'
        self.message_user(request, msg)
