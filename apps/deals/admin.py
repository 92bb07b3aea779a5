from django.contrib import admin
from django.utils.html import format_html

from .models import Deal


@admin.register(Deal)
class DealAdmin(admin.ModelAdmin):

    list_display = ['id', 'title', 'contact', 'value', 'status_badge', 'expected_close_date', 'owner', 'created_at']
    list_filter = ['status', 'created_at', 'expected_close_date']
    search_fields = ['title', 'description', 'contact__name', 'owner__email']
    ordering = ['-created_at']
    list_per_page = 50
    date_hierarchy = 'created_at'
    list_select_related = ['contact', 'owner']
    raw_id_fields = ['owner', 'contact']
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = [
        ('Deal', {
            'fields': ['owner', 'contact', 'title', 'value', 'status', 'expected_close_date']
        }),
        ('Details', {
            'fields': ['description'],
            'classes': ['collapse'],
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse'],
        }),
    ]

    STATUS_COLORS = {
        'new': '#3b82f6',
        'quoted': '#eab308',
        'negotiating': '#8b5cf6',
        'won': '#22c55e',
        'lost': '#ef4444',
    }

    def status_badge(self, obj):
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; '
            'border-radius: 3px; font-size: 11px;">{}</span>',
            self.STATUS_COLORS.get(obj.status, '#6b7280'),
            obj.get_status_display()
        )

    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'
