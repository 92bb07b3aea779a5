from django.contrib import admin
from django.utils.html import format_html

from .models import Invoice


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):

    list_display = ['invoice_number', 'contact', 'total', 'status_badge', 'due_date', 'paid_date', 'owner', 'created_at']
    list_filter = ['status', 'due_date', 'created_at']
    search_fields = ['invoice_number', 'contact__name', 'notes', 'owner__email']
    ordering = ['-created_at']
    list_per_page = 50
    date_hierarchy = 'due_date'
    list_select_related = ['contact', 'owner']
    raw_id_fields = ['owner', 'contact', 'deal']
    readonly_fields = ['amount', 'tax', 'total', 'paid_date', 'created_at', 'updated_at']

    fieldsets = [
        ('Invoice', {
            'fields': ['owner', 'invoice_number', 'contact', 'deal', 'status', 'due_date', 'paid_date']
        }),
        ('Items & Totals', {
            'fields': ['items', 'tax_rate', 'amount', 'tax', 'total']
        }),
        ('Notes', {
            'fields': ['notes'],
            'classes': ['collapse'],
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse'],
        }),
    ]

    STATUS_COLORS = {
        'draft': '#6b7280',
        'sent': '#3b82f6',
        'paid': '#22c55e',
        'overdue': '#ef4444',
        'cancelled': '#9ca3af',
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
