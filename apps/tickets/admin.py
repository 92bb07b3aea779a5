from django.contrib import admin

from .models import Ticket, TicketMessage


class TicketMessageInline(admin.TabularInline):
    model = TicketMessage
    extra = 0
    fields = ['author', 'message', 'is_internal', 'created_at']
    readonly_fields = ['created_at']
    raw_id_fields = ['author']


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):

    list_display = ['ticket_number', 'subject', 'contact', 'status', 'priority', 'category', 'assigned_to', 'owner', 'created_at']
    list_filter = ['status', 'priority', 'category', 'created_at']
    search_fields = ['ticket_number', 'subject', 'description', 'contact__name', 'owner__email']
    ordering = ['-created_at']
    list_per_page = 50
    date_hierarchy = 'created_at'
    list_select_related = ['contact', 'owner']
    raw_id_fields = ['owner', 'contact']
    readonly_fields = ['ticket_number', 'resolved_at', 'created_at', 'updated_at']
    inlines = [TicketMessageInline]

    fieldsets = [
        ('Ticket', {
            'fields': ['owner', 'ticket_number', 'contact', 'subject', 'description']
        }),
        ('Handling', {
            'fields': ['status', 'priority', 'category', 'assigned_to', 'resolved_at']
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse'],
        }),
    ]
