from django.contrib import admin

from .models import Contact


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):

    list_display = ['id', 'name', 'phone', 'email', 'company', 'owner', 'created_at']
    list_filter = ['created_at', 'tags']
    search_fields = ['name', 'phone', 'email', 'company', 'owner__email']
    ordering = ['-created_at']
    list_per_page = 50
    date_hierarchy = 'created_at'
    list_select_related = ['owner']
    raw_id_fields = ['owner']

    fieldsets = [
        ('Basic Information', {
            'fields': ['owner', 'name', 'phone', 'whatsapp', 'email', 'company']
        }),
        ('Additional Info', {
            'fields': ['notes', 'tags'],
            'classes': ['collapse'],
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse'],
        }),
    ]

    readonly_fields = ['created_at', 'updated_at']
