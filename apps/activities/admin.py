from django.contrib import admin

from .models import Activity


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):

    list_display = ['created_at', 'owner', 'type', 'title', 'contact', 'deal']
    list_filter = ['type', 'created_at']
    search_fields = ['title', 'description', 'contact__name', 'deal__title']
    ordering = ['-created_at']
    list_select_related = ['owner', 'contact', 'deal']
    raw_id_fields = ['owner', 'contact', 'deal']
    readonly_fields = ['created_at']
