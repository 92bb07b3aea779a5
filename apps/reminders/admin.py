from django.contrib import admin
from django.utils import timezone

from .models import Reminder


@admin.register(Reminder)
class ReminderAdmin(admin.ModelAdmin):

    list_display = ['title', 'due_date', 'priority', 'is_completed', 'contact', 'owner']
    list_filter = ['is_completed', 'priority', 'due_date']
    search_fields = ['title', 'description', 'contact__name', 'owner__email']
    ordering = ['due_date']
    list_per_page = 50
    date_hierarchy = 'due_date'
    list_select_related = ['contact', 'owner']
    raw_id_fields = ['owner', 'contact', 'deal']
    readonly_fields = ['completed_at', 'created_at', 'updated_at']
    actions = ['mark_completed']

    @admin.action(description='Mark selected reminders as completed')
    def mark_completed(self, request, queryset):
        updated = queryset.filter(is_completed=False).update(is_completed=True, completed_at=timezone.now())
        self.message_user(request, f'{updated} reminder(s) marked as completed.')
