from apps.core.importing import SheetConfig
from apps.core.spreadsheets import ColumnMapping, to_choice, to_datetime

from .models import Reminder


class ReminderSheet(SheetConfig):
    entity = 'reminders'
    verbose_name = 'reminders'

    mappings = [
        ColumnMapping('title', 'Title', required=True),
        ColumnMapping('description', 'Description'),
        ColumnMapping('due_date', 'Due Date', required=True, transform=to_datetime),
        ColumnMapping('priority', 'Priority', transform=to_choice(Reminder.PRIORITY_CHOICES, 'medium')),
    ]

    export_columns = [
        ('Title', 'title'),
        ('Description', 'description'),
        ('Due Date', 'due_date'),
        ('Priority', lambda reminder: reminder.get_priority_display()),
        ('Completed', lambda reminder: 'Yes' if reminder.is_completed else 'No'),
        ('Contact', 'contact.name'),
    ]

    template_example = ['Follow up with client', 'Discuss the proposal', '2024-03-15 10:00', 'high']

    list_url = 'reminders:reminder_list'
    upload_url = 'reminders:reminder_import'
    mapping_url = 'reminders:reminder_import_map'
    template_url = 'reminders:reminder_template'

    def get_queryset(self, request):
        return Reminder.objects.filter(owner=request.user).select_related('contact').order_by('due_date')

    def build_object(self, owner, record):
        return Reminder(
            owner=owner,
            title=record['title'],
            description=record.get('description', ''),
            due_date=record['due_date'],
            priority=record.get('priority', 'medium'),
        )
