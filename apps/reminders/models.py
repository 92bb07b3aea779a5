from django.db import models
from django.urls import reverse
from django.conf import settings
from django.utils import timezone


class ReminderQuerySet(models.QuerySet):
    """
    Filters behind the reminder list tabs

    'today' and 'overdue' only cover pending reminders and compare calendar
    dates in the current time zone, so a reminder due at 09:00 today is
    "today" all day long, never "overdue".
    """

    def pending(self):
        return self.filter(is_completed=False)

    def completed(self):
        return self.filter(is_completed=True)

    def due_today(self, today=None):
        today = today or timezone.localdate()
        return self.pending().filter(due_date__date=today)

    def overdue(self, today=None):
        today = today or timezone.localdate()
        return self.pending().filter(due_date__date__lt=today)

    def for_filter(self, name, today=None):
        if name == 'pending':
            return self.pending()
        if name == 'completed':
            return self.completed()
        if name == 'today':
            return self.due_today(today)
        if name == 'overdue':
            return self.overdue(today)
        return self.all()


class Reminder(models.Model):

    PRIORITY_CHOICES = [
        ('low', 'Low'),
        ('medium', 'Medium'),
        ('high', 'High'),
    ]

    FILTER_CHOICES = [
        ('all', 'All'),
        ('pending', 'Pending'),
        ('today', 'Today'),
        ('overdue', 'Overdue'),
        ('completed', 'Completed'),
    ]

    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='reminders')
    contact = models.ForeignKey('contacts.Contact', on_delete=models.SET_NULL, null=True, blank=True, related_name='reminders')
    deal = models.ForeignKey('deals.Deal', on_delete=models.SET_NULL, null=True, blank=True, related_name='reminders')

    title = models.CharField(max_length=200, help_text='What needs to be done')
    description = models.TextField(blank=True)
    due_date = models.DateTimeField(help_text='When it is due')
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='medium')

    is_completed = models.BooleanField(default=False, db_index=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ReminderQuerySet.as_manager()

    class Meta:
        verbose_name = 'Reminder'
        verbose_name_plural = 'Reminders'
        ordering = ['due_date']
        indexes = [
            models.Index(fields=['owner', 'is_completed', 'due_date'], name='reminder_owner_due_idx'),
        ]

    def __str__(self):
        return f"{self.title} ({self.due_date:%Y-%m-%d %H:%M})"

    def get_absolute_url(self):
        return reverse('reminders:reminder_edit', kwargs={'pk': self.pk})

    def is_overdue(self):
        return not self.is_completed and timezone.localtime(self.due_date).date() < timezone.localdate()

    def is_due_today(self):
        return not self.is_completed and timezone.localtime(self.due_date).date() == timezone.localdate()

    def toggle_complete(self):
        """Flip completion; completed_at is stamped on completion and cleared on re-open."""
        self.is_completed = not self.is_completed
        self.completed_at = timezone.now() if self.is_completed else None
        self.save(update_fields=['is_completed', 'completed_at', 'updated_at'])
        return self.is_completed
