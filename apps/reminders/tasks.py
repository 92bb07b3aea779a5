import logging

from celery import shared_task
from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.core.notifications import notify
from .models import Reminder

logger = logging.getLogger(__name__)


def _digest_lines(title, reminders):
    lines = [f'{title}:']
    for reminder in reminders:
        due = timezone.localtime(reminder.due_date)
        contact = f' ({reminder.contact.name})' if reminder.contact else ''
        lines.append(f'  - {reminder.title}{contact}, due {due:%Y-%m-%d %H:%M}, {reminder.get_priority_display()} priority')
    return lines


@shared_task
def send_reminder_digest():
    """
    E-mail each active user their pending reminders due today and overdue
    Scheduled in config/celery.py
    """
    today = timezone.localdate()
    sent = 0

    for user in get_user_model().objects.filter(is_active=True):
        reminders = Reminder.objects.filter(owner=user).select_related('contact').order_by('due_date')
        due_today = list(reminders.due_today(today))
        overdue = list(reminders.overdue(today))

        if not due_today and not overdue:
            continue

        lines = [f'Hi {user.first_name or user.email},', '']
        if overdue:
            lines += _digest_lines('Overdue', overdue) + ['']
        if due_today:
            lines += _digest_lines('Due today', due_today) + ['']

        if notify(user, 'reminder', f'{len(due_today)} due today, {len(overdue)} overdue', '\n'.join(lines)):
            sent += 1

    logger.info("Reminder digest sent to %d user(s)", sent)
    return f'{sent} reminder digests sent.'
