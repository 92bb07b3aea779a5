# Celery runs the CRM's periodic background jobs:
#
# - Mark unpaid invoices as overdue once their due date passes
# - E-mail each user a digest of today's and overdue reminders
#
# Start worker: celery -A config worker -l info
# Start beat: celery -A config beat -l info
# ==============================================================================

import os
from celery import Celery
from celery.schedules import crontab

# Ensure Celery uses the same settings as Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('crm')

# All settings prefixed with 'CELERY_' are used
# Example: CELERY_BROKER_URL, CELERY_RESULT_BACKEND
app.config_from_object('django.conf:settings', namespace='CELERY')

# Looks for tasks.py in each installed app
# Example: apps/invoices/tasks.py, apps/reminders/tasks.py
app.autodiscover_tasks()


# CELERY BEAT SCHEDULE (Periodic Tasks)

app.conf.beat_schedule = {
    # Flip sent invoices past their due date to overdue
    'mark-overdue-invoices': {
        'task': 'apps.invoices.tasks.mark_overdue_invoices',
        'schedule': crontab(minute=0),  # Every hour at minute 0
    },

    # Morning reminder digest
    'send-reminder-digest': {
        'task': 'apps.reminders.tasks.send_reminder_digest',
        'schedule': crontab(hour=8, minute=0),  # Every day at 8:00 AM
    },
}


# CELERY TASK ANNOTATIONS

app.conf.task_annotations = {
    # Digest sends one e-mail per user; keep the SMTP server happy
    'apps.reminders.tasks.send_reminder_digest': {
        'rate_limit': '10/m',
    },
}


@app.task(bind=True, ignore_result=True)
def debug_task(self):
    """
    Debug task to test Celery is working

    Usage:
        from config.celery import debug_task
        debug_task.delay()
    """
    print(f'Request: {self.request!r}')
