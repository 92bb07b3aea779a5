#!/usr/bin/env python
# CRM - DJANGO MANAGEMENT SCRIPT
#
# Common commands:
# - python manage.py runserver          # Development server
# - python manage.py migrate            # Create / update the database tables
# - python manage.py createsuperuser    # Admin user
# - python manage.py test apps          # Whole test suite
#
# Background jobs (overdue invoices, reminder digest) run in Celery:
# - celery -A config worker -l info
# - celery -A config beat -l info
# ==============================================================================

import os
import sys


def main():
    """Run administrative tasks with config/settings.py"""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
