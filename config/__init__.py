# ==============================================================================
# CRM - CONFIG PACKAGE INITIALIZER
# ==============================================================================

# Import Celery app so it is configured with Django settings
# and shared_task decorators bind to it when Django starts
from .celery import app as celery_app

# Allows importing as: from config import celery_app
__all__ = ('celery_app',)
