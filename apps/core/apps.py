from django.apps import AppConfig


class CoreConfig(AppConfig):
    """
    Configuration for Core application

    This app contains:
        - Dashboard view
        - Reports (growth, monthly series, status breakdowns)
        - Spreadsheet import / export shared by the CRM apps

    It has no models of its own; every figure is read from the
    other apps and scoped to the logged-in user.
    """
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core'
