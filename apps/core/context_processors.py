from django.conf import settings


def crm_settings(request):
    """Currency and app name for every template."""
    currency = settings.CRM_DEFAULT_CURRENCY

    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        profile = getattr(user, 'profile', None)
        if profile is not None:
            currency = profile.currency

    return {
        'APP_NAME': 'CRM',
        'CURRENCY': currency,
    }
