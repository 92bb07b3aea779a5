# WSGI (Web Server Gateway Interface) configuration for production deployment
#
# Used by production servers like Gunicorn, uWSGI or Apache with mod_wsgi
# ==============================================================================

import os
from django.core.wsgi import get_wsgi_application

# Points to config/settings.py
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

application = get_wsgi_application()


# ==============================================================================
# PRODUCTION DEPLOYMENT
# ==============================================================================

# GUNICORN (Recommended)
# Run: gunicorn config.wsgi:application --bind 0.0.0.0:8000 --workers 4
#
# Docker command:
# docker compose exec web gunicorn config.wsgi:application --bind 0.0.0.0:8000
#
# Rule of thumb for workers: (2 x CPU cores) + 1
# Put Nginx in front for static files and SSL.
#
# Environment variables required in production:
#    - DEBUG=False
#    - SECRET_KEY=<random-value>
#    - ALLOWED_HOSTS=yourdomain.com
#    - DB_ENGINE=postgresql (plus DB_NAME, DB_USER, DB_PASSWORD, DB_HOST)
# ==============================================================================
