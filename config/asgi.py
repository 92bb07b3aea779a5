# ASGI (Asynchronous Server Gateway Interface) configuration
#
# Production servers:
# - Uvicorn:   uvicorn config.asgi:application --host 0.0.0.0 --port 8000
# - Hypercorn: hypercorn config.asgi:application --bind 0.0.0.0:8000
# ==============================================================================

import os
from django.core.asgi import get_asgi_application

# Set the default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

# Plain HTTP application; the CRM has no WebSocket endpoints
application = get_asgi_application()
