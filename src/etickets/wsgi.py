"""WSGI config for the etickets project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "etickets.settings")

application = get_wsgi_application()
