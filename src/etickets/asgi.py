"""ASGI config for the etickets project."""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "etickets.settings")

application = get_asgi_application()
