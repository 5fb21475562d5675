"""WSGI entry point for synchronous servers (gunicorn, uwsgi); no websocket support."""
import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "clinic.settings")

application = get_wsgi_application()
