"""
WSGI entry point for the chat API.

Used by gunicorn-style deployments; config.asgi serves the same project
under an ASGI server.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
