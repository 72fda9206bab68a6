"""
WSGI config for the hms project.

It exposes the WSGI callable as a module-level variable named ``application``.
Real-time features need the ASGI entrypoint (``hms.asgi``); this module
serves the plain REST API only.
"""
import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hms.settings')

application = get_wsgi_application()
