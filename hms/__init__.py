"""Project package for the hospital management backend (settings, URLs, ASGI/WSGI)."""
