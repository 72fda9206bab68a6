"""
WebSocket authentication.

Resolves ``scope["user"]`` from the same session token the REST API
accepts: the ``jwt`` cookie, or a ``?token=`` query parameter for
clients that cannot send cookies on the upgrade request.
"""
from __future__ import annotations

import logging
from http.cookies import SimpleCookie
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.conf import settings
from django.contrib.auth.models import AnonymousUser
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.exceptions import TokenError

logger = logging.getLogger(__name__)


def _raw_token(scope) -> str | None:
    query = parse_qs(scope.get('query_string', b'').decode())
    if query.get('token'):
        return query['token'][0]
    for name, value in scope.get('headers', []):
        if name == b'cookie':
            jar = SimpleCookie()
            jar.load(value.decode('latin-1'))
            morsel = jar.get(settings.JWT_COOKIE_NAME)
            if morsel is not None:
                return morsel.value
    return None


@database_sync_to_async
def _user_for(raw: str):
    from clinic.authentication import CookieJWTAuthentication

    auth = CookieJWTAuthentication()
    try:
        return auth.get_user(auth.get_validated_token(raw.encode()))
    except (AuthenticationFailed, TokenError) as e:
        logger.info('websocket token rejected: %s', e)
        return AnonymousUser()


class JWTAuthMiddleware(BaseMiddleware):
    async def __call__(self, scope, receive, send):
        raw = _raw_token(scope)
        scope['user'] = await _user_for(raw) if raw else AnonymousUser()
        return await super().__call__(scope, receive, send)


def JWTAuthMiddlewareStack(inner):
    return JWTAuthMiddleware(inner)
