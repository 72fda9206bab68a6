"""
Session-token authentication.

The token is a signed, time-limited JWT issued at registration/login.
Browsers carry it in the HTTP-only ``jwt`` cookie; API clients may send
it as ``Authorization: Bearer <token>``.  Keeping this class out of the
views avoids circular imports when DRF loads authentication classes.
"""
from __future__ import annotations

from django.conf import settings
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.tokens import AccessToken


class CookieJWTAuthentication(JWTAuthentication):
    """JWT authentication reading the header first, then the cookie."""

    def authenticate(self, request):
        header = self.get_header(request)
        if header is not None:
            raw_token = self.get_raw_token(header)
        else:
            raw_token = request.COOKIES.get(settings.JWT_COOKIE_NAME)
        if not raw_token:
            return None
        if isinstance(raw_token, str):
            raw_token = raw_token.encode()
        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token


def issue_token(user) -> str:
    """Return a signed session token for ``user`` carrying its role."""
    token = AccessToken.for_user(user)
    token['role'] = user.role
    return str(token)


def set_auth_cookie(response, token: str) -> None:
    response.set_cookie(
        settings.JWT_COOKIE_NAME,
        token,
        max_age=settings.JWT_LIFETIME_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.JWT_COOKIE_SECURE,
        samesite=settings.JWT_COOKIE_SAMESITE,
    )


def clear_auth_cookie(response) -> None:
    response.delete_cookie(settings.JWT_COOKIE_NAME, samesite=settings.JWT_COOKIE_SAMESITE)
