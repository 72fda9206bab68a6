"""
Registration, login and logout.

The session token is returned in the body and also set as the HTTP-only
``jwt`` cookie the browser client relies on.  These views live apart
from ``clinic.authentication`` so DRF can import the authentication
class without pulling in the view layer.
"""
from __future__ import annotations

import hmac

from django.conf import settings
from django.contrib.auth import authenticate
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework_simplejwt.exceptions import TokenError

from clinic.authentication import CookieJWTAuthentication, clear_auth_cookie, issue_token, set_auth_cookie
from clinic.exceptions import Unauthorized
from clinic.models import Role
from clinic.serializers.auth import LoginSerializer, RegisterSerializer
from clinic.services.audit import log_activity
from clinic.services.users import create_account, format_user


class LoginRateThrottle(AnonRateThrottle):
    """Per-IP limit on credential attempts (the ``login`` rate)."""
    scope = 'login'


def _admin_secret_ok(supplied: str) -> bool:
    expected = settings.ADMIN_SECRET_KEY
    return bool(expected) and hmac.compare_digest(str(supplied or ''), expected)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([AnonRateThrottle, LoginRateThrottle])
def register_view(request):
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data

    role = v.get('role') or Role.PATIENT
    if role != Role.PATIENT and not _admin_secret_ok(v.get('adminSecret')):
        raise Unauthorized('Invalid Admin Secret Key')

    user = create_account(
        email=v['email'], password=v['password'], first_name=v['firstName'], last_name=v['lastName'], role=role,
        gender=v.get('gender') or '', phone=v.get('phone') or '', date_of_birth=v.get('dateOfBirth'),
        doctor_department=v.get('doctorDepartment') or '',
    )
    log_activity(user=user, action='CREATE', entity='User', entity_id=user.id,
                 details=f'New {user.role} registered: {user.email}', request=request)

    token = issue_token(user)
    resp = Response({**format_user(user), 'token': token}, status=status.HTTP_201_CREATED)
    set_auth_cookie(resp, token)
    return resp


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([AnonRateThrottle, LoginRateThrottle])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    email = s.validated_data['email'].strip().lower()

    user = authenticate(request, email=email, password=s.validated_data['password'])
    if not user:
        raise Unauthorized('Invalid email or password')

    log_activity(user=user, action='LOGIN', entity='User', entity_id=user.id,
                 details=f'{user.role} logged in', request=request)

    token = issue_token(user)
    resp = Response({**format_user(user), 'token': token})
    set_auth_cookie(resp, token)
    return resp


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def logout_view(request):
    """Clear the session cookie.  Always succeeds."""
    user = None
    try:
        result = CookieJWTAuthentication().authenticate(request)
    except (AuthenticationFailed, TokenError):
        result = None
    if result:
        user = result[0]
        log_activity(user=user, action='LOGOUT', entity='User', entity_id=user.id,
                     details=f'{user.role} logged out', request=request)
    resp = Response({'message': 'Logged out successfully'})
    clear_auth_cookie(resp)
    return resp
