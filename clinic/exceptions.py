"""
Error types and the DRF exception handler.

Every error leaving the API has the shape
``{"ok": false, "error": {"code": ..., "message": ...}}``.
"""
from __future__ import annotations

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class BusinessRuleError(APIException):
    """A request that is well formed but violates a domain rule."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Request violates a business rule.'
    default_code = 'business_rule'


def _code_for(exc, status_code: int) -> str:
    code = getattr(exc, 'default_code', None)
    if code:
        return code
    return 'not_found' if status_code == 404 else 'api_error'


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception('unhandled error in %s', getattr(view, '__name__', view), exc_info=exc)
        if settings.DEBUG or getattr(settings, 'ENV', 'dev') != 'prod':
            message = str(exc) or exc.__class__.__name__
        else:
            message = 'Internal server error'
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': message}}, status=500)
    # normalize response
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    elif isinstance(resp.data, list) and len(resp.data) == 1:
        detail = resp.data[0]
    else:
        detail = resp.data
    body = {'ok': False, 'error': {'code': _code_for(exc, resp.status_code), 'message': detail}}
    return Response(body, status=resp.status_code, headers=_auth_headers(resp))


def _auth_headers(resp) -> dict:
    # keep WWW-Authenticate so clients see a proper 401
    value = resp.headers.get('WWW-Authenticate')
    return {'WWW-Authenticate': value} if value else {}


class UploadFailed(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Upload failed'
    default_code = 'upload_failed'


class Unauthorized(APIException):
    """401 raised by views that run without an authentication class."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Not authorized'
    default_code = 'unauthorized'
