"""Append-only activity log: the write helper and the admin queries."""
from __future__ import annotations

import logging
import math
from typing import Any, Optional

from django.db import transaction

from clinic.models import ActivityLog
from clinic.services.users import format_user_ref

logger = logging.getLogger(__name__)


def client_ip(request) -> str:
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR', '')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR', '') or ''


def log_activity(*, user, action: str, entity: str, entity_id: Any = None,
                 details: str = '', request=None, ip_address: str = '') -> Optional[ActivityLog]:
    """Record one activity entry.

    Never raises: a failure to write the log is reported and the caller's
    operation carries on.
    """
    if not getattr(user, 'pk', None):
        return None
    if request is not None and not ip_address:
        ip_address = client_ip(request)
    try:
        with transaction.atomic():
            return ActivityLog.objects.create(
                user=user,
                action=action,
                entity=entity,
                entity_id='' if entity_id is None else str(entity_id),
                details=details or '',
                ip_address=ip_address or '',
            )
    except Exception:
        logger.exception('activity log write failed: %s %s %s', action, entity, entity_id)
        return None


def format_log(entry: ActivityLog) -> dict:
    return {
        'id': entry.id,
        'user': format_user_ref(entry.user),
        'action': entry.action,
        'entity': entry.entity,
        'entityId': entry.entity_id,
        'details': entry.details,
        'ipAddress': entry.ip_address,
        'createdAt': entry.created_at.isoformat() if entry.created_at else None,
    }


def query_logs(*, page: int = 1, limit: int = 20, action: str = '', entity: str = '', user_id=None,
               start_date=None, end_date=None) -> dict:
    """Filtered, newest-first page of the activity log.

    ``start_date`` / ``end_date`` are calendar days, both inclusive.
    """
    qs = ActivityLog.objects.select_related('user')
    if action:
        qs = qs.filter(action=action)
    if entity:
        qs = qs.filter(entity=entity)
    if user_id:
        qs = qs.filter(user_id=user_id)
    if start_date:
        qs = qs.filter(created_at__date__gte=start_date)
    if end_date:
        qs = qs.filter(created_at__date__lte=end_date)
    total = qs.count()
    start = (page - 1) * limit
    logs = qs.order_by('-created_at', '-id')[start:start + limit]
    return {
        'logs': [format_log(e) for e in logs],
        'page': page,
        'pages': math.ceil(total / limit) if total else 0,
        'total': total,
    }


def my_logs(user, limit: int = 50) -> list[dict]:
    return [format_log(e) for e in ActivityLog.objects.select_related('user').filter(user=user)
            .order_by('-created_at', '-id')[:limit]]
