"""Persistent in-app notifications plus their real-time push."""
from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction
from rest_framework.exceptions import NotFound, PermissionDenied

from clinic.models import Message, Notification, Role
from clinic.services import realtime

logger = logging.getLogger(__name__)


def format_notification(n: Notification) -> dict:
    return {
        'id': n.id,
        'userId': n.user_id,
        'title': n.title,
        'message': n.message,
        'type': n.type,
        'isRead': n.is_read,
        'link': n.link,
        'createdAt': n.created_at.isoformat() if n.created_at else None,
        'updatedAt': n.updated_at.isoformat() if n.updated_at else None,
    }


def notify(user_id, title: str, message: str, type: str = 'general', link: str = '') -> Optional[Notification]:
    """Persist a notification for ``user_id`` and push ``new_notification``.

    Never raises; returns ``None`` when the notification could not be
    stored.
    """
    try:
        with transaction.atomic():
            n = Notification.objects.create(user_id=user_id, title=title, message=message, type=type, link=link or '')
    except Exception:
        logger.exception('notification for user %s failed: %s', user_id, title)
        return None
    realtime.emit_to_user(user_id, 'new_notification', format_notification(n))
    return n


def latest_for(user, limit: int = 50):
    return Notification.objects.filter(user=user).order_by('-created_at', '-id')[:limit]


def unread_counts(user) -> dict:
    notification_count = Notification.objects.filter(user=user, is_read=False).count()
    message_count = Message.objects.filter(receiver=user, read=False).count()
    return {
        'count': notification_count + message_count,
        'notificationCount': notification_count,
        'messageCount': message_count,
    }


def _owned(user, notification_id, *, allow_admin: bool = False) -> Notification:
    n = Notification.objects.filter(pk=notification_id).first()
    if not n:
        raise NotFound('Notification not found')
    if n.user_id != user.id and not (allow_admin and user.role == Role.ADMIN):
        raise PermissionDenied('Not authorized')
    return n


def mark_read(user, notification_id) -> Notification:
    n = _owned(user, notification_id)
    n.is_read = True
    n.save(update_fields=['is_read', 'updated_at'])
    return n


def mark_all_read(user) -> int:
    return Notification.objects.filter(user=user, is_read=False).update(is_read=True)


def delete(user, notification_id) -> None:
    _owned(user, notification_id, allow_admin=True).delete()


def clear_all(user) -> int:
    deleted, _ = Notification.objects.filter(user=user).delete()
    return deleted
