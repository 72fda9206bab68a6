"""
Server-side emitters for the real-time channel.

Every connected client sits in three channel-layer groups: its own user
room, its role room and the broadcast room.  Emitting is fire and
forget; delivery failures are logged, never raised to the caller.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.core.serializers.json import DjangoJSONEncoder

logger = logging.getLogger(__name__)

BROADCAST_GROUP = 'broadcast'


def user_group(user_id) -> str:
    return f'user.{user_id}'


def role_group(role: str) -> str:
    return f'role.{role}'


def _send(group: str, event: str, payload: Any) -> None:
    layer = get_channel_layer()
    if layer is None:
        return
    try:
        # the redis layer msgpacks messages, so dates and decimals go as strings
        data = json.loads(json.dumps(payload, cls=DjangoJSONEncoder))
        async_to_sync(layer.group_send)(group, {'type': 'clinic.event', 'event': event, 'data': data})
    except Exception:
        logger.warning('realtime emit %s to %s failed', event, group, exc_info=True)


def emit_to_user(user_id, event: str, payload: Any) -> None:
    _send(user_group(user_id), event, payload)


def emit_to_role(role: str, event: str, payload: Any) -> None:
    _send(role_group(role), event, payload)


def broadcast(event: str, payload: Any) -> None:
    _send(BROADCAST_GROUP, event, payload)
