import json
import logging

from channels.generic.websocket import AsyncWebsocketConsumer
from django.core.serializers.json import DjangoJSONEncoder

from clinic.services.realtime import BROADCAST_GROUP, role_group, user_group

logger = logging.getLogger(__name__)


class NotificationsConsumer(AsyncWebsocketConsumer):
    """Per-user push channel.

    An authenticated socket joins its user room, its role room and the
    broadcast room.  Server events arrive as ``clinic.event`` messages and
    are relayed as ``{"event": ..., "data": ...}``.
    """

    async def connect(self):
        user = self.scope.get('user')
        if not (user and user.is_authenticated):
            await self.close(code=4001)
            return
        self.groups_joined = [user_group(user.id), role_group(user.role), BROADCAST_GROUP]
        for group in self.groups_joined:
            await self.channel_layer.group_add(group, self.channel_name)
        await self.accept()
        await self.send(json.dumps({'event': 'connected', 'data': {'userId': user.id, 'role': user.role}}))

    async def disconnect(self, close_code):
        for group in getattr(self, 'groups_joined', []):
            await self.channel_layer.group_discard(group, self.channel_name)

    async def receive(self, text_data=None, bytes_data=None):
        if not text_data:
            return
        try:
            data = json.loads(text_data)
        except ValueError:
            await self.send(json.dumps({'event': 'error', 'data': {'message': 'invalid_json'}}))
            return
        if isinstance(data, dict) and data.get('type') == 'ping':
            await self.send(json.dumps({'event': 'pong', 'data': {}}))

    async def clinic_event(self, event):
        # event: {"type": "clinic.event", "event": str, "data": Any}
        await self.send(json.dumps({'event': event['event'], 'data': event.get('data')}, cls=DjangoJSONEncoder))
