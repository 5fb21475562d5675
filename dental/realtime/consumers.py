import json

from channels.generic.websocket import AsyncWebsocketConsumer

from dental.services.notifications import GROUP


class NotificationsConsumer(AsyncWebsocketConsumer):
    """Pushes new notifications and cache refresh events to signed-in staff.

    Every staff socket joins the one ``notifications`` group; filtering by
    role or doctor happens client-side against the notification payload.
    """

    async def connect(self):
        user = self.scope.get("user")
        if user is None or not user.is_authenticated:
            await self.close(code=4003)
            return
        await self.channel_layer.group_add(GROUP, self.channel_name)
        await self.accept()
        await self._push({"type": "hello", "userId": user.id, "role": getattr(user, "role", "")})

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(GROUP, self.channel_name)

    async def _push(self, payload):
        await self.send(text_data=json.dumps(payload))

    # group message handlers ("notification.created" -> notification_created)
    async def notification_created(self, event):
        await self._push(event)

    async def broadcast_refresh(self, event):
        await self._push(event)
