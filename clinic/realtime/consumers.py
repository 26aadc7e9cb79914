import json
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer

from clinic.access import STAFF_ROLES
from clinic.services.identity import may_sign_in
from clinic.services.realtime import GROUP, event_visible_to


@database_sync_to_async
def _user_for_token(key):
    from rest_framework.authtoken.models import Token
    token = Token.objects.select_related("user").filter(key=key).first()
    return token.user if token else None


class RecordUpdatesConsumer(AsyncWebsocketConsumer):
    """Pushes ``record.changed`` events to staff dashboards.

    Clients authenticate with the session or ``?token=<auth token>``.
    Events for resources the role may not read are dropped here.
    """
    GROUP = GROUP

    async def connect(self):
        user = self.scope.get("user")
        if not getattr(user, "is_authenticated", False):
            key = parse_qs(self.scope.get("query_string", b"").decode()).get("token", [None])[0]
            user = await _user_for_token(key) if key else None
        if not user or not may_sign_in(user) or getattr(user, "role", None) not in STAFF_ROLES:
            await self.close(code=4403)
            return
        self.role = user.role
        await self.channel_layer.group_add(self.GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "role": self.role}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.GROUP, self.channel_name)

    async def record_changed(self, event):
        # event: {"type": "record.changed", "resource", "action", "id", "version"}
        if event_visible_to(getattr(self, "role", None), event):
            await self.send(json.dumps(event))
