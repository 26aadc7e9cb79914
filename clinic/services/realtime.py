"""
Change notifications for live dashboards.

Every committed create/update/delete is pushed to the ``records`` channel
group as a ``record.changed`` event. Consumers filter the events by what
the connected role may read.
"""
from __future__ import annotations

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

from clinic.access import READ, can_access

logger = logging.getLogger(__name__)

GROUP = "records"


def change_event(resource: str, action: str, obj_id, version=None) -> dict:
    return {
        "type": "record.changed",
        "resource": resource,
        "action": action,
        "id": obj_id,
        "version": version.isoformat() if hasattr(version, "isoformat") else version,
    }


def event_visible_to(role, event: dict) -> bool:
    return can_access(role, READ, event.get("resource", ""))


def _send(event: dict) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    try:
        async_to_sync(channel_layer.group_send)(GROUP, event)
    except Exception:
        logger.exception("broadcast of %s:%s failed", event.get("resource"), event.get("id"))


def broadcast_change(resource: str, action: str, obj_id, version=None) -> dict:
    """Queue the event to go out once the surrounding transaction commits."""
    event = change_event(resource, action, obj_id, version)
    transaction.on_commit(lambda: _send(event))
    return event
