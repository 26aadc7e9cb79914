import logging
from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model

from clinic.models import AuditEvent

logger = logging.getLogger(__name__)

User = get_user_model()


def log_action(*, user, action: str, object_type: Optional[str] = None,
               object_id: Optional[int] = None, detail: Optional[Dict[str, Any]] = None) -> Optional[AuditEvent]:
    """Write an operation log row; a failed write is logged, never raised."""
    try:
        return AuditEvent.objects.create(
            user=user if isinstance(user, User) and getattr(user, 'pk', None) else None,
            action=action,
            object_type=object_type,
            object_id=object_id,
            detail=detail or {},
        )
    except Exception:
        logger.exception('AuditEvent write failed (action=%s, object=%s:%s)', action, object_type, object_id)
        return None
