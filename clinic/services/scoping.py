"""
Per-request screen context.

:class:`ScreenContext` joins the three things every data endpoint needs:
who is asking (role), which patient record they are (link) and what the
rule table lets them do. Views build one per request and never inspect
role strings themselves.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from rest_framework.exceptions import PermissionDenied

from clinic import access
from clinic.exceptions import AccessDenied, PatientProfileNotFound
from clinic.services.audit import log_action
from clinic.services.linking import linked_patient_id

logger = logging.getLogger(__name__)

ACTION_MESSAGES = {
    access.CREATE: "You don't have permission to create this record.",
    access.UPDATE: "You can only edit your own records.",
    access.DELETE: "You don't have permission to delete this record.",
    access.STATUS: "You can only change the status of your own records.",
    access.READ: "You don't have permission to view this record.",
}


@dataclass
class ScreenContext:
    user: object
    resource: str
    role: Optional[str]
    patient_id: Optional[int]

    @classmethod
    def for_request(cls, request, resource: str) -> 'ScreenContext':
        """Resolve the context or raise :class:`AccessDenied` when the screen is closed to the role."""
        user = request.user
        role = getattr(user, 'role', None)
        if not access.can_access(role, access.READ, resource):
            log_action(user=user, action='access_denied', object_type=resource,
                       detail={'op': access.READ, 'role': role})
            raise AccessDenied()
        return cls(user=user, resource=resource, role=role, patient_id=linked_patient_id(user))

    @property
    def profile_missing(self) -> bool:
        return self.role == access.PATIENT and self.patient_id is None

    @property
    def scope(self) -> str:
        return access.rule_for(self.role, access.READ, self.resource)

    def own_only(self, action: str) -> bool:
        return access.rule_for(self.role, action, self.resource) == access.OWN

    def queryset(self, qs, action: str = access.READ):
        return qs.filter(access.scope_query(self.role, self.patient_id, self.resource, action))

    def owns(self, record) -> bool:
        return access.is_owner(self.patient_id, access.owner_of(self.resource, record))

    def require(self, action: str, record=None) -> None:
        """Re-check ``action`` inside the handler.

        For ``OWN`` rules the record (or, for creates, the submitted data)
        decides ownership. An unlinked patient is refused with
        ``profile_not_found`` before anything else.
        """
        scope = access.rule_for(self.role, action, self.resource)
        if scope == access.OWN and self.profile_missing:
            raise PatientProfileNotFound()
        owned = self.owns(record) if (scope == access.OWN and record is not None) else None
        if access.can_access(self.role, action, self.resource, owned=owned):
            return
        log_action(
            user=self.user, action='access_denied', object_type=self.resource,
            object_id=getattr(record, 'pk', None),
            detail={'op': action, 'role': self.role},
        )
        logger.info('denied %s on %s for role %s', action, self.resource, self.role)
        raise PermissionDenied(ACTION_MESSAGES.get(action))

    def payload(self, data, **extra) -> dict:
        """Wrap screen data with the scope decisions the client renders from."""
        body = {
            'ok': True,
            'scope': self.scope,
            'permissions': access.affordances(self.role, self.resource)['permissions'],
        }
        if self.profile_missing:
            body['state'] = 'profile_not_found'
            body['message'] = PatientProfileNotFound.default_detail
            data = [] if isinstance(data, list) else data
        body['data'] = data
        body.update(extra)
        return body
