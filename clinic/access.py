"""
Role based access rules for every resource the API exposes.

The table below is the one place that decides, for each role, which rows of
a resource are visible and which mutations are allowed. Views never compare
role strings themselves: they ask :func:`can_access` for a yes/no and
:func:`scope_query` for the list predicate.

Each ``(resource, action)`` pair maps every role to a scope:

* ``ALL``  - any row
* ``OWN``  - only rows whose patient is the requester's linked patient record
* ``DENY`` - nothing

A ``patient`` account that is not linked to a patient record owns nothing,
so every ``OWN`` check answers ``False`` for it.
"""
from __future__ import annotations

from typing import Optional

from django.db.models import Q

ADMIN = 'admin'
DOCTOR = 'doctor'
RECEPTIONIST = 'receptionist'
PATIENT = 'patient'
ROLES = (ADMIN, DOCTOR, RECEPTIONIST, PATIENT)
STAFF_ROLES = frozenset({ADMIN, DOCTOR, RECEPTIONIST})

ALL = 'all'
OWN = 'own'
DENY = 'none'

READ = 'read'
CREATE = 'create'
UPDATE = 'update'
DELETE = 'delete'
STATUS = 'status'
ACTIONS = (READ, CREATE, UPDATE, DELETE, STATUS)

PATIENTS = 'patients'
DOCTORS = 'doctors'
APPOINTMENTS = 'appointments'
MEDICINES = 'medicines'
PRESCRIPTIONS = 'prescriptions'
PAYMENTS = 'payments'
PATIENT_HISTORY = 'patient_history'
DASHBOARD = 'dashboard'
STAFF = 'staff'
RESOURCES = (
    PATIENTS, DOCTORS, APPOINTMENTS, MEDICINES, PRESCRIPTIONS,
    PAYMENTS, PATIENT_HISTORY, DASHBOARD, STAFF,
)


def _rule(admin: str, doctor: str, receptionist: str, patient: str) -> dict[str, str]:
    return {ADMIN: admin, DOCTOR: doctor, RECEPTIONIST: receptionist, PATIENT: patient}


STAFF_ONLY = _rule(ALL, ALL, DENY, DENY)

RULES: dict[tuple[str, str], dict[str, str]] = {
    (PATIENTS, READ): _rule(ALL, ALL, ALL, OWN),
    (PATIENTS, CREATE): _rule(ALL, ALL, DENY, DENY),
    (PATIENTS, UPDATE): _rule(ALL, ALL, DENY, OWN),
    (PATIENTS, DELETE): _rule(ALL, ALL, DENY, DENY),

    (DOCTORS, READ): _rule(ALL, ALL, ALL, DENY),
    (DOCTORS, CREATE): _rule(ALL, ALL, ALL, DENY),
    (DOCTORS, UPDATE): _rule(ALL, ALL, ALL, DENY),
    (DOCTORS, DELETE): _rule(ALL, ALL, DENY, DENY),

    (APPOINTMENTS, READ): _rule(ALL, ALL, ALL, OWN),
    (APPOINTMENTS, CREATE): _rule(ALL, ALL, ALL, OWN),
    (APPOINTMENTS, UPDATE): STAFF_ONLY,
    (APPOINTMENTS, STATUS): _rule(ALL, ALL, DENY, OWN),
    (APPOINTMENTS, DELETE): STAFF_ONLY,

    (MEDICINES, READ): STAFF_ONLY,
    (MEDICINES, CREATE): STAFF_ONLY,
    (MEDICINES, UPDATE): STAFF_ONLY,
    (MEDICINES, DELETE): STAFF_ONLY,

    (PRESCRIPTIONS, READ): _rule(ALL, ALL, DENY, OWN),
    (PRESCRIPTIONS, CREATE): STAFF_ONLY,
    (PRESCRIPTIONS, UPDATE): STAFF_ONLY,
    (PRESCRIPTIONS, DELETE): STAFF_ONLY,

    (PAYMENTS, READ): _rule(ALL, ALL, DENY, OWN),
    (PAYMENTS, CREATE): STAFF_ONLY,
    (PAYMENTS, STATUS): STAFF_ONLY,
    (PAYMENTS, DELETE): STAFF_ONLY,

    (PATIENT_HISTORY, READ): _rule(ALL, ALL, DENY, OWN),
    (PATIENT_HISTORY, CREATE): STAFF_ONLY,
    (PATIENT_HISTORY, DELETE): STAFF_ONLY,

    (DASHBOARD, READ): _rule(ALL, ALL, ALL, OWN),

    (STAFF, READ): _rule(ALL, DENY, DENY, DENY),
    (STAFF, STATUS): _rule(ALL, DENY, DENY, DENY),
}

# Field that holds the owning patient id, per resource
OWNER_FIELDS: dict[str, str] = {
    PATIENTS: 'id',
    APPOINTMENTS: 'patient_id',
    PRESCRIPTIONS: 'patient_id',
    PAYMENTS: 'patient_id',
    PATIENT_HISTORY: 'patient_id',
}

# Appointment status machine; nothing leads back to scheduled
ALLOWED_STATUS_TRANSITIONS: dict[str, frozenset[str]] = {
    'scheduled': frozenset({'completed', 'cancelled'}),
    'completed': frozenset(),
    'cancelled': frozenset(),
}


def rule_for(role: Optional[str], action: str, resource: str) -> str:
    """Return the scope granted to ``role``; unknown pairs and roles are denied."""
    return RULES.get((resource, action), {}).get(role or '', DENY)


def can_access(role: Optional[str], action: str, resource: str, owned: Optional[bool] = None) -> bool:
    """Decide whether ``role`` may perform ``action`` on ``resource``.

    ``owned`` is the ownership answer for a specific row (see
    :func:`is_owner`). Leave it ``None`` to ask whether the action is
    offered at all, e.g. whether to show a create button.
    """
    scope = rule_for(role, action, resource)
    if scope == ALL:
        return True
    if scope == OWN:
        return True if owned is None else bool(owned)
    return False


def is_owner(linked_patient_id: Optional[int], record_patient_id: Optional[int]) -> bool:
    if linked_patient_id is None or record_patient_id is None:
        return False
    return int(record_patient_id) == int(linked_patient_id)


def owner_of(resource: str, record) -> Optional[int]:
    """Return the patient id that owns ``record`` for ``resource``."""
    field = OWNER_FIELDS.get(resource)
    if not field:
        return None
    if isinstance(record, dict):
        return record.get(field)
    return getattr(record, field, None)


def scope_query(role: Optional[str], patient_id: Optional[int], resource: str, action: str = READ) -> Q:
    """Build the ORM predicate that limits a queryset to what ``role`` may see."""
    scope = rule_for(role, action, resource)
    if scope == ALL:
        return Q()
    field = OWNER_FIELDS.get(resource)
    if scope == OWN and field and patient_id is not None:
        return Q(**{field: patient_id})
    # matches nothing
    return Q(pk__in=[])


def affordances(role: Optional[str], resource: str) -> dict:
    """Summarise which controls a screen for ``resource`` should offer."""
    perms = {
        action: can_access(role, action, resource)
        for action in ACTIONS
        if (resource, action) in RULES
    }
    return {'scope': rule_for(role, READ, resource), 'permissions': perms}


def can_transition(current: str, new: str) -> bool:
    return new in ALLOWED_STATUS_TRANSITIONS.get(current, frozenset())
