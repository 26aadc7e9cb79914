"""
Rule table tests: every role x resource x action pair, plus the list
predicate, affordances and the appointment status machine.
"""
import pytest
from django.db.models import Q

from clinic import access
from clinic.access import ADMIN, DOCTOR, PATIENT, RECEPTIONIST

A, O, N = access.ALL, access.OWN, access.DENY

# (resource, action): (admin, doctor, receptionist, patient)
EXPECTED = {
    ('patients', 'read'): (A, A, A, O),
    ('patients', 'create'): (A, A, N, N),
    ('patients', 'update'): (A, A, N, O),
    ('patients', 'delete'): (A, A, N, N),
    ('doctors', 'read'): (A, A, A, N),
    ('doctors', 'create'): (A, A, A, N),
    ('doctors', 'update'): (A, A, A, N),
    ('doctors', 'delete'): (A, A, N, N),
    ('appointments', 'read'): (A, A, A, O),
    ('appointments', 'create'): (A, A, A, O),
    ('appointments', 'update'): (A, A, N, N),
    ('appointments', 'status'): (A, A, N, O),
    ('appointments', 'delete'): (A, A, N, N),
    ('medicines', 'read'): (A, A, N, N),
    ('medicines', 'create'): (A, A, N, N),
    ('medicines', 'update'): (A, A, N, N),
    ('medicines', 'delete'): (A, A, N, N),
    ('prescriptions', 'read'): (A, A, N, O),
    ('prescriptions', 'create'): (A, A, N, N),
    ('prescriptions', 'update'): (A, A, N, N),
    ('prescriptions', 'delete'): (A, A, N, N),
    ('payments', 'read'): (A, A, N, O),
    ('payments', 'create'): (A, A, N, N),
    ('payments', 'status'): (A, A, N, N),
    ('payments', 'delete'): (A, A, N, N),
    ('patient_history', 'read'): (A, A, N, O),
    ('patient_history', 'create'): (A, A, N, N),
    ('patient_history', 'delete'): (A, A, N, N),
    ('dashboard', 'read'): (A, A, A, O),
    ('staff', 'read'): (A, N, N, N),
    ('staff', 'status'): (A, N, N, N),
}

ROLE_ORDER = (ADMIN, DOCTOR, RECEPTIONIST, PATIENT)

MATRIX = [
    (role, resource, action, scopes[i])
    for resource in access.RESOURCES
    for action in access.ACTIONS
    for i, role in enumerate(ROLE_ORDER)
    for scopes in [EXPECTED.get((resource, action), (N, N, N, N))]
]


@pytest.mark.parametrize('role,resource,action,expected', MATRIX)
def test_rule_table_cell(role, resource, action, expected):
    assert access.rule_for(role, action, resource) == expected


@pytest.mark.parametrize('role,resource,action,expected', MATRIX)
def test_can_access_follows_scope(role, resource, action, expected):
    if expected == A:
        assert access.can_access(role, action, resource, owned=False)
    elif expected == O:
        assert access.can_access(role, action, resource)
        assert access.can_access(role, action, resource, owned=True)
        assert not access.can_access(role, action, resource, owned=False)
    else:
        assert not access.can_access(role, action, resource)
        assert not access.can_access(role, action, resource, owned=True)


def test_table_has_no_unexpected_entries():
    assert set(access.RULES) == set(EXPECTED)


@pytest.mark.parametrize('role', [None, '', 'super', 'nurse'])
def test_unknown_role_is_denied_everything(role):
    for resource in access.RESOURCES:
        for action in access.ACTIONS:
            assert not access.can_access(role, action, resource, owned=True)


def test_is_owner_false_when_not_linked():
    assert access.is_owner(7, 7)
    assert access.is_owner(7, '7')
    assert not access.is_owner(7, 8)
    assert not access.is_owner(None, 7)
    assert not access.is_owner(7, None)


def test_owner_of_reads_objects_and_dicts():
    class Row:
        patient_id = 3
    assert access.owner_of('appointments', Row()) == 3
    assert access.owner_of('payments', {'patient_id': 4}) == 4
    assert access.owner_of('patients', {'id': 9}) == 9
    assert access.owner_of('doctors', {'id': 1}) is None


def test_scope_query_predicates():
    assert access.scope_query(ADMIN, None, 'appointments') == Q()
    assert access.scope_query(PATIENT, 7, 'appointments') == Q(patient_id=7)
    assert access.scope_query(PATIENT, 7, 'patients') == Q(id=7)
    # unlinked patient and denied role match nothing
    assert access.scope_query(PATIENT, None, 'appointments') == Q(pk__in=[])
    assert access.scope_query(RECEPTIONIST, None, 'payments') == Q(pk__in=[])


def test_affordances_for_patient_appointments():
    aff = access.affordances(PATIENT, 'appointments')
    assert aff['scope'] == O
    assert aff['permissions'] == {
        'read': True, 'create': True, 'update': False, 'delete': False, 'status': True,
    }


def test_affordances_for_receptionist_doctors():
    aff = access.affordances(RECEPTIONIST, 'doctors')
    assert aff['scope'] == A
    assert aff['permissions'] == {'read': True, 'create': True, 'update': True, 'delete': False}


@pytest.mark.parametrize('current,new,ok', [
    ('scheduled', 'completed', True),
    ('scheduled', 'cancelled', True),
    ('scheduled', 'scheduled', False),
    ('completed', 'scheduled', False),
    ('cancelled', 'scheduled', False),
    ('completed', 'cancelled', False),
    ('bogus', 'completed', False),
])
def test_status_transitions(current, new, ok):
    assert access.can_transition(current, new) is ok
