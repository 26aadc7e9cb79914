import pytest
from rest_framework.exceptions import ValidationError

from clinic.exceptions import AccountInactive, AccountNotFound, InvalidCredentials
from clinic.models import Doctor, Patient, User
from clinic.services.identity import SessionIdentity, resolve_session, signup
from clinic.services.linking import link_patient, linked_patient_id

pytestmark = pytest.mark.django_db

PW = 'Str0ng!Pass9'


def test_resolve_session_returns_stored_role():
    u = User.objects.create_user(email='doc@x.com', password=PW, role='doctor')
    ident = resolve_session('Doc@X.com ', PW)
    assert ident == SessionIdentity(id=u.id, email='doc@x.com', role='doctor')


def test_resolve_session_unknown_email():
    with pytest.raises(AccountNotFound):
        resolve_session('nobody@x.com', PW)


def test_resolve_session_wrong_password():
    User.objects.create_user(email='p@x.com', password=PW, role='patient')
    with pytest.raises(InvalidCredentials):
        resolve_session('p@x.com', 'wrong-password')


def test_resolve_session_inactive_account():
    User.objects.create_user(email='r@x.com', password=PW, role='receptionist', is_active=False)
    with pytest.raises(AccountInactive):
        resolve_session('r@x.com', PW)


def test_resolve_session_inactive_admin_still_signs_in():
    User.objects.create_user(email='boss@x.com', password=PW, role='admin', is_active=False)
    assert resolve_session('boss@x.com', PW).role == 'admin'


def test_patient_signup_creates_linked_record():
    user = signup(email='New@X.com', password=PW, full_name='New Person')
    assert user.role == 'patient' and user.is_active
    record = Patient.objects.get(email='new@x.com')
    assert record.name == 'New Person'
    assert linked_patient_id(user) == record.id


def test_patient_signup_reuses_existing_record():
    existing = Patient.objects.create(name='Already Here', email='here@x.com')
    user = signup(email='here@x.com', password=PW, full_name='Someone Else')
    assert Patient.objects.filter(email='here@x.com').count() == 1
    assert linked_patient_id(user) == existing.id


def test_doctor_signup_waits_for_approval():
    user = signup(email='dr@x.com', password=PW, full_name='Dr Who', role='doctor', specialty='Time')
    assert user.role == 'doctor'
    assert not user.is_active
    assert Doctor.objects.get(email='dr@x.com').specialty == 'Time'


@pytest.mark.parametrize('role', ['admin', 'receptionist'])
def test_signup_refuses_staff_roles(role):
    with pytest.raises(ValidationError):
        signup(email='sneaky@x.com', password=PW, full_name='Sneaky', role=role)
    assert not User.objects.filter(email='sneaky@x.com').exists()


def test_signup_refuses_duplicate_email():
    User.objects.create_user(email='dup@x.com', password=PW, role='patient')
    with pytest.raises(ValidationError):
        signup(email='DUP@x.com', password=PW, full_name='Dup')


def test_link_patient_zero_or_one_match():
    assert link_patient('ghost@x.com') is None
    assert link_patient('') is None
    rec = Patient.objects.create(name='Alice', email='a@x.com')
    assert link_patient('A@X.COM') == rec.id


def test_linked_patient_id_is_none_for_staff():
    Patient.objects.create(name='Doc Patient', email='doc@x.com')
    doctor = User.objects.create_user(email='doc@x.com', password=PW, role='doctor')
    assert linked_patient_id(doctor) is None


def test_linked_patient_id_caches_not_linked_until_forgotten():
    from clinic.services.linking import forget_links
    user = User.objects.create_user(email='late@x.com', password=PW, role='patient')
    assert linked_patient_id(user) is None
    rec = Patient.objects.create(name='Late', email='late@x.com')
    # still cached as not linked
    assert linked_patient_id(user) is None
    forget_links(['late@x.com'])
    assert linked_patient_id(user) == rec.id
