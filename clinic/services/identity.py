"""
Identity resolution: credentials in, ``(id, email, role)`` out.

The role is always read from the stored account. Anything a client sends
alongside the credentials (a ``role`` field, for instance) is ignored.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import F
from rest_framework.exceptions import ValidationError
from rest_framework_simplejwt.tokens import RefreshToken

from clinic.access import ADMIN, DOCTOR, PATIENT
from clinic.exceptions import AccountInactive, AccountNotFound, InvalidCredentials
from clinic.models import Doctor, Patient
from clinic.services.linking import forget_links

logger = logging.getLogger(__name__)

User = get_user_model()

SELF_SERVICE_ROLES = (PATIENT, DOCTOR)

SESSION_CLAIM = 'sv'


@dataclass(frozen=True)
class SessionIdentity:
    id: int
    email: str
    role: str

    @classmethod
    def from_user(cls, user) -> 'SessionIdentity':
        return cls(id=user.id, email=user.email, role=user.role)


def may_sign_in(user) -> bool:
    """Active accounts may sign in; so may a deactivated admin."""
    return bool(user.is_active or getattr(user, 'role', None) == ADMIN)


def resolve_account(email: str, password: str):
    """Return the :class:`User` matching the credentials or raise.

    Lookup is by case-insensitive email. Inactive accounts are refused
    except for admins.
    """
    email = (email or '').strip().lower()
    user = User.objects.filter(email__iexact=email).first()
    if user is None:
        raise AccountNotFound()
    if not user.check_password(password or ''):
        raise InvalidCredentials()
    if not may_sign_in(user):
        raise AccountInactive()
    return user


def resolve_session(email: str, password: str) -> SessionIdentity:
    return SessionIdentity.from_user(resolve_account(email, password))


def issue_jwt(user) -> RefreshToken:
    """JWT pair stamped with the account's current session version."""
    refresh = RefreshToken.for_user(user)
    refresh[SESSION_CLAIM] = user.session_version
    return refresh


def session_is_current(user, validated_token) -> bool:
    return validated_token.get(SESSION_CLAIM, 0) == user.session_version


def end_sessions(user) -> None:
    """Invalidate every JWT issued to ``user`` so far."""
    User.objects.filter(pk=user.pk).update(session_version=F('session_version') + 1)
    user.refresh_from_db(fields=['session_version'])


@transaction.atomic
def signup(*, email: str, password: str, full_name: str, role: str = PATIENT, phone: str = '',
           specialty: str = ''):
    """Create a self-service account.

    A patient signup also creates the patient record when none exists for
    the email, so the new account is linked from its first login. A doctor
    signup creates the doctor row and leaves the account inactive until an
    admin approves it.
    """
    if role not in SELF_SERVICE_ROLES:
        raise ValidationError({'role': ['Only patient and doctor accounts can sign up.']})
    email = (email or '').strip().lower()
    if User.objects.filter(email__iexact=email).exists():
        raise ValidationError({'email': ['An account with this email already exists.']})

    user = User.objects.create_user(
        email=email,
        password=password,
        role=role,
        full_name=full_name,
        phone=phone,
        is_active=(role == PATIENT),
    )
    if role == PATIENT:
        _, created = Patient.objects.get_or_create(
            email=email, defaults={'name': full_name, 'phone': phone}
        )
        if created:
            logger.info('signup created patient record for %s', email)
        forget_links([email])
    else:
        Doctor.objects.get_or_create(
            email=email,
            defaults={'name': full_name, 'specialty': specialty or 'General', 'phone': phone or None},
        )
    return user
