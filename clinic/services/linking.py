"""
Account -> patient record linking.

A ``patient`` account owns the patient record whose email equals the
account email. The record may not exist yet (accounts and records are
created independently), so the lookup is a "maybe one" query and ``None``
is the ordinary *not linked* answer rather than an error.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from django.conf import settings
from django.core.cache import cache

from clinic.access import PATIENT
from clinic.models import Patient
from clinic.services.retry import retry_read

logger = logging.getLogger(__name__)

_MISSING = object()


def _cache_key(email: str) -> str:
    return f"patient-link:{(email or '').strip().lower()}"


def link_patient(email: Optional[str]) -> Optional[int]:
    """Return the id of the patient record for ``email``, or ``None``."""
    email = (email or '').strip().lower()
    if not email:
        return None
    return retry_read(
        lambda: Patient.objects.filter(email__iexact=email).values_list('id', flat=True).first()
    )


def linked_patient_id(user) -> Optional[int]:
    """Cached :func:`link_patient` for a ``patient`` account; ``None`` for other roles."""
    if getattr(user, 'role', None) != PATIENT:
        return None
    key = _cache_key(user.email)
    cached = cache.get(key, _MISSING)
    if cached is not _MISSING:
        return cached.get('patientId')
    patient_id = link_patient(user.email)
    if patient_id is None:
        logger.info('patient account %s is not linked to a patient record', user.pk)
    cache.set(key, {'patientId': patient_id}, settings.PATIENT_LINK_CACHE_TTL)
    return patient_id


def forget_links(emails: Iterable[Optional[str]]) -> None:
    """Drop cached links so the next lookup re-resolves them."""
    keys = {_cache_key(e) for e in emails if e}
    if keys:
        cache.delete_many(list(keys))
