"""Short-lived lock that turns a double submit into a 409 instead of a second row."""
from __future__ import annotations

import hashlib
import json
from contextlib import contextmanager

from django.conf import settings
from django.core.cache import cache

from clinic.exceptions import DuplicateSubmission


def submission_key(user_id, resource: str, body) -> str:
    try:
        raw = json.dumps(body, sort_keys=True, default=str)
    except TypeError:
        raw = repr(body)
    digest = hashlib.sha256(raw.encode('utf-8')).hexdigest()[:32]
    return f"inflight:{user_id}:{resource}:{digest}"


@contextmanager
def inflight_guard(user, resource: str, body):
    """Hold the submission lock for the duration of the write.

    A successful write keeps the key until ``INFLIGHT_GUARD_TTL`` expires
    so a quick resubmit is refused too; a failed write releases it at once
    so the user can correct the form and try again.
    """
    key = submission_key(getattr(user, 'pk', None), resource, body)
    if not cache.add(key, 1, settings.INFLIGHT_GUARD_TTL):
        raise DuplicateSubmission()
    try:
        yield
    except BaseException:
        cache.delete(key)
        raise
