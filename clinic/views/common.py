"""
Helpers shared by the record endpoints: list querying, pagination and the
create / change bookkeeping (audit row plus realtime event).
"""
from __future__ import annotations

from collections.abc import Mapping
from functools import reduce
from operator import or_

from django.db.models import Q
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from clinic.serializers.common import ListQuerySerializer
from clinic.services.audit import log_action
from clinic.services.realtime import broadcast_change
from clinic.services.retry import retry_read

FILTER_FIELDS = ('status', 'patient_type', 'payment_status', 'category', 'patient_id', 'doctor_id')


def list_params(request) -> dict:
    s = ListQuerySerializer(data=request.query_params)
    s.is_valid(raise_exception=True)
    return s.validated_data


def apply_filters(qs, params: dict, search_fields=()):
    model_fields = {f.attname for f in qs.model._meta.concrete_fields}
    for name in FILTER_FIELDS:
        value = params.get(name)
        if value not in (None, '') and name in model_fields:
            qs = qs.filter(**{name: value})
    q = (params.get('q') or '').strip()
    if q and search_fields:
        qs = qs.filter(reduce(or_, (Q(**{f"{f}__icontains": q}) for f in search_fields)))
    return qs


def paginate(qs, params: dict):
    """Return ``(rows, pagination)`` for ``page``/``pageSize`` (all rows when no page size)."""
    def run():
        total = qs.count()
        page = params.get('page') or 1
        page_size = params.get('pageSize') or 0
        rows = qs
        if page_size:
            start = (page - 1) * page_size
            rows = qs[start:start + page_size]
        return list(rows), {'total': total, 'page': page, 'pageSize': page_size or total}
    return retry_read(run)


def get_record(qs, pk):
    obj = retry_read(lambda: qs.filter(pk=pk).first())
    if obj is None:
        raise NotFound('Record not found.')
    return obj


def record_change(request, resource: str, action: str, obj=None, *, obj_id=None, detail=None):
    obj_id = obj_id if obj_id is not None else getattr(obj, 'pk', None)
    log_action(user=request.user, action=f'{resource}_{action}', object_type=resource,
               object_id=obj_id, detail=detail or {})
    version = getattr(obj, 'updated_at', None) or timezone.now()
    broadcast_change(resource, action, obj_id, version)


def body_object(request):
    """Return the request body, refusing anything that is not a JSON object."""
    if not isinstance(request.data, Mapping):
        raise ValidationError({'non_field_errors': ['Expected an object.']})
    return request.data
