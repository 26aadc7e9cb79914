"""
Staff account management (admin only): list accounts and approve or
suspend them. Doctor self-signups wait here, inactive, for approval.
"""
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.db.models import Q
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.access import ROLES
from clinic.permissions import CanManageStaff
from clinic.serializers.auth import StaffListQuerySerializer, StaffStatusSerializer
from clinic.services.audit import log_action
from clinic.services.identity import end_sessions
from clinic.views.common import get_record

User = get_user_model()


def _account(u) -> dict:
    return {
        'id': u.id,
        'email': u.email,
        'name': u.display_name,
        'role': u.role,
        'phone': u.phone,
        'is_active': u.is_active,
        'last_login': u.last_login,
        'date_joined': u.date_joined,
    }


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanManageStaff])
def staff_list(request):
    q = StaffListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    params = q.validated_data
    qs = User.objects.order_by('role', 'email')
    if params.get('role') in ROLES:
        qs = qs.filter(role=params['role'])
    if params.get('active') is not None:
        qs = qs.filter(is_active=params['active'])
    term = (params.get('q') or '').strip()
    if term:
        qs = qs.filter(Q(email__icontains=term) | Q(full_name__icontains=term))
    return Response({'ok': True, 'data': [_account(u) for u in qs]})


@api_view(['POST', 'PUT'])
@permission_classes([IsAuthenticated, CanManageStaff])
def staff_status(request, pk: int):
    s = StaffStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    account = get_record(User.objects.all(), pk)
    is_active = s.validated_data['is_active']
    if account.pk == request.user.pk and not is_active:
        raise ValidationError({'is_active': ['You cannot deactivate your own account.']})
    account.is_active = is_active
    account.save(update_fields=['is_active'])
    if not is_active:
        Token.objects.filter(user=account).delete()
        end_sessions(account)
    log_action(user=request.user, action='staff_status', object_type='user', object_id=account.pk,
               detail={'is_active': is_active, 'role': account.role})
    return Response({'ok': True, 'data': _account(account)})
