from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic import access
from clinic.models import PatientHistory
from clinic.serializers.patient import PatientHistorySerializer
from clinic.services.inflight import inflight_guard
from clinic.services.scoping import ScreenContext
from clinic.views.common import apply_filters, get_record, list_params, paginate, record_change

SEARCH_FIELDS = ('patient__name', 'symptoms', 'diagnosis', 'treatment')


def _history():
    return PatientHistory.objects.select_related('patient')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def patient_history(request):
    """Visit history; ``patient_id`` narrows a staff list to one patient."""
    ctx = ScreenContext.for_request(request, access.PATIENT_HISTORY)
    if request.method == 'POST':
        ctx.require(access.CREATE)
        with inflight_guard(request.user, access.PATIENT_HISTORY, request.data):
            s = PatientHistorySerializer(data=request.data)
            s.is_valid(raise_exception=True)
            entry = s.save()
        record_change(request, access.PATIENT_HISTORY, 'create', entry, detail={'patient_id': entry.patient_id})
        return Response({'ok': True, 'data': PatientHistorySerializer(entry).data}, status=201)

    params = list_params(request)
    qs = apply_filters(ctx.queryset(_history()), params, SEARCH_FIELDS)
    rows, pagination = paginate(qs, params)
    return Response(ctx.payload(PatientHistorySerializer(rows, many=True).data, pagination=pagination))


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def patient_history_detail(request, pk: int):
    ctx = ScreenContext.for_request(request, access.PATIENT_HISTORY)
    if request.method == 'GET':
        entry = get_record(_history(), pk)
        ctx.require(access.READ, entry)
        return Response({'ok': True, 'data': PatientHistorySerializer(entry).data})

    ctx.require(access.DELETE)
    entry = get_record(_history(), pk)
    entry.delete()
    record_change(request, access.PATIENT_HISTORY, 'delete', obj_id=pk)
    return Response({'ok': True})
