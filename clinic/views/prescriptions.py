from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic import access
from clinic.models import Prescription
from clinic.serializers.pharmacy import PrescriptionSerializer
from clinic.services.inflight import inflight_guard
from clinic.services.scoping import ScreenContext
from clinic.views.common import apply_filters, get_record, list_params, paginate, record_change

SEARCH_FIELDS = ('patient__name', 'doctor__name', 'medicine__name')


def _prescriptions():
    return Prescription.objects.select_related('patient', 'doctor', 'medicine')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def prescriptions(request):
    ctx = ScreenContext.for_request(request, access.PRESCRIPTIONS)
    if request.method == 'POST':
        ctx.require(access.CREATE)
        with inflight_guard(request.user, access.PRESCRIPTIONS, request.data):
            s = PrescriptionSerializer(data=request.data)
            s.is_valid(raise_exception=True)
            rx = s.save()
        record_change(request, access.PRESCRIPTIONS, 'create', rx, detail={'patient_id': rx.patient_id})
        return Response({'ok': True, 'data': PrescriptionSerializer(rx).data}, status=201)

    params = list_params(request)
    qs = apply_filters(ctx.queryset(_prescriptions()), params, SEARCH_FIELDS)
    rows, pagination = paginate(qs, params)
    return Response(ctx.payload(PrescriptionSerializer(rows, many=True).data, pagination=pagination))


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def prescription_detail(request, pk: int):
    ctx = ScreenContext.for_request(request, access.PRESCRIPTIONS)
    if request.method == 'GET':
        rx = get_record(_prescriptions(), pk)
        ctx.require(access.READ, rx)
        return Response({'ok': True, 'data': PrescriptionSerializer(rx).data})

    action = access.UPDATE if request.method == 'PUT' else access.DELETE
    ctx.require(action)
    rx = get_record(_prescriptions(), pk)

    if action == access.DELETE:
        rx.delete()
        record_change(request, access.PRESCRIPTIONS, 'delete', obj_id=pk)
        return Response({'ok': True})

    s = PrescriptionSerializer(rx, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    rx = s.save()
    record_change(request, access.PRESCRIPTIONS, 'update', rx, detail={'fields': sorted(s.validated_data)})
    return Response({'ok': True, 'data': PrescriptionSerializer(rx).data})
