from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic import access
from clinic.models import Doctor
from clinic.serializers.doctor import DoctorSerializer
from clinic.services.inflight import inflight_guard
from clinic.services.scoping import ScreenContext
from clinic.views.common import apply_filters, get_record, list_params, paginate, record_change

SEARCH_FIELDS = ('name', 'specialty', 'email')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def doctors(request):
    """List doctors (``q`` searches name, specialty and email) or add one."""
    ctx = ScreenContext.for_request(request, access.DOCTORS)
    if request.method == 'POST':
        ctx.require(access.CREATE)
        with inflight_guard(request.user, access.DOCTORS, request.data):
            s = DoctorSerializer(data=request.data)
            s.is_valid(raise_exception=True)
            doctor = s.save()
        record_change(request, access.DOCTORS, 'create', doctor)
        return Response({'ok': True, 'data': DoctorSerializer(doctor).data}, status=201)

    params = list_params(request)
    qs = apply_filters(ctx.queryset(Doctor.objects.all()), params, SEARCH_FIELDS)
    rows, pagination = paginate(qs, params)
    return Response(ctx.payload(DoctorSerializer(rows, many=True).data, pagination=pagination))


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def doctor_detail(request, pk: int):
    ctx = ScreenContext.for_request(request, access.DOCTORS)
    if request.method == 'GET':
        doctor = get_record(Doctor.objects.all(), pk)
        return Response({'ok': True, 'data': DoctorSerializer(doctor).data})

    if request.method == 'DELETE':
        ctx.require(access.DELETE)
        doctor = get_record(Doctor.objects.all(), pk)
        doctor.delete()
        record_change(request, access.DOCTORS, 'delete', obj_id=pk)
        return Response({'ok': True})

    ctx.require(access.UPDATE)
    doctor = get_record(Doctor.objects.all(), pk)
    s = DoctorSerializer(doctor, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    doctor = s.save()
    record_change(request, access.DOCTORS, 'update', doctor, detail={'fields': sorted(s.validated_data)})
    return Response({'ok': True, 'data': DoctorSerializer(doctor).data})
