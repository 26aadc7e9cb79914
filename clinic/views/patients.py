"""
Patient record endpoints.

Staff see and manage every record; a ``patient`` account sees and edits
only the record linked to it and may not change the link email or the
admission type. Any change to a record's email invalidates cached links.
"""
from __future__ import annotations

from django.db import transaction
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic import access
from clinic.models import Patient
from clinic.serializers.patient import PatientSelfSerializer, PatientSerializer
from clinic.services.inflight import inflight_guard
from clinic.services.linking import forget_links
from clinic.services.scoping import ScreenContext
from clinic.views.common import apply_filters, get_record, list_params, paginate, record_change

SEARCH_FIELDS = ('name', 'email', 'phone')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def patients(request):
    ctx = ScreenContext.for_request(request, access.PATIENTS)
    if request.method == 'POST':
        return _create_patient(request, ctx)
    params = list_params(request)
    qs = apply_filters(ctx.queryset(Patient.objects.all()), params, SEARCH_FIELDS)
    rows, pagination = paginate(qs, params)
    return Response(ctx.payload(PatientSerializer(rows, many=True).data, pagination=pagination))


def _create_patient(request, ctx):
    ctx.require(access.CREATE)
    with inflight_guard(request.user, access.PATIENTS, request.data):
        s = PatientSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        with transaction.atomic():
            patient = s.save()
    forget_links([patient.email])
    record_change(request, access.PATIENTS, 'create', patient)
    return Response({'ok': True, 'data': PatientSerializer(patient).data}, status=201)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def patient_detail(request, pk: int):
    ctx = ScreenContext.for_request(request, access.PATIENTS)
    if request.method == 'GET':
        patient = get_record(Patient.objects.all(), pk)
        ctx.require(access.READ, patient)
        return Response({'ok': True, 'data': PatientSerializer(patient).data})

    action = access.UPDATE if request.method == 'PUT' else access.DELETE
    ctx.require(action)
    patient = get_record(Patient.objects.all(), pk)
    ctx.require(action, patient)

    if action == access.DELETE:
        email = patient.email
        patient.delete()
        forget_links([email])
        record_change(request, access.PATIENTS, 'delete', obj_id=pk, detail={'email': email})
        return Response({'ok': True})

    serializer_class = PatientSelfSerializer if ctx.own_only(access.UPDATE) else PatientSerializer
    old_email = patient.email
    s = serializer_class(patient, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    patient = s.save()
    forget_links([old_email, patient.email])
    record_change(request, access.PATIENTS, 'update', patient,
                  detail={'fields': sorted(s.validated_data)})
    return Response({'ok': True, 'data': PatientSerializer(patient).data})
