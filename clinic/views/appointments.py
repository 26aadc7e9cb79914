"""
Appointment endpoints.

Booking is open to every role that may create appointments. A patient
always books for their own linked record: whatever ``patient_id`` the
request carries is replaced before validation. Status moves only along
``scheduled -> completed | cancelled`` and the move is applied with a
compare-and-set so two concurrent updates cannot both win.
"""
from __future__ import annotations

from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic import access
from clinic.models import Appointment, Doctor, Patient
from clinic.serializers.appointment import AppointmentSerializer, AppointmentStatusSerializer
from clinic.serializers.doctor import DoctorOptionSerializer
from clinic.services.inflight import inflight_guard
from clinic.services.retry import retry_read
from clinic.services.scoping import ScreenContext
from clinic.views.common import apply_filters, body_object, get_record, list_params, paginate, record_change

SEARCH_FIELDS = ('patient__name', 'doctor__name', 'reason', 'symptoms')


def _appointments():
    return Appointment.objects.select_related('patient', 'doctor')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def appointments(request):
    ctx = ScreenContext.for_request(request, access.APPOINTMENTS)
    if request.method == 'POST':
        return _book(request, ctx)
    params = list_params(request)
    qs = apply_filters(ctx.queryset(_appointments()), params, SEARCH_FIELDS)
    rows, pagination = paginate(qs, params)
    return Response(ctx.payload(AppointmentSerializer(rows, many=True).data, pagination=pagination))


def _book(request, ctx):
    ctx.require(access.CREATE)
    data = body_object(request).copy()
    if ctx.own_only(access.CREATE):
        data['patient_id'] = ctx.patient_id
    with inflight_guard(request.user, access.APPOINTMENTS, data):
        s = AppointmentSerializer(data=data)
        s.is_valid(raise_exception=True)
        appt = s.save()
    record_change(request, access.APPOINTMENTS, 'create', appt,
                  detail={'patient_id': appt.patient_id, 'doctor_id': appt.doctor_id})
    return Response({'ok': True, 'data': AppointmentSerializer(appt).data}, status=201)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def appointment_detail(request, pk: int):
    ctx = ScreenContext.for_request(request, access.APPOINTMENTS)
    if request.method == 'GET':
        appt = get_record(_appointments(), pk)
        ctx.require(access.READ, appt)
        return Response({'ok': True, 'data': AppointmentSerializer(appt).data})

    action = access.UPDATE if request.method == 'PUT' else access.DELETE
    ctx.require(action)
    appt = get_record(_appointments(), pk)
    ctx.require(action, appt)

    if action == access.DELETE:
        appt.delete()
        record_change(request, access.APPOINTMENTS, 'delete', obj_id=pk)
        return Response({'ok': True})

    s = AppointmentSerializer(appt, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    appt = s.save()
    record_change(request, access.APPOINTMENTS, 'update', appt, detail={'fields': sorted(s.validated_data)})
    return Response({'ok': True, 'data': AppointmentSerializer(appt).data})


@api_view(['PUT', 'POST'])
@permission_classes([IsAuthenticated])
def appointment_status(request, pk: int):
    ctx = ScreenContext.for_request(request, access.APPOINTMENTS)
    ctx.require(access.STATUS)
    s = AppointmentStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    new_status = s.validated_data['status']

    appt = get_record(_appointments(), pk)
    ctx.require(access.STATUS, appt)
    current = appt.status
    if not access.can_transition(current, new_status):
        raise ValidationError({'status': [f'Cannot change status from {current} to {new_status}.']})

    updated = Appointment.objects.filter(pk=appt.pk, status=current).update(
        status=new_status, updated_at=timezone.now()
    )
    if not updated:
        raise ValidationError({'status': ['The appointment was changed by someone else. Reload and try again.']})
    appt.refresh_from_db()
    record_change(request, access.APPOINTMENTS, 'status', appt, detail={'from': current, 'to': new_status})
    return Response({'ok': True, 'data': AppointmentSerializer(appt).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def appointment_options(request):
    """Choices for the booking form: available doctors and the patients the caller may book for."""
    ctx = ScreenContext.for_request(request, access.APPOINTMENTS)
    if not access.can_access(ctx.role, access.CREATE, access.APPOINTMENTS):
        raise PermissionDenied("You don't have permission to create this record.")

    def load():
        doctors = list(Doctor.objects.filter(is_available=True))
        patients = list(
            Patient.objects.filter(access.scope_query(ctx.role, ctx.patient_id, access.PATIENTS))
            .values('id', 'name')
        )
        return doctors, patients

    doctors, patients = retry_read(load)
    return Response(ctx.payload({
        'doctors': DoctorOptionSerializer(doctors, many=True).data,
        'patients': patients,
        'patient_id': ctx.patient_id,
    }))
