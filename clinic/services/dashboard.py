"""
Dashboard figures.

Staff dashboards get hospital-wide counts, each one included only when the
role may read the resource it is computed from. A patient dashboard is
built from the patient's own rows and nothing else.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from django.db.models import Count, Q, Sum
from django.utils import timezone

from clinic import access
from clinic.models import Appointment, Doctor, Medicine, Patient, Payment, Prescription
from clinic.services.retry import retry_read


def _revenue(qs) -> Decimal:
    return qs.aggregate(total=Sum('amount'))['total'] or Decimal('0')


def hospital_stats(role: Optional[str]) -> dict:
    def readable(resource):
        return access.can_access(role, access.READ, resource)

    def compute():
        stats = {}
        if readable(access.DOCTORS):
            stats['total_doctors'] = Doctor.objects.count()
        if readable(access.PATIENTS):
            counts = Patient.objects.aggregate(
                total=Count('id'),
                outpatients=Count('id', filter=Q(patient_type=Patient.TYPE_OUTPATIENT)),
                inpatients=Count('id', filter=Q(patient_type=Patient.TYPE_INPATIENT)),
            )
            stats['total_patients'] = counts['total']
            stats['outpatients'] = counts['outpatients']
            stats['inpatients'] = counts['inpatients']
        if readable(access.APPOINTMENTS):
            stats['scheduled_appointments'] = Appointment.objects.filter(
                status=Appointment.STATUS_SCHEDULED
            ).count()
        if readable(access.MEDICINES):
            stats['total_medicines'] = Medicine.objects.count()
        if readable(access.PAYMENTS):
            stats['total_revenue'] = _revenue(Payment.objects.filter(payment_status=Payment.STATUS_COMPLETED))
        return stats

    return retry_read(compute)


def patient_stats(patient_id: Optional[int]) -> dict:
    if patient_id is None:
        return {}

    def compute():
        appts = Appointment.objects.filter(patient_id=patient_id).aggregate(
            total=Count('id'),
            upcoming=Count('id', filter=Q(status=Appointment.STATUS_SCHEDULED,
                                          appointment_date__gte=timezone.now())),
            completed=Count('id', filter=Q(status=Appointment.STATUS_COMPLETED)),
            cancelled=Count('id', filter=Q(status=Appointment.STATUS_CANCELLED)),
        )
        today = timezone.localdate()
        active_rx = sum(
            1 for prescribed, days in Prescription.objects.filter(patient_id=patient_id)
            .values_list('prescribed_date', 'duration_days')
            if (today - prescribed).days < days
        )
        payments = Payment.objects.filter(patient_id=patient_id)
        return {
            'total_appointments': appts['total'],
            'upcoming_appointments': appts['upcoming'],
            'completed_appointments': appts['completed'],
            'cancelled_appointments': appts['cancelled'],
            'active_prescriptions': active_rx,
            'pending_payments': payments.filter(payment_status=Payment.STATUS_PENDING).count(),
            'total_paid': _revenue(payments.filter(payment_status=Payment.STATUS_COMPLETED)),
        }

    return retry_read(compute)
