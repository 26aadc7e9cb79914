from rest_framework import serializers

from clinic.models import Appointment, Doctor, Patient
from clinic.serializers.common import CleanTextMixin


class AppointmentSerializer(CleanTextMixin, serializers.ModelSerializer):
    clean_fields = ('reason', 'diagnosis', 'notes', 'symptoms', 'appointment_day', 'appointment_time')
    patient_id = serializers.PrimaryKeyRelatedField(source='patient', queryset=Patient.objects.all())
    doctor_id = serializers.PrimaryKeyRelatedField(source='doctor', queryset=Doctor.objects.all())
    patient_name = serializers.CharField(source='patient.name', read_only=True)
    doctor_name = serializers.CharField(source='doctor.name', read_only=True)
    doctor_specialty = serializers.CharField(source='doctor.specialty', read_only=True)

    class Meta:
        model = Appointment
        fields = [
            'id', 'patient_id', 'patient_name', 'doctor_id', 'doctor_name', 'doctor_specialty',
            'appointment_date', 'status', 'reason', 'diagnosis', 'notes', 'symptoms',
            'is_emergency', 'appointment_day', 'appointment_time', 'reminder_date',
            'created_at', 'updated_at',
        ]
        # status only moves through the status endpoint
        read_only_fields = ['id', 'status', 'created_at', 'updated_at']


class AppointmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c for c, _ in Appointment.STATUS_CHOICES])
