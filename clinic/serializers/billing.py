from decimal import Decimal

from rest_framework import serializers

from clinic.models import Appointment, Patient, Payment
from clinic.serializers.common import CleanTextMixin


class PaymentSerializer(CleanTextMixin, serializers.ModelSerializer):
    clean_fields = ('payment_method', 'description')
    patient_id = serializers.PrimaryKeyRelatedField(source='patient', queryset=Patient.objects.all())
    appointment_id = serializers.PrimaryKeyRelatedField(
        source='appointment', queryset=Appointment.objects.all(), required=False, allow_null=True
    )
    patient_name = serializers.CharField(source='patient.name', read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'patient_id', 'patient_name', 'appointment_id', 'amount', 'payment_method',
            'payment_status', 'payment_date', 'description', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'payment_date', 'created_at', 'updated_at']

    def validate_amount(self, v):
        if v <= Decimal('0'):
            raise serializers.ValidationError('Amount must be positive.')
        return v

    def validate(self, attrs):
        attrs = super().validate(attrs)
        appointment = attrs.get('appointment')
        patient = attrs.get('patient')
        if appointment is not None and patient is not None and appointment.patient_id != patient.pk:
            raise serializers.ValidationError({'appointment_id': ['Appointment belongs to another patient.']})
        return attrs


class PaymentStatusSerializer(serializers.Serializer):
    payment_status = serializers.ChoiceField(choices=[c for c, _ in Payment.STATUS_CHOICES])
