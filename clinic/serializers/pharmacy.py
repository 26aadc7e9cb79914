from rest_framework import serializers

from clinic.models import Doctor, Medicine, Patient, Prescription
from clinic.serializers.common import CleanTextMixin, clean_text


class MedicineSerializer(CleanTextMixin, serializers.ModelSerializer):
    clean_fields = ('description', 'manufacturer', 'category')

    class Meta:
        model = Medicine
        fields = [
            'id', 'name', 'description', 'manufacturer', 'category', 'stock_quantity',
            'unit_price', 'expiry_date', 'is_available', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Name is required.')
        return v

    def validate_unit_price(self, v):
        if v is not None and v < 0:
            raise serializers.ValidationError('Price cannot be negative.')
        return v


class PrescriptionSerializer(CleanTextMixin, serializers.ModelSerializer):
    clean_fields = ('dosage', 'frequency', 'instructions')
    patient_id = serializers.PrimaryKeyRelatedField(source='patient', queryset=Patient.objects.all())
    doctor_id = serializers.PrimaryKeyRelatedField(source='doctor', queryset=Doctor.objects.all())
    medicine_id = serializers.PrimaryKeyRelatedField(source='medicine', queryset=Medicine.objects.all())
    patient_name = serializers.CharField(source='patient.name', read_only=True)
    doctor_name = serializers.CharField(source='doctor.name', read_only=True)
    medicine_name = serializers.CharField(source='medicine.name', read_only=True)

    class Meta:
        model = Prescription
        fields = [
            'id', 'patient_id', 'patient_name', 'doctor_id', 'doctor_name', 'medicine_id',
            'medicine_name', 'dosage', 'frequency', 'duration_days', 'instructions',
            'prescribed_date', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'prescribed_date', 'created_at', 'updated_at']

    def validate_duration_days(self, v):
        if v < 1:
            raise serializers.ValidationError('Duration must be at least one day.')
        return v
