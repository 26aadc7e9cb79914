from rest_framework import serializers

from clinic.models import Doctor
from clinic.serializers.common import CleanTextMixin, clean_text


class DoctorSerializer(CleanTextMixin, serializers.ModelSerializer):
    clean_fields = ('specialty', 'phone', 'qualification')

    class Meta:
        model = Doctor
        fields = [
            'id', 'name', 'specialty', 'email', 'phone', 'qualification', 'experience_years',
            'consultation_fee', 'is_available', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_name(self, v):
        v = clean_text(v)
        if len(v) < 2:
            raise serializers.ValidationError('Name must be at least 2 characters.')
        return v

    def validate_email(self, v):
        v = (v or '').strip().lower()
        qs = Doctor.objects.filter(email__iexact=v)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError('A doctor with this email already exists.')
        return v

    def validate_consultation_fee(self, v):
        if v is not None and v < 0:
            raise serializers.ValidationError('Fee cannot be negative.')
        return v


class DoctorOptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Doctor
        fields = ['id', 'name', 'specialty', 'consultation_fee', 'is_available']
