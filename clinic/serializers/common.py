import bleach
from rest_framework import serializers


def clean_text(v):
    if v is None:
        return v
    return bleach.clean(str(v).strip(), tags=[], strip=True)


class CleanTextMixin:
    """Strip markup from the free-text fields listed in ``clean_fields``."""
    clean_fields: tuple = ()

    def validate(self, attrs):
        attrs = super().validate(attrs)
        for field in self.clean_fields:
            if isinstance(attrs.get(field), str):
                attrs[field] = clean_text(attrs[field])
        return attrs


class ListQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, max_length=100)
    page = serializers.IntegerField(required=False, min_value=1)
    pageSize = serializers.IntegerField(required=False, min_value=1, max_value=200)
    status = serializers.CharField(required=False, allow_blank=True, max_length=16)
    patient_type = serializers.CharField(required=False, allow_blank=True, max_length=16)
    payment_status = serializers.CharField(required=False, allow_blank=True, max_length=16)
    category = serializers.CharField(required=False, allow_blank=True, max_length=64)
    patient_id = serializers.IntegerField(required=False, min_value=1)
    doctor_id = serializers.IntegerField(required=False, min_value=1)
