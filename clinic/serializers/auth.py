from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from clinic.access import DOCTOR, PATIENT
from clinic.serializers.common import clean_text


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_email(self, v):
        v = (v or '').strip().lower()
        if not v:
            raise serializers.ValidationError('Email is required.')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required.')
        return v


class SignupSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    full_name = serializers.CharField(max_length=255)
    role = serializers.ChoiceField(choices=[PATIENT, DOCTOR], default=PATIENT)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=32, default='')
    specialty = serializers.CharField(required=False, allow_blank=True, max_length=255, default='')

    def validate_email(self, v):
        return v.strip().lower()

    def validate_full_name(self, v):
        v = clean_text(v)
        if len(v) < 2:
            raise serializers.ValidationError('Name must be at least 2 characters.')
        return v

    def validate_phone(self, v):
        return clean_text(v)

    def validate_password(self, v):
        try:
            validate_password(v)
        except DjangoValidationError as e:
            raise serializers.ValidationError(e.messages)
        return v


class StaffStatusSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()


class StaffListQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, max_length=100)
    role = serializers.CharField(required=False, allow_blank=True, max_length=16)
    active = serializers.BooleanField(required=False, allow_null=True, default=None)
