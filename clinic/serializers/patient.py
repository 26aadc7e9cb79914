from rest_framework import serializers

from clinic.models import Patient, PatientHistory
from clinic.serializers.common import CleanTextMixin, clean_text

PATIENT_FIELDS = [
    'id', 'name', 'email', 'phone', 'date_of_birth', 'gender', 'address', 'blood_group',
    'medical_history', 'age', 'patient_type', 'has_diabetes', 'has_hypertension',
    'has_sugar_issues', 'family_medical_history', 'created_at', 'updated_at',
]


class PatientSerializer(CleanTextMixin, serializers.ModelSerializer):
    clean_fields = ('phone', 'gender', 'address', 'blood_group', 'medical_history', 'family_medical_history')

    class Meta:
        model = Patient
        fields = PATIENT_FIELDS
        read_only_fields = ['id', 'created_at', 'updated_at']
        extra_kwargs = {'phone': {'required': False}}

    def validate_name(self, v):
        v = clean_text(v)
        if len(v) < 2:
            raise serializers.ValidationError('Name must be at least 2 characters.')
        return v

    def validate_email(self, v):
        v = (v or '').strip().lower()
        qs = Patient.objects.filter(email__iexact=v)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError('A patient with this email already exists.')
        return v

    def validate_age(self, v):
        if v is not None and v > 150:
            raise serializers.ValidationError('Age looks wrong.')
        return v


class PatientSelfSerializer(PatientSerializer):
    """What a patient may change on their own record: everything but the link email and admission type."""

    class Meta(PatientSerializer.Meta):
        read_only_fields = ['id', 'email', 'patient_type', 'created_at', 'updated_at']


class PatientHistorySerializer(CleanTextMixin, serializers.ModelSerializer):
    clean_fields = ('symptoms', 'diagnosis', 'treatment', 'notes')
    patient_id = serializers.PrimaryKeyRelatedField(source='patient', queryset=Patient.objects.all())
    patient_name = serializers.CharField(source='patient.name', read_only=True)

    class Meta:
        model = PatientHistory
        fields = [
            'id', 'patient_id', 'patient_name', 'visit_date', 'symptoms', 'diagnosis',
            'treatment', 'notes', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
