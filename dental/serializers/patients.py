import bleach
from rest_framework import serializers

from dental.models import MedicalRecord, Patient, TreatmentNote


def _clean(v):
    return bleach.clean((v or '').strip(), tags=[], strip=True)


class PatientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Patient
        fields = ('id', 'patient_id', 'name', 'gender', 'date_of_birth', 'phone', 'email', 'address',
                  'emergency_contact', 'emergency_phone', 'patient_type', 'insurance',
                  'insurance_member_id', 'smart_patient_number', 'last_visit', 'next_appointment',
                  'created_at', 'updated_at')
        read_only_fields = ('id', 'patient_id', 'created_at', 'updated_at')

    def validate_name(self, v):
        v = _clean(v)
        if len(v) < 2:
            raise serializers.ValidationError('Name must be at least 2 characters')
        return v

    def validate_phone(self, v):
        return _clean(v)

    def validate_address(self, v):
        return _clean(v)


class PatientListQuerySerializer(serializers.Serializer):
    q = serializers.CharField(max_length=64, required=False, allow_blank=True)
    type = serializers.ChoiceField(choices=Patient.TYPE_CHOICES, required=False)
    page = serializers.IntegerField(required=False, min_value=1)
    pageSize = serializers.IntegerField(required=False, min_value=1, max_value=200)


class MedicalRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = MedicalRecord
        fields = ('id', 'patient', 'condition', 'date', 'description', 'doctor', 'treatment',
                  'created_at', 'updated_at')
        read_only_fields = ('id', 'patient', 'created_at', 'updated_at')

    def validate_description(self, v):
        return _clean(v)


class TreatmentNoteSerializer(serializers.ModelSerializer):
    patient_name = serializers.CharField(source='patient.name', read_only=True)

    class Meta:
        model = TreatmentNote
        fields = ('id', 'patient', 'patient_name', 'date', 'doctor', 'procedure', 'notes', 'follow_up',
                  'created_at', 'updated_at')
        read_only_fields = ('id', 'patient', 'patient_name', 'created_at', 'updated_at')

    def validate_notes(self, v):
        return _clean(v)


class DuplicateCheckSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    phone = serializers.CharField(max_length=32)


class FamilyLookupSerializer(serializers.Serializer):
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    excludeId = serializers.IntegerField(min_value=1, required=False)

    def validate(self, attrs):
        if not (attrs.get('phone') or '').strip() and not (attrs.get('email') or '').strip():
            raise serializers.ValidationError('A phone number or email address is required')
        return attrs
