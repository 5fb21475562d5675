import bleach
from rest_framework import serializers

from dental.models import Appointment, Consultation, ScheduleNote, XRayImage


class AppointmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Appointment
        fields = ('id', 'patient', 'patient_name', 'patient_phone', 'patient_email', 'date', 'time',
                  'treatment', 'dentist', 'status', 'patient_type', 'insurance', 'insurance_member_id',
                  'notes', 'created_at', 'updated_at')
        read_only_fields = ('id', 'status', 'created_at', 'updated_at')
        extra_kwargs = {'patient_name': {'required': False}}

    def validate_notes(self, v):
        return bleach.clean((v or '').strip(), tags=[], strip=True)


class AppointmentQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    dateFrom = serializers.DateField(required=False)
    dateTo = serializers.DateField(required=False)
    dentist = serializers.CharField(max_length=255, required=False)
    status = serializers.ChoiceField(choices=Appointment.STATUS_CHOICES, required=False)
    patientId = serializers.IntegerField(min_value=1, required=False)


class AppointmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Appointment.STATUS_CHOICES)


class ScheduleNoteSerializer(serializers.ModelSerializer):
    class Meta:
        model = ScheduleNote
        fields = ('id', 'date', 'time_slot', 'doctor_name', 'note', 'type', 'created_at', 'updated_at')
        read_only_fields = ('id', 'created_at', 'updated_at')

    def validate_note(self, v):
        v = bleach.clean((v or '').strip(), tags=[], strip=True)
        if not v:
            raise serializers.ValidationError('Note cannot be empty')
        return v


class XRayImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = XRayImage
        fields = ('id', 'file', 'content_type', 'size', 'created_at')
        read_only_fields = fields


class ConsultationSerializer(serializers.ModelSerializer):
    patient_name = serializers.CharField(source='patient.name', read_only=True)
    patient_file_no = serializers.CharField(source='patient.patient_id', read_only=True)
    xray_images = XRayImageSerializer(many=True, read_only=True)

    class Meta:
        model = Consultation
        fields = ('id', 'patient', 'patient_name', 'patient_file_no', 'doctor', 'doctor_name', 'appointment',
                  'status', 'symptoms', 'examination', 'vital_signs', 'diagnosis', 'diagnosis_type',
                  'treatment_plan', 'prescriptions', 'follow_up_instructions', 'next_appointment',
                  'estimated_cost', 'discount_percent', 'treatment_items', 'xray_result', 'xray_images',
                  'started_at', 'completed_at', 'created_at', 'updated_at')
        read_only_fields = fields


class ConsultationStartSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    appointmentId = serializers.IntegerField(min_value=1, required=False, allow_null=True)


class TreatmentItemSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    code = serializers.CharField(max_length=64, required=False, allow_blank=True)
    cost = serializers.IntegerField(min_value=0)
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)


class ConsultationUpdateSerializer(serializers.Serializer):
    symptoms = serializers.CharField(required=False, allow_blank=True)
    examination = serializers.CharField(required=False, allow_blank=True)
    vital_signs = serializers.DictField(required=False)
    diagnosis = serializers.CharField(required=False, allow_blank=True)
    diagnosis_type = serializers.ChoiceField(choices=Consultation.DIAGNOSIS_CHOICES, required=False, allow_blank=True)
    treatment_plan = serializers.CharField(required=False, allow_blank=True)
    prescriptions = serializers.CharField(required=False, allow_blank=True)
    follow_up_instructions = serializers.CharField(required=False, allow_blank=True)
    next_appointment = serializers.DateField(required=False, allow_null=True)
    estimated_cost = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    discount_percent = serializers.IntegerField(min_value=0, max_value=100, required=False)
    treatment_items = TreatmentItemSerializer(many=True, required=False)


class XRayUploadSerializer(serializers.Serializer):
    note = serializers.CharField(required=False, allow_blank=True)
    radiologist = serializers.CharField(max_length=255, required=False, allow_blank=True)
