from rest_framework import serializers

from dental.models import InsuranceClaim, Payment, PaymentItem, TreatmentPricing
from dental.serializers.clinical import TreatmentItemSerializer


class PaymentItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentItem
        fields = ('id', 'item_name', 'quantity', 'unit_price', 'total_price')
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    items = PaymentItemSerializer(many=True, read_only=True)

    class Meta:
        model = Payment
        fields = ('id', 'patient', 'patient_name', 'treatment_name', 'appointment', 'consultation',
                  'total_amount', 'discount_percent', 'discount_amount', 'final_total', 'amount_paid',
                  'payment_status', 'payment_method', 'insurance_provider', 'collected_by', 'payment_date',
                  'notes', 'items', 'created_at', 'updated_at')
        read_only_fields = fields


class PaymentCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    treatmentName = serializers.CharField(max_length=255)
    totalAmount = serializers.IntegerField(min_value=0)
    discountPercent = serializers.IntegerField(min_value=0, max_value=100, required=False, default=0)
    paymentMethod = serializers.ChoiceField(choices=Payment.METHOD_CHOICES, required=False, default='cash')
    insuranceProvider = serializers.CharField(max_length=32, required=False, allow_blank=True)
    appointmentId = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    items = TreatmentItemSerializer(many=True, required=False)


class RecordPaymentSerializer(serializers.Serializer):
    amount = serializers.IntegerField()
    method = serializers.ChoiceField(choices=Payment.METHOD_CHOICES, required=False, default='cash')
    collectedBy = serializers.CharField(max_length=255, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class InsuranceClaimSerializer(serializers.ModelSerializer):
    class Meta:
        model = InsuranceClaim
        fields = ('id', 'patient', 'patient_name', 'consultation', 'appointment', 'insurance_provider',
                  'treatment_details', 'claim_status', 'claim_number', 'submitted_at', 'approved_at',
                  'rejection_reason', 'created_at', 'updated_at')
        read_only_fields = fields


class ClaimSubmitSerializer(serializers.Serializer):
    signature = serializers.CharField(allow_blank=True)


class ClaimStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=InsuranceClaim.STATUS_CHOICES)
    reason = serializers.CharField(required=False, allow_blank=True)


class TreatmentPricingSerializer(serializers.ModelSerializer):
    class Meta:
        model = TreatmentPricing
        fields = ('id', 'name', 'category', 'base_price', 'duration', 'description', 'insurance_provider',
                  'is_active', 'smart_item_code', 'created_at', 'updated_at')
        read_only_fields = ('id', 'created_at', 'updated_at')

    def validate_insurance_provider(self, v):
        return (v or '').strip().upper()


class CopaymentRequestSerializer(serializers.Serializer):
    provider = serializers.CharField(max_length=32, required=False, allow_blank=True)
    items = TreatmentItemSerializer(many=True, required=False)
    total = serializers.IntegerField(min_value=0, required=False)
    copaymentPercentage = serializers.IntegerField(min_value=0, max_value=100, required=False)
    deductible = serializers.IntegerField(min_value=0, required=False)
    installments = serializers.IntegerField(min_value=1, max_value=24, required=False, default=3)
    downPaymentPercentage = serializers.IntegerField(min_value=0, max_value=100, required=False, default=30)
