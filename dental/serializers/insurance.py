from rest_framework import serializers


class MemberVerifySerializer(serializers.Serializer):
    memberNo = serializers.CharField(max_length=64)


class ItemsVerifySerializer(serializers.Serializer):
    memberNo = serializers.CharField(max_length=64)
    verifyItems = serializers.ListField(child=serializers.DictField(), allow_empty=False)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    benefitCode = serializers.CharField(max_length=32, required=False, allow_blank=True)
    procedureCode = serializers.CharField(max_length=32, required=False, allow_blank=True)


class SubmissionSerializer(serializers.Serializer):
    memberNo = serializers.CharField(max_length=64)
    authorizationNo = serializers.CharField(max_length=64)
    treatments = serializers.ListField(child=serializers.DictField(), allow_empty=False)
    totalAmount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    submissionType = serializers.ChoiceField(choices=['preauth', 'claim'], required=False, default='preauth')
    patientData = serializers.DictField(required=False)
    doctorData = serializers.DictField(required=False)
    diagnosisRemarks = serializers.CharField(required=False, allow_blank=True)
    clinicalNotes = serializers.CharField(required=False, allow_blank=True)
    claimFile = serializers.CharField(required=False, allow_blank=True)


class StatusQuerySerializer(serializers.Serializer):
    submissionId = serializers.CharField(max_length=64)
    type = serializers.ChoiceField(choices=['preauth', 'claim'], required=False, default='preauth')


class PriceListQuerySerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=['price', 'procedure'], required=False, default='price')
