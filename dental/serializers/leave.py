import bleach
from rest_framework import serializers

from dental.models import LeaveRequest


class LeaveRequestSerializer(serializers.ModelSerializer):
    user_name = serializers.CharField(source='user.display_name', read_only=True)
    user_email = serializers.CharField(source='user.email', read_only=True)
    reviewed_by_name = serializers.SerializerMethodField()
    days = serializers.IntegerField(read_only=True)

    class Meta:
        model = LeaveRequest
        fields = ('id', 'user', 'user_name', 'user_email', 'leave_type', 'start_date', 'end_date', 'days',
                  'reason', 'status', 'reviewed_by', 'reviewed_by_name', 'reviewed_at', 'review_notes',
                  'created_at', 'updated_at')
        read_only_fields = fields

    def get_reviewed_by_name(self, obj):
        return obj.reviewed_by.display_name if obj.reviewed_by else None


class LeaveRequestCreateSerializer(serializers.Serializer):
    leave_type = serializers.ChoiceField(choices=LeaveRequest.TYPE_CHOICES)
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    reason = serializers.CharField()

    def validate_reason(self, v):
        return bleach.clean(v.strip(), tags=[], strip=True)

    def validate(self, attrs):
        if attrs['end_date'] < attrs['start_date']:
            raise serializers.ValidationError({'end_date': 'end_date must not be before start_date'})
        return attrs


class LeaveReviewSerializer(serializers.Serializer):
    review_notes = serializers.CharField(required=False, allow_blank=True)
