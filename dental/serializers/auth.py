import bleach
from rest_framework import serializers

from dental.models import InviteCode, User


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(required=False, allow_blank=True)
    email = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField()

    def validate(self, attrs):
        attrs['username'] = (attrs.get('username') or attrs.get('email') or '').strip()
        if not attrs['username']:
            raise serializers.ValidationError('Username or email is required')
        return attrs


class RegisterStaffSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    fullName = serializers.CharField(max_length=150)
    inviteCode = serializers.CharField(max_length=64)
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, required=False)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True)
    specialization = serializers.CharField(max_length=128, required=False, allow_blank=True)
    licenseNumber = serializers.CharField(max_length=64, required=False, allow_blank=True)

    def validate_fullName(self, v):
        v = bleach.clean((v or '').strip(), tags=[], strip=True)
        if len(v) < 2:
            raise serializers.ValidationError('Full name must be at least 2 characters')
        return v


class UserSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='display_name', read_only=True)

    class Meta:
        model = User
        fields = ('id', 'username', 'email', 'name', 'first_name', 'last_name', 'role', 'phone',
                  'specialization', 'license_number', 'is_active', 'date_joined')
        read_only_fields = fields


class SetRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES)


class InviteCodeSerializer(serializers.ModelSerializer):
    created_by_name = serializers.SerializerMethodField()

    class Meta:
        model = InviteCode
        fields = ('id', 'code', 'role', 'max_uses', 'uses_count', 'is_active', 'expires_at',
                  'created_by', 'created_by_name', 'created_at', 'updated_at')
        read_only_fields = fields

    def get_created_by_name(self, obj):
        return obj.created_by.display_name if obj.created_by else None


class InviteCreateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=64, required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES)
    max_uses = serializers.IntegerField(min_value=1, required=False, default=1)
    expires_at = serializers.DateTimeField(required=False, allow_null=True)
