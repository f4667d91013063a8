from rest_framework import serializers

from clinical.models import User
from clinical.policy import Role
from clinical.serializers.common import HospitalBriefSerializer, clean_name, normalize_email


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_email(self, v):
        return normalize_email(v)

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required')
        return v


class RegisterSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    role = serializers.ChoiceField(choices=[r.value for r in Role])
    hospitalId = serializers.UUIDField(required=False, allow_null=True)
    specialization = serializers.CharField(max_length=255, required=False, allow_blank=True)

    def validate_name(self, v):
        return clean_name(v)

    def validate_email(self, v):
        return normalize_email(v)


class HospitalAdminCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    hospitalId = serializers.UUIDField()

    def validate_name(self, v):
        return clean_name(v)

    def validate_email(self, v):
        return normalize_email(v)


class HospitalAdminUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    email = serializers.EmailField(required=False)
    hospitalId = serializers.UUIDField(required=False)

    def validate_name(self, v):
        return clean_name(v)

    def validate_email(self, v):
        return normalize_email(v)


class PublicUserSerializer(serializers.ModelSerializer):
    """User as exposed by the API.  The password hash is never part of it."""
    hospitalId = serializers.UUIDField(source='hospital_id', read_only=True, allow_null=True)
    hospital = HospitalBriefSerializer(read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source='date_joined', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'role', 'hospitalId', 'hospital', 'createdAt']
        read_only_fields = fields
