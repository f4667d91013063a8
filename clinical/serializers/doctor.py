from rest_framework import serializers

from clinical.models import Doctor
from clinical.serializers.common import clean_name, normalize_email


class DoctorSerializer(serializers.ModelSerializer):
    hospitalId = serializers.UUIDField(source='hospital_id', read_only=True)
    hospitalName = serializers.CharField(source='hospital.name', read_only=True)
    userId = serializers.UUIDField(source='user_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Doctor
        fields = [
            'id', 'name', 'email', 'specialization', 'hospitalId', 'hospitalName',
            'userId', 'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class DoctorSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Doctor
        fields = ['id', 'name', 'specialization']


class DoctorCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    specialization = serializers.CharField(max_length=255)
    hospitalId = serializers.UUIDField(required=False, allow_null=True)

    def validate_name(self, v):
        return clean_name(v)

    def validate_email(self, v):
        return normalize_email(v)

    def validate_specialization(self, v):
        return clean_name(v)


class DoctorUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    specialization = serializers.CharField(max_length=255, required=False)

    def validate_name(self, v):
        return clean_name(v)

    def validate_specialization(self, v):
        return clean_name(v)
