from rest_framework import serializers

from clinical.models import Prescription
from clinical.serializers.common import clean_name


class PrescriptionSerializer(serializers.ModelSerializer):
    patientEnrollmentId = serializers.UUIDField(source='patient_enrollment_id', read_only=True)
    doctorId = serializers.UUIDField(source='doctor_id', read_only=True)
    hospitalId = serializers.UUIDField(source='hospital_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Prescription
        fields = [
            'id', 'patientEnrollmentId', 'medication', 'dosage', 'instructions',
            'doctorId', 'hospitalId', 'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class PrescriptionCreateSerializer(serializers.Serializer):
    patientEnrollmentId = serializers.UUIDField()
    medication = serializers.CharField(max_length=255)
    dosage = serializers.CharField(max_length=255)
    instructions = serializers.CharField()
    doctorId = serializers.UUIDField(required=False, allow_null=True)

    def validate_medication(self, v):
        return clean_name(v)

    def validate_dosage(self, v):
        return clean_name(v)

    def validate_instructions(self, v):
        return clean_name(v)


class PrescriptionUpdateSerializer(serializers.Serializer):
    medication = serializers.CharField(max_length=255, required=False)
    dosage = serializers.CharField(max_length=255, required=False)
    instructions = serializers.CharField(required=False)

    def validate_medication(self, v):
        return clean_name(v)

    def validate_dosage(self, v):
        return clean_name(v)

    def validate_instructions(self, v):
        return clean_name(v)
