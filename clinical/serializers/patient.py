from rest_framework import serializers

from clinical.models import PatientEnrollment
from clinical.serializers.common import clean_name
from clinical.serializers.doctor import DoctorSummarySerializer

GENDERS = [g for g, _ in PatientEnrollment.GENDER_CHOICES]


class PatientSerializer(serializers.ModelSerializer):
    doctorId = serializers.UUIDField(source='doctor_id', read_only=True)
    hospitalId = serializers.UUIDField(source='hospital_id', read_only=True)
    dateOfAdmission = serializers.DateTimeField(source='date_of_admission', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = PatientEnrollment
        fields = [
            'id', 'name', 'age', 'gender', 'doctorId', 'hospitalId',
            'dateOfAdmission', 'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class RecentPatientSerializer(PatientSerializer):
    doctor = DoctorSummarySerializer(read_only=True)

    class Meta(PatientSerializer.Meta):
        fields = PatientSerializer.Meta.fields + ['doctor']
        read_only_fields = fields


class PatientCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    age = serializers.IntegerField(min_value=0, max_value=150)
    gender = serializers.ChoiceField(choices=GENDERS)
    doctorId = serializers.UUIDField(required=False, allow_null=True)
    hospitalId = serializers.UUIDField(required=False, allow_null=True)
    dateOfAdmission = serializers.DateTimeField(required=False, allow_null=True)

    def validate_name(self, v):
        return clean_name(v)


class PatientUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    age = serializers.IntegerField(min_value=0, max_value=150, required=False)
    gender = serializers.ChoiceField(choices=GENDERS, required=False)
    dateOfAdmission = serializers.DateTimeField(required=False)

    def validate_name(self, v):
        return clean_name(v)
