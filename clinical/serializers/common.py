import bleach
from rest_framework import serializers

from clinical.models import Hospital


def clean_text(v: str) -> str:
    return bleach.clean((v or '').strip(), tags=[], strip=True)


def clean_name(v: str) -> str:
    v = clean_text(v)
    if not v:
        raise serializers.ValidationError('This field may not be blank.')
    return v


def normalize_email(v: str) -> str:
    return (v or '').strip().lower()


class HospitalBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Hospital
        fields = ['id', 'name', 'address']


class ScopeQuerySerializer(serializers.Serializer):
    """Optional list filters; only SUPER_ADMIN's hospital/doctor filters take effect."""
    hospitalId = serializers.UUIDField(required=False)
    doctorId = serializers.UUIDField(required=False)
    patientId = serializers.UUIDField(required=False)
