from django.utils import timezone
from rest_framework import serializers

from clinical.models import Hospital
from clinical.serializers.common import clean_name, clean_text


class HospitalSerializer(serializers.ModelSerializer):
    """Read/write representation of a hospital.

    ``licenseNumber`` is declared explicitly so duplicate licenses are
    reported as a conflict by the service layer rather than as a field
    validation error.
    """
    licenseNumber = serializers.CharField(source='license_number', max_length=100)
    establishedYear = serializers.IntegerField(source='established_year', min_value=1000)
    bedCapacity = serializers.IntegerField(source='bed_capacity', min_value=0)
    emergencyContact = serializers.CharField(source='emergency_contact', max_length=50)
    createdBy = serializers.UUIDField(source='created_by_id', read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Hospital
        fields = [
            'id', 'name', 'address', 'phone', 'email', 'website', 'licenseNumber',
            'establishedYear', 'bedCapacity', 'emergencyContact', 'description',
            'createdBy', 'createdAt', 'updatedAt',
        ]
        extra_kwargs = {
            'website': {'required': False, 'allow_blank': True},
            'description': {'required': False, 'allow_blank': True},
        }

    def validate_name(self, v):
        return clean_name(v)

    def validate_address(self, v):
        return clean_name(v)

    def validate_description(self, v):
        return clean_text(v)

    def validate_establishedYear(self, v):
        if v > timezone.now().year:
            raise serializers.ValidationError('Established year cannot be in the future')
        return v
