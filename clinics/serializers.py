"""
API Serializers for the clinic admin dashboard
"""
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers
from .models import ClinicLicense, Specialization, SiteSetting, normalize_license_number
from .models_verification_audit import VerificationAttempt


class ClinicLicenseSerializer(serializers.ModelSerializer):
    """Create/update/read serializer for clinic records"""

    license_status_display = serializers.CharField(source='get_license_status_display', read_only=True)

    class Meta:
        model = ClinicLicense
        fields = [
            'id', 'clinic_name', 'license_number', 'doctor_name', 'specialization',
            'license_status', 'license_status_display', 'issue_date', 'expiry_date',
            'phone', 'address', 'qr_code', 'verification_count',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'qr_code', 'verification_count', 'created_at', 'updated_at']
        extra_kwargs = {
            # Uniqueness is checked on the normalized value in validate_license_number
            'license_number': {'validators': []},
            'doctor_name': {'allow_blank': True},
            'phone': {'allow_blank': True},
            'address': {'allow_blank': True},
        }

    def validate_clinic_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Clinic name is required")
        return value

    def validate_specialization(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Specialization is required")
        return value

    def validate_license_number(self, value):
        value = normalize_license_number(value)
        if not value:
            raise serializers.ValidationError("License number is required")

        # Apply the model's shape validator to the normalized value
        for validator in ClinicLicense._meta.get_field('license_number').validators:
            try:
                validator(value)
            except DjangoValidationError as e:
                raise serializers.ValidationError(e.messages)

        existing = ClinicLicense.objects.filter(license_number=value)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
            if existing.exists():
                raise serializers.ValidationError("License number belongs to another clinic")
        elif existing.exists():
            raise serializers.ValidationError("License number already exists")

        return value

    def validate(self, attrs):
        issue_date = attrs.get('issue_date', getattr(self.instance, 'issue_date', None))
        expiry_date = attrs.get('expiry_date', getattr(self.instance, 'expiry_date', None))
        if issue_date and expiry_date and expiry_date < issue_date:
            raise serializers.ValidationError({'expiry_date': "Expiry date cannot be before the issue date"})
        return attrs


class PublicClinicSerializer(serializers.ModelSerializer):
    """Fields shown to the public after a successful verification"""

    license_status_display = serializers.CharField(source='get_license_status_display', read_only=True)
    is_expired = serializers.BooleanField(read_only=True)

    class Meta:
        model = ClinicLicense
        fields = [
            'clinic_name', 'license_number', 'doctor_name', 'specialization',
            'license_status', 'license_status_display', 'is_expired',
            'issue_date', 'expiry_date', 'phone', 'address',
        ]


class SpecializationSerializer(serializers.ModelSerializer):

    class Meta:
        model = Specialization
        fields = ['id', 'name_ar', 'name_en', 'is_active', 'sort_order', 'created_at', 'updated_at']
        read_only_fields = ['id', 'sort_order', 'created_at', 'updated_at']
        extra_kwargs = {
            'name_en': {'allow_blank': True},
        }

    def validate_name_ar(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Arabic name is required")
        return value

    def validate_name_en(self, value):
        if value is None:
            return None
        return value.strip() or None

    def create(self, validated_data):
        validated_data['sort_order'] = Specialization.next_sort_order()
        return super().create(validated_data)


class SiteSettingSerializer(serializers.ModelSerializer):

    class Meta:
        model = SiteSetting
        fields = ['id', 'key', 'value', 'description', 'updated_at']
        read_only_fields = fields


class SiteSettingsUpdateSerializer(serializers.Serializer):
    """Bulk update payload: {"settings": {"footer_title": "...", ...}}"""

    settings = serializers.DictField(child=serializers.CharField(allow_blank=True, allow_null=True))

    def validate_settings(self, value):
        if not value:
            raise serializers.ValidationError("No settings provided")
        known_keys = set(SiteSetting.objects.filter(key__in=value.keys()).values_list('key', flat=True))
        unknown = sorted(set(value.keys()) - known_keys)
        if unknown:
            raise serializers.ValidationError(f"Unknown setting keys: {', '.join(unknown)}")
        return value


class VerificationAttemptSerializer(serializers.ModelSerializer):

    clinic_name = serializers.CharField(source='clinic.clinic_name', read_only=True, default=None)

    class Meta:
        model = VerificationAttempt
        fields = [
            'id', 'license_number', 'verification_method', 'verification_status',
            'clinic', 'clinic_name', 'ip_address', 'user_agent', 'created_at',
        ]
        read_only_fields = fields
