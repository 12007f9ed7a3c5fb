"""
Django Admin configuration for clinic records and the verification audit trail
"""

from django.contrib import admin
from .models import ClinicLicense, Specialization, SiteSetting
from .models_verification_audit import VerificationAttempt


@admin.register(ClinicLicense)
class ClinicLicenseAdmin(admin.ModelAdmin):
    list_display = [
        'clinic_name',
        'license_number',
        'doctor_name',
        'specialization',
        'license_status',
        'expiry_date',
        'verification_count',
    ]
    list_filter = ['license_status', 'specialization']
    search_fields = ['clinic_name', 'license_number', 'doctor_name', 'specialization']
    readonly_fields = ['qr_code', 'verification_count', 'created_at', 'updated_at']
    ordering = ['-created_at']


@admin.register(Specialization)
class SpecializationAdmin(admin.ModelAdmin):
    list_display = ['name_ar', 'name_en', 'is_active', 'sort_order']
    list_filter = ['is_active']
    list_editable = ['is_active', 'sort_order']
    search_fields = ['name_ar', 'name_en']


@admin.register(SiteSetting)
class SiteSettingAdmin(admin.ModelAdmin):
    list_display = ['key', 'value', 'updated_at']
    search_fields = ['key', 'value']
    readonly_fields = ['updated_at']


@admin.register(VerificationAttempt)
class VerificationAttemptAdmin(admin.ModelAdmin):
    """Admin interface for the license verification audit trail"""

    list_display = [
        'created_at',
        'license_number',
        'verification_method',
        'verification_status',
        'clinic',
        'ip_address',
    ]

    list_filter = [
        'verification_status',
        'verification_method',
        'created_at',
    ]

    search_fields = [
        'license_number',
        'clinic__clinic_name',
        'ip_address',
    ]

    readonly_fields = [
        'clinic',
        'license_number',
        'verification_method',
        'verification_status',
        'ip_address',
        'user_agent',
        'location_data',
        'created_at',
    ]

    date_hierarchy = 'created_at'

    ordering = ['-created_at']

    def has_add_permission(self, request):
        """Prevent manual creation of audit records"""
        return False

    def has_delete_permission(self, request, obj=None):
        """Prevent deletion of audit records"""
        return False

    def has_change_permission(self, request, obj=None):
        """Prevent modification of audit records"""
        return False
