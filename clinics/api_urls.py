"""
API URL Configuration for the admin dashboard
All endpoints are prefixed with /dashboard/api/
"""
from django.urls import path
from . import views
from .api_views import (
    ClinicListAPI,
    ClinicDetailAPI,
    ClinicSpecializationsAPI,
    ClinicQRDataAPI,
    QRPreviewAPI,
    ClearQRCodesAPI,
    ClearAllClinicsAPI,
    ExpireLicensesAPI,
    SpecializationListAPI,
    SpecializationDetailAPI,
    SpecializationToggleAPI,
    SiteSettingsAPI,
    LicenseStatisticsAPI,
    VerificationAuditAPI,
)

app_name = 'clinics_api'

urlpatterns = [
    # Clinics
    path('clinics/', ClinicListAPI.as_view(), name='clinic_list'),
    path('clinics/specializations/', ClinicSpecializationsAPI.as_view(), name='clinic_specializations'),
    path('clinics/export/', views.export_clinics, name='clinic_export'),
    path('clinics/expire/', ExpireLicensesAPI.as_view(), name='clinic_expire'),
    path('clinics/clear-qr-codes/', ClearQRCodesAPI.as_view(), name='clear_qr_codes'),
    path('clinics/clear-all/', ClearAllClinicsAPI.as_view(), name='clear_all_clinics'),
    path('clinics/<uuid:clinic_id>/', ClinicDetailAPI.as_view(), name='clinic_detail'),
    path('clinics/<uuid:clinic_id>/qr-data/', ClinicQRDataAPI.as_view(), name='clinic_qr_data'),
    path('qr-preview/', QRPreviewAPI.as_view(), name='qr_preview'),

    # Specializations
    path('specializations/', SpecializationListAPI.as_view(), name='specialization_list'),
    path('specializations/<uuid:specialization_id>/', SpecializationDetailAPI.as_view(), name='specialization_detail'),
    path('specializations/<uuid:specialization_id>/toggle/', SpecializationToggleAPI.as_view(), name='specialization_toggle'),

    # Site settings
    path('site-settings/', SiteSettingsAPI.as_view(), name='site_settings'),

    # Reporting
    path('statistics/', LicenseStatisticsAPI.as_view(), name='statistics'),
    path('verifications/', VerificationAuditAPI.as_view(), name='verifications'),
]
