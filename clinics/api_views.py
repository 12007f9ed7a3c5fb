"""
REST API Views for the admin dashboard
Clinic records, specializations, site settings, statistics and the audit log
"""
from datetime import timedelta
from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView
import logging

from .analytics import compute_license_statistics
from .models import ClinicLicense, Specialization, SiteSetting
from .models_verification_audit import VerificationAttempt
from .qr_service import QRCodeService
from .serializers import (
    ClinicLicenseSerializer,
    SiteSettingSerializer,
    SiteSettingsUpdateSerializer,
    SpecializationSerializer,
    VerificationAttemptSerializer,
)

logger = logging.getLogger(__name__)

CLINICS_PER_PAGE = 10


def qr_response(license_number, qr_data):
    """Payload text plus a rendered PNG (data: URL) for printing"""
    return {
        'license_number': license_number,
        'qr_data': qr_data,
        'image': QRCodeService.qr_image_data_url(qr_data),
    }


def _positive_int(value, default):
    try:
        value = int(value)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


class ClinicListAPI(APIView):
    """
    GET  /dashboard/api/clinics/?search=&status=&specialization=&page=
    POST /dashboard/api/clinics/
    """

    def get(self, request):
        clinics = ClinicLicense.objects.all()
        total_count = clinics.count()

        clinics = clinics.search(request.GET.get('search'))

        status_filter = request.GET.get('status', 'all')
        if status_filter and status_filter != 'all':
            clinics = clinics.filter(license_status=status_filter)

        specialization_filter = request.GET.get('specialization', 'all')
        if specialization_filter and specialization_filter != 'all':
            clinics = clinics.filter(specialization=specialization_filter)

        filtered_count = clinics.count()
        total_pages = max(1, -(-filtered_count // CLINICS_PER_PAGE))
        page = min(_positive_int(request.GET.get('page'), 1), total_pages)
        start = (page - 1) * CLINICS_PER_PAGE

        serializer = ClinicLicenseSerializer(clinics[start:start + CLINICS_PER_PAGE], many=True)

        return Response({
            'results': serializer.data,
            'page': page,
            'total_pages': total_pages,
            'filtered_count': filtered_count,
            'total_count': total_count,
        })

    def post(self, request):
        serializer = ClinicLicenseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        clinic = serializer.save()

        logger.info(f"Clinic {clinic.license_number} created by {request.user.username}")
        return Response(ClinicLicenseSerializer(clinic).data, status=status.HTTP_201_CREATED)


class ClinicDetailAPI(APIView):
    """
    GET/PUT/PATCH/DELETE /dashboard/api/clinics/{clinic_id}/
    """

    def get(self, request, clinic_id):
        clinic = get_object_or_404(ClinicLicense, id=clinic_id)
        return Response(ClinicLicenseSerializer(clinic).data)

    def put(self, request, clinic_id):
        return self._update(request, clinic_id, partial=False)

    def patch(self, request, clinic_id):
        return self._update(request, clinic_id, partial=True)

    def _update(self, request, clinic_id, partial):
        clinic = get_object_or_404(ClinicLicense, id=clinic_id)
        serializer = ClinicLicenseSerializer(clinic, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        clinic = serializer.save()

        logger.info(f"Clinic {clinic.license_number} updated by {request.user.username}")
        return Response(ClinicLicenseSerializer(clinic).data)

    def delete(self, request, clinic_id):
        clinic = get_object_or_404(ClinicLicense, id=clinic_id)
        license_number = clinic.license_number
        clinic.delete()

        logger.info(f"Clinic {license_number} deleted by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)


class ClinicSpecializationsAPI(APIView):
    """
    GET /dashboard/api/clinics/specializations/
    Distinct specializations used by clinic records (for filter dropdowns)
    """

    def get(self, request):
        values = ClinicLicense.objects.exclude(specialization='').values_list('specialization', flat=True).distinct()
        specializations = sorted({value.strip() for value in values if value and value.strip()})
        return Response({'specializations': specializations})


class ClinicQRDataAPI(APIView):
    """
    GET  /dashboard/api/clinics/{clinic_id}/qr-data/  - stored payload (generated if missing)
    POST /dashboard/api/clinics/{clinic_id}/qr-data/  - reissue payload with today's date
    """

    def get(self, request, clinic_id):
        clinic = get_object_or_404(ClinicLicense, id=clinic_id)
        qr_data = QRCodeService.generate_qr_data(clinic)
        if qr_data is None:
            return Response({'error': 'Could not generate QR data'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(qr_response(clinic.license_number, qr_data))

    def post(self, request, clinic_id):
        clinic = get_object_or_404(ClinicLicense, id=clinic_id)
        if not QRCodeService.regenerate_qr_code(clinic):
            return Response({'error': 'Could not regenerate QR data'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(qr_response(clinic.license_number, clinic.qr_code))


class QRPreviewAPI(APIView):
    """
    GET /dashboard/api/qr-preview/?license_number=JOR-DEN-001
    Payload preview for a clinic that has not been saved yet
    """

    def get(self, request):
        license_number = (request.GET.get('license_number') or '').strip().upper()
        if not license_number:
            return Response({'error': 'license_number is required'}, status=status.HTTP_400_BAD_REQUEST)
        return Response(qr_response(license_number, QRCodeService.encode(license_number, None)))


class ClearQRCodesAPI(APIView):
    """
    POST /dashboard/api/clinics/clear-qr-codes/
    Remove stored QR payloads from every clinic
    """

    def post(self, request):
        cleared = ClinicLicense.objects.exclude(qr_code__isnull=True).update(qr_code=None)
        logger.info(f"{cleared} clinic QR payloads cleared by {request.user.username}")
        return Response({'cleared_count': cleared})


class ClearAllClinicsAPI(APIView):
    """
    POST /dashboard/api/clinics/clear-all/   Body: {"confirm": true}
    Delete every clinic record (verification audit rows are kept)
    """

    def post(self, request):
        if request.data.get('confirm') is not True:
            return Response(
                {'error': 'Deleting all clinics requires {"confirm": true}'},
                status=status.HTTP_400_BAD_REQUEST
            )

        with transaction.atomic():
            deleted, _ = ClinicLicense.objects.all().delete()

        logger.warning(f"All clinics ({deleted}) deleted by {request.user.username}")
        return Response({'deleted_count': deleted})


class ExpireLicensesAPI(APIView):
    """
    POST /dashboard/api/clinics/expire/
    Mark active licenses past their expiry date as expired
    """

    def post(self, request):
        updated = ClinicLicense.objects.expire_past_due()
        return Response({'updated_count': updated})


class SpecializationListAPI(APIView):
    """
    GET  /dashboard/api/specializations/   (including inactive ones)
    POST /dashboard/api/specializations/
    """

    def get(self, request):
        specializations = Specialization.objects.all().order_by('sort_order', 'name_ar')
        return Response(SpecializationSerializer(specializations, many=True).data)

    def post(self, request):
        serializer = SpecializationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        specialization = serializer.save()
        return Response(SpecializationSerializer(specialization).data, status=status.HTTP_201_CREATED)


class SpecializationDetailAPI(APIView):
    """
    PATCH/DELETE /dashboard/api/specializations/{specialization_id}/
    """

    def patch(self, request, specialization_id):
        specialization = get_object_or_404(Specialization, id=specialization_id)
        serializer = SpecializationSerializer(specialization, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        return Response(SpecializationSerializer(serializer.save()).data)

    def delete(self, request, specialization_id):
        specialization = get_object_or_404(Specialization, id=specialization_id)
        specialization.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class SpecializationToggleAPI(APIView):
    """
    POST /dashboard/api/specializations/{specialization_id}/toggle/
    """

    def post(self, request, specialization_id):
        specialization = get_object_or_404(Specialization, id=specialization_id)
        specialization.is_active = not specialization.is_active
        specialization.save(update_fields=['is_active', 'updated_at'])
        return Response(SpecializationSerializer(specialization).data)


class SiteSettingsAPI(APIView):
    """
    GET   /dashboard/api/site-settings/
    PATCH /dashboard/api/site-settings/   Body: {"settings": {"footer_title": "..."}}
    """

    def get(self, request):
        return Response(SiteSettingSerializer(SiteSetting.objects.all(), many=True).data)

    def patch(self, request):
        serializer = SiteSettingsUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            for key, value in serializer.validated_data['settings'].items():
                setting = SiteSetting.objects.select_for_update().get(key=key)
                setting.value = value
                setting.save(update_fields=['value', 'updated_at'])

        logger.info(f"Site settings updated by {request.user.username}")
        return Response(SiteSettingSerializer(SiteSetting.objects.all(), many=True).data)


class LicenseStatisticsAPI(APIView):
    """
    GET /dashboard/api/statistics/
    """

    def get(self, request):
        return Response(compute_license_statistics())


class VerificationAuditAPI(APIView):
    """
    GET /dashboard/api/verifications/?days=7&status=all
    Most recent 100 verification attempts
    """

    def get(self, request):
        days = _positive_int(request.GET.get('days'), 7)
        status_filter = request.GET.get('status', 'all')

        cutoff_date = timezone.now() - timedelta(days=days)
        attempts = VerificationAttempt.objects.filter(created_at__gte=cutoff_date)

        if status_filter != 'all':
            attempts = attempts.filter(verification_status=status_filter)

        total_attempts = attempts.count()
        successful = attempts.filter(verification_status=VerificationAttempt.STATUS_SUCCESS).count()

        recent = attempts.select_related('clinic').order_by('-created_at')[:100]

        return Response({
            'attempts': VerificationAttemptSerializer(recent, many=True).data,
            'total_attempts': total_attempts,
            'successful': successful,
            'unsuccessful': total_attempts - successful,
            'days': days,
            'status': status_filter,
        })
