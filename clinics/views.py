"""
Dashboard download views and the scheduled expiry job
"""
from io import StringIO
from django.core.management import call_command
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from accounts.decorators import staff_required, cron_secret_required
from .exports import export_clinics_csv, export_clinics_excel
from .models import ClinicLicense
import logging

logger = logging.getLogger(__name__)

EXPORT_FORMATS = {
    'csv': export_clinics_csv,
    'xlsx': export_clinics_excel,
}


@staff_required
@require_http_methods(["GET"])
def export_clinics(request):
    """
    Download clinic records

    GET /dashboard/api/clinics/export/?format=csv|xlsx
    Honors the same search/status filters as the clinic list.
    """
    export_format = request.GET.get('format', 'csv').lower()
    exporter = EXPORT_FORMATS.get(export_format)
    if exporter is None:
        return JsonResponse({
            'success': False,
            'message': 'Unsupported export format',
            'error_code': 'INVALID_FORMAT'
        }, status=400)

    clinics = ClinicLicense.objects.search(request.GET.get('search')).order_by('clinic_name')
    status_filter = request.GET.get('status', 'all')
    if status_filter and status_filter != 'all':
        clinics = clinics.filter(license_status=status_filter)

    if not clinics.exists():
        return JsonResponse({
            'success': False,
            'message': 'There are no clinics to export',
            'error_code': 'NO_DATA'
        }, status=400)

    logger.info(f"Clinics exported as {export_format} by {request.user.username}")
    return exporter(clinics)


@csrf_exempt
@cron_secret_required
@require_http_methods(["GET", "POST"])
def cron_expire_licenses(request):
    """
    Scheduled handler for update_expired_licenses
    Called daily by the Vercel cron with 'Authorization: Bearer <CRON_SECRET>'
    """
    try:
        output = StringIO()
        call_command('update_expired_licenses', stdout=output, stderr=output)
        output_text = output.getvalue()

        logger.info(f"Cron license expiry executed successfully: {output_text[-200:]}")

        return JsonResponse({
            'success': True,
            'message': 'Expired licenses updated successfully',
            'timestamp': str(timezone.now()),
            'output': output_text[:500]
        })

    except Exception as e:
        error_msg = str(e)
        logger.error(f"Error during cron license expiry: {error_msg}")

        return JsonResponse({
            'success': False,
            'error': error_msg,
            'timestamp': str(timezone.now())
        }, status=500)
