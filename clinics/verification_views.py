"""
Public License Verification Views
- QR scan, uploaded QR image and manual license entry share one endpoint
- Per-IP rate limiting from the audit trail
- Three outcomes only: found, not found, error
"""

from django.conf import settings
from django.http import JsonResponse
from django.shortcuts import render
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from .models import Specialization, SiteSetting
from .models_verification_audit import VerificationAttempt
from .license_store import get_license_store
from .serializers import PublicClinicSerializer
from .verification_service import (
    InvalidLicenseNumber,
    LicenseVerificationService,
    VERIFICATION_METHODS,
    get_client_ip,
)
import json
import logging

logger = logging.getLogger(__name__)


RESULT_MESSAGES = {
    VerificationAttempt.STATUS_SUCCESS: 'License found',
    VerificationAttempt.STATUS_NOT_FOUND: 'No clinic is registered with this license number',
    VerificationAttempt.STATUS_FAILED: 'Verification error occurred, please try again',
}


def prepare_result_data(result):
    """
    Build the JSON body for a verification result

    Args:
        result: VerificationResult from the verification service
    """
    data = {
        'success': result.found,
        'status': result.status,
        'license_number': result.license_number,
        'message': RESULT_MESSAGES[result.status],
        'clinic': None,
    }

    if result.found:
        data['clinic'] = PublicClinicSerializer(result.clinic).data

    return data


def verify_page(request):
    """Public verification page (camera scan, image upload, manual entry)"""
    context = {
        'page_title': 'Verify Clinic License',
    }
    return render(request, 'clinics/verify.html', context)


def is_rate_limited(request, store):
    """True when the client IP has used up its verification budget in the audit store"""
    limit = getattr(settings, 'VERIFICATION_RATE_LIMIT', 30)
    window = getattr(settings, 'VERIFICATION_RATE_WINDOW_MINUTES', 5)
    if not limit:
        return False

    ip_address = get_client_ip(request)
    try:
        recent_attempts = store.recent_attempts(ip_address, minutes=window)
    except Exception as e:
        # Store outages surface as a failed verification below
        logger.error(f"Error counting recent verification attempts for {ip_address}: {str(e)}")
        return False

    if recent_attempts >= limit:
        logger.warning(f"Verification rate limit exceeded for {ip_address}: {recent_attempts} attempts in {window} minutes")
        return True
    return False


@csrf_exempt
@require_http_methods(["POST"])
def verify_license_api(request):
    """
    Verify a clinic license

    POST /verify/
    Body: {
        "method": "qr_scan" | "image_upload" | "manual_entry",
        "qr_text": "decoded QR text",          (QR methods)
        "license_number": "JOR-DEN-001",       (manual entry)
        "location": {...}                      (optional)
    }

    Returns:
        {
            "success": true/false,
            "status": "success" | "not_found" | "failed" | "invalid",
            "license_number": "...",
            "message": "...",
            "clinic": {...} (only when found)
        }
    """
    try:
        data = json.loads(request.body or b'{}')
        if not isinstance(data, dict):
            raise ValueError("Request body must be a JSON object")

        method = data.get('method') or VerificationAttempt.METHOD_MANUAL_ENTRY
        if method not in VERIFICATION_METHODS:
            return JsonResponse({
                'success': False,
                'message': 'Unknown verification method',
                'error_code': 'INVALID_METHOD'
            }, status=400)

        raw_input = data.get('qr_text') or data.get('license_number') or ''
        if not isinstance(raw_input, str) or not raw_input.strip():
            return JsonResponse({
                'success': False,
                'message': 'Please enter a license number',
                'error_code': 'MISSING_LICENSE'
            }, status=400)

        store = get_license_store()
        if is_rate_limited(request, store):
            return JsonResponse({
                'success': False,
                'message': 'Too many verification attempts. Please wait a few minutes.',
                'error_code': 'RATE_LIMIT'
            }, status=429)

        location = data.get('location')
        result = LicenseVerificationService(store=store).verify(
            raw_input,
            method,
            request=request,
            location_data=location if isinstance(location, dict) else None,
        )

        return JsonResponse(prepare_result_data(result))

    except InvalidLicenseNumber as e:
        return JsonResponse({
            'success': False,
            'status': 'invalid',
            'license_number': e.license_number,
            'message': e.message,
            'error_code': 'INVALID_LICENSE',
            'clinic': None,
        }, status=400)
    except (json.JSONDecodeError, ValueError):
        return JsonResponse({
            'success': False,
            'message': 'Invalid request data',
            'error_code': 'INVALID_JSON'
        }, status=400)
    except Exception as e:
        logger.error(f"Error verifying license: {str(e)}")
        return JsonResponse({
            'success': False,
            'message': 'Verification error occurred',
            'error_code': 'SYSTEM_ERROR'
        }, status=500)


@require_http_methods(["GET"])
def active_specializations(request):
    """Public list of active specializations (for clinic forms and filters)"""
    specializations = Specialization.objects.filter(is_active=True).order_by('sort_order', 'name_ar')
    return JsonResponse({
        'specializations': [
            {
                'id': str(spec.id),
                'name_ar': spec.name_ar,
                'name_en': spec.name_en,
            }
            for spec in specializations
        ]
    })


@require_http_methods(["GET"])
def public_site_settings(request):
    """Public key -> value map of site text settings"""
    return JsonResponse({'settings': SiteSetting.as_dict()})
