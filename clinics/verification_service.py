"""
License Verification Service
Single path from a raw input string (camera scan, uploaded QR image or typed
license number) to a classified, audited verification outcome.

Flow: decode (QR input only) -> normalize -> validate -> lookup -> classify -> audit
"""

import re
from dataclasses import dataclass
from typing import Optional
import logging

from .license_store import get_license_store
from .models import ClinicLicense, LICENSE_NUMBER_PATTERN, normalize_license_number
from .models_verification_audit import VerificationAttempt
from .qr_service import QRCodeService

logger = logging.getLogger(__name__)


LICENSE_NUMBER_RE = re.compile(LICENSE_NUMBER_PATTERN)
MIN_LICENSE_LENGTH = 5
MAX_LICENSE_LENGTH = 20

VERIFICATION_METHODS = {method for method, _ in VerificationAttempt.VERIFICATION_METHODS}
QR_METHODS = {VerificationAttempt.METHOD_QR_SCAN, VerificationAttempt.METHOD_IMAGE_UPLOAD}


class VerificationError(Exception):
    """Base error raised by the verification service"""


class InvalidLicenseNumber(VerificationError):
    """Input does not have the shape of a license number"""

    def __init__(self, license_number, message):
        super().__init__(message)
        self.license_number = license_number
        self.message = message


@dataclass
class VerificationResult:
    clinic: Optional[ClinicLicense]
    status: str
    license_number: str

    @property
    def found(self):
        return self.status == VerificationAttempt.STATUS_SUCCESS


def get_client_ip(request):
    """Extract client IP address from request"""
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def validate_license_number(license_number):
    """Raise InvalidLicenseNumber unless the normalized value is 5-20 of [A-Z0-9-]"""
    if not MIN_LICENSE_LENGTH <= len(license_number) <= MAX_LICENSE_LENGTH:
        raise InvalidLicenseNumber(
            license_number,
            f"License number must be between {MIN_LICENSE_LENGTH} and {MAX_LICENSE_LENGTH} characters"
        )
    if not LICENSE_NUMBER_RE.match(license_number):
        raise InvalidLicenseNumber(
            license_number,
            "License number may only contain letters, digits and hyphens"
        )


class LicenseVerificationService:
    """Verifies clinic licenses against the record store and audits every attempt"""

    def __init__(self, store=None):
        self.store = store or get_license_store()

    @staticmethod
    def extract_license_number(raw_input, method):
        """Decode QR-sourced input, then trim and upper-case it"""
        text = raw_input or ''
        if method in QR_METHODS:
            text = QRCodeService.decode(text)
        return normalize_license_number(text)

    def verify(self, raw_input, method, request=None, location_data=None):
        """
        Verify a license number

        Args:
            raw_input: Scanned QR text or typed license number
            method: 'qr_scan', 'manual_entry' or 'image_upload'
            request: HTTP request (for IP/user agent logging)
            location_data: Optional client-reported location

        Returns:
            VerificationResult with status 'success', 'not_found' or 'failed'

        Raises:
            InvalidLicenseNumber: input is not shaped like a license number
                (the attempt is still audited as 'failed')
        """
        if method not in VERIFICATION_METHODS:
            raise ValueError(f"Unknown verification method: {method}")

        license_number = self.extract_license_number(raw_input, method)

        metadata = {'location_data': location_data}
        if request is not None:
            metadata['ip_address'] = get_client_ip(request)
            metadata['user_agent'] = request.META.get('HTTP_USER_AGENT', '')[:500]

        try:
            validate_license_number(license_number)
        except InvalidLicenseNumber:
            logger.warning(f"Rejected malformed license number via {method}: {license_number[:25]!r}")
            self._record(license_number, method, VerificationAttempt.STATUS_FAILED, None, metadata)
            raise

        clinic = None
        try:
            clinic = self.store.find_by_license(license_number)
            status = VerificationAttempt.STATUS_SUCCESS if clinic else VerificationAttempt.STATUS_NOT_FOUND
        except Exception as e:
            logger.error(f"License lookup failed for {license_number}: {str(e)}")
            clinic = None
            status = VerificationAttempt.STATUS_FAILED

        logger.info(f"License {license_number} verified via {method}: {status}")

        self._record(license_number, method, status, clinic, metadata)

        return VerificationResult(clinic=clinic, status=status, license_number=license_number)

    def _record(self, license_number, method, status, clinic, metadata):
        """Write the audit row; failures are logged and never change the outcome"""
        try:
            self.store.record_attempt(
                license_number=license_number,
                verification_method=method,
                verification_status=status,
                clinic=clinic,
                **metadata
            )
        except Exception as e:
            logger.error(f"Error recording verification attempt for {license_number}: {str(e)}")


def verify_license(raw_input, method, request=None, location_data=None):
    """Verify with the configured record store"""
    return LicenseVerificationService().verify(raw_input, method, request=request, location_data=location_data)
