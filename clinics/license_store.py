"""
License record stores used by the verification service

Two backends share one small interface:
- DjangoLicenseStore: the project database through the ORM (default)
- SupabaseLicenseStore: the hosted Supabase tables `clinics` and `verifications`
"""

import logging
from datetime import timedelta
from typing import Dict, Optional
from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from supabase import create_client, Client

from .models import ClinicLicense
from .models_verification_audit import VerificationAttempt

logger = logging.getLogger(__name__)


class LicenseStoreError(Exception):
    """The record store could not be reached or returned an error"""


class DjangoLicenseStore:
    """Record store backed by the project database"""

    name = 'django'

    def find_by_license(self, license_number: str) -> Optional[ClinicLicense]:
        """Exact match on the (unique) license number, zero or one result"""
        return ClinicLicense.objects.filter(license_number=license_number).first()

    def record_attempt(self, **fields) -> VerificationAttempt:
        return VerificationAttempt.log_attempt(**fields)

    def recent_attempts(self, ip_address, minutes=5) -> int:
        return VerificationAttempt.get_ip_recent_attempts(ip_address, minutes=minutes)


class SupabaseLicenseStore:
    """
    Record store backed by the managed Supabase Postgres

    The verification counter on `clinics` is maintained by a database
    trigger on `verifications`, so this store only reads clinics and
    appends audit rows.
    """

    name = 'supabase'
    CLINICS_TABLE = 'clinics'
    VERIFICATIONS_TABLE = 'verifications'

    def __init__(self, client: Optional[Client] = None):
        self.client: Optional[Client] = client
        if self.client is None:
            self._initialize_client()

    def _initialize_client(self):
        """Initialize Supabase client with configuration"""
        try:
            supabase_url = getattr(settings, 'SUPABASE_URL', '')
            supabase_key = getattr(settings, 'SUPABASE_KEY', '')

            if not supabase_url or not supabase_key:
                logger.warning("Supabase credentials not configured. License lookups will fail.")
                return

            self.client = create_client(supabase_url, supabase_key)
            logger.info("Supabase client initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {e}")
            self.client = None

    def is_connected(self) -> bool:
        """Check if Supabase client is connected"""
        return self.client is not None

    def _require_client(self) -> Client:
        if self.client is None:
            raise LicenseStoreError("Supabase client is not configured")
        return self.client

    def find_by_license(self, license_number: str) -> Optional[ClinicLicense]:
        client = self._require_client()

        response = (
            client.table(self.CLINICS_TABLE)
            .select('*')
            .eq('license_number', license_number)
            .limit(1)
            .execute()
        )

        rows = response.data or []
        if not rows:
            return None
        return self._row_to_clinic(rows[0])

    def record_attempt(self, clinic=None, **fields) -> Dict:
        client = self._require_client()

        row = {
            'clinic_id': str(clinic.pk) if clinic is not None else None,
            'license_number': fields.get('license_number'),
            'verification_method': fields.get('verification_method'),
            'verification_status': fields.get('verification_status'),
            'ip_address': fields.get('ip_address') or None,
            'user_agent': (fields.get('user_agent') or '')[:500] or None,
            'location_data': fields.get('location_data'),
        }

        response = client.table(self.VERIFICATIONS_TABLE).insert(row).execute()
        return (response.data or [row])[0]

    def recent_attempts(self, ip_address, minutes=5) -> int:
        """Attempts logged from one IP within the last `minutes` (for rate limiting)"""
        if not ip_address:
            return 0
        client = self._require_client()

        cutoff_time = timezone.now() - timedelta(minutes=minutes)
        response = (
            client.table(self.VERIFICATIONS_TABLE)
            .select('id', count='exact')
            .eq('ip_address', ip_address)
            .gte('created_at', cutoff_time.isoformat())
            .execute()
        )
        return response.count or 0

    @staticmethod
    def _row_to_clinic(row: Dict) -> ClinicLicense:
        """Map a `clinics` row onto an unsaved ClinicLicense instance"""
        values = {}
        for field in ClinicLicense._meta.concrete_fields:
            if field.attname not in row:
                continue
            value = row[field.attname]
            if isinstance(value, str):
                if field.get_internal_type() == 'DateField':
                    value = parse_date(value)
                elif field.get_internal_type() == 'DateTimeField':
                    value = parse_datetime(value)
            values[field.attname] = value

        if values.get('verification_count') is None:
            values['verification_count'] = 0

        return ClinicLicense(**values)


def get_license_store():
    """Return the record store selected by settings.LICENSE_STORE_BACKEND"""
    backend = getattr(settings, 'LICENSE_STORE_BACKEND', 'django')

    if backend == 'supabase':
        return SupabaseLicenseStore()
    if backend != 'django':
        logger.warning(f"Unknown LICENSE_STORE_BACKEND '{backend}', using the Django store")
    return DjangoLicenseStore()
