from django.db import models
from django.core.validators import RegexValidator
from django.utils import timezone
from datetime import timedelta
import uuid
import logging

from .qr_service import QRCodeService

logger = logging.getLogger(__name__)


LICENSE_NUMBER_PATTERN = r'^[A-Z0-9-]{5,20}$'


def normalize_license_number(value):
    """Trim surrounding whitespace and upper-case a license number"""
    return (value or '').strip().upper()


def _clean_optional(value):
    """Trim optional text, storing blanks as NULL"""
    if value is None:
        return None
    value = value.strip()
    return value or None


class ClinicLicenseQuerySet(models.QuerySet):

    def search(self, term):
        """Case-insensitive substring match on name, license, doctor and specialization"""
        term = (term or '').strip()
        if not term:
            return self
        return self.filter(
            models.Q(clinic_name__icontains=term) |
            models.Q(license_number__icontains=term) |
            models.Q(doctor_name__icontains=term) |
            models.Q(specialization__icontains=term)
        )

    def past_expiry(self, today=None):
        """Active licenses whose expiry date has passed"""
        today = today or timezone.localdate()
        return self.filter(
            license_status=ClinicLicense.STATUS_ACTIVE,
            expiry_date__isnull=False,
            expiry_date__lt=today,
        )

    def expire_past_due(self, today=None):
        """Mark active licenses past their expiry date as expired, returns the count"""
        updated = self.past_expiry(today).update(
            license_status=ClinicLicense.STATUS_EXPIRED,
            updated_at=timezone.now(),
        )
        logger.info(f"Expired {updated} licenses past their expiry date")
        return updated

    def expiring_within(self, days=30, today=None):
        """Active licenses that expire between today and today + days"""
        today = today or timezone.localdate()
        return self.filter(
            license_status=ClinicLicense.STATUS_ACTIVE,
            expiry_date__gte=today,
            expiry_date__lte=today + timedelta(days=days),
        )


class ClinicLicense(models.Model):
    """A licensed dental/medical clinic"""

    STATUS_ACTIVE = 'active'
    STATUS_EXPIRED = 'expired'
    STATUS_SUSPENDED = 'suspended'
    STATUS_PENDING = 'pending'

    LICENSE_STATUSES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_EXPIRED, 'Expired'),
        (STATUS_SUSPENDED, 'Suspended'),
        (STATUS_PENDING, 'Pending Review'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    clinic_name = models.CharField(max_length=255, help_text="Registered clinic name")
    license_number = models.CharField(
        max_length=20,
        unique=True,
        validators=[RegexValidator(
            LICENSE_NUMBER_PATTERN,
            'License number must be 5-20 characters of letters, digits and hyphens'
        )],
        help_text="Unique license number (stored upper-case, e.g. JOR-DEN-001)"
    )
    doctor_name = models.CharField(max_length=255, null=True, blank=True)
    specialization = models.CharField(max_length=255, help_text="Clinic specialization")

    # License lifecycle
    license_status = models.CharField(max_length=10, choices=LICENSE_STATUSES, default=STATUS_ACTIVE)
    issue_date = models.DateField(null=True, blank=True)
    expiry_date = models.DateField(null=True, blank=True)

    # Contact
    phone = models.CharField(max_length=50, null=True, blank=True)
    address = models.TextField(null=True, blank=True)

    # QR payload currently printed for this clinic
    qr_code = models.TextField(null=True, blank=True)

    # Maintained by the verification audit signal, not by the verification service
    verification_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ClinicLicenseQuerySet.as_manager()

    class Meta:
        db_table = 'clinics'
        verbose_name = "Clinic License"
        verbose_name_plural = "Clinic Licenses"
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['license_status'], name='clinic_status_idx'),
            models.Index(fields=['expiry_date'], name='clinic_expiry_idx'),
        ]

    def __str__(self):
        return f"{self.clinic_name} ({self.license_number})"

    def save(self, *args, **kwargs):
        """Normalize text fields and issue a QR payload for new clinics"""
        self.license_number = normalize_license_number(self.license_number)
        self.clinic_name = (self.clinic_name or '').strip()
        self.doctor_name = _clean_optional(self.doctor_name)
        self.phone = _clean_optional(self.phone)
        self.address = _clean_optional(self.address)

        if not self._state.adding and self.qr_code:
            # Reissue the payload when the license number is edited
            old_license = ClinicLicense.objects.filter(pk=self.pk).values_list('license_number', flat=True).first()
            if old_license and old_license != self.license_number:
                logger.info(f"License number changed {old_license} -> {self.license_number}, reissuing QR payload")
                self.qr_code = None

        if not self.qr_code and self.license_number:
            self.qr_code = QRCodeService.encode(self.license_number, self.pk)

        super().save(*args, **kwargs)

    @property
    def is_expired(self):
        return bool(self.expiry_date and self.expiry_date < timezone.localdate())


class Specialization(models.Model):
    """Selectable clinic specialization (Arabic name with optional English name)"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name_ar = models.CharField(max_length=150)
    name_en = models.CharField(max_length=150, null=True, blank=True)
    is_active = models.BooleanField(default=True)
    sort_order = models.IntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'specializations'
        ordering = ['sort_order', 'name_ar']

    def __str__(self):
        return self.name_en or self.name_ar

    @classmethod
    def next_sort_order(cls):
        current = cls.objects.aggregate(max_order=models.Max('sort_order'))['max_order']
        return (current or 0) + 1


class SiteSetting(models.Model):
    """Editable site text (footer content etc.) keyed by name"""

    FOOTER_KEYS = [
        'footer_title',
        'footer_description',
        'footer_features',
        'footer_developer_name',
        'footer_developer_title',
        'footer_organization',
        'footer_copyright',
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(null=True, blank=True)
    description = models.TextField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'site_settings'
        ordering = ['key']

    def __str__(self):
        return self.key

    @classmethod
    def as_dict(cls):
        """Return all settings as a key -> value mapping"""
        return {setting.key: setting.value for setting in cls.objects.all()}

    @classmethod
    def get_value(cls, key, default=None):
        setting = cls.objects.filter(key=key).first()
        if setting is None or setting.value is None:
            return default
        return setting.value


# Audit model lives in its own module; imported here so the app registry sees it
from .models_verification_audit import VerificationAttempt  # noqa: E402,F401
