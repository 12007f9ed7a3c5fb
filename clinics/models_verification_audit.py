"""
License Verification Audit Trail Model
Records every verification attempt (successful and failed) for abuse monitoring
"""

from django.db import models


class VerificationAttempt(models.Model):
    """Immutable record of one license verification request"""

    METHOD_QR_SCAN = 'qr_scan'
    METHOD_MANUAL_ENTRY = 'manual_entry'
    METHOD_IMAGE_UPLOAD = 'image_upload'

    VERIFICATION_METHODS = [
        (METHOD_QR_SCAN, 'QR Scan'),
        (METHOD_MANUAL_ENTRY, 'Manual Entry'),
        (METHOD_IMAGE_UPLOAD, 'Image Upload'),
    ]

    STATUS_SUCCESS = 'success'
    STATUS_NOT_FOUND = 'not_found'
    STATUS_FAILED = 'failed'

    VERIFICATION_STATUSES = [
        (STATUS_SUCCESS, 'License Found'),
        (STATUS_NOT_FOUND, 'License Not Found'),
        (STATUS_FAILED, 'Verification Failed'),
    ]

    clinic = models.ForeignKey(
        'clinics.ClinicLicense',
        on_delete=models.SET_NULL,
        related_name='verifications',
        null=True,
        blank=True,
        help_text='Matched clinic (null if no clinic matched)'
    )
    license_number = models.CharField(
        max_length=100,
        help_text='Normalized license number that was checked'
    )
    verification_method = models.CharField(
        max_length=20,
        choices=VERIFICATION_METHODS,
        help_text='Input channel used for the attempt'
    )
    verification_status = models.CharField(
        max_length=20,
        choices=VERIFICATION_STATUSES,
        help_text='Outcome classification'
    )
    ip_address = models.GenericIPAddressField(
        null=True,
        blank=True,
        help_text='IP address of verification attempt'
    )
    user_agent = models.CharField(
        max_length=500,
        blank=True,
        default='',
        help_text='User agent of verification attempt'
    )
    location_data = models.JSONField(
        null=True,
        blank=True,
        help_text='Optional client-reported location'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text='When the attempt was made'
    )

    class Meta:
        db_table = 'verifications'
        verbose_name = "Verification Attempt"
        verbose_name_plural = "Verification Attempts"
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['clinic', '-created_at'], name='verif_clinic_idx'),
            models.Index(fields=['verification_status', '-created_at'], name='verif_status_idx'),
            models.Index(fields=['ip_address', '-created_at'], name='verif_ip_idx'),
        ]

    def __str__(self):
        return f"{self.license_number} - {self.get_verification_status_display()} - {self.created_at}"

    @classmethod
    def log_attempt(cls, license_number, verification_method, verification_status,
                    clinic=None, ip_address=None, user_agent=None, location_data=None):
        """
        Log a verification attempt

        Args:
            license_number: Normalized license number
            verification_method: One of VERIFICATION_METHODS
            verification_status: One of VERIFICATION_STATUSES
            clinic: Matched ClinicLicense (None when not found)
            ip_address: IP address of request
            user_agent: User agent string
            location_data: Optional location dict
        """
        return cls.objects.create(
            clinic=clinic,
            license_number=(license_number or '')[:100],
            verification_method=verification_method,
            verification_status=verification_status,
            ip_address=ip_address or None,
            user_agent=(user_agent or '')[:500],
            location_data=location_data,
        )

    @classmethod
    def get_ip_recent_attempts(cls, ip_address, minutes=5):
        """Get recent attempts from one IP (for rate limiting)"""
        from django.utils import timezone
        from datetime import timedelta

        if not ip_address:
            return 0

        cutoff_time = timezone.now() - timedelta(minutes=minutes)

        return cls.objects.filter(
            ip_address=ip_address,
            created_at__gte=cutoff_time
        ).count()
