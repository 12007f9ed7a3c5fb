from django.db.models import F
from django.db.models.signals import post_save
from django.dispatch import receiver
from .models import ClinicLicense
from .models_verification_audit import VerificationAttempt
import logging

logger = logging.getLogger(__name__)


@receiver(post_save, sender=VerificationAttempt)
def increment_verification_count(sender, instance, created, **kwargs):
    """Bump the matched clinic's verification counter for successful lookups"""
    if not created or instance.verification_status != VerificationAttempt.STATUS_SUCCESS:
        return

    if not instance.clinic_id:
        return

    try:
        ClinicLicense.objects.filter(pk=instance.clinic_id).update(
            verification_count=F('verification_count') + 1
        )
    except Exception as e:
        # Counter is best-effort, the audit row is already stored
        logger.error(f"Error updating verification count for clinic {instance.clinic_id}: {str(e)}")
