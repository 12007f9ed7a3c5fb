"""
Management command to expire licenses past their expiry date
Marks every 'active' clinic whose expiry_date is before today as 'expired'.

This runs daily via the Vercel cron job (clinics.views.cron_expire_licenses)
"""
from django.core.management.base import BaseCommand
from django.utils import timezone
from clinics.models import ClinicLicense
import logging

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Mark active licenses whose expiry date has passed as expired'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show which licenses would be expired without changing them'
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        today = timezone.localdate()

        self.stdout.write("=" * 70)
        self.stdout.write(self.style.WARNING("📅 LICENSE EXPIRY UPDATE"))
        self.stdout.write("=" * 70)
        self.stdout.write(f"\n📅 Run Date: {today}")
        self.stdout.write(f"{'🧪 DRY RUN MODE' if dry_run else '🔴 LIVE MODE'}\n")

        past_due = ClinicLicense.objects.past_expiry(today).order_by('expiry_date')
        total = past_due.count()

        if total == 0:
            self.stdout.write(self.style.SUCCESS("\n✅ No active licenses past their expiry date."))
            return

        self.stdout.write(f"\n📋 Licenses to expire ({total}):")
        for clinic in past_due:
            self.stdout.write(
                f"   • {clinic.license_number} - {clinic.clinic_name} (expired {clinic.expiry_date})"
            )

        if dry_run:
            self.stdout.write("\n" + "=" * 70)
            self.stdout.write(self.style.SUCCESS("🧪 DRY RUN COMPLETE - No licenses were changed"))
            self.stdout.write("=" * 70)
            return

        try:
            updated = ClinicLicense.objects.expire_past_due(today)
        except Exception as e:
            self.stdout.write(self.style.ERROR(f"\n❌ Error updating licenses: {str(e)}"))
            logger.error(f"Error expiring licenses: {str(e)}")
            raise

        self.stdout.write("\n" + "=" * 70)
        self.stdout.write(self.style.SUCCESS(f"✅ {updated} licenses marked as expired"))
        self.stdout.write("=" * 70)
