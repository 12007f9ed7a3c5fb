"""
Django management command to delete all clinic records
Usage: python manage.py delete_all_clinics [--confirm]

Verification audit rows are kept; their clinic link is set to NULL.
"""
from django.core.management.base import BaseCommand
from django.db import transaction
from clinics.models import ClinicLicense
import logging

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Delete all clinic records from the database'

    def add_arguments(self, parser):
        parser.add_argument(
            '--confirm',
            action='store_true',
            help='Skip confirmation prompt',
        )

    def handle(self, *args, **options):
        total_clinics = ClinicLicense.objects.count()

        self.stdout.write("=" * 60)
        self.stdout.write(self.style.WARNING("DELETE ALL CLINICS"))
        self.stdout.write("=" * 60)

        self.stdout.write("\nCurrent Database State:")
        for status, label in ClinicLicense.LICENSE_STATUSES:
            count = ClinicLicense.objects.filter(license_status=status).count()
            self.stdout.write(f"  {label}: {count}")
        self.stdout.write(f"  Total Clinics: {total_clinics}")

        if total_clinics == 0:
            self.stdout.write(self.style.SUCCESS("\n✓ No clinics found. Database is already clean!"))
            return

        if not options['confirm']:
            self.stdout.write("\n" + "!" * 60)
            self.stdout.write(self.style.ERROR("WARNING: This will DELETE ALL clinics permanently!"))
            self.stdout.write("!" * 60)
            confirm = input("\nType 'yes' to confirm: ")

            if confirm.lower() != 'yes':
                self.stdout.write(self.style.WARNING("\n✗ Deletion cancelled. No changes made."))
                return

        self.stdout.write("\nDeleting clinics...")

        with transaction.atomic():
            ClinicLicense.objects.all().delete()

        logger.warning(f"Deleted all {total_clinics} clinics from the command line")

        remaining = ClinicLicense.objects.count()
        self.stdout.write(self.style.SUCCESS(f"  ✓ Deleted {total_clinics} clinics"))
        self.stdout.write(f"\nRemaining Clinics: {remaining}")
