"""
License statistics for the admin dashboard
Computed server-side and returned as JSON; the charts are drawn client-side.
"""
from collections import Counter
from django.db.models import Count
from django.utils import timezone
from .models import ClinicLicense
from .models_verification_audit import VerificationAttempt

UNSPECIFIED = 'Unspecified'
EXPIRING_SOON_DAYS = 30


def _percentage(count, total):
    return round(count * 100.0 / total, 1) if total else 0.0


def _distribution(counter, total, label):
    return [
        {label: name, 'count': count, 'percentage': _percentage(count, total)}
        for name, count in sorted(counter.items(), key=lambda item: (-item[1], item[0]))
    ]


def region_from_address(address):
    """Last comma-separated part of an address, e.g. 'Street 5, Amman' -> 'Amman'"""
    if not address:
        return None
    region = address.split(',')[-1].strip()
    return region or UNSPECIFIED


def compute_license_statistics(clinics=None, today=None):
    """
    Summarize clinic licenses

    Args:
        clinics: ClinicLicense queryset (defaults to all clinics)
        today: Reference date for the expiring-soon window

    Returns:
        dict with status totals, expiring-soon clinics, region and
        specialization distributions and verification totals
    """
    if clinics is None:
        clinics = ClinicLicense.objects.all()
    today = today or timezone.localdate()

    total = clinics.count()
    status_counts = dict(clinics.values_list('license_status').annotate(count=Count('id')).order_by())
    by_status = {status: status_counts.get(status, 0) for status, _ in ClinicLicense.LICENSE_STATUSES}

    expiring = clinics.expiring_within(days=EXPIRING_SOON_DAYS, today=today).order_by('expiry_date')

    regions = Counter()
    specializations = Counter()
    for address, specialization in clinics.values_list('address', 'specialization'):
        region = region_from_address(address)
        if region:
            regions[region] += 1
        specializations[(specialization or '').strip() or UNSPECIFIED] += 1

    verification_counts = dict(
        VerificationAttempt.objects.values_list('verification_status').annotate(count=Count('id')).order_by()
    )

    return {
        'total_clinics': total,
        'by_status': by_status,
        'status_percentages': {status: _percentage(count, total) for status, count in by_status.items()},
        'expiring_soon_count': expiring.count(),
        'expiring_soon': [
            {
                'id': str(clinic.id),
                'clinic_name': clinic.clinic_name,
                'license_number': clinic.license_number,
                'expiry_date': clinic.expiry_date.isoformat(),
                'days_left': (clinic.expiry_date - today).days,
            }
            for clinic in expiring
        ],
        'regions': _distribution(regions, total, 'region'),
        'specializations': _distribution(specializations, total, 'specialization'),
        'verifications': {
            status: verification_counts.get(status, 0)
            for status, _ in VerificationAttempt.VERIFICATION_STATUSES
        },
    }
