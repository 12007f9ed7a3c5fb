"""
Shared pytest fixtures

- API clients (anonymous, staff)
- Clinic records
"""
from datetime import timedelta
import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient

from clinics.models import ClinicLicense


@pytest.fixture
def api_client():
    """Unauthenticated DRF API client"""
    return APIClient()


@pytest.fixture
def staff_user(db):
    return get_user_model().objects.create_user(
        username='admin',
        password='testpass123',
        is_staff=True,
    )


@pytest.fixture
def admin_client(staff_user):
    """API client logged in as a staff user (session auth, works for plain views too)"""
    client = APIClient()
    client.force_login(staff_user)
    return client


@pytest.fixture
def user_client(db):
    """API client logged in as a non-staff user"""
    user = get_user_model().objects.create_user(username='viewer', password='testpass123')
    client = APIClient()
    client.force_login(user)
    return client


@pytest.fixture
def clinic(db):
    """Active clinic JOR-DEN-001 licensed until next year"""
    today = timezone.localdate()
    return ClinicLicense.objects.create(
        clinic_name='Amman Dental Center',
        license_number='JOR-DEN-001',
        doctor_name='Dr. Rania Haddad',
        specialization='Dentistry',
        license_status=ClinicLicense.STATUS_ACTIVE,
        issue_date=today - timedelta(days=30),
        expiry_date=today + timedelta(days=335),
        phone='+962 6 555 0101',
        address='Rainbow Street 12, Amman',
    )


@pytest.fixture
def make_clinic(db):
    """Factory for additional clinics"""
    def _make(license_number, **fields):
        fields.setdefault('clinic_name', f'Clinic {license_number}')
        fields.setdefault('specialization', 'Dentistry')
        return ClinicLicense.objects.create(license_number=license_number, **fields)
    return _make
