"""
Admin dashboard API tests
"""
import base64
import json
from datetime import timedelta
import pytest
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from clinics.models import ClinicLicense, SiteSetting, Specialization
from clinics.models_verification_audit import VerificationAttempt
from clinics.qr_service import QRCodeService


CLINIC_LIST_URL = reverse('clinics_api:clinic_list')


def clinic_detail_url(clinic):
    return reverse('clinics_api:clinic_detail', kwargs={'clinic_id': clinic.pk})


@pytest.mark.django_db
class TestPermissions:

    def test_anonymous_is_rejected(self, api_client):
        response = api_client.get(CLINIC_LIST_URL)
        assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)

    def test_non_staff_is_forbidden(self, user_client):
        assert user_client.get(CLINIC_LIST_URL).status_code == status.HTTP_403_FORBIDDEN

    def test_anonymous_export_gets_json_401(self, api_client):
        response = api_client.get(reverse('clinics_api:clinic_export'))

        assert response.status_code == 401
        assert response.json()['error_code'] == 'NOT_AUTHENTICATED'

    def test_non_staff_export_gets_json_403(self, user_client):
        response = user_client.get(reverse('clinics_api:clinic_export'))

        assert response.status_code == 403
        assert response.json()['error_code'] == 'FORBIDDEN'


@pytest.mark.django_db
class TestClinicCRUD:

    def test_create_normalizes_fields(self, admin_client):
        response = admin_client.post(CLINIC_LIST_URL, {
            'clinic_name': '  Irbid Smile Clinic ',
            'license_number': ' jor-den-010 ',
            'specialization': 'Orthodontics',
            'doctor_name': '   ',
            'phone': '',
            'issue_date': '2024-01-01',
            'expiry_date': '2026-01-01',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED, response.data
        clinic = ClinicLicense.objects.get(license_number='JOR-DEN-010')
        assert clinic.clinic_name == 'Irbid Smile Clinic'
        assert clinic.doctor_name is None
        assert clinic.phone is None
        assert QRCodeService.decode(clinic.qr_code) == 'JOR-DEN-010'

    def test_create_rejects_duplicate_license(self, admin_client, clinic):
        response = admin_client.post(CLINIC_LIST_URL, {
            'clinic_name': 'Copy',
            'license_number': 'jor-den-001',
            'specialization': 'Dentistry',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'License number already exists' in str(response.data['license_number'])

    def test_create_rejects_bad_license_shape(self, admin_client):
        response = admin_client.post(CLINIC_LIST_URL, {
            'clinic_name': 'Bad',
            'license_number': 'AB',
            'specialization': 'Dentistry',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'license_number' in response.data

    def test_create_requires_name_and_specialization(self, admin_client):
        response = admin_client.post(CLINIC_LIST_URL, {
            'clinic_name': '  ',
            'license_number': 'JOR-DEN-011',
            'specialization': ' ',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'clinic_name' in response.data
        assert 'specialization' in response.data

    def test_expiry_before_issue_is_rejected(self, admin_client):
        response = admin_client.post(CLINIC_LIST_URL, {
            'clinic_name': 'Dates',
            'license_number': 'JOR-DEN-012',
            'specialization': 'Dentistry',
            'issue_date': '2025-01-01',
            'expiry_date': '2024-01-01',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'expiry_date' in response.data

    def test_update_rejects_license_of_another_clinic(self, admin_client, clinic, make_clinic):
        other = make_clinic('JOR-DEN-020')

        response = admin_client.patch(clinic_detail_url(other), {'license_number': 'JOR-DEN-001'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'belongs to another clinic' in str(response.data['license_number'])

    def test_update_keeps_own_license(self, admin_client, clinic):
        response = admin_client.patch(clinic_detail_url(clinic), {
            'license_number': 'jor-den-001',
            'license_status': 'suspended',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        clinic.refresh_from_db()
        assert clinic.license_status == 'suspended'

    def test_retrieve_and_delete(self, admin_client, clinic):
        assert admin_client.get(clinic_detail_url(clinic)).data['license_number'] == 'JOR-DEN-001'

        response = admin_client.delete(clinic_detail_url(clinic))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not ClinicLicense.objects.exists()

    def test_delete_keeps_audit_rows(self, admin_client, clinic):
        VerificationAttempt.log_attempt('JOR-DEN-001', 'manual_entry', 'success', clinic=clinic)

        admin_client.delete(clinic_detail_url(clinic))

        attempt = VerificationAttempt.objects.get()
        assert attempt.clinic is None


@pytest.mark.django_db
class TestClinicList:

    def test_search_and_filters(self, admin_client, clinic, make_clinic):
        make_clinic('JOR-DER-001', clinic_name='Skin Care', specialization='Dermatology')
        make_clinic('JOR-DEN-002', clinic_name='Old Dental', license_status='expired')

        data = admin_client.get(CLINIC_LIST_URL, {'search': 'dental'}).data
        assert data['filtered_count'] == 2
        assert data['total_count'] == 3

        data = admin_client.get(CLINIC_LIST_URL, {'status': 'expired'}).data
        assert [row['license_number'] for row in data['results']] == ['JOR-DEN-002']

        data = admin_client.get(CLINIC_LIST_URL, {'specialization': 'Dermatology'}).data
        assert [row['license_number'] for row in data['results']] == ['JOR-DER-001']

    def test_pagination(self, admin_client, make_clinic):
        for index in range(12):
            make_clinic(f'JOR-PAG-{index:03d}')

        first = admin_client.get(CLINIC_LIST_URL).data
        second = admin_client.get(CLINIC_LIST_URL, {'page': 2}).data
        past_end = admin_client.get(CLINIC_LIST_URL, {'page': 99}).data

        assert len(first['results']) == 10
        assert first['total_pages'] == 2
        assert len(second['results']) == 2
        assert past_end['page'] == 2

    def test_distinct_specializations(self, admin_client, clinic, make_clinic):
        make_clinic('JOR-DER-001', specialization='Dermatology')
        make_clinic('JOR-DEN-002', specialization='Dentistry')

        response = admin_client.get(reverse('clinics_api:clinic_specializations'))

        assert response.data['specializations'] == ['Dentistry', 'Dermatology']


@pytest.mark.django_db
class TestQRManagement:

    def test_qr_data_generated_when_missing(self, admin_client, clinic):
        ClinicLicense.objects.filter(pk=clinic.pk).update(qr_code=None)

        response = admin_client.get(reverse('clinics_api:clinic_qr_data', kwargs={'clinic_id': clinic.pk}))

        assert response.status_code == status.HTTP_200_OK
        assert json.loads(response.data['qr_data'])['id'] == str(clinic.pk)
        assert response.data['image'].startswith('data:image/png;base64,')

    def test_regenerate(self, admin_client, clinic):
        response = admin_client.post(reverse('clinics_api:clinic_qr_data', kwargs={'clinic_id': clinic.pk}))

        assert response.status_code == status.HTTP_200_OK
        assert QRCodeService.decode(response.data['qr_data']) == 'JOR-DEN-001'

    def test_preview_uses_new_placeholder(self, admin_client):
        response = admin_client.get(reverse('clinics_api:qr_preview'), {'license_number': ' jor-den-050 '})

        payload = json.loads(response.data['qr_data'])
        assert payload['license'] == 'JOR-DEN-050'
        assert payload['id'] == 'new'
        png = base64.b64decode(response.data['image'].split(',', 1)[1])
        assert png.startswith(b'\x89PNG')

    def test_preview_requires_license(self, admin_client):
        response = admin_client.get(reverse('clinics_api:qr_preview'))
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_clear_qr_codes(self, admin_client, clinic, make_clinic):
        make_clinic('JOR-DEN-002')

        response = admin_client.post(reverse('clinics_api:clear_qr_codes'))

        assert response.data['cleared_count'] == 2
        assert not ClinicLicense.objects.filter(qr_code__isnull=False).exists()


@pytest.mark.django_db
class TestBulkOperations:

    def test_clear_all_requires_confirm(self, admin_client, clinic):
        response = admin_client.post(reverse('clinics_api:clear_all_clinics'), {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert ClinicLicense.objects.count() == 1

    def test_clear_all(self, admin_client, clinic, make_clinic):
        make_clinic('JOR-DEN-002')

        response = admin_client.post(reverse('clinics_api:clear_all_clinics'), {'confirm': True}, format='json')

        assert response.data['deleted_count'] == 2
        assert not ClinicLicense.objects.exists()

    def test_expire_licenses(self, admin_client, make_clinic):
        today = timezone.localdate()
        make_clinic('JOR-EXP-001', expiry_date=today - timedelta(days=1))
        make_clinic('JOR-EXP-002', expiry_date=today)
        make_clinic('JOR-EXP-003', expiry_date=today - timedelta(days=3), license_status='suspended')
        make_clinic('JOR-EXP-004')

        response = admin_client.post(reverse('clinics_api:clinic_expire'))

        assert response.data == {'updated_count': 1}
        assert ClinicLicense.objects.get(license_number='JOR-EXP-001').license_status == 'expired'
        assert ClinicLicense.objects.get(license_number='JOR-EXP-002').license_status == 'active'
        assert ClinicLicense.objects.get(license_number='JOR-EXP-003').license_status == 'suspended'


@pytest.mark.django_db
class TestSpecializations:

    def test_create_appends_sort_order(self, admin_client):
        Specialization.objects.create(name_ar='أسنان', sort_order=4)

        response = admin_client.post(reverse('clinics_api:specialization_list'), {
            'name_ar': ' جلدية ',
            'name_en': 'Dermatology',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['sort_order'] == 5
        assert response.data['name_ar'] == 'جلدية'

    def test_list_includes_inactive(self, admin_client):
        Specialization.objects.create(name_ar='أسنان', is_active=False)

        response = admin_client.get(reverse('clinics_api:specialization_list'))

        assert len(response.data) == 1

    def test_update_toggle_delete(self, admin_client):
        spec = Specialization.objects.create(name_ar='أسنان')

        response = admin_client.patch(
            reverse('clinics_api:specialization_detail', kwargs={'specialization_id': spec.pk}),
            {'name_en': 'Dentistry'}, format='json'
        )
        assert response.data['name_en'] == 'Dentistry'

        response = admin_client.post(reverse('clinics_api:specialization_toggle', kwargs={'specialization_id': spec.pk}))
        assert response.data['is_active'] is False

        response = admin_client.delete(reverse('clinics_api:specialization_detail', kwargs={'specialization_id': spec.pk}))
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Specialization.objects.exists()


@pytest.mark.django_db
class TestSiteSettings:

    def test_list(self, admin_client):
        response = admin_client.get(reverse('clinics_api:site_settings'))

        keys = {row['key'] for row in response.data}
        assert set(SiteSetting.FOOTER_KEYS) <= keys

    def test_bulk_update(self, admin_client):
        response = admin_client.patch(reverse('clinics_api:site_settings'), {
            'settings': {'footer_title': 'Jordan Dental Association', 'footer_organization': 'JDA'}
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert SiteSetting.get_value('footer_title') == 'Jordan Dental Association'
        assert SiteSetting.get_value('footer_organization') == 'JDA'

    def test_unknown_key_is_rejected(self, admin_client):
        response = admin_client.patch(reverse('clinics_api:site_settings'), {
            'settings': {'footer_title': 'Changed', 'secret_key': 'x'}
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert SiteSetting.get_value('footer_title') == 'Clinic License Verification'


@pytest.mark.django_db
class TestReporting:

    def test_statistics(self, admin_client, clinic):
        response = admin_client.get(reverse('clinics_api:statistics'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_clinics'] == 1
        assert response.data['by_status']['active'] == 1

    def test_verification_audit_filters(self, admin_client, clinic):
        VerificationAttempt.log_attempt('JOR-DEN-001', 'manual_entry', 'success', clinic=clinic)
        VerificationAttempt.log_attempt('JOR-DEN-404', 'qr_scan', 'not_found')
        old = VerificationAttempt.log_attempt('JOR-DEN-001', 'qr_scan', 'success', clinic=clinic)
        VerificationAttempt.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=10))

        data = admin_client.get(reverse('clinics_api:verifications')).data
        assert data['total_attempts'] == 2
        assert data['successful'] == 1
        assert data['unsuccessful'] == 1

        data = admin_client.get(reverse('clinics_api:verifications'), {'days': 30, 'status': 'success'}).data
        assert data['total_attempts'] == 2
        assert data['attempts'][0]['clinic_name'] == 'Amman Dental Center'
