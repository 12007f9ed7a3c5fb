"""
QR payload encode/decode tests
"""
import base64
import json
from datetime import date
from io import BytesIO
import pytest
from PIL import Image

from clinics.qr_service import (
    LegacyPayload,
    NEW_CLINIC_ID,
    QRCodeService,
    StructuredPayload,
)


class TestDecode:

    def test_structured_payload_returns_license(self):
        text = '{"type":"clinic","license":"JOR-DEN-001","id":"abc123","issued":"2024-01-01"}'
        assert QRCodeService.decode(text) == 'JOR-DEN-001'

    def test_legacy_string_is_returned_unchanged(self):
        assert QRCodeService.decode('JOR-DEN-002') == 'JOR-DEN-002'

    @pytest.mark.parametrize('text', [
        '',
        '   ',
        'not json at all',
        '{"type":"clinic"',               # truncated JSON
        '{"type":"booking","license":"JOR-DEN-001"}',
        '{"license":"JOR-DEN-001"}',      # missing tag
        '{"type":"clinic","license":""}',
        '{"type":"clinic","license":42}',
        '["clinic","JOR-DEN-001"]',
        '"JOR-DEN-001"',
        '12345',
    ])
    def test_non_matching_text_is_identity(self, text):
        assert QRCodeService.decode(text) == text

    def test_decode_does_not_normalize(self):
        text = '{"type":"clinic","license":" jor-den-001 "}'
        assert QRCodeService.decode(text) == ' jor-den-001 '

    @pytest.mark.parametrize('text', [
        '[' * 100000,
        '{"a":' * 100000,
    ])
    def test_deeply_nested_json_is_legacy(self, text):
        assert QRCodeService.decode(text) == text


class TestParse:

    def test_structured_variant(self):
        payload = QRCodeService.parse('{"type":"clinic","license":"JOR-DEN-001","id":"abc","issued":"2024-01-01"}')
        assert payload == StructuredPayload(license='JOR-DEN-001', id='abc', issued='2024-01-01')

    def test_legacy_variant(self):
        assert QRCodeService.parse('JOR-DEN-002') == LegacyPayload(raw='JOR-DEN-002')

    def test_structured_without_optional_fields(self):
        payload = QRCodeService.parse('{"type":"clinic","license":"JOR-DEN-001"}')
        assert payload == StructuredPayload(license='JOR-DEN-001')


class TestEncode:

    def test_payload_shape(self):
        text = QRCodeService.encode('JOR-DEN-001', 'abc123', date(2024, 1, 1))
        assert json.loads(text) == {
            'type': 'clinic',
            'license': 'JOR-DEN-001',
            'id': 'abc123',
            'issued': '2024-01-01',
        }
        assert ' ' not in text

    def test_unsaved_clinic_uses_placeholder_id(self):
        payload = json.loads(QRCodeService.encode('JOR-DEN-001', None, '2024-01-01'))
        assert payload['id'] == NEW_CLINIC_ID

    def test_issued_defaults_to_today(self):
        from django.utils import timezone
        payload = json.loads(QRCodeService.encode('JOR-DEN-001', 'abc'))
        assert payload['issued'] == timezone.localdate().isoformat()

    @pytest.mark.parametrize('license_number', ['JOR-DEN-001', 'ABCDE', 'X' * 20, 'عيادة-1'])
    def test_encoded_payload_decodes_to_license(self, license_number):
        assert QRCodeService.decode(QRCodeService.encode(license_number, 'id-1', '2024-01-01')) == license_number


@pytest.mark.django_db
class TestClinicQRData:

    def test_new_clinic_gets_payload_on_save(self, clinic):
        payload = json.loads(clinic.qr_code)
        assert payload['license'] == 'JOR-DEN-001'
        assert payload['id'] == str(clinic.pk)

    def test_generate_qr_data_fills_missing_payload(self, clinic):
        clinic.qr_code = None
        type(clinic).objects.filter(pk=clinic.pk).update(qr_code=None)

        qr_data = QRCodeService.generate_qr_data(clinic)

        clinic.refresh_from_db()
        assert qr_data == clinic.qr_code
        assert QRCodeService.decode(qr_data) == 'JOR-DEN-001'

    def test_generate_qr_data_keeps_existing_payload(self, clinic):
        original = clinic.qr_code
        assert QRCodeService.generate_qr_data(clinic) == original

    def test_regenerate_qr_code(self, clinic):
        clinic.qr_code = '{"stale":true}'
        assert QRCodeService.regenerate_qr_code(clinic) is True
        clinic.refresh_from_db()
        assert QRCodeService.decode(clinic.qr_code) == 'JOR-DEN-001'

    def test_license_change_reissues_payload(self, clinic):
        clinic.license_number = 'JOR-DEN-777'
        clinic.save()
        clinic.refresh_from_db()
        assert QRCodeService.decode(clinic.qr_code) == 'JOR-DEN-777'


class TestQRImage:

    def test_generate_qr_image_is_png(self):
        png = QRCodeService.generate_qr_image(QRCodeService.encode('JOR-DEN-001', 'abc', '2024-01-01'))

        assert png.startswith(b'\x89PNG\r\n\x1a\n')
        image = Image.open(BytesIO(png))
        assert image.format == 'PNG'
        assert image.size[0] == image.size[1]

    def test_longer_payload_gives_larger_image(self):
        short = Image.open(BytesIO(QRCodeService.generate_qr_image('JOR-DEN-001')))
        long = Image.open(BytesIO(QRCodeService.generate_qr_image(
            QRCodeService.encode('JOR-DEN-001', '0b6c2a9e-7d2f-4f0e-9c61-3f7b9f1f2a10', '2024-01-01')
        )))
        assert long.size[0] > short.size[0]

    def test_data_url(self):
        data_url = QRCodeService.qr_image_data_url('JOR-DEN-001')

        assert data_url.startswith('data:image/png;base64,')
        png = base64.b64decode(data_url.split(',', 1)[1])
        assert png.startswith(b'\x89PNG')
