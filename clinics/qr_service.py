"""
QR Code Payload Service for Clinic License Verification
Payload generation and PNG rendering of clinic QR codes

Two payload formats are in circulation:
- Structured (current): {"type": "clinic", "license": "...", "id": "...", "issued": "YYYY-MM-DD"}
- Legacy: the bare license number printed on codes issued before the structured format
"""

import base64
import json
from dataclasses import dataclass
from io import BytesIO
from datetime import date
from typing import Optional, Union
from django.utils import timezone
import qrcode
import logging

logger = logging.getLogger(__name__)


PAYLOAD_TYPE = 'clinic'
NEW_CLINIC_ID = 'new'  # Placeholder id for a live preview of an unsaved clinic

QR_BOX_SIZE = 10
QR_BORDER = 4


@dataclass(frozen=True)
class StructuredPayload:
    """Tagged JSON payload carrying the license number"""
    license: str
    id: Optional[str] = None
    issued: Optional[str] = None


@dataclass(frozen=True)
class LegacyPayload:
    """Bare license number with no wrapping structure"""
    raw: str


QRPayload = Union[StructuredPayload, LegacyPayload]


class QRCodeService:
    """Service for encoding and decoding clinic QR payloads"""

    @staticmethod
    def encode(license_number, clinic_id=None, issued=None):
        """
        Build the structured payload text for a clinic QR code

        Args:
            license_number: Clinic license number
            clinic_id: Clinic primary key, or None for an unsaved clinic
            issued: Issue date (date or ISO string), defaults to today

        Returns:
            str: Compact JSON text to embed in the QR code
        """
        if issued is None:
            issued = timezone.localdate()
        if isinstance(issued, date):
            issued = issued.isoformat()

        payload = {
            'type': PAYLOAD_TYPE,
            'license': license_number,
            'id': str(clinic_id) if clinic_id else NEW_CLINIC_ID,
            'issued': issued,
        }
        return json.dumps(payload, ensure_ascii=False, separators=(',', ':'))

    @staticmethod
    def parse_structured(text) -> Optional[StructuredPayload]:
        """Return the structured payload, or None if text is not one"""
        if not isinstance(text, str) or not text.lstrip().startswith('{'):
            return None

        try:
            data = json.loads(text)
        except (ValueError, RecursionError):
            # Malformed or pathologically nested JSON is treated as legacy text
            return None

        if not isinstance(data, dict) or data.get('type') != PAYLOAD_TYPE:
            return None

        license_number = data.get('license')
        if not isinstance(license_number, str) or not license_number:
            return None

        clinic_id = data.get('id')
        issued = data.get('issued')
        return StructuredPayload(
            license=license_number,
            id=str(clinic_id) if clinic_id is not None else None,
            issued=str(issued) if issued is not None else None,
        )

    @staticmethod
    def parse(text) -> QRPayload:
        """
        Classify scanned text as a structured or legacy payload.
        Never raises: anything that is not a structured payload is legacy.
        """
        return QRCodeService.parse_structured(text) or LegacyPayload(raw=text)

    @staticmethod
    def decode(text):
        """
        Extract the license number from scanned QR text

        Args:
            text: Raw decoded QR text

        Returns:
            str: License number (the whole text for legacy codes)
        """
        payload = QRCodeService.parse(text)

        if isinstance(payload, StructuredPayload):
            return payload.license

        logger.debug("QR text is not a structured payload, treating it as a legacy license number")
        return payload.raw

    @staticmethod
    def generate_qr_data(clinic):
        """
        Return the QR payload for a clinic, generating it if missing

        Args:
            clinic: ClinicLicense instance

        Returns:
            str: QR payload text, or None on failure
        """
        try:
            if not clinic.qr_code:
                clinic.qr_code = QRCodeService.encode(clinic.license_number, clinic.pk)
                clinic.save(update_fields=['qr_code', 'updated_at'])

            logger.info(f"QR data generated for clinic {clinic.license_number}")
            return clinic.qr_code

        except Exception as e:
            logger.error(f"Error generating QR data for clinic {clinic.pk}: {str(e)}")
            return None

    @staticmethod
    def regenerate_qr_code(clinic):
        """
        Re-issue the QR payload for a clinic with today's date

        Returns:
            bool: True if successful
        """
        try:
            clinic.qr_code = QRCodeService.encode(clinic.license_number, clinic.pk)
            clinic.save(update_fields=['qr_code', 'updated_at'])

            logger.info(f"QR payload regenerated for clinic {clinic.license_number}")
            return True

        except Exception as e:
            logger.error(f"Error regenerating QR payload for clinic {clinic.pk}: {str(e)}")
            return False

    @staticmethod
    def generate_qr_image(payload):
        """
        Render payload text as a printable QR code

        Args:
            payload: QR payload text (structured JSON or a bare license number)

        Returns:
            bytes: PNG image
        """
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=QR_BOX_SIZE,
            border=QR_BORDER,
        )
        qr.add_data(payload)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()

    @staticmethod
    def qr_image_data_url(payload):
        """PNG QR code as a data: URL for <img src>, or None on failure"""
        try:
            img_base64 = base64.b64encode(QRCodeService.generate_qr_image(payload)).decode()
            return f"data:image/png;base64,{img_base64}"
        except Exception as e:
            logger.error(f"Error rendering QR image: {str(e)}")
            return None
