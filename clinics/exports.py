"""
Clinic export helpers (CSV and Excel)
"""
import csv
from io import BytesIO
from django.http import HttpResponse
from django.utils import timezone
import openpyxl
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

EXPORT_HEADERS = [
    'Clinic Name',
    'License Number',
    'Doctor Name',
    'Specialization',
    'License Status',
    'Phone',
    'Address',
    'Issue Date',
    'Expiry Date',
    'Verification Count',
    'Created At',
]


def _date(value):
    return value.isoformat() if value else ''


def clinic_export_rows(clinics):
    """Yield one list of cell values per clinic, in EXPORT_HEADERS order"""
    for clinic in clinics:
        yield [
            clinic.clinic_name or '',
            clinic.license_number or '',
            clinic.doctor_name or '',
            clinic.specialization or '',
            clinic.license_status or '',
            clinic.phone or '',
            clinic.address or '',
            _date(clinic.issue_date),
            _date(clinic.expiry_date),
            clinic.verification_count or 0,
            _date(timezone.localtime(clinic.created_at).date()) if clinic.created_at else '',
        ]


def export_filename(extension):
    return f"clinics_export_{timezone.localdate().isoformat()}.{extension}"


def export_clinics_csv(clinics):
    """Export clinics as CSV (UTF-8 with BOM so Excel shows Arabic text correctly)"""
    response = HttpResponse(content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{export_filename("csv")}"'
    response.write('\ufeff')

    writer = csv.writer(response, quoting=csv.QUOTE_ALL)
    writer.writerow(EXPORT_HEADERS)
    for row in clinic_export_rows(clinics):
        writer.writerow(row)

    return response


def export_clinics_excel(clinics):
    """Export clinics as an Excel workbook"""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Clinics"

    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="0F766E", end_color="0F766E", fill_type="solid")

    for col, header in enumerate(EXPORT_HEADERS, start=1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = header_font
        cell.fill = header_fill

    for row_index, row in enumerate(clinic_export_rows(clinics), start=2):
        for col, value in enumerate(row, start=1):
            ws.cell(row=row_index, column=col, value=value)

    # Size columns to their content
    for col in range(1, len(EXPORT_HEADERS) + 1):
        letter = get_column_letter(col)
        width = max(len(str(cell.value or '')) for cell in ws[letter])
        ws.column_dimensions[letter].width = min(width + 2, 60)

    ws.freeze_panes = 'A2'

    output = BytesIO()
    wb.save(output)
    output.seek(0)

    response = HttpResponse(
        output.getvalue(),
        content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )
    response['Content-Disposition'] = f'attachment; filename="{export_filename("xlsx")}"'
    return response
