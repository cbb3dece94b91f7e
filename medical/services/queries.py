"""Read-only projections over visit records and certificates."""
import datetime
import re
from typing import Iterable, Optional

from django.db import DEFAULT_DB_ALIAS
from django.urls import reverse
from django.utils import timezone

from medical.models import Certificate, DispensedLine, VisitRecord

_DATE_RE = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def parse_day(value: Optional[str]) -> datetime.date:
    """Parse ``YYYY-MM-DD``; anything missing or malformed means today."""
    if value and _DATE_RE.match(value):
        try:
            return datetime.date.fromisoformat(value)
        except ValueError:
            pass
    return timezone.localdate()


def medication_summary(lines: Iterable[DispensedLine]) -> Optional[str]:
    return '; '.join(f"{line.medicine_name} (Qty: {line.quantity})" for line in lines) or None


def download_path(filename: str) -> str:
    return reverse('download_certificate', args=[filename])


def _latest_certificate(record: VisitRecord) -> Optional[Certificate]:
    # prefetched with the model's default ordering, newest first
    certs = [c for c in record.certificates.all() if c.file]
    return certs[0] if certs else None


def visit_history(roll_no: str, *, using: str = DEFAULT_DB_ALIAS) -> list[dict]:
    qs = (
        VisitRecord.objects.using(using)
        .filter(student_id=roll_no)
        .prefetch_related('dispensed_lines', 'certificates')
        .order_by('-created_at', '-id')
    )
    items = []
    for r in qs:
        cert = _latest_certificate(r)
        items.append({
            'id': r.id,
            'date': timezone.localtime(r.created_at).date().isoformat(),
            'diagnosis': r.diagnosis,
            'remarks': r.remarks,
            'medications': medication_summary(r.dispensed_lines.all()),
            'certificate_file_path': cert.filename if cert else None,
            'certificate_download_path': download_path(cert.filename) if cert else None,
        })
    return items


def day_log(day: datetime.date, *, using: str = DEFAULT_DB_ALIAS) -> list[dict]:
    qs = (
        VisitRecord.objects.using(using)
        .filter(created_at__date=day)
        .select_related('student')
        .prefetch_related('dispensed_lines', 'certificates')
        .order_by('-created_at', '-id')
    )
    return [{
        'recordId': r.id,
        'name': r.student.name,
        'roll_no': r.student_id,
        'diagnosis': r.diagnosis,
        'remarks': r.remarks,
        'created_at': timezone.localtime(r.created_at).isoformat(),
        'medications': medication_summary(r.dispensed_lines.all()),
        'hasCertificate': _latest_certificate(r) is not None,
    } for r in qs]


def certificate_list(roll_no: str, *, using: str = DEFAULT_DB_ALIAS) -> list[dict]:
    qs = (
        Certificate.objects.using(using)
        .filter(visit__student_id=roll_no)
        .exclude(file='')
        .select_related('visit')
        .prefetch_related('visit__dispensed_lines')
        .order_by('-visit__created_at', '-created_at')
    )
    return [{
        'id': c.serial_no,
        'date': timezone.localtime(c.visit.created_at).date().isoformat(),
        'diagnosis': c.visit.diagnosis,
        'medications': medication_summary(c.visit.dispensed_lines.all()),
        'serial_no': c.serial_no,
        'file_path': c.filename,
        'created_at': timezone.localtime(c.created_at).isoformat(),
        'downloadPath': download_path(c.filename),
    } for c in qs]
