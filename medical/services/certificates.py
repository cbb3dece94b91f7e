"""
Certificate attachment and lookup.

The uploaded PDF is written to the media storage first and the
certificate row is inserted afterwards. The two writes are not atomic
together: if the insert fails the stored file is deleted again, but a
crash between the two steps leaves an orphaned file behind.
"""
import logging
import os
import posixpath
import re
import secrets
import time
from typing import Optional

from django.conf import settings
from django.core.files.storage import Storage, default_storage
from django.db import DEFAULT_DB_ALIAS, IntegrityError, transaction
from rest_framework.exceptions import NotFound

from medical.exceptions import DuplicateCertificate
from medical.models import Certificate, User, VisitRecord
from medical.services.audit import log_action

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r'[^a-zA-Z0-9_-]')


def certificate_filename(roll_no: Optional[str], original_name: Optional[str]) -> str:
    safe_roll = _UNSAFE_CHARS.sub('_', roll_no or 'unknown_roll')
    ext = os.path.splitext(original_name or '')[1]
    return f"cert-{safe_roll}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"


def certificate_path(filename: str) -> str:
    return posixpath.join(settings.CERTIFICATE_UPLOAD_DIR, filename)


def _discard(storage: Storage, name: str) -> None:
    try:
        storage.delete(name)
    except OSError:
        logger.exception('Could not delete orphaned certificate file %s', name)


def attach_certificate(
    staff: Optional[User],
    *,
    serial_no: str,
    record_id: int,
    age: int,
    gender: str,
    upload,
    relaxations: Optional[str] = None,
    roll_no: Optional[str] = None,
    using: str = DEFAULT_DB_ALIAS,
    storage: Optional[Storage] = None,
) -> Certificate:
    storage = storage or default_storage
    visit = VisitRecord.objects.using(using).filter(pk=record_id).first()
    if not visit:
        raise NotFound('Medical record not found.')

    stored_name = storage.save(certificate_path(certificate_filename(roll_no or visit.student_id, upload.name)), upload)
    try:
        with transaction.atomic(using=using):
            cert = Certificate.objects.using(using).create(
                serial_no=serial_no,
                visit=visit,
                age=age,
                gender=gender,
                relaxations=relaxations or None,
                file=stored_name,
            )
    except IntegrityError:
        logger.info('Duplicate certificate serial %s rejected', serial_no)
        _discard(storage, stored_name)
        raise DuplicateCertificate()
    except Exception:
        _discard(storage, stored_name)
        raise

    logger.info('Certificate %s issued for record %s (%s)', serial_no, visit.pk, stored_name)
    try:
        log_action(user=staff, action='certificate_issue', object_type='certificate', object_id=serial_no,
                   detail={'recordId': visit.pk, 'file': stored_name})
    except Exception:
        logger.exception('Audit write failed for certificate %s', serial_no)
    return cert


def find_certificate_by_filename(filename: str, *, using: str = DEFAULT_DB_ALIAS) -> Optional[Certificate]:
    return (
        Certificate.objects.using(using)
        .select_related('visit')
        .filter(file=certificate_path(filename))
        .first()
    )


def can_download(user, cert: Certificate) -> bool:
    if getattr(user, 'role', None) == User.ROLE_STAFF:
        return True
    return getattr(user, 'role', None) == User.ROLE_STUDENT and user.roll_no == cert.visit.student_id
