import os

import pytest
from django.conf import settings
from django.core.files.uploadedfile import SimpleUploadedFile

from medical.models import Certificate, VisitRecord

pytestmark = pytest.mark.django_db

CERT_URL = '/generate-and-save-certificate'


def pdf(name='certificate.pdf', content=b'%PDF-1.4 medical certificate', content_type='application/pdf'):
    return SimpleUploadedFile(name, content, content_type=content_type)


def stored_files():
    cert_dir = os.path.join(settings.MEDIA_ROOT, settings.CERTIFICATE_UPLOAD_DIR)
    if not os.path.isdir(cert_dir):
        return []
    return sorted(os.listdir(cert_dir))


@pytest.fixture
def visit(student):
    return VisitRecord.objects.create(student=student, diagnosis='Viral fever')


def attach(client, visit, serial='SN-001', **overrides):
    data = {
        'serialNo': serial,
        'recordId': visit.id,
        'age': 20,
        'gender': 'Female',
        'relaxations': 'Exempt from PT for 3 days',
        'pdf': pdf(),
    }
    data.update(overrides)
    data = {k: v for k, v in data.items() if v is not None}
    return client.post(CERT_URL, data, format='multipart')


def test_attach_certificate_stores_file_and_row(staff_client, visit):
    r = attach(staff_client, visit)
    assert r.status_code == 201
    assert r.data['success'] is True

    cert = Certificate.objects.get(serial_no='SN-001')
    assert cert.visit_id == visit.id
    assert cert.age == 20 and cert.gender == 'Female'
    assert cert.filename.startswith('cert-21CS001-') and cert.filename.endswith('.pdf')
    assert stored_files() == [cert.filename]
    assert r.data['data']['downloadPath'] == f'/download/certificate/{cert.filename}'


def test_roll_number_from_form_is_sanitized_into_filename(staff_client, visit):
    r = attach(staff_client, visit, rollNo='21/CS 001')
    assert r.status_code == 201
    assert Certificate.objects.get().filename.startswith('cert-21_CS_001-')


def test_duplicate_serial_conflicts_and_removes_new_file(staff_client, visit, student):
    first = attach(staff_client, visit)
    assert first.status_code == 201

    second_visit = VisitRecord.objects.create(student=student, diagnosis='Sprain')
    second = attach(staff_client, second_visit)
    assert second.status_code == 409
    assert second.data['success'] is False
    assert 'serial number already exists' in second.data['error']

    cert = Certificate.objects.get()
    assert cert.visit_id == visit.id
    assert stored_files() == [cert.filename]


def test_same_serial_on_same_visit_twice_conflicts(staff_client, visit):
    assert attach(staff_client, visit).status_code == 201
    assert attach(staff_client, visit).status_code == 409
    assert Certificate.objects.count() == 1


def test_missing_fields_store_nothing(staff_client, visit):
    r = attach(staff_client, visit, gender=None)
    assert r.status_code == 400
    assert 'gender' in r.data['fields']

    r = attach(staff_client, visit, pdf=None)
    assert r.status_code == 400
    assert stored_files() == []
    assert not Certificate.objects.exists()


def test_non_pdf_upload_is_rejected(staff_client, visit):
    r = attach(staff_client, visit, pdf=pdf('notes.txt', b'hello', 'text/plain'))
    assert r.status_code == 400
    assert stored_files() == []


def test_unknown_record_is_404_without_stored_file(staff_client, visit):
    r = attach(staff_client, visit, recordId=visit.id + 100)
    assert r.status_code == 404
    assert stored_files() == []


def test_failed_insert_removes_stored_file(staff_client, visit, monkeypatch):
    def boom(self, *args, **kwargs):
        raise RuntimeError('database went away')

    monkeypatch.setattr(Certificate, 'save', boom)
    r = attach(staff_client, visit)
    assert r.status_code == 500
    assert r.data == {'success': False, 'error': 'Internal Server Error'}
    assert stored_files() == []


def test_student_cannot_attach_certificates(student_client, visit):
    r = attach(student_client, visit)
    assert r.status_code == 403
    assert stored_files() == []


def test_student_lists_own_certificates(staff_client, student_client, visit):
    attach(staff_client, visit)
    r = student_client.get('/student/certificates/21CS001')
    assert r.status_code == 200
    [item] = r.data['data']
    assert item['serial_no'] == 'SN-001'
    assert item['diagnosis'] == 'Viral fever'
    assert item['downloadPath'] == f"/download/certificate/{item['file_path']}"


def test_certificate_list_is_scoped_to_owner(staff_client, visit, other_student, make_client):
    attach(staff_client, visit)
    r = make_client(other_student).get('/student/certificates/21CS001')
    assert r.status_code == 403
    r = staff_client.get('/student/certificates/21CS001')
    assert r.status_code == 403
    assert r.data == {'success': False, 'error': 'Forbidden.'}


def test_download_checks_ownership(staff_client, student_client, visit, other_student, make_client):
    attach(staff_client, visit)
    filename = Certificate.objects.get().filename
    url = f'/download/certificate/{filename}'

    r = student_client.get(url)
    assert r.status_code == 200
    assert b''.join(r.streaming_content) == b'%PDF-1.4 medical certificate'
    assert 'attachment' in r['Content-Disposition']

    assert staff_client.get(url).status_code == 200
    assert make_client(other_student).get(url).status_code == 403


def test_download_rejects_traversal_and_unknown_files(student_client):
    assert student_client.get('/download/certificate/..secret.pdf').status_code == 400
    r = student_client.get('/download/certificate/cert-nothing.pdf')
    assert r.status_code == 404
    assert r.data['success'] is False


def test_download_of_missing_file_is_404(staff_client, visit):
    attach(staff_client, visit)
    cert = Certificate.objects.get()
    os.remove(os.path.join(settings.MEDIA_ROOT, cert.file.name))
    assert staff_client.get(f'/download/certificate/{cert.filename}').status_code == 404
