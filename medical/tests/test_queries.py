import datetime

import pytest
from django.utils import timezone

from medical.models import Certificate, DispensedLine, VisitRecord
from medical.services.queries import medication_summary, parse_day

pytestmark = pytest.mark.django_db


def make_visit(student, diagnosis, when=None, lines=(), remarks=None):
    visit = VisitRecord.objects.create(student=student, diagnosis=diagnosis, remarks=remarks)
    for name, qty in lines:
        DispensedLine.objects.create(visit=visit, medicine_name=name, quantity=qty)
    if when is not None:
        VisitRecord.objects.filter(pk=visit.pk).update(created_at=when)
        visit.refresh_from_db()
    return visit


def at(day: datetime.date, hour: int) -> datetime.datetime:
    return timezone.make_aware(datetime.datetime.combine(day, datetime.time(hour, 0)))


def test_parse_day_falls_back_to_today():
    today = timezone.localdate()
    assert parse_day('2024-03-05') == datetime.date(2024, 3, 5)
    assert parse_day(None) == today
    assert parse_day('') == today
    assert parse_day('05/03/2024') == today
    assert parse_day('2024-13-40') == today


def test_medication_summary_format():
    lines = [DispensedLine(medicine_name='Paracetamol', quantity=3), DispensedLine(medicine_name='ORS', quantity=1)]
    assert medication_summary(lines) == 'Paracetamol (Qty: 3); ORS (Qty: 1)'
    assert medication_summary([]) is None


def test_visit_history_newest_first_with_certificate_links(student, student_client, other_student):
    day = datetime.date(2024, 8, 1)
    older = make_visit(student, 'Cold', at(day, 9), lines=[('Cetirizine', 2)])
    newer = make_visit(student, 'Fever', at(day + datetime.timedelta(days=1), 10),
                       lines=[('Paracetamol', 3), ('ORS', 1)], remarks='Hydrate')
    make_visit(other_student, 'Sprain', at(day, 11))
    Certificate.objects.create(serial_no='SN-100', visit=newer, age=20, gender='Female',
                               file='certificates/cert-21CS001-1-1.pdf')

    r = student_client.get('/records/21CS001')
    assert r.status_code == 200
    data = r.data['data']
    assert [row['id'] for row in data] == [newer.id, older.id]
    assert data[0]['date'] == '2024-08-02'
    assert data[0]['medications'] == 'Paracetamol (Qty: 3); ORS (Qty: 1)'
    assert data[0]['remarks'] == 'Hydrate'
    assert data[0]['certificate_file_path'] == 'cert-21CS001-1-1.pdf'
    assert data[0]['certificate_download_path'] == '/download/certificate/cert-21CS001-1-1.pdf'
    assert data[1]['certificate_download_path'] is None
    assert data[1]['medications'] == 'Cetirizine (Qty: 2)'


def test_student_cannot_read_another_students_history(student, other_student, make_client):
    make_visit(student, 'Cold')
    r = make_client(other_student).get('/records/21CS001')
    assert r.status_code == 403
    assert r.data == {'success': False, 'error': 'Forbidden.'}


def test_staff_can_read_any_history(student, staff_client):
    make_visit(student, 'Cold')
    r = staff_client.get('/records/21CS001')
    assert r.status_code == 200
    assert len(r.data['data']) == 1


def test_day_log_filters_by_date(student, other_student, staff_client):
    day = datetime.date(2024, 8, 1)
    a = make_visit(student, 'Cold', at(day, 9), lines=[('Cetirizine', 1)])
    b = make_visit(other_student, 'Fever', at(day, 15))
    make_visit(student, 'Headache', at(day + datetime.timedelta(days=1), 9))
    Certificate.objects.create(serial_no='SN-200', visit=a, age=21, gender='Female',
                               file='certificates/cert-21CS001-2-2.pdf')

    r = staff_client.get('/medical/staff/records', {'date': '2024-08-01'})
    assert r.status_code == 200
    assert r.data['date'] == '2024-08-01'
    rows = r.data['data']
    assert [row['recordId'] for row in rows] == [b.id, a.id]
    assert rows[0]['name'] == 'Ravi Kumar' and rows[0]['roll_no'] == '21CS002'
    assert rows[0]['hasCertificate'] is False and rows[0]['medications'] is None
    assert rows[1]['hasCertificate'] is True
    assert rows[1]['medications'] == 'Cetirizine (Qty: 1)'


def test_day_log_defaults_to_today(student, staff_client):
    visit = make_visit(student, 'Cough')
    for params in ({}, {'date': 'yesterday'}):
        r = staff_client.get('/medical/staff/records', params)
        assert r.status_code == 200
        assert r.data['date'] == timezone.localdate().isoformat()
        assert [row['recordId'] for row in r.data['data']] == [visit.id]


def test_day_log_is_staff_only(student_client):
    assert student_client.get('/medical/staff/records').status_code == 403
