import csv
import datetime
import io

import pytest

from records.models import Immunization

pytestmark = pytest.mark.django_db


def _dose(patient, vaccine, dose, day, **extra):
    payload = {'patientId': patient.id, 'vaccineType': vaccine, 'doseNumber': dose, 'vaccinationDate': day}
    payload.update(extra)
    return payload


def test_next_due_date_follows_schedule(client_for, staff_b, patient_b):
    resp = client_for(staff_b).post('/api/immunizations', _dose(patient_b, 'Pentavalent', 1, '2024-01-15'),
                                    format='json')
    assert resp.status_code == 201
    data = resp.json()['data']
    assert data['nextDueDate'] == '2024-03-15'
    assert data['maxDoses'] == 3
    assert data['isLastDose'] is False
    assert data['ageMonths'] == 12
    assert data['facilityId'] == staff_b.facility_id


def test_last_dose_has_no_next_due_date(client_for, staff_b, patient_b):
    data = client_for(staff_b).post('/api/immunizations', _dose(patient_b, 'BCG', 1, '2023-01-11'),
                                    format='json').json()['data']
    assert data['nextDueDate'] is None
    assert data['isLastDose'] is True


def test_supplied_due_date_is_kept(client_for, staff_b, patient_b):
    data = client_for(staff_b).post('/api/immunizations',
                                    _dose(patient_b, 'OPV', 1, '2024-01-15', nextDueDate='2024-02-20'),
                                    format='json').json()['data']
    assert data['nextDueDate'] == '2024-02-20'


def test_duplicate_and_out_of_range_doses_are_rejected(client_for, staff_b, patient_b):
    client = client_for(staff_b)
    client.post('/api/immunizations', _dose(patient_b, 'Pentavalent', 1, '2024-01-15'), format='json')

    resp = client.post('/api/immunizations', _dose(patient_b, 'Pentavalent', 1, '2024-02-01'), format='json')
    assert resp.status_code == 400
    assert 'doseNumber' in resp.json()['error']['fields']

    resp = client.post('/api/immunizations', _dose(patient_b, 'Pentavalent', 4, '2024-02-01'), format='json')
    assert resp.status_code == 400
    assert Immunization.objects.count() == 1


def test_bulk_import_reports_bad_rows(client_for, staff_b, patient_b):
    rows = [
        _dose(patient_b, 'Pentavalent', 1, '2024-01-15'),
        _dose(patient_b, 'Pentavalent', 1, '2024-01-20'),
        {'patientId': patient_b.id, 'vaccineType': 'OPV'},
        _dose(patient_b, 'OPV', 1, '2024-01-15'),
    ]
    resp = client_for(staff_b).post('/api/immunizations/bulk-import', {'records': rows}, format='json')
    assert resp.status_code == 201
    data = resp.json()['data']
    assert data['created'] == 2
    assert [e['row'] for e in data['errors']] == [1, 2]
    assert 'doseNumber' in data['errors'][0]['errors']
    assert 'vaccinationDate' in data['errors'][1]['errors']


def test_bulk_import_with_nothing_valid(client_for, staff_b):
    resp = client_for(staff_b).post('/api/immunizations/bulk-import', {'records': [{}]}, format='json')
    assert resp.status_code == 200
    assert resp.json()['data']['created'] == 0

    resp = client_for(staff_b).post('/api/immunizations/bulk-import', {'records': 'nope'}, format='json')
    assert resp.status_code == 400


def test_coverage_and_patient_card(client_for, staff_b, patient_b):
    client = client_for(staff_b)
    for dose, day in ((1, '2023-03-10'), (2, '2023-05-10')):
        client.post('/api/immunizations', _dose(patient_b, 'Pentavalent', dose, day), format='json')
    client.post('/api/immunizations', _dose(patient_b, 'BCG', 1, '2023-01-11'), format='json')

    coverage = {row['vaccineType']: row for row in client.get('/api/immunizations/coverage').json()['data']}
    assert coverage['Pentavalent']['started'] == 1
    assert coverage['Pentavalent']['completed'] == 0
    assert coverage['BCG']['coverage'] == 100.0

    card = client.get(f'/api/immunizations/patient/{patient_b.id}').json()['data']
    assert len(card['immunizations']) == 3
    assert card['nextDue'] == [{'vaccineType': 'Pentavalent', 'doseNumber': 3, 'dueDate': '2023-07-10'}]


def test_schedule_calculator(client_for, staff_b):
    client = client_for(staff_b)
    assert len(client.get('/api/immunizations/vaccine-types').json()['data']) == 13
    data = client.get('/api/immunizations/schedules/info',
                      {'vaccineType': 'Measles', 'doseNumber': 1, 'vaccinationDate': '2024-01-31'}).json()['data']
    assert data['interval'] == 6
    assert data['nextDueDate'] == '2024-07-31'


def test_export_is_csv(client_for, staff_b, patient_b):
    client = client_for(staff_b)
    client.post('/api/immunizations', _dose(patient_b, 'BCG', 1, '2023-01-11', lotNumber='LOT-7'), format='json')
    resp = client.get('/api/immunizations/export')
    assert resp.status_code == 200
    assert resp['Content-Type'].startswith('text/csv')
    rows = list(csv.reader(io.StringIO(resp.content.decode())))
    assert rows[0][:3] == ['registrationNumber', 'patientName', 'vaccineType']
    assert rows[1][2] == 'BCG'
    assert 'LOT-7' in rows[1]


def test_statistics_count_overdue_doses(client_for, staff_b, supervisor, patient_b):
    client_for(staff_b).post('/api/immunizations', _dose(patient_b, 'Pentavalent', 1, '2023-03-10'), format='json')
    data = client_for(supervisor).get('/api/immunizations/statistics').json()['data']
    assert data['total'] == 1
    assert data['overdue'] == 1
    assert data['byVaccine'] == {'Pentavalent': 1}


def test_overdue_ignores_doses_with_a_later_dose_recorded(client_for, staff_b, supervisor, patient_b):
    client = client_for(staff_b)
    for dose, day in ((1, '2023-03-10'), (2, '2023-05-10')):
        client.post('/api/immunizations', _dose(patient_b, 'Pentavalent', dose, day), format='json')
    data = client_for(supervisor).get('/api/immunizations/statistics').json()['data']
    assert data['total'] == 2
    # only dose 2 is still open, and it is overdue
    assert data['overdue'] == 1

    client.post('/api/immunizations', _dose(patient_b, 'Pentavalent', 3, '2023-07-10'), format='json')
    data = client_for(supervisor).get('/api/immunizations/statistics').json()['data']
    assert data['overdue'] == 0


def test_statistics_count_doses_due_next_week(client_for, staff_b, supervisor, patient_b):
    today = datetime.date.today()
    client = client_for(staff_b)
    client.post('/api/immunizations',
                _dose(patient_b, 'OPV', 1, today.isoformat(),
                      nextDueDate=(today + datetime.timedelta(days=3)).isoformat()), format='json')
    client.post('/api/immunizations',
                _dose(patient_b, 'Rotavirus', 1, today.isoformat(),
                      nextDueDate=(today + datetime.timedelta(days=30)).isoformat()), format='json')
    data = client_for(supervisor).get('/api/immunizations/statistics').json()['data']
    assert data['dueNextWeek'] == 1
    assert data['overdue'] == 0
