import datetime

import pytest

from records.models import AntenatalRecord, AuditEvent
from records.services.obstetrics import estimated_due_date

pytestmark = pytest.mark.django_db

TODAY = datetime.date.today()
LMP = TODAY - datetime.timedelta(weeks=10)


def _book(client, patient, **extra):
    payload = {'patientId': patient.id, 'lmp': LMP.isoformat()}
    payload.update(extra)
    return client.post('/api/antenatal', payload, format='json')


def test_booking_derives_due_date_and_first_appointment(client_for, doctor_a, patient_a):
    resp = _book(client_for(doctor_a), patient_a)
    assert resp.status_code == 201
    data = resp.json()['data']
    assert data['edd'] == estimated_due_date(LMP).isoformat()
    assert data['nextAppointment'] == (TODAY + datetime.timedelta(weeks=4)).isoformat()
    assert data['gestationalAge'] == 10
    assert data['trimester'] == 1
    assert data['riskLevel'] == 'low'
    assert data['facilityId'] == doctor_a.facility_id
    record = AntenatalRecord.objects.get()
    assert data['registrationNumber'] == f'ANC{10000 + record.id}'
    assert AuditEvent.objects.filter(action='antenatal_create', object_id=record.id).exists()


def test_risk_factors_grade_the_pregnancy(client_for, doctor_a, patient_a):
    client = client_for(doctor_a)
    data = _book(client, patient_a, riskFactors=['hypertension', 'previous caesarean', '']).json()['data']
    assert data['riskLevel'] == 'high'
    assert data['riskFactors'] == ['hypertension', 'previous caesarean']

    resp = client.patch(f"/api/antenatal/{data['id']}", {'riskLevel': 'medium'}, format='json')
    assert resp.json()['data']['riskLevel'] == 'medium'


def test_para_cannot_exceed_gravida(client_for, doctor_a, patient_a):
    resp = _book(client_for(doctor_a), patient_a, gravida=2, para=3)
    assert resp.status_code == 400
    assert 'para' in resp.json()['error']['fields']


def test_cannot_book_patient_from_another_facility(client_for, doctor_a, patient_b):
    resp = _book(client_for(doctor_a), patient_b)
    assert resp.status_code == 400
    assert resp.json()['error']['fields'] == {'patientId': ['patient not found']}


def test_visits_are_numbered_and_move_the_appointment(client_for, doctor_a, patient_a):
    client = client_for(doctor_a)
    record_id = _book(client, patient_a).json()['data']['id']

    first = LMP + datetime.timedelta(weeks=8)
    second = LMP + datetime.timedelta(weeks=9)
    for day in (first, second):
        resp = client.post(f'/api/antenatal/{record_id}/visits',
                           {'visitDate': day.isoformat(), 'bloodPressure': '120/80', 'fetalHeartRate': 140},
                           format='json')
        assert resp.status_code == 201

    visits = client.get(f'/api/antenatal/{record_id}/visits').json()['data']
    assert [v['visitNumber'] for v in visits] == [1, 2]
    assert [v['gestationalAge'] for v in visits] == [8, 9]
    assert visits[1]['nextAppointment'] == (second + datetime.timedelta(weeks=4)).isoformat()

    detail = client.get(f'/api/antenatal/{record_id}').json()['data']
    assert detail['visitCount'] == 2
    assert detail['nextAppointment'] == (TODAY + datetime.timedelta(weeks=4)).isoformat()


def test_visit_before_lmp_is_rejected(client_for, doctor_a, patient_a):
    client = client_for(doctor_a)
    record_id = _book(client, patient_a).json()['data']['id']
    resp = client.post(f'/api/antenatal/{record_id}/visits',
                       {'visitDate': (LMP - datetime.timedelta(days=1)).isoformat()}, format='json')
    assert resp.status_code == 400
    assert 'visitDate' in resp.json()['error']['fields']


def test_schedule_marks_completed_visits(client_for, doctor_a, patient_a):
    client = client_for(doctor_a)
    record_id = _book(client, patient_a).json()['data']['id']
    client.post(f'/api/antenatal/{record_id}/visits', {'visitDate': TODAY.isoformat()}, format='json')

    data = client.get(f'/api/antenatal/{record_id}/schedule', {'count': 3}).json()['data']
    assert [v['gestationalWeek'] for v in data['visits']] == [4, 8, 12]
    assert [v['completed'] for v in data['visits']] == [True, False, False]
    assert data['visits'][0]['visitDate'] == (LMP + datetime.timedelta(weeks=4)).isoformat()


def test_other_facilities_cannot_read_the_record(client_for, doctor_a, staff_b, patient_a):
    record_id = _book(client_for(doctor_a), patient_a).json()['data']['id']
    assert client_for(staff_b).get(f'/api/antenatal/{record_id}').status_code == 404


def test_statistics_by_trimester_and_risk(client_for, doctor_a, supervisor, patient_a):
    _book(client_for(doctor_a), patient_a)
    data = client_for(supervisor).get('/api/antenatal/statistics').json()['data']
    assert data['total'] == 1
    assert data['active'] == 1
    assert data['byTrimester'] == {'1': 1, '2': 0, '3': 0}
    assert data['byRiskLevel'] == {'low': 1, 'medium': 0, 'high': 0}


def test_visit_measurements_are_stored(client_for, doctor_a, patient_a):
    client = client_for(doctor_a)
    record_id = _book(client, patient_a).json()['data']['id']
    resp = client.post(f'/api/antenatal/{record_id}/visits',
                       {'visitDate': TODAY.isoformat(), 'hemoglobin': '11.2', 'weightKg': '64.5',
                        'fundalHeightCm': '10.0'}, format='json')
    assert resp.status_code == 201
    data = resp.json()['data']
    assert data['hemoglobin'] == 11.2
    assert data['weightKg'] == 64.5

    resp = client.post(f'/api/antenatal/{record_id}/visits',
                       {'visitDate': TODAY.isoformat(), 'hemoglobin': '40'}, format='json')
    assert resp.status_code == 400
    assert 'hemoglobin' in resp.json()['error']['fields']


def test_statistics_count_upcoming_and_missed_appointments(client_for, supervisor, patient_a):
    def booked(next_appointment, status='active'):
        return AntenatalRecord.objects.create(patient=patient_a, facility=patient_a.facility, lmp=LMP,
                                              next_appointment=next_appointment, status=status)

    booked(TODAY + datetime.timedelta(days=3))
    booked(TODAY + datetime.timedelta(days=20))
    booked(TODAY - datetime.timedelta(days=3))
    booked(TODAY - datetime.timedelta(days=10), status='delivered')

    data = client_for(supervisor).get('/api/antenatal/statistics').json()['data']
    assert data['total'] == 4
    assert data['active'] == 3
    assert data['upcomingAppointments'] == 1
    assert data['missedAppointments'] == 1
