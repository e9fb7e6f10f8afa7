import datetime

import pytest

from records.models import DiseaseCase, Outbreak
from records.services import diseases as svc

pytestmark = pytest.mark.django_db

REPORTED = '2024-06-03'


def _case(client, patient, disease='malaria', **extra):
    payload = {'patientId': patient.id, 'diseaseId': disease, 'reportDate': REPORTED, 'status': 'confirmed'}
    payload.update(extra)
    return client.post('/api/diseases/cases', payload, format='json')


def test_catalogue_is_seeded(client_for, doctor_a):
    data = client_for(doctor_a).get('/api/diseases').json()['data']
    assert len(data) == 12
    assert {'id': 'lassa-fever', 'name': 'Lassa Fever', 'type': 'Viral'} in data


def test_missing_fields_are_listed_together(client_for, doctor_a):
    resp = client_for(doctor_a).post('/api/diseases/cases', {'location': 'Uyo'}, format='json')
    assert resp.status_code == 400
    assert resp.json()['error']['message'] == 'Missing required fields: patientId, diseaseId, reportDate, status'


def test_unknown_disease_is_rejected(client_for, doctor_a, patient_a):
    resp = _case(client_for(doctor_a), patient_a, disease='dengue')
    assert resp.status_code == 400
    assert resp.json()['error']['fields'] == {'diseaseId': ['unknown disease']}


def test_case_registration(client_for, doctor_a, patient_a):
    resp = _case(client_for(doctor_a), patient_a, symptoms=['fever', 'chills'], severity='moderate')
    assert resp.status_code == 201
    data = resp.json()['data']
    case = DiseaseCase.objects.get()
    assert data['caseId'] == f'DC-2024-{case.id:05d}'
    assert data['diseaseName'] == 'Malaria'
    assert data['facilityId'] == doctor_a.facility_id
    assert data['symptoms'] == ['fever', 'chills']
    assert data['contacts'] == []


def test_oversight_case_defaults_to_patients_facility(client_for, supervisor, patient_b):
    data = _case(client_for(supervisor), patient_b).json()['data']
    assert data['facilityId'] == patient_b.facility_id


def test_contacts_are_traced(client_for, doctor_a, staff_b, patient_a):
    client = client_for(doctor_a)
    case_id = _case(client, patient_a, disease='cholera').json()['data']['id']

    resp = client.post(f'/api/diseases/cases/{case_id}/contacts',
                       {'name': 'Imaobong Udo', 'relationship': 'sister', 'exposureDate': '2024-06-01'},
                       format='json')
    assert resp.status_code == 201
    assert resp.json()['data']['followUpStatus'] == 'pending'

    assert client.post(f'/api/diseases/cases/{case_id}/contacts', {'phone': '080'}, format='json').status_code == 400
    contacts = client.get(f'/api/diseases/cases/{case_id}').json()['data']['contacts']
    assert [c['name'] for c in contacts] == ['Imaobong Udo']

    assert client_for(staff_b).get(f'/api/diseases/cases/{case_id}/contacts').status_code == 404


def test_outbreak_flags_cases_and_alerts_dashboards(client_for, doctor_a, patient_a, monkeypatch):
    alerts = []
    monkeypatch.setattr(svc, 'broadcast_outbreak', alerts.append)
    client = client_for(doctor_a)
    ids = [_case(client, patient_a, disease='cholera').json()['data']['id'] for _ in range(2)]

    resp = client.post('/api/diseases/outbreaks', {
        'diseaseId': 'cholera', 'lga': 'Uyo', 'startDate': REPORTED, 'caseIds': ids,
    }, format='json')
    assert resp.status_code == 201
    data = resp.json()['data']
    assert data['caseCount'] == 2
    assert data['facilityId'] == doctor_a.facility_id
    assert DiseaseCase.objects.filter(is_outbreak=True).count() == 2
    assert [o.id for o in alerts] == [data['id']]

    listed = client.get('/api/diseases/outbreaks', {'status': 'active'}).json()['data']
    assert [o['id'] for o in listed] == [data['id']]


def test_outbreak_rejects_cases_of_another_disease(client_for, doctor_a, patient_a, monkeypatch):
    monkeypatch.setattr(svc, 'broadcast_outbreak', lambda outbreak: None)
    client = client_for(doctor_a)
    malaria_id = _case(client, patient_a).json()['data']['id']
    resp = client.post('/api/diseases/outbreaks',
                       {'diseaseId': 'cholera', 'startDate': REPORTED, 'caseIds': [malaria_id]}, format='json')
    assert resp.status_code == 400
    assert 'caseIds' in resp.json()['error']['fields']
    assert not Outbreak.objects.exists()
    assert not DiseaseCase.objects.get(pk=malaria_id).is_outbreak


def test_broadcast_sends_alert_to_updates_group(admin_user, monkeypatch):
    sent = []

    class Layer:
        async def group_send(self, group, event):
            sent.append((group, event))

    monkeypatch.setattr(svc, 'get_channel_layer', Layer)
    outbreak = Outbreak.objects.create(disease_id='measles', lga='Ikot Ekpene', start_date=datetime.date(2024, 5, 1),
                                       reported_by=admin_user, case_count=3)
    svc.broadcast_outbreak(outbreak)
    (group, event), = sent
    assert group == 'updates'
    assert event['type'] == 'outbreak.alert'
    assert event['outbreak']['diseaseName'] == 'Measles'
    assert event['outbreak']['caseCount'] == 3


def test_statistics(client_for, doctor_a, patient_a):
    client = client_for(doctor_a)
    _case(client, patient_a, outcome='recovered')
    _case(client, patient_a, disease='typhoid', status='suspected')
    data = client.get('/api/diseases/statistics').json()['data']
    assert data['totalCases'] == 2
    assert data['recoveredCases'] == 1
    assert data['suspectedCases'] == 1
    assert len(data['weeklyTrend']) == 8
    assert {row['diseaseId'] for row in data['byDisease']} == {'malaria', 'typhoid'}
