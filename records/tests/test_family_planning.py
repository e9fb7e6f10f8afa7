import pytest

from records.models import FamilyPlanningClient

pytestmark = pytest.mark.django_db


def _register(client, patient, facility, **extra):
    payload = {
        'patientId': patient.id, 'facilityId': facility.id, 'registrationDate': '2024-04-02',
        'clientType': 'New Acceptor', 'maritalStatus': 'Married',
    }
    payload.update(extra)
    return client.post('/api/family-planning/clients', payload, format='json')


def test_required_fields(client_for, doctor_a, patient_a):
    resp = client_for(doctor_a).post('/api/family-planning/clients', {'patientId': patient_a.id}, format='json')
    assert resp.status_code == 400
    assert resp.json()['error']['message'] == (
        'Missing required fields: facilityId, registrationDate, clientType, maritalStatus'
    )


def test_unknown_method_is_rejected(client_for, doctor_a, patient_a, facility_a):
    resp = _register(client_for(doctor_a), patient_a, facility_a, currentMethod='herbal')
    assert resp.status_code == 400
    assert 'currentMethod' in resp.json()['error']['fields']


def test_registration_uses_callers_facility(client_for, doctor_a, patient_a, facility_b):
    resp = _register(client_for(doctor_a), patient_a, facility_b, currentMethod='implant')
    assert resp.status_code == 201
    data = resp.json()['data']
    client = FamilyPlanningClient.objects.get()
    assert data['clientNumber'] == f'FPC{client.id:08d}'
    assert data['facilityId'] == doctor_a.facility_id
    assert data['currentMethodName'] == 'Implant'


def test_search_and_update(client_for, doctor_a, patient_a, facility_a):
    client = client_for(doctor_a)
    client_id = _register(client, patient_a, facility_a).json()['data']['id']

    found = client.get('/api/family-planning/clients/search', {'q': 'udo'}).json()['data']
    assert [c['id'] for c in found] == [client_id]

    resp = client.patch(f'/api/family-planning/clients/{client_id}',
                        {'status': 'Discontinued', 'currentMethod': ''}, format='json')
    assert resp.json()['data']['status'] == 'Discontinued'
    assert client.delete(f'/api/family-planning/clients/{client_id}').status_code == 403


def test_methods_and_statistics(client_for, doctor_a, supervisor, patient_a, patient_b, facility_a, facility_b):
    _register(client_for(doctor_a), patient_a, facility_a, currentMethod='iud')
    _register(client_for(supervisor), patient_b, facility_b, currentMethod='iud', clientType='Restart')

    methods = client_for(doctor_a).get('/api/family-planning/methods').json()['data']
    assert len(methods) == 10

    data = client_for(supervisor).get('/api/family-planning/statistics').json()['data']
    assert data['totalClients'] == 2
    assert data['newAcceptors'] == 1
    assert data['topMethods'] == [{'methodId': 'iud', 'name': 'Intrauterine Device (IUD)', 'clients': 2,
                                   'percentage': 100.0}]

    own = client_for(doctor_a).get('/api/family-planning/statistics').json()['data']
    assert own['totalClients'] == 1
