from pathlib import Path

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from records.models import AuditEvent, PatientDocument

pytestmark = pytest.mark.django_db


@pytest.fixture(autouse=True)
def _media(settings, tmp_path):
    settings.MEDIA_ROOT = tmp_path


def _pdf(name='lab.pdf', body=b'%PDF-1.4 haemoglobin 11.2'):
    return SimpleUploadedFile(name, body, content_type='application/pdf')


def _upload(client, patient, **extra):
    payload = {'title': 'Full blood count', 'documentType': 'Lab Result', 'file': _pdf()}
    payload.update(extra)
    return client.post(f'/api/patients/{patient.id}/documents', payload, format='multipart')


def test_medical_history_entries(client_for, doctor_a, patient_a):
    client = client_for(doctor_a)
    url = f'/api/patients/{patient_a.id}/medical-history'
    resp = client.post(url, {'condition': 'Hypertension', 'diagnosis_date': '2021-06-01',
                             'status': 'Chronic', 'diagnosedBy': 'Dr. Inyang'}, format='json')
    assert resp.status_code == 201
    entry = resp.json()['data']
    assert entry['diagnosisDate'] == '2021-06-01'
    assert entry['severity'] == 'Moderate'
    assert entry['createdBy'] == doctor_a.id
    client.post(url, {'condition': 'Malaria', 'diagnosisDate': '2023-09-12', 'status': 'Resolved'}, format='json')

    data = client.get(url).json()['data']
    assert [e['condition'] for e in data] == ['Malaria', 'Hypertension']

    resp = client.patch(f"{url}/{entry['id']}", {'severity': 'Severe', 'notes': '<b>on</b> amlodipine'},
                        format='json')
    assert resp.json()['data']['severity'] == 'Severe'
    assert resp.json()['data']['notes'] == 'on amlodipine'

    detail = client.get(f'/api/patients/{patient_a.id}').json()['data']
    assert detail['medicalHistoryCount'] == 2
    assert AuditEvent.objects.filter(action='medical_history_update', object_id=patient_a.id).exists()


def test_medical_history_validation(client_for, doctor_a, patient_a):
    url = f'/api/patients/{patient_a.id}/medical-history'
    resp = client_for(doctor_a).post(url, {'status': 'Ongoing'}, format='json')
    assert resp.status_code == 400
    assert 'condition' in resp.json()['error']['fields']

    resp = client_for(doctor_a).post(url, {'condition': 'Asthma', 'status': 'Sometimes'}, format='json')
    assert resp.status_code == 400
    assert 'status' in resp.json()['error']['fields']


def test_medical_history_follows_facility_isolation(client_for, doctor_a, staff_b, supervisor, patient_a):
    url = f'/api/patients/{patient_a.id}/medical-history'
    entry_id = client_for(doctor_a).post(url, {'condition': 'Asthma'}, format='json').json()['data']['id']

    assert client_for(staff_b).get(url).status_code == 404
    assert client_for(staff_b).post(url, {'condition': 'Asthma'}, format='json').status_code == 404

    # clinical roles cannot delete; oversight roles can
    assert client_for(doctor_a).delete(f'{url}/{entry_id}').status_code == 403
    assert client_for(supervisor).delete(f'{url}/{entry_id}').json() == {'ok': True}
    assert client_for(supervisor).get(f'{url}/{entry_id}').status_code == 404


def test_document_upload_and_download(client_for, doctor_a, patient_a):
    client = client_for(doctor_a)
    resp = _upload(client, patient_a, source='Uyo General Hospital laboratory', confidential='true')
    assert resp.status_code == 201
    data = resp.json()['data']
    assert data['fileName'] == 'lab.pdf'
    assert data['contentType'] == 'application/pdf'
    assert data['size'] == len(b'%PDF-1.4 haemoglobin 11.2')
    assert data['confidential'] is True
    assert data['downloadUrl'] == f"/api/patients/{patient_a.id}/documents/{data['id']}/download"

    listed = client.get(f'/api/patients/{patient_a.id}/documents', {'documentType': 'Lab Result'}).json()
    assert [d['id'] for d in listed['data']] == [data['id']]
    assert listed['pagination']['totalItems'] == 1

    resp = client.get(data['downloadUrl'])
    assert resp.status_code == 200
    assert b''.join(resp.streaming_content) == b'%PDF-1.4 haemoglobin 11.2'
    assert 'attachment' in resp['Content-Disposition']
    resp.close()


def test_document_requires_title_and_file(client_for, doctor_a, patient_a):
    client = client_for(doctor_a)
    resp = client.post(f'/api/patients/{patient_a.id}/documents', {'title': 'Referral'}, format='multipart')
    assert resp.status_code == 400
    assert 'file' in resp.json()['error']['fields']

    resp = _upload(client, patient_a, documentType='Selfie')
    assert resp.status_code == 400
    assert 'documentType' in resp.json()['error']['fields']
    assert not PatientDocument.objects.exists()


def test_oversized_document_is_rejected(client_for, settings, doctor_a, patient_a):
    settings.PATIENT_DOCUMENT_MAX_MB = 0
    resp = _upload(client_for(doctor_a), patient_a)
    assert resp.status_code == 400
    assert resp.json()['error']['fields']['file'] == ['file is larger than 0 MB']


def test_documents_of_other_facilities_are_hidden(client_for, doctor_a, staff_b, patient_a):
    data = _upload(client_for(doctor_a), patient_a).json()['data']
    other = client_for(staff_b)
    assert other.get(f'/api/patients/{patient_a.id}/documents').status_code == 404
    assert other.get(data['downloadUrl']).status_code == 404


def test_deleting_a_document_removes_the_file(client_for, doctor_a, admin_user, patient_a, tmp_path):
    data = _upload(client_for(doctor_a), patient_a).json()['data']
    stored = PatientDocument.objects.get().file.path
    assert (tmp_path / 'patient_documents').exists()

    url = f"/api/patients/{patient_a.id}/documents/{data['id']}"
    assert client_for(doctor_a).delete(url).status_code == 403
    assert client_for(admin_user).delete(url).json() == {'ok': True}
    assert not PatientDocument.objects.exists()
    assert not Path(stored).exists()
    assert AuditEvent.objects.filter(action='document_delete', object_id=patient_a.id).exists()
