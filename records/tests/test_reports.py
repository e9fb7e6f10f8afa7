import csv
import datetime
import io

import pytest

from records.models import Birth
from records.services.stats_cache import cache_key

pytestmark = pytest.mark.django_db


def test_general_report_is_scoped(client_for, admin_user, doctor_a, patient_a, patient_b):
    totals = client_for(admin_user).get('/api/reports/general').json()['data']['totals']
    assert totals['patients'] == 2
    assert totals['facilities'] == 2

    totals = client_for(doctor_a).get('/api/reports/general').json()['data']['totals']
    assert totals['patients'] == 1
    assert totals['facilities'] == 1


def test_general_report_timestamp_is_timezone_aware(client_for, admin_user):
    stamp = client_for(admin_user).get('/api/reports/general').json()['data']['generatedAt']
    assert datetime.datetime.fromisoformat(stamp).utcoffset() is not None


def test_writes_invalidate_cached_statistics(client_for, supervisor, staff_b):
    from django.core.cache import cache

    oversight = client_for(supervisor)
    assert oversight.get('/api/births/statistics').json()['data']['totalBirths'] == 0
    assert cache.get(cache_key('births')) is not None

    # rows written behind the service's back stay invisible until a write through the API
    Birth.objects.create(gender='female', date_of_birth=datetime.date(2024, 2, 2), mother_name='Affiong Etuk')
    assert oversight.get('/api/births/statistics').json()['data']['totalBirths'] == 0

    client_for(staff_b).post('/api/births', {
        'gender': 'male', 'dateOfBirth': '2024-02-03', 'motherName': 'Eno Archibong',
    }, format='json')
    assert oversight.get('/api/births/statistics').json()['data']['totalBirths'] == 2


def test_export_unknown_module(client_for, admin_user):
    resp = client_for(admin_user).get('/api/reports/export', {'module': 'wards'})
    assert resp.status_code == 400
    assert 'module' in resp.json()['error']['fields']


def test_export_rejects_other_formats(client_for, admin_user):
    resp = client_for(admin_user).get('/api/reports/export', {'module': 'patients', 'format': 'xlsx'})
    assert resp.status_code == 400


def test_export_patients_honours_scope(client_for, doctor_a, patient_a, patient_b):
    resp = client_for(doctor_a).get('/api/reports/export', {'module': 'patients', 'format': 'csv'})
    assert resp.status_code == 200
    assert 'attachment; filename="patients-' in resp['Content-Disposition']
    rows = list(csv.reader(io.StringIO(resp.content.decode())))
    assert rows[0][0] == 'registrationNumber'
    assert [r[1] for r in rows[1:]] == ['Ekaette']


def test_locations(client_for, staff_b):
    client = client_for(staff_b)
    states = {s['name']: s for s in client.get('/api/locations/states').json()['data']}
    assert states['Akwa Ibom']['lgaCount'] == 31

    data = client.get('/api/locations/lgas', {'state': 'akwa ibom'}).json()['data']
    assert data['capital'] == 'Uyo'
    assert 'Ikot Ekpene' in data['lgas']

    assert client.get('/api/locations/lgas', {'state': 'Atlantis'}).json()['data']['lgas'] == []


def test_healthz(client):
    resp = client.get('/healthz')
    assert resp.status_code == 200
    assert resp.json() == {'ok': True, 'db': True, 'cache': True}
