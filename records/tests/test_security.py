import pytest
from rest_framework.test import APIClient

from records.models import AuditEvent, User

pytestmark = pytest.mark.django_db


def _login(username, password):
    return APIClient().post('/api/auth/login', {'username': username, 'password': password}, format='json')


def test_login_issues_token_and_jwt_pair(doctor_a):
    resp = _login('doc_a', 'Str0ng!Pass')
    assert resp.status_code == 200
    body = resp.json()
    assert body['ok'] is True
    assert body['token'] and body['jwt_access'] and body['jwt_refresh']
    assert body['role'] == 'doctor'
    assert body['user']['facilityId'] == doctor_a.facility_id

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {body['jwt_access']}")
    assert client.get('/api/auth/profile').json()['data']['username'] == 'doc_a'

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Token {body['token']}")
    assert client.get('/api/auth/profile').status_code == 200


def test_failed_login_is_rejected_and_audited(doctor_a):
    resp = _login('doc_a', 'wrong-password')
    assert resp.status_code == 401
    assert resp.json()['ok'] is False
    event = AuditEvent.objects.get(action='login')
    assert event.user_id is None
    assert event.detail == {'result': 'fail', 'username': 'doc_a'}


def test_blank_credentials_are_a_validation_error(db):
    resp = _login('   ', '')
    assert resp.status_code == 400
    assert resp.json()['error']['code'] == 'invalid'


def test_refresh_and_logout(admin_user):
    tokens = _login('admin1', 'Str0ng!Pass').json()

    resp = APIClient().post('/api/auth/refresh', {'refresh': tokens['jwt_refresh']}, format='json')
    assert resp.status_code == 200
    assert resp.json()['jwt_access']

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['jwt_access']}")
    resp = client.post('/api/auth/logout', {'refresh': tokens['jwt_refresh']}, format='json')
    assert resp.json() == {'ok': True, 'blacklisted': 1}

    resp = APIClient().post('/api/auth/refresh', {'refresh': tokens['jwt_refresh']}, format='json')
    assert resp.status_code == 401


def test_requests_without_credentials_are_unauthorized(db):
    resp = APIClient().get('/api/patients')
    assert resp.status_code == 401
    assert resp.json()['error']['code'] == 'not_authenticated'


def test_profile_update(client_for, staff_b):
    resp = client_for(staff_b).patch('/api/auth/profile', {'firstName': 'Nsikak', 'phone': '0802'}, format='json')
    assert resp.status_code == 200
    staff_b.refresh_from_db()
    assert staff_b.first_name == 'Nsikak'
    assert staff_b.phone == '0802'


def test_change_password(client_for, staff_b):
    client = client_for(staff_b)
    resp = client.post('/api/auth/change-password',
                       {'currentPassword': 'nope', 'newPassword': 'An0ther!Pass'}, format='json')
    assert resp.status_code == 400
    assert 'currentPassword' in resp.json()['error']['fields']

    resp = client.post('/api/auth/change-password',
                       {'currentPassword': 'Str0ng!Pass', 'newPassword': 'An0ther!Pass'}, format='json')
    assert resp.json() == {'ok': True}
    staff_b.refresh_from_db()
    assert staff_b.check_password('An0ther!Pass')
    assert AuditEvent.objects.filter(action='password_change', user=staff_b).exists()


def test_retired_endpoint_answers_gone(client_for, admin_user):
    resp = client_for(admin_user).get('/api/family-planning/services')
    assert resp.status_code == 410
    assert resp.json()['error']['code'] == 'deprecated'


def test_user_management_is_admin_only(client_for, admin_user, supervisor, facility_a):
    resp = client_for(supervisor).get('/api/users')
    assert resp.status_code == 403

    admin = client_for(admin_user)
    resp = admin.post('/api/users', {
        'username': 'nurse1', 'password': 'Nurse!2024x', 'role': 'staff', 'facilityId': facility_a.id,
    }, format='json')
    assert resp.status_code == 201
    created = User.objects.get(username='nurse1')
    assert created.facility_id == facility_a.id
    assert created.check_password('Nurse!2024x')

    resp = admin.post('/api/users', {'username': 'nurse1', 'password': 'Nurse!2024x'}, format='json')
    assert resp.status_code == 400

    resp = admin.get('/api/users', {'role': 'staff'})
    assert [u['username'] for u in resp.json()['data']] == ['nurse1']


def test_admin_cannot_delete_own_account(client_for, admin_user):
    resp = client_for(admin_user).delete(f'/api/users/{admin_user.id}')
    assert resp.status_code == 403
    assert User.objects.filter(pk=admin_user.id).exists()


def test_audit_log_filters(client_for, admin_user, supervisor, doctor_a):
    _login('doc_a', 'Str0ng!Pass')
    _login('doc_a', 'bad')
    client_for(admin_user).patch(f'/api/users/{doctor_a.id}', {'phone': '0809'}, format='json')

    resp = client_for(supervisor).get('/api/admin/audit-logs', {'action': 'login'})
    assert resp.status_code == 200
    events = resp.json()['data']
    assert len(events) == 2
    assert {e['detail']['result'] for e in events} == {'ok', 'fail'}

    resp = client_for(supervisor).get('/api/admin/audit-logs', {'userId': admin_user.id})
    assert [e['action'] for e in resp.json()['data']] == ['user_update']

    resp = client_for(admin_user).get(f'/api/users/{doctor_a.id}/logs')
    assert [e['action'] for e in resp.json()['data']] == ['login']

    assert client_for(doctor_a).get('/api/admin/audit-logs').status_code == 403


def _register(facility, **extra):
    payload = {
        'username': 'mfon.etuk', 'firstName': 'Mfon', 'lastName': 'Etuk', 'email': 'mfon@example.org',
        'phoneNumber': '08021234567', 'facilityId': facility.id, 'roleId': 'doctor',
        'password': 'Reg1ster!Now', 'password_confirmation': 'Reg1ster!Now',
    }
    payload.update(extra)
    return APIClient().post('/api/auth/register', payload, format='json')


def test_registration_waits_for_approval(client_for, admin_user, facility_a):
    resp = _register(facility_a)
    assert resp.status_code == 201
    data = resp.json()['data']
    assert data['status'] == 'pending'
    assert data['role'] == 'doctor'
    assert data['facilityId'] == facility_a.id
    assert AuditEvent.objects.filter(action='user_register', object_id=data['id']).exists()

    resp = _login('mfon.etuk', 'Reg1ster!Now')
    assert resp.status_code == 403
    assert resp.json()['error']['code'] == 'account_not_approved'
    assert 'token' not in resp.json()

    admin = client_for(admin_user)
    pending = admin.get('/api/users', {'status': 'pending'}).json()['data']
    assert [u['username'] for u in pending] == ['mfon.etuk']

    resp = admin.patch(f"/api/users/{data['id']}/approve")
    assert resp.status_code == 200
    assert resp.json()['data']['status'] == 'approved'
    assert admin.patch(f"/api/users/{data['id']}/approve").status_code == 400

    tokens = _login('mfon.etuk', 'Reg1ster!Now').json()
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['jwt_access']}")
    me = client.get('/api/auth/me').json()['data']
    assert me['username'] == 'mfon.etuk'
    assert me['status'] == 'approved'


def test_registration_validation(facility_a):
    resp = _register(facility_a, password_confirmation='Different!1')
    assert resp.status_code == 400
    assert 'confirmPassword' in resp.json()['error']['fields']

    resp = _register(facility_a, email='', facilityId=None)
    assert resp.status_code == 400
    assert resp.json()['error']['message'] == 'Missing required fields: email, facilityId'

    # oversight roles are only granted by an administrator
    resp = _register(facility_a, roleId='admin')
    assert resp.status_code == 400
    assert 'role' in resp.json()['error']['fields']
    assert not User.objects.filter(username='mfon.etuk').exists()


def test_rejected_registration_cannot_sign_in(client_for, admin_user, facility_a):
    user_id = _register(facility_a).json()['data']['id']
    admin = client_for(admin_user)
    resp = admin.patch(f'/api/users/{user_id}/reject', {'reason': 'not on staff list'}, format='json')
    assert resp.status_code == 200
    assert resp.json()['data']['rejectionReason'] == 'not on staff list'
    # only pending registrations can be rejected
    assert admin.patch(f'/api/users/{user_id}/reject').status_code == 400

    resp = _login('mfon.etuk', 'Reg1ster!Now')
    assert resp.status_code == 403
    assert resp.json()['error']['message'] == 'account registration was rejected'
    event = AuditEvent.objects.filter(action='login', user_id=user_id).latest('id')
    assert event.detail == {'result': 'fail', 'status': 'rejected'}


def test_approval_endpoints_are_admin_only(client_for, supervisor, facility_a):
    user_id = _register(facility_a).json()['data']['id']
    client = client_for(supervisor)
    assert client.patch(f'/api/users/{user_id}/approve').status_code == 403
    assert client.patch(f'/api/users/{user_id}/role', {'role': 'supervisor'}, format='json').status_code == 403


def test_admin_changes_roles_but_not_their_own(client_for, admin_user, doctor_a):
    admin = client_for(admin_user)
    resp = admin.patch(f'/api/users/{doctor_a.id}/role', {'role': 'supervisor'}, format='json')
    assert resp.status_code == 200
    assert resp.json()['data']['role'] == 'supervisor'
    event = AuditEvent.objects.get(action='user_role_change')
    assert event.detail == {'from': 'doctor', 'to': 'supervisor'}

    resp = admin.patch(f'/api/users/{doctor_a.id}/role', {'role': 'chief'}, format='json')
    assert resp.status_code == 400

    resp = admin.patch(f'/api/users/{admin_user.id}/role', {'role': 'staff'}, format='json')
    assert resp.status_code == 403
    admin_user.refresh_from_db()
    assert admin_user.role == 'admin'


def test_unknown_user_answers_not_found(client_for, admin_user):
    admin = client_for(admin_user)
    for path in ('/api/users/99999', '/api/users/99999/logs'):
        resp = admin.get(path)
        assert resp.status_code == 404
        assert resp.json()['error'] == {'code': 'not_found', 'message': 'user not found'}
    assert admin.patch('/api/users/99999/approve').status_code == 404
