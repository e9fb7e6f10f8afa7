"""
Integration tests for the registry API.

These tests exercise the core registries (facilities, patients, births
and deaths) together with facility isolation, pagination and the error
envelope.  They use Django REST framework's APIClient within the
APITestCase base class.
"""
import datetime

from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from ..models import AuditEvent, Birth, Death, Facility, Patient, User


class RegistryAPITests(APITestCase):
    def setUp(self) -> None:
        self.uyo = Facility.objects.create(name='Uyo General Hospital', facility_type='hospital', lga='Uyo',
                                           latitude='5.037800', longitude='7.909600')
        self.eket = Facility.objects.create(name='Eket Health Centre', facility_type='health_center', lga='Eket')

        self.admin_user = User.objects.create_user(username='admin1', password='Str0ng!Pass', role='admin')
        self.doctor = User.objects.create_user(username='doc1', password='Str0ng!Pass', role='doctor',
                                               facility=self.uyo)
        self.staff = User.objects.create_user(username='staff1', password='Str0ng!Pass', role='staff',
                                              facility=self.eket)

        self.p_uyo = Patient.objects.create(first_name='Ekaette', last_name='Udo', gender='Female',
                                            date_of_birth=datetime.date(1995, 3, 14), facility=self.uyo)
        self.p_eket = Patient.objects.create(first_name='Okon', last_name='Bassey', gender='Male',
                                             facility=self.eket)

    def authenticate(self, user: User) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    # -- facilities -------------------------------------------------------

    def test_admin_creates_facility_with_aliases(self):
        client = self.authenticate(self.admin_user)
        resp = client.post('/api/facilities', {
            'name': 'Oron Maternity', 'facility_type': 'maternity', 'local_govt': 'Oron',
            'contact_person': 'Mfon Akpan', 'latitude': 4.8275, 'longitude': 8.2347,
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        data = resp.data['data']
        self.assertEqual(data['facilityType'], 'maternity')
        self.assertEqual(data['lga'], 'Oron')
        self.assertEqual(data['state'], 'Akwa Ibom')
        self.assertEqual(data['facilityCode'], f"FAC{data['id']:08d}")
        self.assertEqual(data['profile']['headTitle'], 'Chief Midwife')

    def test_clinical_users_cannot_create_facilities(self):
        client = self.authenticate(self.doctor)
        resp = client.post('/api/facilities', {'name': 'Rogue Clinic'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.data['error']['code'], 'permission_denied')

    def test_doctor_sees_only_own_facility(self):
        client = self.authenticate(self.doctor)
        resp = client.get('/api/facilities')
        self.assertEqual([f['id'] for f in resp.data['data']], [self.uyo.id])
        resp = client.get(f'/api/facilities/{self.eket.id}')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_facility_map_skips_facilities_without_coordinates(self):
        client = self.authenticate(self.admin_user)
        resp = client.get('/api/facilities/map')
        features = resp.data['data']['features']
        self.assertEqual(len(features), 1)
        self.assertEqual(features[0]['geometry']['coordinates'], [7.9096, 5.0378])

    def test_facility_statistics(self):
        client = self.authenticate(self.admin_user)
        data = client.get('/api/facilities/statistics').data['data']
        self.assertEqual(data['total'], 2)
        self.assertEqual(data['byType'], {'health_center': 1, 'hospital': 1})

    # -- patients ---------------------------------------------------------

    def test_doctor_registers_patient_under_own_facility(self):
        client = self.authenticate(self.doctor)
        resp = client.post('/api/patients', {
            'first_name': 'Idara', 'last_name': 'Inyang', 'gender': 'female',
            'phone': '08030000000', 'facilityId': self.eket.id,
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        data = resp.data['data']
        self.assertEqual(data['facilityId'], self.uyo.id)
        self.assertEqual(data['gender'], 'Female')
        self.assertEqual(data['phoneNumber'], '08030000000')
        self.assertEqual(data['registrationNumber'], f"PAT{1000 + data['id']}")
        self.assertTrue(AuditEvent.objects.filter(action='patient_create', object_id=data['id']).exists())

    def test_missing_patient_fields_use_error_envelope(self):
        client = self.authenticate(self.admin_user)
        resp = client.post('/api/patients', {'gender': 'Male'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIs(resp.data['ok'], False)
        self.assertEqual(resp.data['error']['code'], 'invalid')
        self.assertIn('firstName', resp.data['error']['fields'])

    def test_patient_list_is_isolated_and_paginated(self):
        for i in range(12):
            Patient.objects.create(first_name=f'P{i}', last_name='Uyo', gender='Male', facility=self.uyo)
        client = self.authenticate(self.doctor)
        resp = client.get('/api/patients', {'page': 2, 'limit': 5})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['pagination'], {'page': 2, 'limit': 5, 'totalItems': 13, 'totalPages': 3})
        self.assertNotIn(self.p_eket.id, [p['id'] for p in resp.data['data']])

    def test_out_of_scope_patient_is_not_found(self):
        client = self.authenticate(self.doctor)
        resp = client.get(f'/api/patients/{self.p_eket.id}')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data['error']['code'], 'not_found')

    def test_unbound_clinical_user_cannot_list(self):
        loner = User.objects.create_user(username='loner', password='Str0ng!Pass', role='staff')
        resp = self.authenticate(loner).get('/api/patients')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_only_oversight_roles_delete(self):
        resp = self.authenticate(self.doctor).delete(f'/api/patients/{self.p_uyo.id}')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        resp = self.authenticate(self.admin_user).delete(f'/api/patients/{self.p_uyo.id}')
        self.assertEqual(resp.data, {'ok': True})
        self.assertFalse(Patient.objects.filter(pk=self.p_uyo.id).exists())

    def test_patient_search_and_visits(self):
        client = self.authenticate(self.doctor)
        resp = client.get('/api/patients/search', {'q': 'ekae'})
        self.assertEqual([p['id'] for p in resp.data['data']], [self.p_uyo.id])

        resp = client.post(f'/api/patients/{self.p_uyo.id}/visits', {
            'visitDate': datetime.date.today().isoformat(), 'purpose': 'Fever',
            'vitalSigns': {'temperature': 38.2},
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        detail = client.get(f'/api/patients/{self.p_uyo.id}').data['data']
        self.assertEqual(detail['visitCount'], 1)
        self.assertEqual(detail['lastVisit']['purpose'], 'Fever')

    def test_markup_is_stripped_from_text(self):
        client = self.authenticate(self.admin_user)
        resp = client.patch(f'/api/patients/{self.p_uyo.id}', {'notes': '<script>x</script>allergic'},
                            format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertNotIn('<script>', resp.data['data']['notes'])

    # -- births and deaths ------------------------------------------------

    def test_birth_registration_and_list_counts(self):
        client = self.authenticate(self.staff)
        resp = client.post('/api/births', {
            'childName': 'Baby Bassey', 'gender': 'Male', 'dateOfBirth': '2024-05-01',
            'motherName': 'Uduak Bassey', 'birthWeight': '2.3', 'deliveryMethod': 'home',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        birth = Birth.objects.get()
        self.assertEqual(resp.data['data']['registrationNumber'], f'BR{10000 + birth.id}')
        self.assertEqual(birth.facility_id, self.eket.id)
        self.assertEqual(birth.gender, 'male')

        data = client.get('/api/births').data['data']
        self.assertEqual(data['total'], 1)
        self.assertEqual(data['counts']['home'], 1)
        stats = client.get('/api/births/statistics').data['data']
        self.assertEqual(stats['lowBirthWeight'], 1)
        self.assertEqual(len(stats['byMonth']), 12)

    def test_birth_mother_must_be_visible_to_the_registrar(self):
        payload = {'childName': 'Baby Udo', 'gender': 'female', 'dateOfBirth': '2024-05-01',
                   'motherName': 'Ekaette Udo'}
        client = self.authenticate(self.staff)
        resp = client.post('/api/births', {**payload, 'motherId': self.p_uyo.id}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error']['fields'], {'motherId': ['patient not found']})
        self.assertFalse(Birth.objects.exists())

        client = self.authenticate(self.doctor)
        resp = client.post('/api/births', {**payload, 'motherId': self.p_uyo.id}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['data']['motherId'], self.p_uyo.id)

    def test_death_registration_derives_age(self):
        client = self.authenticate(self.admin_user)
        resp = client.post('/api/death-statistics', {
            'deceasedName': 'Etim Umoh', 'gender': 'male', 'dateOfBirth': '1950-02-01',
            'dateOfDeath': '2024-01-15', 'causeOfDeath': 'Hypertension',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        death = Death.objects.get()
        self.assertEqual(death.age_at_death, 73)
        self.assertEqual(resp.data['data']['registrationNumber'],
                         f'DR-{datetime.date.today().year}-{death.id:04d}')
        summary = client.get('/api/death-statistics/summary').data['data']
        self.assertEqual(summary['byAgeGroup']['70+'], 1)
        self.assertEqual(summary['topCauses'], [{'cause': 'Hypertension', 'count': 1}])

    def test_death_before_birth_is_rejected(self):
        client = self.authenticate(self.admin_user)
        resp = client.post('/api/death-statistics', {
            'deceasedName': 'X', 'gender': 'Male', 'dateOfBirth': '2000-01-01',
            'dateOfDeath': '1999-01-01', 'causeOfDeath': 'Unknown',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('dateOfDeath', resp.data['error']['fields'])

    def test_page_size_aliases_are_capped(self):
        client = self.authenticate(self.admin_user)
        resp = client.get('/api/patients', {'per_page': 1})
        self.assertEqual(resp.data['pagination']['limit'], 1)
        self.assertEqual(len(resp.data['data']), 1)
        resp = client.get('/api/patients', {'pageSize': 5000, 'page': 0})
        self.assertEqual(resp.data['pagination'], {'page': 1, 'limit': 100, 'totalItems': 2, 'totalPages': 1})
