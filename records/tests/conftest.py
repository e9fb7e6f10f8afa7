import datetime

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from records.models import Facility, Patient, User


@pytest.fixture(autouse=True)
def _clear_cache():
    # stats payloads and throttle counters live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def facility_a(db):
    return Facility.objects.create(name='Uyo General Hospital', facility_type='hospital', lga='Uyo',
                                   latitude='5.037800', longitude='7.909600')


@pytest.fixture
def facility_b(db):
    return Facility.objects.create(name='Eket Health Centre', facility_type='health_center', lga='Eket')


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(username='admin1', password='Str0ng!Pass', role='admin')


@pytest.fixture
def supervisor(db):
    return User.objects.create_user(username='super1', password='Str0ng!Pass', role='supervisor')


@pytest.fixture
def doctor_a(facility_a):
    return User.objects.create_user(username='doc_a', password='Str0ng!Pass', role='doctor', facility=facility_a)


@pytest.fixture
def staff_b(facility_b):
    return User.objects.create_user(username='staff_b', password='Str0ng!Pass', role='staff', facility=facility_b)


@pytest.fixture
def unbound_doctor(db):
    return User.objects.create_user(username='doc_x', password='Str0ng!Pass', role='doctor')


@pytest.fixture
def client_for():
    def make(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return make


@pytest.fixture
def patient_a(facility_a):
    return Patient.objects.create(first_name='Ekaette', last_name='Udo', gender='Female',
                                  date_of_birth=datetime.date(1995, 3, 14), phone_number='08031234567',
                                  lga='Uyo', facility=facility_a)


@pytest.fixture
def patient_b(facility_b):
    return Patient.objects.create(first_name='Akpan', last_name='Essien', gender='Male',
                                  date_of_birth=datetime.date(2023, 1, 10), lga='Eket', facility=facility_b)
