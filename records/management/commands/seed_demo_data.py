"""
Management command to populate the database with demo registry data.

Safe to run repeatedly: every object is looked up by a natural key
before it is created.
"""
import datetime
import random

from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand
from django.db import transaction

from records.models import (AntenatalRecord, AntenatalVisit, Birth, Death, Disease, DiseaseCase, Facility,
                            FamilyPlanningClient, Immunization, Patient, User)
from records.services.dates import add_weeks, age_in_months
from records.services.obstetrics import assess_risk, estimated_due_date, gestational_age_weeks
from records.services.vaccines import next_due_date
from .ensure_test_users import DEFAULT_PASSWORD

FACILITIES = [
    {'name': 'University of Uyo Teaching Hospital', 'facility_type': 'hospital', 'lga': 'Uyo',
     'ownership': 'Federal', 'latitude': '5.037800', 'longitude': '7.909600'},
    {'name': 'St. Luke\'s Hospital Anua', 'facility_type': 'hospital', 'lga': 'Uyo',
     'ownership': 'Mission', 'latitude': '5.008000', 'longitude': '7.960000'},
    {'name': 'Eket General Hospital', 'facility_type': 'hospital', 'lga': 'Eket',
     'ownership': 'Government', 'latitude': '4.642600', 'longitude': '7.924100'},
    {'name': 'Ikot Ekpene Primary Health Centre', 'facility_type': 'health_center', 'lga': 'Ikot Ekpene',
     'ownership': 'Government', 'latitude': '5.179400', 'longitude': '7.714900'},
    {'name': 'Oron Maternity Home', 'facility_type': 'maternity', 'lga': 'Oron',
     'ownership': 'Government', 'latitude': '4.827500', 'longitude': '8.234700'},
]

FIRST_NAMES_F = ['Aniekan', 'Ekaette', 'Idara', 'Mfon', 'Nsikak', 'Uduak', 'Imaobong', 'Emem']
FIRST_NAMES_M = ['Akpan', 'Etim', 'Ubong', 'Edidiong', 'Kufre', 'Okon', 'Aniefiok', 'Itoro']
LAST_NAMES = ['Udo', 'Essien', 'Bassey', 'Okon', 'Ekpo', 'Inyang', 'Umoh', 'Effiong']


class Command(BaseCommand):
    help = 'Populate the database with demo facilities, users, patients and registry records'

    def add_arguments(self, parser):
        parser.add_argument('--patients', type=int, default=16, help='Patients per run (default 16).')
        parser.add_argument('--seed', type=int, default=42, help='Random seed for repeatable data.')

    @transaction.atomic
    def handle(self, *args, **options):
        rng = random.Random(options['seed'])
        today = datetime.date.today()

        facilities = self.create_facilities()
        self.create_users(facilities)
        patients = self.create_patients(facilities, options['patients'], rng, today)
        self.create_births(patients, rng, today)
        self.create_deaths(facilities, rng, today)
        self.create_antenatal(patients, rng, today)
        self.create_immunizations(patients, rng, today)
        self.create_disease_cases(patients, rng, today)
        self.create_family_planning(patients, rng, today)

        self.stdout.write(self.style.SUCCESS('Demo data ready.'))

    def create_facilities(self):
        facilities = []
        for data in FACILITIES:
            facility, created = Facility.objects.get_or_create(name=data['name'], defaults=data)
            facilities.append(facility)
            if created:
                self.stdout.write(f'facility: {facility.name}')
        return facilities

    def create_users(self, facilities):
        password = make_password(DEFAULT_PASSWORD)
        users = [
            ('admin1', 'admin', None),
            ('supervisor1', 'supervisor', None),
            ('doctor1', 'doctor', facilities[0]),
            ('staff1', 'staff', facilities[0]),
            ('doctor2', 'doctor', facilities[2]),
        ]
        for username, role, facility in users:
            user, created = User.objects.get_or_create(
                username=username,
                defaults={
                    'password': password,
                    'role': role,
                    'facility': facility,
                    'is_staff': role == 'admin',
                    'first_name': username.rstrip('0123456789').capitalize(),
                },
            )
            if created:
                self.stdout.write(f'user: {user.username} ({user.role})')

    def create_patients(self, facilities, count, rng, today):
        patients = []
        for i in range(count):
            female = i % 3 != 0
            first = (FIRST_NAMES_F if female else FIRST_NAMES_M)[i % 8]
            last = LAST_NAMES[(i * 3) % 8]
            facility = facilities[i % len(facilities)]
            dob = today - datetime.timedelta(days=rng.randint(18 * 365, 45 * 365))
            patient, created = Patient.objects.get_or_create(
                first_name=first, last_name=last, facility=facility,
                defaults={
                    'gender': 'Female' if female else 'Male',
                    'date_of_birth': dob,
                    'phone_number': f'080{rng.randint(10000000, 99999999)}',
                    'lga': facility.lga,
                    'location': rng.choice(['Urban', 'Rural']),
                    'registration_date': today - datetime.timedelta(days=rng.randint(0, 300)),
                },
            )
            patients.append(patient)
            if created:
                self.stdout.write(f'patient: {patient.registration_number} {patient.full_name}')
        return patients

    def create_births(self, patients, rng, today):
        for mother in [p for p in patients if p.gender == 'Female'][:5]:
            if Birth.objects.filter(mother=mother).exists():
                continue
            Birth.objects.create(
                child_name=f'Baby {mother.last_name}',
                gender=rng.choice(['male', 'female']),
                date_of_birth=today - datetime.timedelta(days=rng.randint(0, 200)),
                delivery_method=rng.choice(['hospital', 'home']),
                birth_weight=round(rng.uniform(2.1, 4.2), 2),
                mother_name=mother.full_name,
                mother=mother,
                lga_residence=mother.lga,
                facility=mother.facility,
            )

    def create_deaths(self, facilities, rng, today):
        causes = ['Malaria', 'Hypertension', 'Road traffic accident', 'Diabetes', 'Pneumonia']
        for i, cause in enumerate(causes):
            name = f'{FIRST_NAMES_M[i]} {LAST_NAMES[-1 - i]}'
            date_of_death = today - datetime.timedelta(days=rng.randint(1, 300))
            dob = date_of_death - datetime.timedelta(days=rng.randint(1, 85) * 365)
            Death.objects.get_or_create(
                deceased_name=name,
                defaults={
                    'gender': 'Male',
                    'date_of_birth': dob,
                    'date_of_death': date_of_death,
                    'age_at_death': (date_of_death - dob).days // 365,
                    'cause_of_death': cause,
                    'manner_of_death': 'Accident' if 'accident' in cause else 'Natural',
                    'lga': facilities[i % len(facilities)].lga,
                    'facility': facilities[i % len(facilities)],
                },
            )

    def create_antenatal(self, patients, rng, today):
        for patient in [p for p in patients if p.gender == 'Female'][:6]:
            if AntenatalRecord.objects.filter(patient=patient).exists():
                continue
            lmp = today - datetime.timedelta(weeks=rng.randint(6, 36))
            factors = rng.sample(['hypertension', 'anaemia', 'previous caesarean', 'diabetes'], rng.randint(0, 2))
            gravida = rng.randint(1, 6)
            age = (today - patient.date_of_birth).days // 365 if patient.date_of_birth else None
            record = AntenatalRecord.objects.create(
                patient=patient,
                facility=patient.facility,
                registration_date=lmp + datetime.timedelta(weeks=5),
                lmp=lmp,
                edd=estimated_due_date(lmp),
                gravida=gravida,
                para=rng.randint(0, gravida - 1),
                risk_factors=factors,
                risk_level=assess_risk(age, gravida, factors),
                next_appointment=add_weeks(today, 4),
            )
            visit_date = record.registration_date
            for n in range(1, 3):
                AntenatalVisit.objects.create(
                    record=record, visit_number=n, visit_date=visit_date,
                    gestational_age=gestational_age_weeks(lmp, visit_date),
                    blood_pressure=f'{rng.randint(100, 140)}/{rng.randint(60, 90)}',
                    next_appointment=add_weeks(visit_date, 4),
                )
                visit_date = add_weeks(visit_date, 4)

    def create_immunizations(self, patients, rng, today):
        for patient in patients[:8]:
            for vaccine, doses in (('BCG', 1), ('Pentavalent', 2)):
                for dose in range(1, doses + 1):
                    given = today - datetime.timedelta(days=rng.randint(10, 120) * (doses - dose + 1))
                    Immunization.objects.get_or_create(
                        patient=patient, vaccine_type=vaccine, dose_number=dose,
                        defaults={
                            'vaccination_date': given,
                            'next_due_date': next_due_date(vaccine, dose, given),
                            'facility': patient.facility,
                            'lot_number': f'LOT{rng.randint(1000, 9999)}',
                            'age_months': age_in_months(patient.date_of_birth, given),
                        },
                    )

    def create_disease_cases(self, patients, rng, today):
        diseases = list(Disease.objects.filter(id__in=['malaria', 'cholera', 'lassa-fever', 'typhoid']))
        if not diseases:
            self.stdout.write(self.style.WARNING('disease catalogue empty, run migrations first'))
            return
        for i, patient in enumerate(patients[:10]):
            disease = diseases[i % len(diseases)]
            if DiseaseCase.objects.filter(patient=patient, disease=disease).exists():
                continue
            DiseaseCase.objects.create(
                disease=disease,
                patient=patient,
                facility=patient.facility,
                report_date=today - datetime.timedelta(days=rng.randint(0, 50)),
                status=rng.choice(['suspected', 'probable', 'confirmed']),
                severity=rng.choice(['mild', 'moderate', 'severe']),
                outcome=rng.choice(['under_treatment', 'recovered']),
                location=patient.lga,
                symptoms=rng.sample(['fever', 'headache', 'vomiting', 'diarrhoea', 'fatigue'], 2),
            )

    def create_family_planning(self, patients, rng, today):
        methods = ['oral-contraceptives', 'injectable-contraceptives', 'implant', 'iud', 'condoms']
        for patient in [p for p in patients if p.gender == 'Female'][-4:]:
            FamilyPlanningClient.objects.get_or_create(
                patient=patient,
                defaults={
                    'facility': patient.facility,
                    'registration_date': today - datetime.timedelta(days=rng.randint(0, 200)),
                    'client_type': rng.choice(['New Acceptor', 'Continuing User', 'Restart']),
                    'marital_status': rng.choice(['Single', 'Married']),
                    'number_of_children': rng.randint(0, 5),
                    'current_method': rng.choice(methods),
                },
            )
