"""
Database models for the health records backend.

These models capture the registries kept by the state health
administration: facilities, patients and their clinic visits, birth
and death registration, antenatal care, immunizations, notifiable
disease surveillance and family planning.  Field names follow the
payloads used by the administration dashboard so that the JSON
responses can be built with little translation.
"""
from __future__ import annotations

import datetime
import os
import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models


class Facility(models.Model):
    """A health facility (hospital, clinic, health centre or maternity)."""
    TYPE_CHOICES = [
        ('hospital', 'Hospital'),
        ('clinic', 'Clinic'),
        ('health_center', 'Health Center'),
        ('maternity', 'Maternity'),
    ]
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
    ]
    name = models.CharField(max_length=255)
    facility_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='health_center', db_index=True)
    address = models.CharField(max_length=255, blank=True)
    lga = models.CharField(max_length=100, blank=True, db_index=True)
    state = models.CharField(max_length=100, default='Akwa Ibom')
    contact_person = models.CharField(max_length=255, blank=True)
    phone_number = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True)
    ownership = models.CharField(max_length=50, default='Government')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active', db_index=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def facility_code(self) -> str:
        return f"FAC{self.pk:08d}" if self.pk else ''

    def __str__(self) -> str:
        return f"{self.name} ({self.facility_type})"


class User(AbstractUser):
    """Dashboard user with a role and an optional facility binding.

    Administrators and supervisors work across the whole state.  Doctors
    and records staff are bound to a facility and only see its records.
    """
    ROLE_CHOICES = [
        ('admin', 'Administrator'),
        ('supervisor', 'Supervisor'),
        ('doctor', 'Doctor'),
        ('staff', 'Records Staff'),
    ]
    STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED = 'pending', 'approved', 'rejected'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending approval'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
    ]
    role = models.CharField(max_length=12, choices=ROLE_CHOICES, default='staff')
    facility = models.ForeignKey(
        Facility, null=True, blank=True, on_delete=models.SET_NULL, related_name='users'
    )
    phone = models.CharField(max_length=32, blank=True)
    # self-registered accounts start out pending; accounts created by an admin are approved
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_APPROVED, db_index=True)
    rejection_reason = models.CharField(max_length=255, blank=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class RegisteredRecord(models.Model):
    """Base for records that carry a generated registration number.

    The number depends on the primary key, so it is assigned right after
    the first insert.
    """
    registration_number = models.CharField(max_length=32, unique=True, null=True, blank=True)

    class Meta:
        abstract = True

    def build_registration_number(self) -> str:
        raise NotImplementedError

    def save(self, *args, **kwargs):
        super().save(*args, **kwargs)
        if not self.registration_number:
            self.registration_number = self.build_registration_number()
            super().save(update_fields=['registration_number'])


class Patient(RegisteredRecord):
    GENDER_CHOICES = [('Male', 'Male'), ('Female', 'Female')]
    LOCATION_CHOICES = [('Urban', 'Urban'), ('Rural', 'Rural')]
    STATUS_CHOICES = [('active', 'Active'), ('inactive', 'Inactive')]

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    other_names = models.CharField(max_length=100, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    date_of_birth = models.DateField(null=True, blank=True)
    phone_number = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True)
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, default='Akwa Ibom')
    lga = models.CharField(max_length=100, blank=True)
    location = models.CharField(max_length=10, choices=LOCATION_CHOICES, blank=True)
    blood_group = models.CharField(max_length=5, blank=True)
    genotype = models.CharField(max_length=5, blank=True)
    marital_status = models.CharField(max_length=20, blank=True)
    next_of_kin_name = models.CharField(max_length=255, blank=True)
    next_of_kin_relationship = models.CharField(max_length=50, blank=True)
    next_of_kin_phone = models.CharField(max_length=32, blank=True)
    notes = models.TextField(blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active', db_index=True)
    registration_date = models.DateField(default=datetime.date.today)
    facility = models.ForeignKey(
        Facility, null=True, blank=True, on_delete=models.SET_NULL, related_name='patients'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def build_registration_number(self) -> str:
        return f"PAT{1000 + self.pk}"

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.other_names, self.last_name) if p)

    def __str__(self) -> str:
        return f"{self.full_name} ({self.registration_number})"


class PatientVisit(models.Model):
    """A general outpatient encounter with vital signs."""
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='visits')
    visit_date = models.DateField()
    purpose = models.CharField(max_length=255)
    diagnosis = models.CharField(max_length=255, blank=True)
    treatment = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    vital_signs = models.JSONField(default=dict, blank=True)
    created_by = models.ForeignKey(
        'User', null=True, blank=True, on_delete=models.SET_NULL, related_name='patient_visits'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"Visit {self.visit_date} for {self.patient_id}"


class PatientMedicalHistory(models.Model):
    """A past or ongoing condition on the patient's medical history tab."""
    STATUS_CHOICES = [
        ('Ongoing', 'Ongoing'),
        ('Resolved', 'Resolved'),
        ('In Remission', 'In Remission'),
        ('Chronic', 'Chronic'),
        ('Acute', 'Acute'),
    ]
    SEVERITY_CHOICES = [
        ('Mild', 'Mild'),
        ('Moderate', 'Moderate'),
        ('Severe', 'Severe'),
        ('Life-threatening', 'Life-threatening'),
    ]

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='medical_history')
    condition = models.CharField(max_length=255)
    diagnosis_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Ongoing')
    severity = models.CharField(max_length=20, choices=SEVERITY_CHOICES, default='Moderate')
    diagnosed_by = models.CharField(max_length=255, blank=True)
    treatment_history = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(
        'User', null=True, blank=True, on_delete=models.SET_NULL, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'patient medical history'

    def __str__(self) -> str:
        return f"{self.condition} ({self.status}) for {self.patient_id}"


def _document_upload(instance, filename: str) -> str:
    # stored under a random name; the original one is kept in file_name
    ext = os.path.splitext(filename)[1].lower()
    return f"patient_documents/{datetime.date.today():%Y/%m}/{uuid.uuid4().hex}{ext}"


class PatientDocument(models.Model):
    """A scanned report, lab result or other file attached to a patient."""
    TYPE_CHOICES = [(t, t) for t in (
        'Medical Report', 'Lab Result', 'Imaging Result', 'Prescription', 'Discharge Summary',
        'Referral Letter', 'Consent Form', 'Insurance Document', 'ID Document', 'Other',
    )]

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='documents')
    document_type = models.CharField(max_length=30, choices=TYPE_CHOICES, default='Other')
    document_date = models.DateField(default=datetime.date.today)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    source = models.CharField(max_length=255, blank=True, help_text="Issuing authority")
    confidential = models.BooleanField(default=False)
    file = models.FileField(upload_to=_document_upload, max_length=255)
    file_name = models.CharField(max_length=255, blank=True)
    content_type = models.CharField(max_length=100, blank=True)
    size = models.PositiveIntegerField(default=0)
    uploaded_by = models.ForeignKey(
        'User', null=True, blank=True, on_delete=models.SET_NULL, related_name='+'
    )
    uploaded_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.title} ({self.document_type})"


class Birth(RegisteredRecord):
    GENDER_CHOICES = [('male', 'Male'), ('female', 'Female')]
    DELIVERY_CHOICES = [('hospital', 'Hospital'), ('home', 'Home')]
    BIRTH_TYPE_CHOICES = [('singleton', 'Singleton'), ('twin', 'Twin'), ('triplet', 'Triplet')]
    STATUS_CHOICES = [('registered', 'Registered'), ('pending', 'Pending')]

    child_name = models.CharField(max_length=255, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    date_of_birth = models.DateField(db_index=True)
    time_of_birth = models.TimeField(null=True, blank=True)
    delivery_method = models.CharField(max_length=10, choices=DELIVERY_CHOICES, default='hospital')
    birth_type = models.CharField(max_length=10, choices=BIRTH_TYPE_CHOICES, default='singleton')
    birth_weight = models.DecimalField(max_digits=4, decimal_places=2, null=True, blank=True)
    birth_length = models.DecimalField(max_digits=4, decimal_places=1, null=True, blank=True)
    mother_name = models.CharField(max_length=255)
    mother_age = models.PositiveSmallIntegerField(null=True, blank=True)
    mother = models.ForeignKey(
        Patient, null=True, blank=True, on_delete=models.SET_NULL, related_name='births'
    )
    father_name = models.CharField(max_length=255, blank=True)
    father_age = models.PositiveSmallIntegerField(null=True, blank=True)
    address = models.CharField(max_length=255, blank=True)
    lga_residence = models.CharField(max_length=100, blank=True)
    state_residence = models.CharField(max_length=100, default='Akwa Ibom')
    nationality = models.CharField(max_length=50, default='Nigerian')
    facility = models.ForeignKey(
        Facility, null=True, blank=True, on_delete=models.SET_NULL, related_name='births'
    )
    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default='registered', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def build_registration_number(self) -> str:
        return f"BR{10000 + self.pk}"

    def __str__(self) -> str:
        return f"Birth {self.registration_number} ({self.date_of_birth})"


class Death(RegisteredRecord):
    GENDER_CHOICES = [('Male', 'Male'), ('Female', 'Female')]
    PLACE_CHOICES = [('Home', 'Home'), ('Hospital', 'Hospital'), ('Other', 'Other')]
    MANNER_CHOICES = [
        ('Natural', 'Natural'),
        ('Accident', 'Accident'),
        ('Homicide', 'Homicide'),
        ('Suicide', 'Suicide'),
        ('Undetermined', 'Undetermined'),
    ]
    STATUS_CHOICES = [('registered', 'Registered'), ('pending', 'Pending')]

    deceased_name = models.CharField(max_length=255)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    date_of_birth = models.DateField(null=True, blank=True)
    date_of_death = models.DateField(db_index=True)
    age_at_death = models.PositiveSmallIntegerField(null=True, blank=True)
    place_of_death = models.CharField(max_length=20, choices=PLACE_CHOICES, default='Hospital')
    hospital_name = models.CharField(max_length=255, blank=True)
    cause_of_death = models.CharField(max_length=255)
    manner_of_death = models.CharField(max_length=20, choices=MANNER_CHOICES, default='Natural')
    informant_name = models.CharField(max_length=255, blank=True)
    informant_relationship = models.CharField(max_length=50, blank=True)
    informant_phone = models.CharField(max_length=32, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, default='Akwa Ibom')
    lga = models.CharField(max_length=100, blank=True)
    facility = models.ForeignKey(
        Facility, null=True, blank=True, on_delete=models.SET_NULL, related_name='deaths'
    )
    registration_date = models.DateField(default=datetime.date.today)
    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default='registered', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def build_registration_number(self) -> str:
        year = (self.registration_date or self.date_of_death).year
        return f"DR-{year}-{self.pk:04d}"

    def __str__(self) -> str:
        return f"{self.deceased_name} ({self.date_of_death})"


class AntenatalRecord(RegisteredRecord):
    """A pregnancy booked for antenatal care."""
    RISK_CHOICES = [('low', 'Low'), ('medium', 'Medium'), ('high', 'High')]
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('delivered', 'Delivered'),
        ('transferred', 'Transferred'),
        ('inactive', 'Inactive'),
    ]

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='antenatal_records')
    facility = models.ForeignKey(
        Facility, null=True, blank=True, on_delete=models.SET_NULL, related_name='antenatal_records'
    )
    registration_date = models.DateField(default=datetime.date.today)
    lmp = models.DateField(help_text="First day of the last menstrual period")
    edd = models.DateField(null=True, blank=True, help_text="Estimated date of delivery")
    gravida = models.PositiveSmallIntegerField(default=1)
    para = models.PositiveSmallIntegerField(default=0)
    blood_group = models.CharField(max_length=5, blank=True)
    height_cm = models.DecimalField(max_digits=5, decimal_places=1, null=True, blank=True)
    pre_pregnancy_weight = models.DecimalField(max_digits=5, decimal_places=1, null=True, blank=True)
    hiv_status = models.CharField(max_length=20, blank=True)
    sickling_status = models.CharField(max_length=20, blank=True)
    hepatitis_b_status = models.CharField(max_length=20, blank=True)
    hepatitis_c_status = models.CharField(max_length=20, blank=True)
    vdrl_status = models.CharField(max_length=20, blank=True)
    tetanus_vaccination = models.CharField(max_length=30, blank=True)
    malaria_prophylaxis = models.CharField(max_length=30, blank=True)
    iron_folate_supplementation = models.CharField(max_length=30, blank=True)
    risk_factors = models.JSONField(default=list, blank=True)
    risk_level = models.CharField(max_length=10, choices=RISK_CHOICES, default='low', db_index=True)
    medical_history = models.TextField(blank=True)
    obstetrics_history = models.TextField(blank=True)
    partner = models.JSONField(default=dict, blank=True)
    emergency_contact = models.JSONField(default=dict, blank=True)
    nearest_health_facility = models.CharField(max_length=255, blank=True)
    outcome = models.CharField(max_length=50, blank=True)
    delivery_date = models.DateField(null=True, blank=True)
    mode_of_delivery = models.CharField(max_length=50, blank=True)
    birth_outcome = models.CharField(max_length=50, blank=True)
    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default='active', db_index=True)
    next_appointment = models.DateField(null=True, blank=True)
    created_by = models.ForeignKey(
        'User', null=True, blank=True, on_delete=models.SET_NULL, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def build_registration_number(self) -> str:
        return f"ANC{10000 + self.pk}"

    def __str__(self) -> str:
        return f"ANC {self.registration_number} ({self.patient_id})"


class AntenatalVisit(models.Model):
    record = models.ForeignKey(AntenatalRecord, on_delete=models.CASCADE, related_name='visits')
    visit_number = models.PositiveSmallIntegerField()
    visit_date = models.DateField()
    gestational_age = models.PositiveSmallIntegerField(null=True, blank=True)
    weight_kg = models.DecimalField(max_digits=5, decimal_places=1, null=True, blank=True)
    blood_pressure = models.CharField(max_length=15, blank=True)
    fundal_height_cm = models.DecimalField(max_digits=4, decimal_places=1, null=True, blank=True)
    fetal_heart_rate = models.PositiveSmallIntegerField(null=True, blank=True)
    fetal_movement = models.CharField(max_length=20, blank=True)
    urine_test = models.CharField(max_length=50, blank=True)
    hemoglobin = models.DecimalField(max_digits=4, decimal_places=1, null=True, blank=True)
    complaints = models.TextField(blank=True)
    interventions = models.TextField(blank=True)
    next_appointment = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)
    provider = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = [('record', 'visit_number')]

    def __str__(self) -> str:
        return f"ANC visit {self.visit_number} of {self.record_id}"


class Immunization(RegisteredRecord):
    STATUS_CHOICES = [
        ('completed', 'Completed'),
        ('pending', 'Pending'),
        ('missed', 'Missed'),
    ]
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='immunizations')
    vaccine_type = models.CharField(max_length=50, db_index=True)
    dose_number = models.PositiveSmallIntegerField(default=1)
    lot_number = models.CharField(max_length=50, blank=True)
    vaccination_date = models.DateField(db_index=True)
    next_due_date = models.DateField(null=True, blank=True)
    healthcare_provider = models.CharField(max_length=255, blank=True)
    provider_id = models.CharField(max_length=50, blank=True)
    facility = models.ForeignKey(
        Facility, null=True, blank=True, on_delete=models.SET_NULL, related_name='immunizations'
    )
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='completed', db_index=True)
    side_effects = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    weight_kg = models.DecimalField(max_digits=5, decimal_places=1, null=True, blank=True)
    height_cm = models.DecimalField(max_digits=5, decimal_places=1, null=True, blank=True)
    site_of_administration = models.CharField(max_length=50, blank=True)
    route_of_administration = models.CharField(max_length=30, blank=True)
    age_months = models.PositiveSmallIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = [('patient', 'vaccine_type', 'dose_number')]

    def build_registration_number(self) -> str:
        return f"IM{10000 + self.pk}"

    def __str__(self) -> str:
        return f"{self.vaccine_type} dose {self.dose_number} ({self.patient_id})"


class Disease(models.Model):
    """A notifiable disease.  The slug primary key matches the dashboard ids."""
    id = models.CharField(max_length=50, primary_key=True, help_text="Slug such as 'lassa-fever'")
    name = models.CharField(max_length=255)
    disease_type = models.CharField(max_length=50, blank=True)

    def __str__(self) -> str:
        return self.name


class DiseaseCase(RegisteredRecord):
    STATUS_CHOICES = [
        ('suspected', 'Suspected'),
        ('probable', 'Probable'),
        ('confirmed', 'Confirmed'),
        ('ruled_out', 'Ruled out'),
    ]
    SEVERITY_CHOICES = [
        ('mild', 'Mild'),
        ('moderate', 'Moderate'),
        ('severe', 'Severe'),
        ('critical', 'Critical'),
    ]
    OUTCOME_CHOICES = [
        ('under_treatment', 'Under treatment'),
        ('recovered', 'Recovered'),
        ('deceased', 'Deceased'),
        ('unknown', 'Unknown'),
    ]
    disease = models.ForeignKey(Disease, on_delete=models.PROTECT, related_name='cases')
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='disease_cases')
    facility = models.ForeignKey(
        Facility, null=True, blank=True, on_delete=models.SET_NULL, related_name='disease_cases'
    )
    report_date = models.DateField(db_index=True)
    onset_date = models.DateField(null=True, blank=True)
    diagnosis_date = models.DateField(null=True, blank=True)
    diagnosis_type = models.CharField(max_length=50, blank=True)
    location = models.CharField(max_length=255, blank=True)
    symptoms = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=12, choices=STATUS_CHOICES, db_index=True)
    severity = models.CharField(max_length=10, choices=SEVERITY_CHOICES, default='mild')
    outcome = models.CharField(max_length=20, choices=OUTCOME_CHOICES, default='under_treatment')
    is_outbreak = models.BooleanField(default=False, db_index=True)
    reported_by = models.CharField(max_length=255, blank=True)
    lab_test_type = models.CharField(max_length=100, blank=True)
    lab_result = models.CharField(max_length=50, blank=True)
    lab_notes = models.TextField(blank=True)
    hospitalized = models.BooleanField(default=False)
    hospital_name = models.CharField(max_length=255, blank=True)
    admission_date = models.DateField(null=True, blank=True)
    discharge_date = models.DateField(null=True, blank=True)
    outcome_date = models.DateField(null=True, blank=True)
    transmission_route = models.CharField(max_length=100, blank=True)
    transmission_location = models.CharField(max_length=255, blank=True)
    travel_history = models.TextField(blank=True)
    contact_history = models.TextField(blank=True)
    treatment = models.TextField(blank=True)
    complications = models.JSONField(default=list, blank=True)
    notes = models.TextField(blank=True)
    reported_to_authorities = models.BooleanField(default=False)
    reported_date = models.DateField(null=True, blank=True)
    created_by = models.ForeignKey(
        'User', null=True, blank=True, on_delete=models.SET_NULL, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def build_registration_number(self) -> str:
        return f"DC-{self.report_date.year}-{self.pk:05d}"

    def __str__(self) -> str:
        return f"{self.registration_number} ({self.disease_id})"


class CaseContact(models.Model):
    """A person exposed to a disease case, traced for follow-up."""
    FOLLOW_UP_CHOICES = [
        ('pending', 'Pending'),
        ('monitoring', 'Monitoring'),
        ('cleared', 'Cleared'),
        ('symptomatic', 'Symptomatic'),
    ]
    case = models.ForeignKey(DiseaseCase, on_delete=models.CASCADE, related_name='contacts')
    name = models.CharField(max_length=255)
    relationship = models.CharField(max_length=50, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    exposure_date = models.DateField(null=True, blank=True)
    follow_up_status = models.CharField(max_length=20, choices=FOLLOW_UP_CHOICES, default='pending')
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.name} (case {self.case_id})"


class Outbreak(models.Model):
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('contained', 'Contained'),
        ('closed', 'Closed'),
    ]
    disease = models.ForeignKey(Disease, on_delete=models.PROTECT, related_name='outbreaks')
    lga = models.CharField(max_length=100, blank=True)
    facility = models.ForeignKey(
        Facility, null=True, blank=True, on_delete=models.SET_NULL, related_name='outbreaks'
    )
    start_date = models.DateField()
    case_count = models.PositiveIntegerField(default=0)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default='active', db_index=True)
    reported_by = models.ForeignKey(
        'User', null=True, blank=True, on_delete=models.SET_NULL, related_name='outbreaks_reported'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.disease_id} outbreak in {self.lga or '-'} ({self.status})"


class FamilyPlanningClient(RegisteredRecord):
    CLIENT_TYPE_CHOICES = [
        ('New Acceptor', 'New Acceptor'),
        ('Continuing User', 'Continuing User'),
        ('Restart', 'Restart'),
    ]
    STATUS_CHOICES = [
        ('Active', 'Active'),
        ('Inactive', 'Inactive'),
        ('Discontinued', 'Discontinued'),
    ]
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='family_planning')
    facility = models.ForeignKey(
        Facility, null=True, blank=True, on_delete=models.SET_NULL, related_name='family_planning_clients'
    )
    registration_date = models.DateField()
    client_type = models.CharField(max_length=20, choices=CLIENT_TYPE_CHOICES)
    marital_status = models.CharField(max_length=20)
    number_of_children = models.PositiveSmallIntegerField(default=0)
    desired_number_of_children = models.PositiveSmallIntegerField(default=0)
    education_level = models.CharField(max_length=50, blank=True)
    occupation = models.CharField(max_length=100, blank=True)
    primary_contact = models.JSONField(default=dict, blank=True)
    medical_history = models.TextField(blank=True)
    allergy_history = models.TextField(blank=True)
    reproductive_history = models.TextField(blank=True)
    menstrual_history = models.TextField(blank=True)
    referred_by = models.CharField(max_length=255, blank=True)
    current_method = models.CharField(max_length=50, blank=True, db_index=True)
    notes = models.TextField(blank=True)
    status = models.CharField(max_length=15, choices=STATUS_CHOICES, default='Active', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def build_registration_number(self) -> str:
        return f"FPC{self.pk:08d}"

    def __str__(self) -> str:
        return f"{self.registration_number} ({self.client_type})"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.BigIntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    ip = models.GenericIPAddressField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
