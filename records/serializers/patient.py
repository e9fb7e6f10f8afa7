from django.conf import settings
from rest_framework import serializers

from records.models import Patient, PatientDocument, PatientMedicalHistory
from .common import AliasMixin, CleanCharField, optional_text, not_in_future


class PatientSerializer(AliasMixin, serializers.Serializer):
    ALIASES = {
        'first_name': 'firstName',
        'last_name': 'lastName',
        'other_names': 'otherNames',
        'date_of_birth': 'dateOfBirth',
        'phone_number': 'phoneNumber',
        'phone': 'phoneNumber',
        'blood_group': 'bloodGroup',
        'marital_status': 'maritalStatus',
        'next_of_kin_name': 'nextOfKinName',
        'next_of_kin_relationship': 'nextOfKinRelationship',
        'next_of_kin_phone': 'nextOfKinPhone',
        'registration_date': 'registrationDate',
        'facility_id': 'facilityId',
        'local_govt': 'lga',
    }

    firstName = CleanCharField(max_length=100, source='first_name')
    lastName = CleanCharField(max_length=100, source='last_name')
    otherNames = optional_text(100, source='other_names')
    gender = CleanCharField(max_length=10)
    dateOfBirth = serializers.DateField(required=False, allow_null=True, source='date_of_birth')
    phoneNumber = optional_text(32, source='phone_number')
    email = serializers.EmailField(required=False, allow_blank=True)
    address = optional_text(255)
    city = optional_text(100)
    state = optional_text(100)
    lga = optional_text(100)
    location = serializers.ChoiceField(choices=Patient.LOCATION_CHOICES, required=False, allow_blank=True)
    bloodGroup = optional_text(5, source='blood_group')
    genotype = optional_text(5)
    maritalStatus = optional_text(20, source='marital_status')
    nextOfKinName = optional_text(255, source='next_of_kin_name')
    nextOfKinRelationship = optional_text(50, source='next_of_kin_relationship')
    nextOfKinPhone = optional_text(32, source='next_of_kin_phone')
    notes = optional_text()
    status = serializers.ChoiceField(choices=Patient.STATUS_CHOICES, required=False)
    registrationDate = serializers.DateField(required=False, source='registration_date')
    facilityId = serializers.IntegerField(required=False, allow_null=True)

    def validate_gender(self, v):
        v = v.capitalize()
        if v not in dict(Patient.GENDER_CHOICES):
            raise serializers.ValidationError('gender must be Male or Female')
        return v

    def validate_dateOfBirth(self, v):
        return not_in_future(v, 'dateOfBirth')


class PatientVisitSerializer(AliasMixin, serializers.Serializer):
    ALIASES = {'visit_date': 'visitDate', 'vital_signs': 'vitalSigns'}

    visitDate = serializers.DateField(source='visit_date')
    purpose = CleanCharField(max_length=255)
    diagnosis = optional_text(255)
    treatment = optional_text()
    notes = optional_text()
    vitalSigns = serializers.DictField(required=False, source='vital_signs')

    def validate_visitDate(self, v):
        return not_in_future(v, 'visitDate')


class SearchQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=50)


class MedicalHistorySerializer(AliasMixin, serializers.Serializer):
    ALIASES = {
        'diagnosis_date': 'diagnosisDate',
        'diagnosed_by': 'diagnosedBy',
        'treatment_history': 'treatmentHistory',
    }

    condition = CleanCharField(max_length=255)
    diagnosisDate = serializers.DateField(required=False, allow_null=True, source='diagnosis_date')
    status = serializers.ChoiceField(choices=PatientMedicalHistory.STATUS_CHOICES, required=False)
    severity = serializers.ChoiceField(choices=PatientMedicalHistory.SEVERITY_CHOICES, required=False)
    diagnosedBy = optional_text(255, source='diagnosed_by')
    treatmentHistory = optional_text(source='treatment_history')
    notes = optional_text()

    def validate_diagnosisDate(self, v):
        return not_in_future(v, 'diagnosisDate')


class PatientDocumentSerializer(AliasMixin, serializers.Serializer):
    ALIASES = {'document_type': 'documentType', 'document_date': 'documentDate'}

    documentType = serializers.ChoiceField(choices=PatientDocument.TYPE_CHOICES, required=False,
                                           source='document_type')
    documentDate = serializers.DateField(required=False, source='document_date')
    title = CleanCharField(max_length=255)
    description = optional_text()
    source = optional_text(255)
    confidential = serializers.BooleanField(required=False)
    file = serializers.FileField()

    def validate_documentDate(self, v):
        return not_in_future(v, 'documentDate')

    def validate_file(self, f):
        limit = settings.PATIENT_DOCUMENT_MAX_MB
        if f.size > limit * 1024 * 1024:
            raise serializers.ValidationError(f'file is larger than {limit} MB')
        return f
