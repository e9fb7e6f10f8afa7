from rest_framework import serializers

from records.models import CaseContact, DiseaseCase, Outbreak
from .common import RequiredOnCreateMixin, optional_text, not_in_future


class DiseaseCaseSerializer(RequiredOnCreateMixin, serializers.Serializer):
    REQUIRED_ON_CREATE = (
        ('patientId', 'patientId'),
        ('diseaseId', 'diseaseId'),
        ('reportDate', 'report_date'),
        ('status', 'status'),
    )

    patientId = serializers.IntegerField(required=False)
    diseaseId = serializers.CharField(required=False, max_length=50)
    facilityId = serializers.IntegerField(required=False, allow_null=True)
    reportDate = serializers.DateField(required=False, source='report_date')
    onsetDate = serializers.DateField(required=False, allow_null=True, source='onset_date')
    diagnosisDate = serializers.DateField(required=False, allow_null=True, source='diagnosis_date')
    diagnosisType = optional_text(50, source='diagnosis_type')
    location = optional_text(255)
    symptoms = serializers.ListField(child=optional_text(100), required=False)
    status = serializers.ChoiceField(choices=DiseaseCase.STATUS_CHOICES, required=False)
    severity = serializers.ChoiceField(choices=DiseaseCase.SEVERITY_CHOICES, required=False)
    outcome = serializers.ChoiceField(choices=DiseaseCase.OUTCOME_CHOICES, required=False)
    isOutbreak = serializers.BooleanField(required=False, source='is_outbreak')
    reportedBy = optional_text(255, source='reported_by')
    labTestType = optional_text(100, source='lab_test_type')
    labResult = optional_text(50, source='lab_result')
    labNotes = optional_text(source='lab_notes')
    hospitalized = serializers.BooleanField(required=False)
    hospitalName = optional_text(255, source='hospital_name')
    admissionDate = serializers.DateField(required=False, allow_null=True, source='admission_date')
    dischargeDate = serializers.DateField(required=False, allow_null=True, source='discharge_date')
    outcomeDate = serializers.DateField(required=False, allow_null=True, source='outcome_date')
    transmissionRoute = optional_text(100, source='transmission_route')
    transmissionLocation = optional_text(255, source='transmission_location')
    travelHistory = optional_text(source='travel_history')
    contactHistory = optional_text(source='contact_history')
    treatment = optional_text()
    complications = serializers.ListField(child=optional_text(100), required=False)
    notes = optional_text()
    reportedToAuthorities = serializers.BooleanField(required=False, source='reported_to_authorities')
    reportedDate = serializers.DateField(required=False, allow_null=True, source='reported_date')

    def validate_reportDate(self, v):
        return not_in_future(v, 'reportDate')


class CaseContactSerializer(serializers.Serializer):
    name = optional_text(255, allow_blank=False, required=True)
    relationship = optional_text(50)
    phone = optional_text(32)
    exposureDate = serializers.DateField(required=False, allow_null=True, source='exposure_date')
    followUpStatus = serializers.ChoiceField(choices=CaseContact.FOLLOW_UP_CHOICES, required=False,
                                             source='follow_up_status')


class OutbreakSerializer(serializers.Serializer):
    diseaseId = serializers.CharField(max_length=50)
    lga = optional_text(100)
    facilityId = serializers.IntegerField(required=False, allow_null=True)
    startDate = serializers.DateField(source='start_date')
    description = optional_text()
    status = serializers.ChoiceField(choices=Outbreak.STATUS_CHOICES, required=False)
    caseIds = serializers.ListField(child=serializers.IntegerField(), required=False)

    def validate_startDate(self, v):
        return not_in_future(v, 'startDate')
