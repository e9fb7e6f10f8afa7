from decimal import Decimal

from rest_framework import serializers

from records.models import Immunization
from records.services.vaccines import validate_dose_number
from .common import CleanCharField, optional_text, not_in_future, current_value


class ImmunizationSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(required=False)
    vaccineType = CleanCharField(max_length=50, source='vaccine_type')
    doseNumber = serializers.IntegerField(required=False, source='dose_number')
    lotNumber = optional_text(50, source='lot_number')
    vaccinationDate = serializers.DateField(source='vaccination_date')
    nextDueDate = serializers.DateField(required=False, allow_null=True, source='next_due_date')
    healthcareProvider = optional_text(255, source='healthcare_provider')
    providerId = optional_text(50, source='provider_id')
    facilityId = serializers.IntegerField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=Immunization.STATUS_CHOICES, required=False)
    sideEffects = optional_text(source='side_effects')
    notes = optional_text()
    weightKg = serializers.DecimalField(max_digits=5, decimal_places=1, min_value=Decimal('0'), required=False,
                                        allow_null=True, source='weight_kg')
    heightCm = serializers.DecimalField(max_digits=5, decimal_places=1, min_value=Decimal('0'), required=False,
                                        allow_null=True, source='height_cm')
    siteOfAdministration = optional_text(50, source='site_of_administration')
    routeOfAdministration = optional_text(30, source='route_of_administration')

    def validate_vaccinationDate(self, v):
        return not_in_future(v, 'vaccinationDate')

    def validate(self, attrs):
        if self.instance is None and not attrs.get('patientId'):
            raise serializers.ValidationError({'patientId': ['This field is required.']})
        vaccine = current_value(self, attrs, 'vaccine_type')
        dose = current_value(self, attrs, 'dose_number') or 1
        error = validate_dose_number(vaccine, dose)
        if error:
            raise serializers.ValidationError({'doseNumber': [error]})
        if self.instance is None:
            attrs.setdefault('dose_number', dose)
        return attrs


class ScheduleInfoQuerySerializer(serializers.Serializer):
    vaccineType = serializers.CharField()
    doseNumber = serializers.IntegerField(min_value=1)
    vaccinationDate = serializers.DateField(required=False)
