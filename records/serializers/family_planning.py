from rest_framework import serializers

from records.models import FamilyPlanningClient
from records.services.family_planning import METHOD_IDS
from .common import RequiredOnCreateMixin, optional_text


class FamilyPlanningClientSerializer(RequiredOnCreateMixin, serializers.Serializer):
    REQUIRED_ON_CREATE = (
        ('patientId', 'patientId'),
        ('facilityId', 'facilityId'),
        ('registrationDate', 'registration_date'),
        ('clientType', 'client_type'),
        ('maritalStatus', 'marital_status'),
    )

    patientId = serializers.IntegerField(required=False)
    facilityId = serializers.IntegerField(required=False, allow_null=True)
    registrationDate = serializers.DateField(required=False, source='registration_date')
    clientType = serializers.ChoiceField(choices=FamilyPlanningClient.CLIENT_TYPE_CHOICES, required=False,
                                         source='client_type')
    maritalStatus = optional_text(20, source='marital_status')
    numberOfChildren = serializers.IntegerField(required=False, min_value=0, max_value=30, source='number_of_children')
    desiredNumberOfChildren = serializers.IntegerField(required=False, min_value=0, max_value=30,
                                                       source='desired_number_of_children')
    educationLevel = optional_text(50, source='education_level')
    occupation = optional_text(100)
    primaryContact = serializers.DictField(required=False, source='primary_contact')
    medicalHistory = optional_text(source='medical_history')
    allergyHistory = optional_text(source='allergy_history')
    reproductiveHistory = optional_text(source='reproductive_history')
    menstrualHistory = optional_text(source='menstrual_history')
    referredBy = optional_text(255, source='referred_by')
    currentMethod = optional_text(50, source='current_method')
    notes = optional_text()
    status = serializers.ChoiceField(choices=FamilyPlanningClient.STATUS_CHOICES, required=False)

    def validate_currentMethod(self, v):
        if v and v not in METHOD_IDS:
            raise serializers.ValidationError(f'unknown method {v}')
        return v
