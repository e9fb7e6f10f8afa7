from rest_framework import serializers

from records.models import Death
from .common import CleanCharField, optional_text, not_in_future, current_value


class DeathSerializer(serializers.Serializer):
    deceasedName = CleanCharField(max_length=255, source='deceased_name')
    gender = CleanCharField(max_length=10)
    dateOfBirth = serializers.DateField(required=False, allow_null=True, source='date_of_birth')
    dateOfDeath = serializers.DateField(source='date_of_death')
    ageAtDeath = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=130, source='age_at_death')
    placeOfDeath = serializers.ChoiceField(choices=Death.PLACE_CHOICES, required=False, source='place_of_death')
    hospitalName = optional_text(255, source='hospital_name')
    causeOfDeath = CleanCharField(max_length=255, source='cause_of_death')
    mannerOfDeath = serializers.ChoiceField(choices=Death.MANNER_CHOICES, required=False, source='manner_of_death')
    informantName = optional_text(255, source='informant_name')
    informantRelationship = optional_text(50, source='informant_relationship')
    informantPhone = optional_text(32, source='informant_phone')
    city = optional_text(100)
    state = optional_text(100)
    lga = optional_text(100)
    facilityId = serializers.IntegerField(required=False, allow_null=True)
    registrationDate = serializers.DateField(required=False, source='registration_date')
    status = serializers.ChoiceField(choices=Death.STATUS_CHOICES, required=False)

    def validate_gender(self, v):
        v = v.capitalize()
        if v not in dict(Death.GENDER_CHOICES):
            raise serializers.ValidationError('gender must be Male or Female')
        return v

    def validate_dateOfDeath(self, v):
        return not_in_future(v, 'dateOfDeath')

    def validate(self, attrs):
        born = current_value(self, attrs, 'date_of_birth')
        died = current_value(self, attrs, 'date_of_death')
        if born and died and died < born:
            raise serializers.ValidationError({'dateOfDeath': ['date of death cannot precede date of birth']})
        return attrs
