from decimal import Decimal

from rest_framework import serializers

from records.models import Birth
from .common import CleanCharField, optional_text, not_in_future


class BirthSerializer(serializers.Serializer):
    childName = optional_text(255, source='child_name')
    gender = CleanCharField(max_length=10)
    dateOfBirth = serializers.DateField(source='date_of_birth')
    timeOfBirth = serializers.TimeField(required=False, allow_null=True, source='time_of_birth')
    deliveryMethod = serializers.ChoiceField(choices=Birth.DELIVERY_CHOICES, required=False, source='delivery_method')
    birthType = serializers.ChoiceField(choices=Birth.BIRTH_TYPE_CHOICES, required=False, source='birth_type')
    birthWeight = serializers.DecimalField(max_digits=4, decimal_places=2, min_value=Decimal('0.2'), max_value=Decimal('9.99'),
                                           required=False, allow_null=True, source='birth_weight')
    birthLength = serializers.DecimalField(max_digits=4, decimal_places=1, min_value=Decimal('10'), max_value=Decimal('99.9'),
                                           required=False, allow_null=True, source='birth_length')
    motherName = CleanCharField(max_length=255, source='mother_name')
    motherAge = serializers.IntegerField(required=False, allow_null=True, min_value=10, max_value=70, source='mother_age')
    motherId = serializers.IntegerField(required=False, allow_null=True)
    fatherName = optional_text(255, source='father_name')
    fatherAge = serializers.IntegerField(required=False, allow_null=True, min_value=12, max_value=100, source='father_age')
    address = optional_text(255)
    lgaResidence = optional_text(100, source='lga_residence')
    stateResidence = optional_text(100, source='state_residence')
    nationality = optional_text(50)
    facilityId = serializers.IntegerField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=Birth.STATUS_CHOICES, required=False)

    def validate_gender(self, v):
        v = v.lower()
        if v not in dict(Birth.GENDER_CHOICES):
            raise serializers.ValidationError('gender must be male or female')
        return v

    def validate_dateOfBirth(self, v):
        return not_in_future(v, 'dateOfBirth')
