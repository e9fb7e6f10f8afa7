from decimal import Decimal

from rest_framework import serializers

from records.models import Facility
from .common import AliasMixin, CleanCharField, optional_text


class FacilitySerializer(AliasMixin, serializers.Serializer):
    ALIASES = {
        'facility_type': 'facilityType',
        'type': 'facilityType',
        'contact_person': 'contactPerson',
        'phone_number': 'phoneNumber',
        'phone': 'phoneNumber',
        'local_govt': 'lga',
        'city': 'lga',
    }

    name = CleanCharField(max_length=255)
    facilityType = serializers.ChoiceField(choices=Facility.TYPE_CHOICES, source='facility_type', required=False)
    address = optional_text(255)
    lga = optional_text(100)
    state = optional_text(100)
    contactPerson = optional_text(255, source='contact_person')
    phoneNumber = optional_text(32, source='phone_number')
    email = serializers.EmailField(required=False, allow_blank=True)
    ownership = optional_text(50)
    status = serializers.ChoiceField(choices=Facility.STATUS_CHOICES, required=False)
    latitude = serializers.FloatField(required=False, allow_null=True, min_value=-90, max_value=90)
    longitude = serializers.FloatField(required=False, allow_null=True, min_value=-180, max_value=180)

    def _coordinate(self, v):
        return None if v is None else Decimal(str(round(v, 6)))

    def validate_latitude(self, v):
        return self._coordinate(v)

    def validate_longitude(self, v):
        return self._coordinate(v)
