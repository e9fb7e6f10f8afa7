from decimal import Decimal

from rest_framework import serializers

from records.models import AntenatalRecord
from .common import optional_text, not_in_future, current_value


def _measure(max_digits, decimal_places, source=None, low='0', high=None):
    kwargs = {'min_value': Decimal(low)}
    if high:
        kwargs['max_value'] = Decimal(high)
    # DRF refuses a source equal to the field name
    if source:
        kwargs['source'] = source
    return serializers.DecimalField(max_digits=max_digits, decimal_places=decimal_places, required=False,
                                    allow_null=True, **kwargs)


class AntenatalRecordSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(required=False)
    facilityId = serializers.IntegerField(required=False, allow_null=True)
    registrationDate = serializers.DateField(required=False, source='registration_date')
    lmp = serializers.DateField()
    edd = serializers.DateField(required=False, allow_null=True)
    gravida = serializers.IntegerField(required=False, min_value=1, max_value=20)
    para = serializers.IntegerField(required=False, min_value=0, max_value=20)
    bloodGroup = optional_text(5, source='blood_group')
    heightCm = _measure(5, 1, 'height_cm', high='250')
    prePregnancyWeight = _measure(5, 1, 'pre_pregnancy_weight', high='300')
    hivStatus = optional_text(20, source='hiv_status')
    sicklingStatus = optional_text(20, source='sickling_status')
    hepatitisBStatus = optional_text(20, source='hepatitis_b_status')
    hepatitisCStatus = optional_text(20, source='hepatitis_c_status')
    vdrlStatus = optional_text(20, source='vdrl_status')
    tetanusVaccination = optional_text(30, source='tetanus_vaccination')
    malariaProphylaxis = optional_text(30, source='malaria_prophylaxis')
    ironFolateSupplementation = optional_text(30, source='iron_folate_supplementation')
    riskFactors = serializers.ListField(child=optional_text(100), required=False, source='risk_factors')
    riskLevel = serializers.ChoiceField(choices=AntenatalRecord.RISK_CHOICES, required=False, source='risk_level')
    medicalHistory = optional_text(source='medical_history')
    obstetricsHistory = optional_text(source='obstetrics_history')
    partner = serializers.DictField(required=False)
    emergencyContact = serializers.DictField(required=False, source='emergency_contact')
    nearestHealthFacility = optional_text(255, source='nearest_health_facility')
    outcome = optional_text(50)
    deliveryDate = serializers.DateField(required=False, allow_null=True, source='delivery_date')
    modeOfDelivery = optional_text(50, source='mode_of_delivery')
    birthOutcome = optional_text(50, source='birth_outcome')
    status = serializers.ChoiceField(choices=AntenatalRecord.STATUS_CHOICES, required=False)
    nextAppointment = serializers.DateField(required=False, allow_null=True, source='next_appointment')

    def validate_lmp(self, v):
        return not_in_future(v, 'lmp')

    def validate(self, attrs):
        if self.instance is None and not attrs.get('patientId'):
            raise serializers.ValidationError({'patientId': ['This field is required.']})
        lmp = current_value(self, attrs, 'lmp')
        edd = current_value(self, attrs, 'edd')
        gravida = current_value(self, attrs, 'gravida') or 1
        para = current_value(self, attrs, 'para') or 0
        if para > gravida:
            raise serializers.ValidationError({'para': ['para cannot exceed gravida']})
        if lmp and edd and edd <= lmp:
            raise serializers.ValidationError({'edd': ['edd must be after lmp']})
        # risk factors are free text; drop empties
        if 'risk_factors' in attrs:
            attrs['risk_factors'] = [f for f in attrs['risk_factors'] if f]
        return attrs


class AntenatalVisitSerializer(serializers.Serializer):
    visitDate = serializers.DateField(source='visit_date')
    weightKg = _measure(5, 1, 'weight_kg', high='300')
    bloodPressure = serializers.RegexField(r'^\d{2,3}/\d{2,3}$', required=False, allow_blank=True, source='blood_pressure')
    fundalHeightCm = _measure(4, 1, 'fundal_height_cm', high='60')
    fetalHeartRate = serializers.IntegerField(required=False, allow_null=True, min_value=60, max_value=220, source='fetal_heart_rate')
    fetalMovement = optional_text(20, source='fetal_movement')
    urineTest = optional_text(50, source='urine_test')
    hemoglobin = _measure(4, 1, high='25')
    complaints = optional_text()
    interventions = optional_text()
    nextAppointment = serializers.DateField(required=False, allow_null=True, source='next_appointment')
    notes = optional_text()
    provider = optional_text(255)

    def validate_visitDate(self, v):
        return not_in_future(v, 'visitDate')

    def validate(self, attrs):
        record = self.context.get('record')
        if record is not None and attrs['visit_date'] < record.lmp:
            raise serializers.ValidationError({'visitDate': ['visit date cannot precede lmp']})
        return attrs


class ScheduleQuerySerializer(serializers.Serializer):
    count = serializers.IntegerField(required=False, min_value=1, max_value=20)
