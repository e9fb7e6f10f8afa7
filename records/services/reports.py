"""
Cross-module reporting: the general dashboard counts and CSV exports.
"""
import csv
import datetime
import logging

from django.http import HttpResponse
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from records.models import (AntenatalRecord, Birth, Death, DiseaseCase, Facility, FamilyPlanningClient,
                            Immunization, Patient)
from . import antenatal, births, deaths, diseases, facilities, family_planning, immunizations, patients
from .access import facility_scope, scope_queryset
from .dates import month_bounds
from .stats_cache import cached_stats

logger = logging.getLogger(__name__)

# model, date field used for "this month", facility lookup
REPORT_SOURCES = {
    'patients': (Patient, 'registration_date', 'facility_id'),
    'facilities': (Facility, None, 'pk'),
    'births': (Birth, 'date_of_birth', 'facility_id'),
    'deaths': (Death, 'date_of_death', 'facility_id'),
    'antenatal': (AntenatalRecord, 'registration_date', 'facility_id'),
    'immunizations': (Immunization, 'vaccination_date', 'facility_id'),
    'diseaseCases': (DiseaseCase, 'report_date', 'facility_id'),
    'familyPlanning': (FamilyPlanningClient, 'registration_date', 'facility_id'),
}


def build_general_report(facility_id=None, today=None) -> dict:
    today = today or datetime.date.today()
    month_start, next_month = month_bounds(today)
    totals, this_month = {}, {}
    for name, (model, date_field, facility_field) in REPORT_SOURCES.items():
        qs = model.objects.all()
        if facility_id is not None:
            qs = qs.filter(**{facility_field: facility_id})
        totals[name] = qs.count()
        if date_field:
            this_month[name] = qs.filter(**{f'{date_field}__gte': month_start, f'{date_field}__lt': next_month}).count()
    return {
        'totals': totals,
        'thisMonth': this_month,
        'generatedAt': timezone.now().isoformat(timespec='seconds'),
    }


def general_report(user) -> dict:
    facility_id = facility_scope(user)
    return cached_stats('reports', facility_id, lambda: build_general_report(facility_id))


# module -> (visible queryset, list filter, row serializer, columns)
EXPORTS = {
    'patients': (
        lambda user: scope_queryset(user, Patient.objects.all()),
        patients.filter_patients, patients.serialize_patient,
        ['registrationNumber', 'firstName', 'lastName', 'otherNames', 'gender', 'dateOfBirth', 'phoneNumber',
         'lga', 'state', 'status', 'registrationDate', 'facilityName'],
    ),
    'facilities': (
        facilities.visible_facilities, facilities.filter_facilities, facilities.serialize_facility,
        ['facilityCode', 'name', 'facilityType', 'lga', 'state', 'ownership', 'status', 'contactPerson',
         'phoneNumber', 'latitude', 'longitude'],
    ),
    'births': (
        births.visible_births, births.filter_births, births.serialize_birth,
        ['registrationNumber', 'childName', 'gender', 'dateOfBirth', 'deliveryMethod', 'birthType', 'birthWeight',
         'motherName', 'fatherName', 'lgaResidence', 'status', 'facilityName'],
    ),
    'deaths': (
        deaths.visible_deaths, deaths.filter_deaths, deaths.serialize_death,
        ['registrationNumber', 'deceasedName', 'gender', 'dateOfDeath', 'ageAtDeath', 'placeOfDeath',
         'causeOfDeath', 'mannerOfDeath', 'lga', 'status'],
    ),
    'antenatal': (
        antenatal.visible_records, antenatal.filter_records, antenatal.serialize_record,
        ['registrationNumber', 'patientName', 'lmp', 'edd', 'gestationalAge', 'gravida', 'para', 'riskLevel',
         'status', 'nextAppointment', 'facilityName'],
    ),
    'immunizations': (
        immunizations.visible_immunizations, immunizations.filter_immunizations,
        immunizations.serialize_immunization,
        ['registrationNumber', 'patientName', 'vaccineType', 'doseNumber', 'vaccinationDate', 'nextDueDate',
         'lotNumber', 'status', 'healthcareProvider', 'facilityName'],
    ),
    'diseases': (
        diseases.visible_cases, diseases.filter_cases, diseases.serialize_case,
        ['caseId', 'diseaseName', 'patientName', 'reportDate', 'status', 'severity', 'outcome', 'isOutbreak',
         'location', 'facilityName'],
    ),
    'family-planning': (
        family_planning.visible_clients, family_planning.filter_clients, family_planning.serialize_client,
        ['clientNumber', 'patientName', 'registrationDate', 'clientType', 'maritalStatus', 'currentMethod',
         'status', 'facilityName'],
    ),
}


def export_csv(user, module: str, params) -> HttpResponse:
    if module not in EXPORTS:
        raise ValidationError({'module': [f"unknown module '{module}'; expected one of {', '.join(EXPORTS)}"]})
    visible, filter_fn, serialize, columns = EXPORTS[module]
    qs = filter_fn(visible(user), params)
    response = HttpResponse(content_type='text/csv')
    stamp = datetime.date.today().strftime('%Y%m%d')
    response['Content-Disposition'] = f'attachment; filename="{module}-{stamp}.csv"'
    writer = csv.writer(response)
    writer.writerow(columns)
    count = 0
    for obj in qs.iterator():
        row = serialize(obj)
        writer.writerow(['' if row.get(c) is None else row.get(c) for c in columns])
        count += 1
    logger.info("Exported %s %s rows for %s", count, module, user.username)
    return response
