"""
Immunization registry.

Next due dates come from the vaccine schedule unless the clinician
supplies one.  A patient has at most one record per vaccine dose.
"""
import datetime
import logging

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Exists, OuterRef, Q
from rest_framework.exceptions import ValidationError

from records.models import Immunization
from records.serializers.immunization import ImmunizationSerializer
from .access import facility_scope, is_oversight, resolve_facility_for_write, scope_queryset
from .audit import log_action
from .dates import age_in_months, month_bounds, parse_date
from .patients import patient_search_q, resolve_patient
from .stats_cache import cached_stats, invalidate
from .vaccines import VACCINE_SCHEDULES, get_vaccine_schedule_info, next_due_date

logger = logging.getLogger(__name__)


def serialize_immunization(i: Immunization) -> dict:
    info = get_vaccine_schedule_info(i.vaccine_type, i.dose_number)
    return {
        'id': i.id,
        'registrationNumber': i.registration_number,
        'patientId': i.patient_id,
        'patientName': i.patient.full_name,
        'vaccineType': i.vaccine_type,
        'doseNumber': i.dose_number,
        'maxDoses': info['maxDoses'],
        'isLastDose': info['isLastDose'],
        'lotNumber': i.lot_number,
        'vaccinationDate': i.vaccination_date.isoformat(),
        'nextDueDate': i.next_due_date.isoformat() if i.next_due_date else None,
        'healthcareProvider': i.healthcare_provider,
        'providerId': i.provider_id,
        'facilityId': i.facility_id,
        'facilityName': i.facility.name if i.facility_id else None,
        'status': i.status,
        'sideEffects': i.side_effects,
        'notes': i.notes,
        'weightKg': float(i.weight_kg) if i.weight_kg is not None else None,
        'heightCm': float(i.height_cm) if i.height_cm is not None else None,
        'siteOfAdministration': i.site_of_administration,
        'routeOfAdministration': i.route_of_administration,
        'ageMonths': i.age_months,
        'createdAt': i.created_at.isoformat() if i.created_at else None,
        'updatedAt': i.updated_at.isoformat() if i.updated_at else None,
    }


def filter_immunizations(qs, params):
    mapping = {
        'status': 'status',
        'vaccineType': 'vaccine_type',
        'facilityId': 'facility_id',
        'patientId': 'patient_id',
    }
    for param, field in mapping.items():
        value = params.get(param)
        if value:
            qs = qs.filter(**{field: value})
    date_from = parse_date(params.get('dateFrom'))
    date_to = parse_date(params.get('dateTo'))
    if date_from:
        qs = qs.filter(vaccination_date__gte=date_from)
    if date_to:
        qs = qs.filter(vaccination_date__lte=date_to)
    search = (params.get('search') or '').strip()
    if search:
        qs = qs.filter(
            Q(registration_number__icontains=search) | Q(lot_number__icontains=search)
            | patient_search_q(search, 'patient__')
        )
    return qs.select_related('patient', 'facility').order_by('-vaccination_date', '-id')


def _ensure_unique_dose(patient_id, vaccine_type, dose_number, exclude_id=None):
    qs = Immunization.objects.filter(patient_id=patient_id, vaccine_type=vaccine_type, dose_number=dose_number)
    if exclude_id:
        qs = qs.exclude(pk=exclude_id)
    if qs.exists():
        raise ValidationError({'doseNumber': [f'dose {dose_number} of {vaccine_type} is already recorded for this patient']})


def _derive(imm: Immunization, explicit_due: bool) -> None:
    imm.age_months = age_in_months(imm.patient.date_of_birth, imm.vaccination_date)
    if not explicit_due:
        imm.next_due_date = next_due_date(imm.vaccine_type, imm.dose_number, imm.vaccination_date)


def create_immunization(user, data: dict, request=None) -> Immunization:
    patient = resolve_patient(user, data.pop('patientId'))
    requested_facility = data.pop('facilityId', None)
    if requested_facility in (None, '') and is_oversight(user):
        requested_facility = patient.facility_id
    facility = resolve_facility_for_write(user, requested_facility)
    _ensure_unique_dose(patient.id, data['vaccine_type'], data['dose_number'])
    imm = Immunization(patient=patient, facility=facility, **data)
    _derive(imm, explicit_due='next_due_date' in data)
    imm.save()
    log_action(user=user, action='immunization_create', object_type='immunization', object_id=imm.id,
               detail={'vaccineType': imm.vaccine_type, 'doseNumber': imm.dose_number}, request=request)
    invalidate('immunizations', [imm.facility_id])
    logger.info("Immunization %s recorded by %s", imm.registration_number, user.username)
    return imm


def update_immunization(user, imm: Immunization, data: dict, request=None) -> Immunization:
    old_facility = imm.facility_id
    data.pop('patientId', None)
    if 'facilityId' in data:
        requested = data.pop('facilityId')
        if is_oversight(user):
            imm.facility = resolve_facility_for_write(user, requested)
    for field, value in data.items():
        setattr(imm, field, value)
    if {'vaccine_type', 'dose_number'} & set(data):
        _ensure_unique_dose(imm.patient_id, imm.vaccine_type, imm.dose_number, exclude_id=imm.id)
    if {'vaccine_type', 'dose_number', 'vaccination_date'} & set(data):
        _derive(imm, explicit_due='next_due_date' in data)
    imm.save()
    log_action(user=user, action='immunization_update', object_type='immunization', object_id=imm.id,
               detail={'fields': sorted(data)}, request=request)
    invalidate('immunizations', [old_facility, imm.facility_id])
    return imm


def delete_immunization(user, imm: Immunization, request=None) -> None:
    iid, facility_id = imm.id, imm.facility_id
    detail = {'vaccineType': imm.vaccine_type, 'doseNumber': imm.dose_number, 'patientId': imm.patient_id}
    imm.delete()
    log_action(user=user, action='immunization_delete', object_type='immunization', object_id=iid,
               detail=detail, request=request)
    invalidate('immunizations', [facility_id])
    logger.info("Immunization %s deleted by %s", iid, user.username)


def bulk_import(user, rows, request=None) -> dict:
    """Create immunizations row by row; bad rows are reported, not fatal."""
    if not isinstance(rows, list):
        raise ValidationError({'records': ['expected a list of immunization records']})
    if len(rows) > settings.BULK_IMPORT_MAX_ROWS:
        raise ValidationError({'records': [f'at most {settings.BULK_IMPORT_MAX_ROWS} records per import']})
    created, errors = [], []
    for index, row in enumerate(rows):
        s = ImmunizationSerializer(data=row)
        if not s.is_valid():
            errors.append({'row': index, 'errors': s.errors})
            logger.warning("Bulk import row %s rejected: %s", index, s.errors)
            continue
        try:
            with transaction.atomic():
                imm = create_immunization(user, dict(s.validated_data), request=request)
        except ValidationError as exc:
            errors.append({'row': index, 'errors': exc.detail})
            logger.warning("Bulk import row %s rejected: %s", index, exc.detail)
            continue
        created.append(imm.id)
    logger.info("Bulk import by %s: %s created, %s rejected", user.username, len(created), len(errors))
    return {'created': len(created), 'ids': created, 'errors': errors}


def _later_dose_exists():
    return Exists(Immunization.objects.filter(
        patient_id=OuterRef('patient_id'),
        vaccine_type=OuterRef('vaccine_type'),
        dose_number__gt=OuterRef('dose_number'),
    ))


def build_immunization_statistics(facility_id=None, today=None) -> dict:
    today = today or datetime.date.today()
    qs = Immunization.objects.all()
    if facility_id is not None:
        qs = qs.filter(facility_id=facility_id)
    month_start, next_month = month_bounds(today)
    open_doses = qs.filter(next_due_date__isnull=False).annotate(has_later=_later_dose_exists()).filter(has_later=False)
    by_status = {row['status']: row['n'] for row in qs.values('status').annotate(n=Count('id'))}
    by_vaccine = {row['vaccine_type']: row['n'] for row in qs.values('vaccine_type').annotate(n=Count('id')).order_by('vaccine_type')}
    return {
        'total': qs.count(),
        'byStatus': by_status,
        'byVaccine': by_vaccine,
        'thisMonth': qs.filter(vaccination_date__gte=month_start, vaccination_date__lt=next_month).count(),
        'dueNextWeek': open_doses.filter(
            next_due_date__gte=today, next_due_date__lte=today + datetime.timedelta(days=7)
        ).count(),
        'overdue': open_doses.filter(next_due_date__lt=today, status__in=['pending', 'completed']).count(),
    }


def immunization_statistics(user) -> dict:
    facility_id = facility_scope(user)
    return cached_stats('immunizations', facility_id, lambda: build_immunization_statistics(facility_id))


def coverage(user) -> list:
    qs = scope_queryset(user, Immunization.objects.all())
    result = []
    for vaccine, schedule in VACCINE_SCHEDULES.items():
        doses = qs.filter(vaccine_type=vaccine)
        started = doses.values('patient_id').distinct().count()
        completed = doses.filter(dose_number__gte=schedule['maxDoses']).values('patient_id').distinct().count()
        result.append({
            'vaccineType': vaccine,
            'maxDoses': schedule['maxDoses'],
            'started': started,
            'completed': completed,
            'coverage': round(completed * 100.0 / started, 1) if started else 0.0,
        })
    return result


def patient_history(patient) -> dict:
    records = list(patient.immunizations.select_related('patient', 'facility').order_by('vaccination_date', 'dose_number'))
    latest = {}
    for imm in records:
        current = latest.get(imm.vaccine_type)
        if current is None or imm.dose_number > current.dose_number:
            latest[imm.vaccine_type] = imm
    next_due = []
    for vaccine, imm in sorted(latest.items()):
        info = get_vaccine_schedule_info(vaccine, imm.dose_number)
        if info['isLastDose']:
            continue
        next_due.append({
            'vaccineType': vaccine,
            'doseNumber': imm.dose_number + 1,
            'dueDate': imm.next_due_date.isoformat() if imm.next_due_date else None,
        })
    return {
        'patientId': patient.id,
        'patientName': patient.full_name,
        'immunizations': [serialize_immunization(i) for i in records],
        'nextDue': next_due,
    }


def visible_immunizations(user):
    return scope_queryset(user, Immunization.objects.all())
