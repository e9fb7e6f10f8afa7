"""
Antenatal care registry.

A record is opened when a pregnant patient books; each clinic attendance
is an :class:`AntenatalVisit` numbered in order.  Gestational age and the
expected delivery date are derived from the last menstrual period.
"""
import datetime
import logging

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Max, Q

from records.models import AntenatalRecord, AntenatalVisit
from .access import facility_scope, is_oversight, resolve_facility_for_write, scope_queryset
from .audit import log_action
from .dates import add_weeks, age_in_years, parse_date
from .obstetrics import (assess_risk, estimated_due_date, gestational_age_weeks, next_appointment,
                         trimester, visit_schedule)
from .patients import patient_search_q, resolve_patient
from .stats_cache import cached_stats, invalidate

logger = logging.getLogger(__name__)

UPCOMING_DAYS = 7


def _iso(value):
    return value.isoformat() if value else None


def _num(value):
    return float(value) if value is not None else None


def serialize_record(r: AntenatalRecord, *, today=None) -> dict:
    weeks = gestational_age_weeks(r.lmp, today)
    patient = r.patient
    return {
        'id': r.id,
        'registrationNumber': r.registration_number,
        'patientId': r.patient_id,
        'patientName': patient.full_name,
        'patientAge': age_in_years(patient.date_of_birth),
        'patientPhone': patient.phone_number,
        'facilityId': r.facility_id,
        'facilityName': r.facility.name if r.facility_id else None,
        'registrationDate': _iso(r.registration_date),
        'lmp': _iso(r.lmp),
        'edd': _iso(r.edd),
        'gestationalAge': weeks,
        'trimester': trimester(weeks),
        'gravida': r.gravida,
        'para': r.para,
        'bloodGroup': r.blood_group,
        'heightCm': _num(r.height_cm),
        'prePregnancyWeight': _num(r.pre_pregnancy_weight),
        'hivStatus': r.hiv_status,
        'sicklingStatus': r.sickling_status,
        'hepatitisBStatus': r.hepatitis_b_status,
        'hepatitisCStatus': r.hepatitis_c_status,
        'vdrlStatus': r.vdrl_status,
        'tetanusVaccination': r.tetanus_vaccination,
        'malariaProphylaxis': r.malaria_prophylaxis,
        'ironFolateSupplementation': r.iron_folate_supplementation,
        'riskFactors': r.risk_factors,
        'riskLevel': r.risk_level,
        'medicalHistory': r.medical_history,
        'obstetricsHistory': r.obstetrics_history,
        'partner': r.partner,
        'emergencyContact': r.emergency_contact,
        'nearestHealthFacility': r.nearest_health_facility,
        'outcome': r.outcome,
        'deliveryDate': _iso(r.delivery_date),
        'modeOfDelivery': r.mode_of_delivery,
        'birthOutcome': r.birth_outcome,
        'status': r.status,
        'nextAppointment': _iso(r.next_appointment),
        'visitCount': r.visits.count(),
        'createdAt': _iso(r.created_at),
        'updatedAt': _iso(r.updated_at),
    }


def serialize_visit(v: AntenatalVisit) -> dict:
    return {
        'id': v.id,
        'recordId': v.record_id,
        'visitNumber': v.visit_number,
        'visitDate': _iso(v.visit_date),
        'gestationalAge': v.gestational_age,
        'weightKg': _num(v.weight_kg),
        'bloodPressure': v.blood_pressure,
        'fundalHeightCm': _num(v.fundal_height_cm),
        'fetalHeartRate': v.fetal_heart_rate,
        'fetalMovement': v.fetal_movement,
        'urineTest': v.urine_test,
        'hemoglobin': _num(v.hemoglobin),
        'complaints': v.complaints,
        'interventions': v.interventions,
        'nextAppointment': _iso(v.next_appointment),
        'notes': v.notes,
        'provider': v.provider,
        'createdAt': _iso(v.created_at),
    }


def filter_records(qs, params):
    for param, field in (('status', 'status'), ('riskLevel', 'risk_level'), ('facilityId', 'facility_id')):
        value = params.get(param)
        if value:
            qs = qs.filter(**{field: value})
    due_before = parse_date(params.get('dueBefore'))
    if due_before:
        qs = qs.filter(next_appointment__lte=due_before)
    search = (params.get('search') or '').strip()
    if search:
        qs = qs.filter(Q(registration_number__icontains=search) | patient_search_q(search, 'patient__'))
    return qs.select_related('patient', 'facility').order_by('-registration_date', '-id')


def _apply_risk(record: AntenatalRecord, explicit: bool) -> None:
    # a risk level chosen by the clinician wins over the computed one
    if explicit:
        return
    age = age_in_years(record.patient.date_of_birth, record.registration_date)
    record.risk_level = assess_risk(age, record.gravida, record.risk_factors)


def create_record(user, data: dict, request=None) -> AntenatalRecord:
    patient = resolve_patient(user, data.pop('patientId'))
    requested_facility = data.pop('facilityId', None)
    if requested_facility in (None, '') and is_oversight(user):
        requested_facility = patient.facility_id
    facility = resolve_facility_for_write(user, requested_facility)
    record = AntenatalRecord(patient=patient, facility=facility, created_by=user, **data)
    if not record.edd:
        record.edd = estimated_due_date(record.lmp)
    if not record.next_appointment:
        record.next_appointment = add_weeks(record.registration_date, settings.ANC_VISIT_INTERVAL_WEEKS)
    _apply_risk(record, explicit='risk_level' in data)
    record.save()
    log_action(user=user, action='antenatal_create', object_type='antenatal', object_id=record.id,
               detail={'registrationNumber': record.registration_number, 'riskLevel': record.risk_level},
               request=request)
    invalidate('antenatal', [record.facility_id])
    logger.info("Antenatal record %s opened by %s", record.registration_number, user.username)
    return record


def update_record(user, record: AntenatalRecord, data: dict, request=None) -> AntenatalRecord:
    old_facility = record.facility_id
    data.pop('patientId', None)
    if 'facilityId' in data:
        requested = data.pop('facilityId')
        if is_oversight(user):
            record.facility = resolve_facility_for_write(user, requested)
    for field, value in data.items():
        setattr(record, field, value)
    if 'lmp' in data and 'edd' not in data:
        record.edd = estimated_due_date(record.lmp)
    if 'risk_level' in data or {'risk_factors', 'gravida'} & set(data):
        _apply_risk(record, explicit='risk_level' in data)
    record.save()
    log_action(user=user, action='antenatal_update', object_type='antenatal', object_id=record.id,
               detail={'fields': sorted(data)}, request=request)
    invalidate('antenatal', [old_facility, record.facility_id])
    return record


def delete_record(user, record: AntenatalRecord, request=None) -> None:
    rid, facility_id, number = record.id, record.facility_id, record.registration_number
    record.delete()
    log_action(user=user, action='antenatal_delete', object_type='antenatal', object_id=rid,
               detail={'registrationNumber': number}, request=request)
    invalidate('antenatal', [facility_id])
    logger.info("Antenatal record %s deleted by %s", number, user.username)


def create_visit(user, record: AntenatalRecord, data: dict, request=None) -> AntenatalVisit:
    with transaction.atomic():
        # lock the record so concurrent visits get distinct numbers
        record = AntenatalRecord.objects.select_for_update().get(pk=record.pk)
        last = record.visits.aggregate(n=Max('visit_number'))['n'] or 0
        visit = AntenatalVisit(record=record, visit_number=last + 1, **data)
        visit.gestational_age = gestational_age_weeks(record.lmp, visit.visit_date)
        if not visit.next_appointment:
            visit.next_appointment = next_appointment(visit.visit_date, settings.ANC_VISIT_INTERVAL_WEEKS)
        visit.save()
        if record.next_appointment is None or visit.next_appointment > record.next_appointment:
            record.next_appointment = visit.next_appointment
            record.save(update_fields=['next_appointment', 'updated_at'])
    log_action(user=user, action='antenatal_visit_create', object_type='antenatal', object_id=record.id,
               detail={'visitNumber': visit.visit_number}, request=request)
    invalidate('antenatal', [record.facility_id])
    return visit


def record_schedule(record: AntenatalRecord, count: int) -> list:
    interval = settings.ANC_VISIT_INTERVAL_WEEKS
    done = record.visits.count()
    plan = visit_schedule(record.lmp, count, interval_weeks=interval)
    for item in plan:
        item['completed'] = item['visitNumber'] <= done
    return plan


def build_antenatal_statistics(facility_id=None, today=None) -> dict:
    today = today or datetime.date.today()
    qs = AntenatalRecord.objects.all()
    if facility_id is not None:
        qs = qs.filter(facility_id=facility_id)
    active = qs.filter(status='active')
    by_trimester = {'1': 0, '2': 0, '3': 0}
    for lmp in active.values_list('lmp', flat=True):
        by_trimester[str(trimester(gestational_age_weeks(lmp, today)))] += 1
    by_risk = {level: 0 for level, _ in AntenatalRecord.RISK_CHOICES}
    for row in qs.values('risk_level').annotate(n=Count('id')):
        by_risk[row['risk_level']] = row['n']
    return {
        'total': qs.count(),
        'active': active.count(),
        'delivered': qs.filter(status='delivered').count(),
        'byRiskLevel': by_risk,
        'byTrimester': by_trimester,
        'upcomingAppointments': active.filter(
            next_appointment__gte=today,
            next_appointment__lte=today + datetime.timedelta(days=UPCOMING_DAYS),
        ).count(),
        'missedAppointments': active.filter(next_appointment__lt=today).count(),
    }


def antenatal_statistics(user) -> dict:
    facility_id = facility_scope(user)
    return cached_stats('antenatal', facility_id, lambda: build_antenatal_statistics(facility_id))


def visible_records(user):
    return scope_queryset(user, AntenatalRecord.objects.all())
