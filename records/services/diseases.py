"""
Notifiable disease surveillance: cases, traced contacts and outbreaks.

Reporting an outbreak flags the linked cases and pushes an
``outbreak.alert`` event to every dashboard connected to the updates
channel group.
"""
import datetime
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from records.models import CaseContact, Disease, DiseaseCase, Outbreak
from .access import facility_scope, is_oversight, resolve_facility_for_write, scope_queryset
from .audit import log_action
from .dates import parse_date
from .patients import patient_search_q, resolve_patient
from .stats_cache import cached_stats, invalidate

logger = logging.getLogger(__name__)

UPDATES_GROUP = "updates"
TREND_WEEKS = 8

DISEASE_CATALOGUE = [
    ('covid-19', 'COVID-19', 'Viral'),
    ('malaria', 'Malaria', 'Parasitic'),
    ('tuberculosis', 'Tuberculosis', 'Bacterial'),
    ('cholera', 'Cholera', 'Bacterial'),
    ('typhoid', 'Typhoid Fever', 'Bacterial'),
    ('measles', 'Measles', 'Viral'),
    ('meningitis', 'Meningitis', 'Bacterial'),
    ('hepatitis-b', 'Hepatitis B', 'Viral'),
    ('yellow-fever', 'Yellow Fever', 'Viral'),
    ('lassa-fever', 'Lassa Fever', 'Viral'),
    ('ebola', 'Ebola Virus Disease', 'Viral'),
    ('hiv-aids', 'HIV/AIDS', 'Viral'),
]

ACTIVE_OUTCOMES = ('under_treatment', 'unknown')


def _iso(value):
    return value.isoformat() if value else None


def serialize_disease(d: Disease) -> dict:
    return {'id': d.id, 'name': d.name, 'type': d.disease_type}


def serialize_contact(c: CaseContact) -> dict:
    return {
        'id': c.id,
        'caseId': c.case_id,
        'name': c.name,
        'relationship': c.relationship,
        'phone': c.phone,
        'exposureDate': _iso(c.exposure_date),
        'followUpStatus': c.follow_up_status,
        'notes': c.notes,
        'createdAt': _iso(c.created_at),
    }


def serialize_case(c: DiseaseCase, *, detail: bool = False) -> dict:
    data = {
        'id': c.id,
        'caseId': c.registration_number,
        'diseaseId': c.disease_id,
        'diseaseName': c.disease.name,
        'patientId': c.patient_id,
        'patientName': c.patient.full_name,
        'facilityId': c.facility_id,
        'facilityName': c.facility.name if c.facility_id else None,
        'reportDate': _iso(c.report_date),
        'onsetDate': _iso(c.onset_date),
        'diagnosisDate': _iso(c.diagnosis_date),
        'diagnosisType': c.diagnosis_type,
        'location': c.location,
        'symptoms': c.symptoms,
        'status': c.status,
        'severity': c.severity,
        'outcome': c.outcome,
        'isOutbreak': c.is_outbreak,
        'reportedBy': c.reported_by,
        'labTestType': c.lab_test_type,
        'labResult': c.lab_result,
        'labNotes': c.lab_notes,
        'hospitalized': c.hospitalized,
        'hospitalName': c.hospital_name,
        'admissionDate': _iso(c.admission_date),
        'dischargeDate': _iso(c.discharge_date),
        'outcomeDate': _iso(c.outcome_date),
        'transmissionRoute': c.transmission_route,
        'transmissionLocation': c.transmission_location,
        'travelHistory': c.travel_history,
        'contactHistory': c.contact_history,
        'treatment': c.treatment,
        'complications': c.complications,
        'notes': c.notes,
        'reportedToAuthorities': c.reported_to_authorities,
        'reportedDate': _iso(c.reported_date),
        'createdAt': _iso(c.created_at),
        'updatedAt': _iso(c.updated_at),
    }
    if detail:
        data['contacts'] = [serialize_contact(x) for x in c.contacts.order_by('id')]
    return data


def serialize_outbreak(o: Outbreak) -> dict:
    return {
        'id': o.id,
        'diseaseId': o.disease_id,
        'diseaseName': o.disease.name,
        'lga': o.lga,
        'facilityId': o.facility_id,
        'startDate': _iso(o.start_date),
        'caseCount': o.case_count,
        'description': o.description,
        'status': o.status,
        'reportedBy': o.reported_by_id,
        'createdAt': _iso(o.created_at),
    }


def filter_cases(qs, params):
    mapping = {
        'status': 'status',
        'diseaseId': 'disease_id',
        'severity': 'severity',
        'outcome': 'outcome',
        'facilityId': 'facility_id',
    }
    for param, field in mapping.items():
        value = params.get(param)
        if value:
            qs = qs.filter(**{field: value})
    flag = params.get('isOutbreak')
    if flag not in (None, ''):
        qs = qs.filter(is_outbreak=str(flag).lower() in {'1', 'true', 'yes'})
    date_from = parse_date(params.get('dateFrom'))
    date_to = parse_date(params.get('dateTo'))
    if date_from:
        qs = qs.filter(report_date__gte=date_from)
    if date_to:
        qs = qs.filter(report_date__lte=date_to)
    search = (params.get('search') or '').strip()
    if search:
        qs = qs.filter(
            Q(registration_number__icontains=search) | Q(location__icontains=search)
            | Q(disease__name__icontains=search) | patient_search_q(search, 'patient__')
        )
    return qs.select_related('disease', 'patient', 'facility').order_by('-report_date', '-id')


def _disease(disease_id) -> Disease:
    disease = Disease.objects.filter(pk=disease_id).first()
    if disease is None:
        raise ValidationError({'diseaseId': ['unknown disease']})
    return disease


def create_case(user, data: dict, request=None) -> DiseaseCase:
    patient = resolve_patient(user, data.pop('patientId'))
    disease = _disease(data.pop('diseaseId'))
    requested_facility = data.pop('facilityId', None)
    if requested_facility in (None, '') and is_oversight(user):
        requested_facility = patient.facility_id
    facility = resolve_facility_for_write(user, requested_facility)
    case = DiseaseCase.objects.create(patient=patient, disease=disease, facility=facility, created_by=user, **data)
    log_action(user=user, action='disease_case_create', object_type='disease_case', object_id=case.id,
               detail={'caseId': case.registration_number, 'diseaseId': disease.id, 'status': case.status},
               request=request)
    invalidate('diseases', [case.facility_id])
    logger.info("Disease case %s (%s) reported by %s", case.registration_number, disease.id, user.username)
    return case


def update_case(user, case: DiseaseCase, data: dict, request=None) -> DiseaseCase:
    old_facility = case.facility_id
    data.pop('patientId', None)
    if 'diseaseId' in data:
        case.disease = _disease(data.pop('diseaseId'))
    if 'facilityId' in data:
        requested = data.pop('facilityId')
        if is_oversight(user):
            case.facility = resolve_facility_for_write(user, requested)
    for field, value in data.items():
        setattr(case, field, value)
    case.save()
    log_action(user=user, action='disease_case_update', object_type='disease_case', object_id=case.id,
               detail={'fields': sorted(data)}, request=request)
    invalidate('diseases', [old_facility, case.facility_id])
    return case


def delete_case(user, case: DiseaseCase, request=None) -> None:
    cid, facility_id, number = case.id, case.facility_id, case.registration_number
    case.delete()
    log_action(user=user, action='disease_case_delete', object_type='disease_case', object_id=cid,
               detail={'caseId': number}, request=request)
    invalidate('diseases', [facility_id])
    logger.info("Disease case %s deleted by %s", number, user.username)


def add_contact(user, case: DiseaseCase, data: dict, request=None) -> CaseContact:
    contact = CaseContact.objects.create(case=case, **data)
    log_action(user=user, action='case_contact_create', object_type='disease_case', object_id=case.id,
               detail={'contactId': contact.id}, request=request)
    return contact


def broadcast_outbreak(outbreak: Outbreak) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    now = timezone.now()
    event = {
        "type": "outbreak.alert",
        "ts": now.isoformat(),
        "outbreak": serialize_outbreak(outbreak),
    }
    async_to_sync(channel_layer.group_send)(UPDATES_GROUP, event)


def report_outbreak(user, data: dict, request=None) -> Outbreak:
    disease = _disease(data.pop('diseaseId'))
    facility = resolve_facility_for_write(user, data.pop('facilityId', None))
    case_ids = data.pop('caseIds', None) or []
    cases = scope_queryset(user, DiseaseCase.objects.filter(pk__in=case_ids, disease=disease))
    with transaction.atomic():
        linked = list(cases.values_list('id', flat=True))
        missing = sorted(set(case_ids) - set(linked))
        if missing:
            raise ValidationError({'caseIds': [f'unknown cases for this disease: {missing}']})
        DiseaseCase.objects.filter(pk__in=linked).update(is_outbreak=True, updated_at=timezone.now())
        outbreak = Outbreak.objects.create(
            disease=disease, facility=facility, reported_by=user, case_count=len(linked), **data
        )
        log_action(user=user, action='outbreak_report', object_type='outbreak', object_id=outbreak.id,
                   detail={'diseaseId': disease.id, 'caseIds': linked, 'lga': outbreak.lga}, request=request)
    invalidate('diseases', [facility.id if facility else None])
    broadcast_outbreak(outbreak)
    logger.info("Outbreak %s of %s reported by %s (%s cases)", outbreak.id, disease.id, user.username, len(linked))
    return outbreak


def visible_outbreaks(user, params):
    qs = scope_queryset(user, Outbreak.objects.all())
    status = params.get('status')
    disease_id = params.get('diseaseId')
    if status:
        qs = qs.filter(status=status)
    if disease_id:
        qs = qs.filter(disease_id=disease_id)
    return qs.select_related('disease').order_by('-start_date', '-id')


def _iso_week(d: datetime.date) -> str:
    year, week, _ = d.isocalendar()
    return f'{year}-W{week:02d}'


def build_disease_statistics(facility_id=None, today=None) -> dict:
    today = today or datetime.date.today()
    qs = DiseaseCase.objects.all()
    outbreaks = Outbreak.objects.filter(status='active')
    if facility_id is not None:
        qs = qs.filter(facility_id=facility_id)
        outbreaks = outbreaks.filter(facility_id=facility_id)
    # Monday of the earliest week in the trend window
    this_monday = today - datetime.timedelta(days=today.weekday())
    window_start = this_monday - datetime.timedelta(weeks=TREND_WEEKS - 1)
    weekly = {}
    for d in qs.filter(report_date__gte=window_start, report_date__lte=today).values_list('report_date', flat=True):
        key = _iso_week(d)
        weekly[key] = weekly.get(key, 0) + 1
    trend = []
    for i in range(TREND_WEEKS):
        key = _iso_week(window_start + datetime.timedelta(weeks=i))
        trend.append({'week': key, 'count': weekly.get(key, 0)})
    by_disease = [
        {'diseaseId': row['disease_id'], 'name': row['disease__name'], 'count': row['n']}
        for row in qs.values('disease_id', 'disease__name').annotate(n=Count('id')).order_by('-n', 'disease_id')
    ]
    return {
        'totalCases': qs.count(),
        'activeCases': qs.exclude(status='ruled_out').filter(outcome__in=ACTIVE_OUTCOMES).count(),
        'confirmedCases': qs.filter(status='confirmed').count(),
        'suspectedCases': qs.filter(status='suspected').count(),
        'recoveredCases': qs.filter(outcome='recovered').count(),
        'deaths': qs.filter(outcome='deceased').count(),
        'outbreaks': outbreaks.count(),
        'byDisease': by_disease,
        'weeklyTrend': trend,
    }


def disease_statistics(user) -> dict:
    facility_id = facility_scope(user)
    return cached_stats('diseases', facility_id, lambda: build_disease_statistics(facility_id))


def visible_cases(user):
    return scope_queryset(user, DiseaseCase.objects.all())
