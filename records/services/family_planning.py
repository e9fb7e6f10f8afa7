import datetime
import logging

from django.db.models import Count, Q

from records.models import FamilyPlanningClient
from .access import facility_scope, is_oversight, resolve_facility_for_write, scope_queryset
from .audit import log_action
from .dates import age_in_years, month_bounds
from .patients import patient_search_q, resolve_patient
from .stats_cache import cached_stats, invalidate

logger = logging.getLogger(__name__)

METHODS = [
    {'id': 'oral-contraceptives', 'name': 'Oral Contraceptives', 'type': 'Hormonal', 'duration': '1 month'},
    {'id': 'injectable-contraceptives', 'name': 'Injectable Contraceptives', 'type': 'Hormonal', 'duration': '3 months'},
    {'id': 'iud', 'name': 'Intrauterine Device (IUD)', 'type': 'Long-acting', 'duration': '5-10 years'},
    {'id': 'implant', 'name': 'Implant', 'type': 'Long-acting', 'duration': '3-5 years'},
    {'id': 'condoms', 'name': 'Condoms', 'type': 'Barrier', 'duration': 'Per use'},
    {'id': 'female-sterilization', 'name': 'Female Sterilization', 'type': 'Permanent', 'duration': 'Permanent'},
    {'id': 'male-sterilization', 'name': 'Male Sterilization', 'type': 'Permanent', 'duration': 'Permanent'},
    {'id': 'natural-family-planning', 'name': 'Natural Family Planning', 'type': 'Natural', 'duration': 'Ongoing'},
    {'id': 'emergency-contraception', 'name': 'Emergency Contraception', 'type': 'Emergency', 'duration': 'One-time'},
    {'id': 'other', 'name': 'Other', 'type': 'Other', 'duration': 'Varies'},
]
METHOD_IDS = {m['id'] for m in METHODS}
METHOD_NAMES = {m['id']: m['name'] for m in METHODS}


def serialize_client(c: FamilyPlanningClient) -> dict:
    patient = c.patient
    return {
        'id': c.id,
        'clientNumber': c.registration_number,
        'patientId': c.patient_id,
        'patientName': patient.full_name,
        'age': age_in_years(patient.date_of_birth),
        'gender': patient.gender,
        'phoneNumber': patient.phone_number,
        'facilityId': c.facility_id,
        'facilityName': c.facility.name if c.facility_id else None,
        'registrationDate': c.registration_date.isoformat(),
        'clientType': c.client_type,
        'maritalStatus': c.marital_status,
        'numberOfChildren': c.number_of_children,
        'desiredNumberOfChildren': c.desired_number_of_children,
        'educationLevel': c.education_level,
        'occupation': c.occupation,
        'primaryContact': c.primary_contact,
        'medicalHistory': c.medical_history,
        'allergyHistory': c.allergy_history,
        'reproductiveHistory': c.reproductive_history,
        'menstrualHistory': c.menstrual_history,
        'referredBy': c.referred_by,
        'currentMethod': c.current_method,
        'currentMethodName': METHOD_NAMES.get(c.current_method),
        'notes': c.notes,
        'status': c.status,
        'createdAt': c.created_at.isoformat() if c.created_at else None,
        'updatedAt': c.updated_at.isoformat() if c.updated_at else None,
    }


def client_search_q(term: str) -> Q:
    return Q(registration_number__icontains=term) | patient_search_q(term, 'patient__')


def filter_clients(qs, params):
    mapping = {
        'status': 'status',
        'clientType': 'client_type',
        'facilityId': 'facility_id',
        'currentMethod': 'current_method',
    }
    for param, field in mapping.items():
        value = params.get(param)
        if value:
            qs = qs.filter(**{field: value})
    search = (params.get('search') or '').strip()
    if search:
        qs = qs.filter(client_search_q(search))
    return qs.select_related('patient', 'facility').order_by('-registration_date', '-id')


def create_client(user, data: dict, request=None) -> FamilyPlanningClient:
    patient = resolve_patient(user, data.pop('patientId'))
    facility = resolve_facility_for_write(user, data.pop('facilityId', None))
    client = FamilyPlanningClient.objects.create(patient=patient, facility=facility, **data)
    log_action(user=user, action='fp_client_create', object_type='fp_client', object_id=client.id,
               detail={'clientNumber': client.registration_number}, request=request)
    invalidate('family-planning', [client.facility_id])
    logger.info("Family planning client %s registered by %s", client.registration_number, user.username)
    return client


def update_client(user, client: FamilyPlanningClient, data: dict, request=None) -> FamilyPlanningClient:
    old_facility = client.facility_id
    data.pop('patientId', None)
    if 'facilityId' in data:
        requested = data.pop('facilityId')
        if is_oversight(user) and requested:
            client.facility = resolve_facility_for_write(user, requested)
    for field, value in data.items():
        setattr(client, field, value)
    client.save()
    log_action(user=user, action='fp_client_update', object_type='fp_client', object_id=client.id,
               detail={'fields': sorted(data)}, request=request)
    invalidate('family-planning', [old_facility, client.facility_id])
    return client


def delete_client(user, client: FamilyPlanningClient, request=None) -> None:
    cid, facility_id, number = client.id, client.facility_id, client.registration_number
    client.delete()
    log_action(user=user, action='fp_client_delete', object_type='fp_client', object_id=cid,
               detail={'clientNumber': number}, request=request)
    invalidate('family-planning', [facility_id])
    logger.info("Family planning client %s deleted by %s", number, user.username)


def build_family_planning_statistics(facility_id=None, today=None) -> dict:
    today = today or datetime.date.today()
    qs = FamilyPlanningClient.objects.all()
    if facility_id is not None:
        qs = qs.filter(facility_id=facility_id)
    month_start, next_month = month_bounds(today)
    with_method = qs.exclude(current_method='')
    method_total = with_method.count()
    top_methods = [
        {
            'methodId': row['current_method'],
            'name': METHOD_NAMES.get(row['current_method'], row['current_method']),
            'clients': row['n'],
            'percentage': round(row['n'] * 100.0 / method_total, 1),
        }
        for row in with_method.values('current_method').annotate(n=Count('id')).order_by('-n', 'current_method')[:5]
    ]
    by_type = {row['client_type']: row['n'] for row in qs.values('client_type').annotate(n=Count('id'))}
    return {
        'totalClients': qs.count(),
        'activeClients': qs.filter(status='Active').count(),
        'newAcceptors': qs.filter(client_type='New Acceptor').count(),
        'newThisMonth': qs.filter(registration_date__gte=month_start, registration_date__lt=next_month).count(),
        'discontinuations': qs.filter(status='Discontinued').count(),
        'topMethods': top_methods,
        'byClientType': by_type,
    }


def family_planning_statistics(user) -> dict:
    facility_id = facility_scope(user)
    return cached_stats('family-planning', facility_id, lambda: build_family_planning_statistics(facility_id))


def search_clients(user, term: str, limit: int = 20):
    qs = scope_queryset(user, FamilyPlanningClient.objects.all())
    if term:
        qs = qs.filter(client_search_q(term))
    return list(qs.select_related('patient', 'facility').order_by('-id')[:limit])


def visible_clients(user):
    return scope_queryset(user, FamilyPlanningClient.objects.all())
