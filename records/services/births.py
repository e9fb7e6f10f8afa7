"""
Birth registration.
"""
import datetime
import logging
from decimal import Decimal

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.db.models import Count, Q
from django.db.models.functions import TruncMonth

from records.models import Birth
from .access import facility_scope, is_oversight, resolve_facility_for_write, scope_queryset
from .audit import log_action
from .dates import month_bounds, parse_date
from .patients import resolve_patient
from .stats_cache import cached_stats, invalidate

logger = logging.getLogger(__name__)

LOW_BIRTH_WEIGHT_KG = Decimal('2.5')


def serialize_birth(b: Birth) -> dict:
    return {
        'id': b.id,
        'registrationNumber': b.registration_number,
        'childName': b.child_name,
        'gender': b.gender,
        'dateOfBirth': b.date_of_birth.isoformat(),
        'timeOfBirth': b.time_of_birth.strftime('%H:%M') if b.time_of_birth else None,
        'deliveryMethod': b.delivery_method,
        'birthType': b.birth_type,
        'birthWeight': float(b.birth_weight) if b.birth_weight is not None else None,
        'birthLength': float(b.birth_length) if b.birth_length is not None else None,
        'motherName': b.mother_name,
        'motherAge': b.mother_age,
        'motherId': b.mother_id,
        'fatherName': b.father_name,
        'fatherAge': b.father_age,
        'address': b.address,
        'lgaResidence': b.lga_residence,
        'stateResidence': b.state_residence,
        'nationality': b.nationality,
        'facilityId': b.facility_id,
        'facilityName': b.facility.name if b.facility_id else None,
        'status': b.status,
        'createdAt': b.created_at.isoformat() if b.created_at else None,
        'updatedAt': b.updated_at.isoformat() if b.updated_at else None,
    }


def filter_births(qs, params):
    mapping = {
        'status': 'status',
        'gender': 'gender',
        'deliveryMethod': 'delivery_method',
        'birthType': 'birth_type',
        'facilityId': 'facility_id',
    }
    for param, field in mapping.items():
        value = params.get(param)
        if value:
            qs = qs.filter(**{field: value})
    date_from = parse_date(params.get('dateFrom'))
    date_to = parse_date(params.get('dateTo'))
    if date_from:
        qs = qs.filter(date_of_birth__gte=date_from)
    if date_to:
        qs = qs.filter(date_of_birth__lte=date_to)
    search = (params.get('search') or '').strip()
    if search:
        qs = qs.filter(
            Q(child_name__icontains=search) | Q(mother_name__icontains=search)
            | Q(father_name__icontains=search) | Q(registration_number__icontains=search)
        )
    return qs.select_related('facility').order_by('-date_of_birth', '-id')


def birth_counts(qs) -> dict:
    """Counts over an already filtered queryset, for the list summary cards."""
    agg = qs.aggregate(
        total=Count('id'),
        registered=Count('id', filter=Q(status='registered')),
        pending=Count('id', filter=Q(status='pending')),
        hospital=Count('id', filter=Q(delivery_method='hospital')),
        home=Count('id', filter=Q(delivery_method='home')),
        male=Count('id', filter=Q(gender='male')),
        female=Count('id', filter=Q(gender='female')),
        singleton=Count('id', filter=Q(birth_type='singleton')),
        twin=Count('id', filter=Q(birth_type='twin')),
        triplet=Count('id', filter=Q(birth_type='triplet')),
    )
    return agg


def _mother(user, data: dict):
    mother_id = data.pop('motherId', None)
    if mother_id in (None, ''):
        return None
    return resolve_patient(user, mother_id, field='motherId')


def create_birth(user, data: dict, request=None) -> Birth:
    facility = resolve_facility_for_write(user, data.pop('facilityId', None))
    mother = _mother(user, data)
    data.setdefault('state_residence', settings.DEFAULT_STATE)
    birth = Birth.objects.create(facility=facility, mother=mother, **data)
    log_action(user=user, action='birth_create', object_type='birth', object_id=birth.id,
               detail={'registrationNumber': birth.registration_number}, request=request)
    invalidate('births', [birth.facility_id])
    logger.info("Birth %s registered by %s", birth.registration_number, user.username)
    return birth


def update_birth(user, birth: Birth, data: dict, request=None) -> Birth:
    old_facility = birth.facility_id
    if 'facilityId' in data:
        requested = data.pop('facilityId')
        if is_oversight(user):
            birth.facility = resolve_facility_for_write(user, requested)
    if 'motherId' in data:
        birth.mother = _mother(user, data)
    for field, value in data.items():
        setattr(birth, field, value)
    birth.save()
    log_action(user=user, action='birth_update', object_type='birth', object_id=birth.id,
               detail={'fields': sorted(data)}, request=request)
    invalidate('births', [old_facility, birth.facility_id])
    return birth


def delete_birth(user, birth: Birth, request=None) -> None:
    bid, facility_id, number = birth.id, birth.facility_id, birth.registration_number
    birth.delete()
    log_action(user=user, action='birth_delete', object_type='birth', object_id=bid,
               detail={'registrationNumber': number}, request=request)
    invalidate('births', [facility_id])
    logger.info("Birth %s deleted by %s", number, user.username)


def _by(qs, field):
    return {row[field]: row['n'] for row in qs.values(field).annotate(n=Count('id')).order_by(field)}


def build_birth_statistics(facility_id=None, today=None) -> dict:
    today = today or datetime.date.today()
    qs = Birth.objects.all()
    if facility_id is not None:
        qs = qs.filter(facility_id=facility_id)
    month_start, next_month = month_bounds(today)
    window_start = month_start - relativedelta(months=11)
    monthly = {
        row['month'].strftime('%Y-%m'): row['n']
        for row in qs.filter(date_of_birth__gte=window_start, date_of_birth__lt=next_month)
        .annotate(month=TruncMonth('date_of_birth')).values('month').annotate(n=Count('id'))
    }
    by_month = []
    for i in range(12):
        key = (window_start + relativedelta(months=i)).strftime('%Y-%m')
        by_month.append({'month': key, 'count': monthly.get(key, 0)})
    return {
        'totalBirths': qs.count(),
        'thisMonth': qs.filter(date_of_birth__gte=month_start, date_of_birth__lt=next_month).count(),
        'thisYear': qs.filter(date_of_birth__year=today.year).count(),
        'byGender': _by(qs, 'gender'),
        'byDeliveryMethod': _by(qs, 'delivery_method'),
        'byStatus': _by(qs, 'status'),
        'byBirthType': _by(qs, 'birth_type'),
        'byMonth': by_month,
        'lowBirthWeight': qs.filter(birth_weight__lt=LOW_BIRTH_WEIGHT_KG).count(),
    }


def birth_statistics(user) -> dict:
    facility_id = facility_scope(user)
    return cached_stats('births', facility_id, lambda: build_birth_statistics(facility_id))


def visible_births(user):
    return scope_queryset(user, Birth.objects.all())
