import datetime
import logging

from django.conf import settings
from django.db.models import Avg, Count, Q

from records.models import Death
from .access import facility_scope, is_oversight, resolve_facility_for_write, scope_queryset
from .audit import log_action
from .dates import age_in_years, month_bounds, parse_date
from .stats_cache import cached_stats, invalidate

logger = logging.getLogger(__name__)

AGE_GROUPS = (
    ('0-4', 0, 4),
    ('5-14', 5, 14),
    ('15-49', 15, 49),
    ('50-69', 50, 69),
    ('70+', 70, None),
)


def serialize_death(d: Death) -> dict:
    return {
        'id': d.id,
        'registrationNumber': d.registration_number,
        'deceasedName': d.deceased_name,
        'gender': d.gender,
        'dateOfBirth': d.date_of_birth.isoformat() if d.date_of_birth else None,
        'dateOfDeath': d.date_of_death.isoformat(),
        'ageAtDeath': d.age_at_death,
        'placeOfDeath': d.place_of_death,
        'hospitalName': d.hospital_name,
        'causeOfDeath': d.cause_of_death,
        'mannerOfDeath': d.manner_of_death,
        'informantName': d.informant_name,
        'informantRelationship': d.informant_relationship,
        'informantPhone': d.informant_phone,
        'city': d.city,
        'state': d.state,
        'lga': d.lga,
        'facilityId': d.facility_id,
        'facilityName': d.facility.name if d.facility_id else None,
        'registrationDate': d.registration_date.isoformat() if d.registration_date else None,
        'status': d.status,
        'createdAt': d.created_at.isoformat() if d.created_at else None,
        'updatedAt': d.updated_at.isoformat() if d.updated_at else None,
    }


def filter_deaths(qs, params):
    mapping = {
        'status': 'status',
        'gender': 'gender__iexact',
        'placeOfDeath': 'place_of_death',
        'mannerOfDeath': 'manner_of_death',
        'cause': 'cause_of_death__icontains',
        'facilityId': 'facility_id',
    }
    for param, lookup in mapping.items():
        value = params.get(param)
        if value:
            qs = qs.filter(**{lookup: value})
    date_from = parse_date(params.get('dateFrom'))
    date_to = parse_date(params.get('dateTo'))
    if date_from:
        qs = qs.filter(date_of_death__gte=date_from)
    if date_to:
        qs = qs.filter(date_of_death__lte=date_to)
    search = (params.get('search') or '').strip()
    if search:
        qs = qs.filter(
            Q(deceased_name__icontains=search) | Q(registration_number__icontains=search)
            | Q(cause_of_death__icontains=search) | Q(informant_name__icontains=search)
        )
    return qs.select_related('facility').order_by('-date_of_death', '-id')


def _fill_age(death: Death) -> None:
    if death.date_of_birth and death.date_of_death:
        death.age_at_death = age_in_years(death.date_of_birth, death.date_of_death)


def create_death(user, data: dict, request=None) -> Death:
    facility = resolve_facility_for_write(user, data.pop('facilityId', None))
    data.setdefault('state', settings.DEFAULT_STATE)
    death = Death(facility=facility, **data)
    _fill_age(death)
    death.save()
    log_action(user=user, action='death_create', object_type='death', object_id=death.id,
               detail={'registrationNumber': death.registration_number}, request=request)
    invalidate('deaths', [death.facility_id])
    logger.info("Death %s registered by %s", death.registration_number, user.username)
    return death


def update_death(user, death: Death, data: dict, request=None) -> Death:
    old_facility = death.facility_id
    if 'facilityId' in data:
        requested = data.pop('facilityId')
        if is_oversight(user):
            death.facility = resolve_facility_for_write(user, requested)
    for field, value in data.items():
        setattr(death, field, value)
    _fill_age(death)
    death.save()
    log_action(user=user, action='death_update', object_type='death', object_id=death.id,
               detail={'fields': sorted(data)}, request=request)
    invalidate('deaths', [old_facility, death.facility_id])
    return death


def delete_death(user, death: Death, request=None) -> None:
    did, facility_id, number = death.id, death.facility_id, death.registration_number
    death.delete()
    log_action(user=user, action='death_delete', object_type='death', object_id=did,
               detail={'registrationNumber': number}, request=request)
    invalidate('deaths', [facility_id])
    logger.info("Death %s deleted by %s", number, user.username)


def _by(qs, field):
    return {row[field]: row['n'] for row in qs.values(field).annotate(n=Count('id')).order_by(field)}


def age_group(age) -> str:
    if age is None:
        return 'unknown'
    for label, low, high in AGE_GROUPS:
        if age >= low and (high is None or age <= high):
            return label
    return 'unknown'


def build_death_summary(facility_id=None, today=None) -> dict:
    today = today or datetime.date.today()
    qs = Death.objects.all()
    if facility_id is not None:
        qs = qs.filter(facility_id=facility_id)
    month_start, next_month = month_bounds(today)
    by_age = {label: 0 for label, _, _ in AGE_GROUPS}
    by_age['unknown'] = 0
    for age in qs.values_list('age_at_death', flat=True):
        by_age[age_group(age)] += 1
    top_causes = [
        {'cause': row['cause_of_death'], 'count': row['n']}
        for row in qs.values('cause_of_death').annotate(n=Count('id')).order_by('-n', 'cause_of_death')[:5]
    ]
    average = qs.aggregate(avg=Avg('age_at_death'))['avg']
    return {
        'totalDeaths': qs.count(),
        'thisMonth': qs.filter(date_of_death__gte=month_start, date_of_death__lt=next_month).count(),
        'thisYear': qs.filter(date_of_death__year=today.year).count(),
        'byGender': _by(qs, 'gender'),
        'byPlace': _by(qs, 'place_of_death'),
        'byManner': _by(qs, 'manner_of_death'),
        'topCauses': top_causes,
        'byAgeGroup': by_age,
        'averageAge': round(average, 1) if average is not None else None,
    }


def death_summary(user) -> dict:
    facility_id = facility_scope(user)
    return cached_stats('deaths', facility_id, lambda: build_death_summary(facility_id))


def visible_deaths(user):
    return scope_queryset(user, Death.objects.all())
