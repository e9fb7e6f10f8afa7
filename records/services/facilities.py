"""
Facility registry: listing, derived profile, statistics and map export.
"""
import logging

from django.conf import settings
from django.db.models import Count, Q

from records.models import Facility
from .access import facility_scope
from .audit import log_action
from .stats_cache import cached_stats, invalidate

logger = logging.getLogger(__name__)

# level, default services, beds, staff and head title per facility type
FACILITY_PROFILES = {
    'hospital': {
        'level': 'Secondary',
        'services': ['Outpatient', 'Inpatient', 'Surgery', 'Maternity', 'Laboratory', 'Pharmacy', 'Radiology'],
        'beds': 120,
        'staff': 150,
        'headTitle': 'Medical Director',
    },
    'clinic': {
        'level': 'Primary',
        'services': ['Outpatient', 'Laboratory', 'Pharmacy'],
        'beds': 15,
        'staff': 18,
        'headTitle': 'Medical Officer in Charge',
    },
    'health_center': {
        'level': 'Primary',
        'services': ['Outpatient', 'Immunization', 'Antenatal Care', 'Family Planning'],
        'beds': 25,
        'staff': 35,
        'headTitle': 'Officer in Charge',
    },
    'maternity': {
        'level': 'Primary',
        'services': ['Antenatal Care', 'Delivery', 'Postnatal Care', 'Immunization'],
        'beds': 30,
        'staff': 25,
        'headTitle': 'Chief Midwife',
    },
}
DEFAULT_PROFILE = {
    'level': 'Primary',
    'services': ['Outpatient'],
    'beds': 20,
    'staff': 25,
    'headTitle': 'Officer in Charge',
}


def facility_profile(facility: Facility) -> dict:
    return dict(FACILITY_PROFILES.get(facility.facility_type, DEFAULT_PROFILE))


def serialize_facility(f: Facility, *, detail: bool = False) -> dict:
    data = {
        'id': f.id,
        'facilityCode': f.facility_code,
        'name': f.name,
        'facilityType': f.facility_type,
        'address': f.address,
        'lga': f.lga,
        'state': f.state,
        'contactPerson': f.contact_person,
        'phoneNumber': f.phone_number,
        'email': f.email,
        'ownership': f.ownership,
        'status': f.status,
        'latitude': float(f.latitude) if f.latitude is not None else None,
        'longitude': float(f.longitude) if f.longitude is not None else None,
        'createdAt': f.created_at.isoformat() if f.created_at else None,
        'updatedAt': f.updated_at.isoformat() if f.updated_at else None,
    }
    if detail:
        data['profile'] = facility_profile(f)
        data['recordCounts'] = {
            'patients': f.patients.count(),
            'births': f.births.count(),
            'deaths': f.deaths.count(),
            'antenatal': f.antenatal_records.count(),
            'immunizations': f.immunizations.count(),
            'diseaseCases': f.disease_cases.count(),
            'familyPlanning': f.family_planning_clients.count(),
            'users': f.users.count(),
        }
    return data


def _search_q(term: str) -> Q:
    return Q(name__icontains=term) | Q(address__icontains=term) | Q(contact_person__icontains=term)


def visible_facilities(user):
    """Doctors and staff only see the facility they are bound to."""
    qs = Facility.objects.all()
    facility_id = facility_scope(user)
    if facility_id is not None:
        qs = qs.filter(pk=facility_id)
    return qs


def filter_facilities(qs, params):
    status = params.get('status')
    ftype = params.get('facilityType') or params.get('type')
    lga = params.get('lga') or params.get('city')
    search = (params.get('search') or '').strip()
    if status:
        qs = qs.filter(status=status)
    if ftype:
        qs = qs.filter(facility_type=ftype)
    if lga:
        qs = qs.filter(lga__iexact=lga)
    if search:
        qs = qs.filter(_search_q(search))
    return qs.order_by('name', 'id')


def search_facilities(user, term: str, limit: int = 20):
    qs = visible_facilities(user)
    if term:
        qs = qs.filter(_search_q(term))
    return list(qs.order_by('name')[:limit])


def create_facility(user, data: dict, request=None) -> Facility:
    data.setdefault('state', settings.DEFAULT_STATE)
    facility = Facility.objects.create(**data)
    log_action(user=user, action='facility_create', object_type='facility', object_id=facility.id,
               detail={'name': facility.name}, request=request)
    invalidate('facilities')
    logger.info("Facility %s created by %s", facility.id, user.username)
    return facility


def update_facility(user, facility: Facility, data: dict, request=None) -> Facility:
    for field, value in data.items():
        setattr(facility, field, value)
    facility.save()
    log_action(user=user, action='facility_update', object_type='facility', object_id=facility.id,
               detail={'fields': sorted(data)}, request=request)
    invalidate('facilities', [facility.id])
    return facility


def delete_facility(user, facility: Facility, request=None) -> None:
    fid = facility.id
    facility.delete()
    log_action(user=user, action='facility_delete', object_type='facility', object_id=fid, request=request)
    invalidate('facilities', [fid])
    logger.info("Facility %s deleted by %s", fid, user.username)


def _counts(qs, field):
    return {row[field] or 'unknown': row['n'] for row in qs.values(field).annotate(n=Count('id')).order_by(field)}


def build_facility_statistics(facility_id=None) -> dict:
    qs = Facility.objects.all()
    if facility_id is not None:
        qs = qs.filter(pk=facility_id)
    return {
        'total': qs.count(),
        'byType': _counts(qs, 'facility_type'),
        'byLga': _counts(qs, 'lga'),
        'byStatus': _counts(qs, 'status'),
    }


def facility_statistics(user) -> dict:
    facility_id = facility_scope(user)
    return cached_stats('facilities', facility_id, lambda: build_facility_statistics(facility_id))


def facility_map(user) -> dict:
    qs = visible_facilities(user).exclude(latitude__isnull=True).exclude(longitude__isnull=True)
    features = []
    for f in qs.order_by('id'):
        features.append({
            'type': 'Feature',
            # GeoJSON coordinates are [longitude, latitude]
            'geometry': {'type': 'Point', 'coordinates': [float(f.longitude), float(f.latitude)]},
            'properties': {
                'id': f.id,
                'name': f.name,
                'facilityType': f.facility_type,
                'lga': f.lga,
                'status': f.status,
            },
        })
    return {'type': 'FeatureCollection', 'features': features}
