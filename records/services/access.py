"""
Facility isolation.

Administrators and supervisors see every facility.  Doctors and records
staff only see records of the facility they are bound to, and a clinical
user without a facility binding cannot list anything.
"""
from typing import Optional

from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from records.models import Facility
from records.permissions import OVERSIGHT_ROLES


def is_oversight(user) -> bool:
    return getattr(user, 'role', '') in OVERSIGHT_ROLES


def facility_scope(user) -> Optional[int]:
    """Facility id the user is limited to, or ``None`` for all facilities."""
    if is_oversight(user):
        return None
    if not getattr(user, 'facility_id', None):
        raise PermissionDenied('user without bound facility cannot view records')
    return user.facility_id


def scope_queryset(user, qs, field: str = 'facility'):
    facility_id = facility_scope(user)
    if facility_id is None:
        return qs
    return qs.filter(**{f'{field}_id': facility_id})


def get_scoped_or_404(user, qs, pk, label: str = 'record', field: str = 'facility'):
    obj = qs.filter(pk=pk).first()
    if obj is None:
        raise NotFound(f'{label} not found')
    if is_oversight(user):
        return obj
    # records outside the user's facility are reported as missing
    if not getattr(user, 'facility_id', None) or getattr(obj, f'{field}_id') != user.facility_id:
        raise NotFound(f'{label} not found')
    return obj


def resolve_facility_for_write(user, requested_id=None) -> Optional[Facility]:
    """Facility a new record is filed under.

    Clinical users always file under their own facility; oversight roles may
    pick one (or none).
    """
    if is_oversight(user):
        if requested_id in (None, ''):
            return None
        facility = Facility.objects.filter(pk=requested_id).first()
        if facility is None:
            raise ValidationError({'facilityId': ['facility not found']})
        return facility
    if not getattr(user, 'facility_id', None):
        raise PermissionDenied('user without bound facility cannot create records')
    return user.facility
