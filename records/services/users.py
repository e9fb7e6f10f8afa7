import logging

from django.db.models import Q
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from records.models import Facility, User
from .audit import log_action

logger = logging.getLogger(__name__)


def serialize_user(u: User) -> dict:
    return {
        'id': u.id,
        'username': u.username,
        'firstName': u.first_name,
        'lastName': u.last_name,
        'name': u.get_full_name() or u.username,
        'email': u.email,
        'phone': u.phone,
        'role': u.role,
        'status': u.status,
        'rejectionReason': u.rejection_reason or None,
        'facilityId': u.facility_id,
        'facilityName': u.facility.name if u.facility_id else None,
        'isActive': u.is_active,
        'lastLogin': u.last_login.isoformat() if u.last_login else None,
        'dateJoined': u.date_joined.isoformat() if u.date_joined else None,
    }


def get_user_or_404(pk) -> User:
    user = User.objects.select_related('facility').filter(pk=pk).first()
    if user is None:
        raise NotFound('user not found')
    return user


def filter_users(qs, params):
    role = params.get('role')
    status = params.get('status')
    facility_id = params.get('facilityId')
    search = (params.get('search') or '').strip()
    if role:
        qs = qs.filter(role=role)
    # the user list filters on approval state as well as on the active flag
    if status in ('active', 'inactive'):
        qs = qs.filter(is_active=status == 'active')
    elif status:
        qs = qs.filter(status=status)
    if facility_id:
        qs = qs.filter(facility_id=facility_id)
    if search:
        qs = qs.filter(Q(username__icontains=search) | Q(first_name__icontains=search)
                       | Q(last_name__icontains=search) | Q(email__icontains=search))
    return qs.select_related('facility').order_by('username')


def _facility(facility_id):
    if facility_id in (None, ''):
        return None
    facility = Facility.objects.filter(pk=facility_id).first()
    if facility is None:
        raise ValidationError({'facilityId': ['facility not found']})
    return facility


def create_user(actor, data: dict, request=None) -> User:
    password = data.pop('password')
    facility = _facility(data.pop('facilityId', None))
    user = User(facility=facility, **data)
    user.set_password(password)
    user.save()
    log_action(user=actor, action='user_create', object_type='user', object_id=user.id,
               detail={'username': user.username, 'role': user.role}, request=request)
    logger.info("User %s (%s) created by %s", user.username, user.role, actor.username)
    return user


def register_user(data: dict, request=None) -> User:
    """Self-registration; the account cannot sign in until approved."""
    password = data.pop('password')
    facility = _facility(data.pop('facilityId', None))
    user = User(facility=facility, status=User.STATUS_PENDING, **data)
    user.set_password(password)
    user.save()
    log_action(user=user, action='user_register', object_type='user', object_id=user.id,
               detail={'username': user.username, 'role': user.role}, request=request)
    logger.info("User %s registered as %s, awaiting approval", user.username, user.role)
    return user


def update_user(actor, user: User, data: dict, request=None) -> User:
    password = data.pop('password', None)
    if 'facilityId' in data:
        user.facility = _facility(data.pop('facilityId'))
    for field, value in data.items():
        setattr(user, field, value)
    if password:
        user.set_password(password)
    user.save()
    fields = sorted(data) + (['password'] if password else [])
    log_action(user=actor, action='user_update', object_type='user', object_id=user.id,
               detail={'fields': fields}, request=request)
    return user


def approve_user(actor, user: User, request=None) -> User:
    if user.status == User.STATUS_APPROVED:
        raise ValidationError({'status': ['user is already approved']})
    previous = user.status
    user.status = User.STATUS_APPROVED
    user.rejection_reason = ''
    user.save(update_fields=['status', 'rejection_reason'])
    log_action(user=actor, action='user_approve', object_type='user', object_id=user.id,
               detail={'from': previous}, request=request)
    logger.info("User %s approved by %s", user.username, actor.username)
    return user


def reject_user(actor, user: User, reason: str = '', request=None) -> User:
    if user.status != User.STATUS_PENDING:
        raise ValidationError({'status': ['only pending registrations can be rejected']})
    user.status = User.STATUS_REJECTED
    user.rejection_reason = reason
    user.save(update_fields=['status', 'rejection_reason'])
    log_action(user=actor, action='user_reject', object_type='user', object_id=user.id,
               detail={'reason': reason}, request=request)
    logger.info("User %s rejected by %s", user.username, actor.username)
    return user


def change_role(actor, user: User, role: str, request=None) -> User:
    if user.pk == actor.pk:
        raise PermissionDenied('you cannot change your own role')
    previous = user.role
    user.role = role
    user.save(update_fields=['role'])
    log_action(user=actor, action='user_role_change', object_type='user', object_id=user.id,
               detail={'from': previous, 'to': role}, request=request)
    logger.info("User %s role changed %s -> %s by %s", user.username, previous, role, actor.username)
    return user


def delete_user(actor, user: User, request=None) -> None:
    if user.pk == actor.pk:
        raise PermissionDenied('you cannot delete your own account')
    uid, username = user.id, user.username
    user.delete()
    log_action(user=actor, action='user_delete', object_type='user', object_id=uid,
               detail={'username': username}, request=request)
    logger.info("User %s deleted by %s", username, actor.username)
