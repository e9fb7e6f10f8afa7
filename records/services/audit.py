from typing import Optional, Any, Dict

from django.contrib.auth import get_user_model

from records.models import AuditEvent

User = get_user_model()


def client_ip(request) -> Optional[str]:
    if request is None:
        return None
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip() or None
    return request.META.get('REMOTE_ADDR')


def log_action(*, user: Optional[User], action: str, object_type: Optional[str]=None, object_id: Optional[int]=None,
               detail: Optional[Dict[str, Any]]=None, request=None) -> AuditEvent:
    return AuditEvent.objects.create(
        user=user if isinstance(user, User) and user.pk else None,
        action=action,
        object_type=object_type, object_id=object_id,
        detail=detail or {},
        ip=client_ip(request),
    )


def serialize_event(e: AuditEvent) -> dict:
    return {
        'id': e.id,
        'userId': e.user_id,
        'username': e.user.username if e.user_id else None,
        'action': e.action,
        'objectType': e.object_type,
        'objectId': e.object_id,
        'detail': e.detail,
        'ip': e.ip,
        'createdAt': e.created_at.isoformat() if e.created_at else None,
    }
