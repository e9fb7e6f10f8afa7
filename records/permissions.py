"""
Role based permission classes.

Administrators and supervisors work across all facilities.  Doctors and
records staff are clinical roles bound to one facility; facility scoping
itself lives in :mod:`records.services.access`.
"""
from rest_framework.permissions import BasePermission

ADMIN_ROLES = {"admin"}
OVERSIGHT_ROLES = {"admin", "supervisor"}
CLINICAL_ROLES = {"admin", "supervisor", "doctor", "staff"}


def _role(request):
    user = getattr(request, "user", None)
    if not (user and user.is_authenticated):
        return None
    return getattr(user, "role", None)


class IsAdminRole(BasePermission):
    """Allow access only to administrators."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) in ADMIN_ROLES


class IsSupervisorOrAdmin(BasePermission):
    """Administrators or supervisors."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) in OVERSIGHT_ROLES


class IsClinicalRole(BasePermission):
    """Any dashboard role."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) in CLINICAL_ROLES


class CanDeleteRecords(BasePermission):
    """Reads and writes for every role; DELETE only for admin or supervisor."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        role = _role(request)
        if role not in CLINICAL_ROLES:
            return False
        if request.method == "DELETE":
            return role in OVERSIGHT_ROLES
        return True
