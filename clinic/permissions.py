"""
Custom permission classes for role based access control.

Row level decisions live in :mod:`clinic.access`; these classes only gate
whole endpoints by role, using the same rule table.
"""
from rest_framework.permissions import SAFE_METHODS, BasePermission

from clinic import access


class CanManageStaff(BasePermission):
    """Staff account endpoints: reads need ``(staff, read)``, changes need ``(staff, status)``."""
    message = "You don't have permission to access this page."

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        action = access.READ if request.method in SAFE_METHODS else access.STATUS
        return access.can_access(getattr(user, "role", None), action, access.STAFF)
