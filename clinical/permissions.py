"""
Custom permission classes for role based access control.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

ADMIN_ROLES = {"ADMIN"}
CLINICAL_ROLES = {"ADMIN", "DOCTOR", "NURSE"}


class IsAdminRole(BasePermission):
    """Allow access only to users with the administrator role."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) in ADMIN_ROLES)


class IsClinicalStaff(BasePermission):
    """Admins, doctors and nurses."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) in CLINICAL_ROLES)


class IsAdminOrReadOnly(BasePermission):
    """Read-only for authenticated users; writes for administrators."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return getattr(user, "role", None) in ADMIN_ROLES
