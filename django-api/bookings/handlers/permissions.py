from rest_framework.permissions import BasePermission

from bookings.domain.value_objects import Role
from bookings.services.session_service import RoleSession


class IsSignedIn(BasePermission):
    """Any role obtained through login."""

    message = "Login required"

    def has_permission(self, request, view) -> bool:
        return RoleSession(request.session).role is not Role.NONE


class AdminForListedMethods(BasePermission):
    """Admin role required for the HTTP methods a view lists in ``admin_methods``."""

    message = "Admin role required"

    def has_permission(self, request, view) -> bool:
        if request.method not in getattr(view, "admin_methods", ()):
            return True
        return RoleSession(request.session).is_admin
