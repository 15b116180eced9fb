"""Role-based DRF permissions.

Roles come from the authenticated :class:`accounts.models.TeamMember`, read
fresh from the database on every request, so a demotion takes effect before
the member's token expires.
"""
from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """Allow access to members with the ``admin`` access level."""

    message = "Admin access required"

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_admin)


class CanDeleteRecords(BasePermission):
    """Allow deletes to ``admin`` and ``class_a`` members."""

    message = "Deleting records requires Admin or Class A access"

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.can_delete_records)
