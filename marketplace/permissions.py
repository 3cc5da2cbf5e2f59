from rest_framework import permissions

from utils.rbac import Principal, can_moderate


class IsModeratorOrAdmin(permissions.BasePermission):
    """
    Allows access only to users whose role is moderator or admin.

    Services repeat the check; this keeps staff-only endpoints from running
    any query for other callers.
    """

    message = "Only moderators and admins can access this resource."

    def has_permission(self, request, view):
        return can_moderate(Principal.from_user(request.user))
