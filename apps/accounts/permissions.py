from rest_framework import permissions


class IsProgramAdmin(permissions.BasePermission):
    """
    Permission: User must be a loyalty program administrator.
    """

    message = 'Only program administrators can perform this action.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_program_admin)


class IsProgramAdminOrReadOnly(IsProgramAdmin):
    """
    Permission: Anyone authenticated may read; only administrators may write.
    """

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return bool(request.user and request.user.is_authenticated)
        return super().has_permission(request, view)
