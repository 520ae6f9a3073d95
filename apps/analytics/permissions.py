"""
Custom permission classes for analytics app.

Permission Classes:
    CanViewInstallerAnalytics - Installers see their own data, admins see anyone's

Usage:
    from apps.analytics.permissions import CanViewInstallerAnalytics

    @api_view(['GET'])
    @permission_classes([IsAuthenticated, CanViewInstallerAnalytics])
    def installations_timeseries(request):
        ...
"""

from rest_framework.permissions import BasePermission


class CanViewInstallerAnalytics(BasePermission):
    """
    Permission check for per-installer analytics.

    Reads `installer_id` from the query parameters.

    Access is allowed if:
    - User is a program administrator
    - installer_id is the user's own ID

    Access is denied if:
    - A non-admin omits installer_id (program-wide data is admin only)
    - A non-admin asks for another installer's data
    """

    message = 'You can only view your own installation analytics.'

    def has_permission(self, request, view):
        if request.user.is_program_admin:
            return True

        installer_id = request.query_params.get('installer_id')
        if not installer_id:
            return False
        return str(request.user.id) == str(installer_id)
