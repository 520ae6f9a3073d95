"""Tests for analytics and program-admin permission classes."""
import pytest
from unittest.mock import Mock
from apps.accounts.permissions import IsProgramAdmin, IsProgramAdminOrReadOnly
from apps.analytics.permissions import CanViewInstallerAnalytics


def mock_request(user, method='GET', **query_params):
    request = Mock()
    request.user = user
    request.method = method
    request.query_params = query_params
    return request


@pytest.mark.django_db
class TestCanViewInstallerAnalytics:

    def test_admin_sees_program_data(self, program_admin):
        permission = CanViewInstallerAnalytics()

        assert permission.has_permission(mock_request(program_admin), Mock()) is True

    def test_installer_sees_own_data(self, approved_installer):
        permission = CanViewInstallerAnalytics()
        request = mock_request(approved_installer, installer_id=str(approved_installer.id))

        assert permission.has_permission(request, Mock()) is True

    def test_installer_denied_program_data(self, approved_installer):
        permission = CanViewInstallerAnalytics()

        assert permission.has_permission(mock_request(approved_installer), Mock()) is False

    def test_installer_denied_other_installers_data(self, approved_installer, other_installer):
        permission = CanViewInstallerAnalytics()
        request = mock_request(approved_installer, installer_id=str(other_installer.id))

        assert permission.has_permission(request, Mock()) is False


@pytest.mark.django_db
class TestProgramAdminPermissions:

    def test_admin_allowed(self, program_admin):
        assert IsProgramAdmin().has_permission(mock_request(program_admin, 'POST'), Mock()) is True

    def test_installer_denied(self, approved_installer):
        assert IsProgramAdmin().has_permission(mock_request(approved_installer, 'POST'), Mock()) is False

    def test_read_only_for_installers(self, approved_installer):
        permission = IsProgramAdminOrReadOnly()

        assert permission.has_permission(mock_request(approved_installer, 'GET'), Mock()) is True
        assert permission.has_permission(mock_request(approved_installer, 'DELETE'), Mock()) is False
