import pytest
from uuid import uuid4
from django.urls import reverse
from rest_framework import status
from apps.accounts.models import User, InstallerStatus


# =============================================================================
# Model Tests
# =============================================================================

@pytest.mark.django_db
class TestUserModel:

    def test_new_installer_defaults(self, installer):
        assert installer.is_installer
        assert installer.status == InstallerStatus.PENDING
        assert installer.loyalty_card_id.startswith('SX')
        assert not installer.is_staff

    def test_admin_role_implies_staff(self, program_admin):
        assert program_admin.is_staff
        assert program_admin.is_program_admin

    def test_loyalty_card_ids_are_unique(self, installer, program_admin):
        assert installer.loyalty_card_id != program_admin.loyalty_card_id


# =============================================================================
# Profile Tests
# =============================================================================

@pytest.mark.django_db
class TestCurrentUser:
    """Tests for GET/PATCH /api/auth/me/"""

    def test_get_profile(self, installer_client, installer):
        url = reverse('accounts:current-user')
        response = installer_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == installer.email
        assert response.data['loyalty_card_id'] == installer.loyalty_card_id

    def test_update_profile_city(self, installer_client, installer):
        url = reverse('accounts:current-user')
        response = installer_client.patch(url, {'city': 'Karachi'})

        assert response.status_code == status.HTTP_200_OK
        installer.refresh_from_db()
        assert installer.city == 'Karachi'

    def test_cannot_self_approve(self, installer_client, installer):
        url = reverse('accounts:current-user')
        installer_client.patch(url, {'status': InstallerStatus.APPROVED})

        installer.refresh_from_db()
        assert installer.status == InstallerStatus.PENDING

    def test_unauthenticated(self, api_client):
        url = reverse('accounts:current-user')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Installer Review Tests
# =============================================================================

@pytest.mark.django_db
class TestReviewInstaller:
    """Tests for POST /api/auth/installers/{id}/review/"""

    def test_admin_approves_installer(self, admin_client, installer):
        url = reverse('accounts:review-installer', kwargs={'pk': installer.id})
        response = admin_client.post(url, {'status': InstallerStatus.APPROVED})

        assert response.status_code == status.HTTP_200_OK
        installer.refresh_from_db()
        assert installer.status == InstallerStatus.APPROVED

    def test_installer_cannot_review(self, installer_client, installer):
        url = reverse('accounts:review-installer', kwargs={'pk': installer.id})
        response = installer_client.post(url, {'status': InstallerStatus.APPROVED})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unknown_installer(self, admin_client):
        url = reverse('accounts:review-installer', kwargs={'pk': uuid4()})
        response = admin_client.post(url, {'status': InstallerStatus.SUSPENDED})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_invalid_status(self, admin_client, installer):
        url = reverse('accounts:review-installer', kwargs={'pk': installer.id})
        response = admin_client.post(url, {'status': 'banned'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestTokenObtain:
    """Tests for POST /api/auth/token/"""

    def test_obtain_token(self, api_client, installer):
        url = reverse('token_obtain_pair')
        response = api_client.post(url, {'email': installer.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data
