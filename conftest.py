import pytest
from datetime import timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole, InstallerStatus
from apps.serials.models import SerialRecord, SerialStatus


def authenticated_client(user):
    """Return an API client carrying a JWT for the user."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def installer(db):
    """Create and return a pending installer."""
    return User.objects.create_user(
        email='installer@example.com',
        password='TestPass123!',
        display_name='Test Installer',
        city='Lahore',
    )


@pytest.fixture
def approved_installer(db):
    """Create and return an approved installer."""
    return User.objects.create_user(
        email='approved@example.com',
        password='TestPass123!',
        display_name='Approved Installer',
        city='Karachi',
        status=InstallerStatus.APPROVED,
    )


@pytest.fixture
def other_installer(db):
    """Create and return a second approved installer."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other Installer',
        city='Multan',
        status=InstallerStatus.APPROVED,
    )


@pytest.fixture
def program_admin(db):
    """Create and return an administrator."""
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        display_name='Program Admin',
        role=UserRole.ADMIN,
        status=InstallerStatus.APPROVED,
    )


@pytest.fixture
def installer_client(installer):
    """Return an API client authenticated as the pending installer."""
    return authenticated_client(installer)


@pytest.fixture
def approved_client(approved_installer):
    """Return an API client authenticated as the approved installer."""
    return authenticated_client(approved_installer)


@pytest.fixture
def admin_client(program_admin):
    """Return an API client authenticated as the administrator."""
    return authenticated_client(program_admin)


@pytest.fixture
def make_serial(db):
    """
    Factory for serial records.

    Usage:
        make_serial(installer, hours_ago=2, city='Lahore', customer_rating=5)
    """
    counter = {'n': 0}

    def _make(installer, hours_ago=1, status=SerialStatus.ACTIVE, **kwargs):
        counter['n'] += 1
        kwargs.setdefault('serial_number', f"SN-{installer.loyalty_card_id}-{counter['n']:04d}")
        return SerialRecord.objects.create(
            installer=installer,
            installation_date=timezone.now() - timedelta(hours=hours_ago),
            status=status,
            **kwargs,
        )

    return _make
