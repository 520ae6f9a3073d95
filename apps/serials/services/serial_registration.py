"""
Serial registration service.

Registers installer-submitted inverter serials and fans the new
installation out to promotion progress and milestone notifications.
"""

import logging
from datetime import datetime
from typing import Optional

from django.db import transaction, IntegrityError
from django.utils import timezone

from apps.accounts.models import User, InstallerStatus
from apps.serials.models import SerialRecord

from .rating_aggregation import update_installer_rating

from .exceptions import (
    DuplicateSerialError,
    InvalidInstallationDateError,
    InstallerNotAllowedError,
)

logger = logging.getLogger(__name__)


def normalize_serial_number(serial_number: str) -> str:
    """Serial numbers are stored trimmed and upper-cased."""
    return serial_number.strip().upper()


def register_serial(
    *,
    installer: User,
    serial_number: str,
    installation_date: Optional[datetime] = None,
    city: str = '',
    address: str = '',
    customer_name: str = '',
    customer_rating: Optional[int] = None,
) -> SerialRecord:
    """
    Register a new inverter installation for an installer.

    This operation:
    1. Validates the installer may register installations
    2. Rejects duplicate serial numbers (system-wide uniqueness)
    3. Creates the SerialRecord
    4. Refreshes the installer's average rating when a rating is given
    5. Recomputes progress of the installer's active promotions
    6. Notifies the installer when a new milestone becomes claimable

    Args:
        installer: Installer submitting the serial
        serial_number: Inverter serial number
        installation_date: When the inverter was installed (defaults to now)
        city: Installation city
        address: Installation address
        customer_name: End customer
        customer_rating: Optional 1-5 satisfaction rating

    Returns:
        Created SerialRecord

    Raises:
        InstallerNotAllowedError: If account is not an approved installer
        DuplicateSerialError: If serial number already registered
        InvalidInstallationDateError: If installation date is in the future
    """
    from apps.payments.services import get_milestone_state

    if not installer.is_installer or installer.status != InstallerStatus.APPROVED:
        raise InstallerNotAllowedError("Only approved installers can register serial numbers")

    now = timezone.now()
    installation_date = installation_date or now
    if installation_date > now:
        raise InvalidInstallationDateError("Installation date cannot be in the future")

    serial_number = normalize_serial_number(serial_number)
    if SerialRecord.objects.filter(serial_number=serial_number).exists():
        raise DuplicateSerialError(f"Serial number {serial_number} is already registered")

    milestone_before = get_milestone_state(installer_id=installer.id)

    try:
        with transaction.atomic():
            serial = SerialRecord.objects.create(
                installer=installer,
                serial_number=serial_number,
                installation_date=installation_date,
                city=city.strip(),
                address=address.strip(),
                customer_name=customer_name.strip(),
                customer_rating=customer_rating,
            )
    except IntegrityError:
        # Concurrent registration of the same serial
        raise DuplicateSerialError(f"Serial number {serial_number} is already registered")

    logger.info("Installer %s registered serial %s", installer.id, serial.serial_number)

    if customer_rating is not None:
        installer.average_rating = update_installer_rating(installer_id=installer.id).average_rating

    _after_registration(installer, milestone_before)

    return serial


def _after_registration(installer: User, milestone_before) -> None:
    from apps.payments.services import get_milestone_state
    from apps.promotions.services import refresh_installer_progress
    from apps.notifications.services import notify_milestone_unlocked

    refresh_installer_progress(installer_id=installer.id)

    milestone_after = get_milestone_state(installer_id=installer.id)
    if milestone_after.completed > milestone_before.completed and milestone_after.has_unclaimed_milestone:
        notify_milestone_unlocked(installer, milestone_after)


def get_installer_serials(*, installer_id, status: Optional[str] = None):
    """
    Get an installer's serials, newest installation first.

    Args:
        installer_id: Installer UUID
        status: Optional SerialStatus filter

    Returns:
        QuerySet of SerialRecord
    """
    queryset = SerialRecord.objects.for_installer(installer_id)
    if status:
        queryset = queryset.filter(status=status)
    return queryset.order_by('-installation_date', '-created_at')
