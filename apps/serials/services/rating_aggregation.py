"""Installer rating aggregation with concurrency protection."""

from decimal import Decimal, ROUND_HALF_UP
from uuid import UUID

from django.db import transaction
from django.db.models import Avg

from apps.accounts.models import User, UserRole
from apps.accounts.services.exceptions import InstallerNotFoundError
from apps.serials.models import SerialRecord


@transaction.atomic
def update_installer_rating(*, installer_id: UUID) -> User:
    """
    Recalculate an installer's average customer rating.

    The average covers every valid serial with a customer rating and has
    no date cutoff. Unrated serials are ignored. Uses select_for_update()
    so concurrent registrations don't overwrite each other's result.

    Args:
        installer_id: Installer UUID

    Returns:
        Updated installer

    Raises:
        InstallerNotFoundError: If installer doesn't exist
    """
    try:
        installer = (
            User.objects
            .select_for_update()
            .get(id=installer_id, role=UserRole.INSTALLER)
        )
    except User.DoesNotExist:
        raise InstallerNotFoundError(f"Installer {installer_id} not found")

    aggregates = (
        SerialRecord.objects
        .for_installer(installer_id)
        .valid()
        .aggregate(avg=Avg('customer_rating'))
    )

    if aggregates['avg'] is None:
        installer.average_rating = Decimal('0.00')
    else:
        installer.average_rating = Decimal(str(aggregates['avg'])).quantize(
            Decimal('0.01'), rounding=ROUND_HALF_UP,
        )
    installer.save(update_fields=['average_rating'])

    return installer
