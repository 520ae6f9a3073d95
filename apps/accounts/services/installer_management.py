"""Installer review service (admin approval and suspension)."""

import logging
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User, UserRole, InstallerStatus

from .exceptions import InstallerNotFoundError, InvalidInstallerStatusError

logger = logging.getLogger(__name__)


@transaction.atomic
def update_installer_status(*, installer_id: UUID, status: str) -> User:
    """
    Approve, suspend or reset an installer account.

    Args:
        installer_id: Installer UUID
        status: Target InstallerStatus value

    Returns:
        Updated installer

    Raises:
        InstallerNotFoundError: If installer doesn't exist
        InvalidInstallerStatusError: If status is not a known value
    """
    if status not in InstallerStatus.values:
        raise InvalidInstallerStatusError(f"Unknown installer status: {status}")

    try:
        installer = (
            User.objects
            .select_for_update()
            .get(id=installer_id, role=UserRole.INSTALLER)
        )
    except User.DoesNotExist:
        raise InstallerNotFoundError(f"Installer {installer_id} not found")

    if installer.status != status:
        logger.info("Installer %s status %s -> %s", installer.id, installer.status, status)
        installer.status = status
        installer.save(update_fields=['status'])

    return installer
